"""
Task logger for feed operations.

A TaskLogger collects the log lines of one find/update operation so that
callers can show them as an operation transcript, and forwards every line to
the standard logging tree.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from nuget_feeds.core.interfaces import LoggableTaskType


logger = logging.getLogger("nuget_feeds.tasks")


@dataclass(frozen=True)
class TaskLogLine:
    """A single line recorded by a TaskLogger."""
    message: str
    is_error: bool = False


class TaskLogger:
    """
    Records the lines of a single task.
    """

    def __init__(self, task_type: LoggableTaskType):
        self.task_type = task_type
        self.started_at = time.time()
        self.finished_at: Optional[float] = None
        self.return_code: Optional[int] = None
        self._lines: List[TaskLogLine] = []

    @classmethod
    def create_new(cls, task_type: LoggableTaskType) -> "TaskLogger":
        return cls(task_type)

    def log(self, message: str) -> None:
        self._lines.append(TaskLogLine(message))
        logger.info(f"[{self.task_type.value}] {message}")

    def error(self, message: str) -> None:
        self._lines.append(TaskLogLine(message, is_error=True))
        logger.error(f"[{self.task_type.value}] {message}")

    def close(self, code: int) -> None:
        """
        Mark the task as finished. Only the first call has an effect.

        Args:
            code: Return code of the task, 0 for success.
        """
        if self.closed:
            return
        self.return_code = code
        self.finished_at = time.time()
        logger.debug(
            f"[{self.task_type.value}] finished with code {code} "
            f"in {self.finished_at - self.started_at:.2f}s"
        )

    @property
    def closed(self) -> bool:
        return self.finished_at is not None

    @property
    def lines(self) -> List[TaskLogLine]:
        return list(self._lines)

    @property
    def errors(self) -> List[str]:
        return [line.message for line in self._lines if line.is_error]

    def as_text(self) -> str:
        return "\n".join(line.message for line in self._lines)
