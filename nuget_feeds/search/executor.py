"""
Runs one job per source, sequentially or on a bounded thread pool.

Results always come back in source order. A deadline or a cancellation event
stops the run early; sources that had not finished by then contribute
nothing.
"""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# How often a pool run wakes up to look at the cancellation event.
CANCEL_POLL_INTERVAL = 0.1


class SourceExecutor:
    """
    Executes per-source jobs.

    Jobs receive their item and the time left before the deadline (None when
    there is no deadline) and must not raise for expected failures.
    """

    def __init__(
        self,
        max_workers: int = 1,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        on_abort: Optional[Callable[[], None]] = None
    ):
        """
        Args:
            max_workers: Size of the worker pool, 1 for sequential execution.
            deadline: Seconds from the start of ``run`` after which it gives up.
            cancel_event: Event that aborts the run when set.
            on_abort: Called once when the run is aborted. It runs on the
                calling thread while abandoned jobs may still be running.
        """
        self.max_workers = max(max_workers, 1)
        self.deadline = deadline
        self.cancel_event = cancel_event
        self.on_abort = on_abort
        self.aborted = False
        self._expires_at: Optional[float] = None

    def run(self, items: Sequence[T], job: Callable[[T, Optional[float]], R]) -> List[Optional[R]]:
        """
        Run ``job`` for every item.

        Returns:
            One entry per item, in item order. Items that were not completed
            or whose job raised are None.
        """
        self.aborted = False
        self._expires_at = time.monotonic() + self.deadline if self.deadline is not None else None

        if not items:
            return []
        if self.max_workers == 1 and self.deadline is None and self.cancel_event is None:
            return [self._run_one(item, job) for item in items]
        return self._run_pool(items, job)

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    def should_stop(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def _run_one(self, item: T, job: Callable[[T, Optional[float]], R]) -> Optional[R]:
        try:
            return job(item, self.remaining())
        except Exception as e:
            logger.error(f"Job for {item!r} failed: {e}")
            return None

    def _run_pool(self, items: Sequence[T], job: Callable[[T, Optional[float]], R]) -> List[Optional[R]]:
        results: List[Optional[R]] = [None] * len(items)
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(items)))
        future_to_index = {}
        try:
            for index, item in enumerate(items):
                future_to_index[executor.submit(self._run_one, item, job)] = index

            pending = set(future_to_index)
            while pending:
                if self.should_stop():
                    self._abort(pending)
                    break
                timeout = self.remaining()
                if self.cancel_event is not None:
                    timeout = CANCEL_POLL_INTERVAL if timeout is None else min(timeout, CANCEL_POLL_INTERVAL)
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    results[future_to_index[future]] = future.result()
        finally:
            executor.shutdown(wait=not self.aborted, cancel_futures=True)
        return results

    def _abort(self, pending) -> None:
        self.aborted = True
        for future in pending:
            future.cancel()
        logger.warning(f"Aborting run with {len(pending)} unfinished sources")
        if self.on_abort is not None:
            self.on_abort()
