"""
Tests for the per-source executor.
"""

import threading
import time
from unittest.mock import Mock

from nuget_feeds.search.executor import SourceExecutor


class TestSourceExecutor:
    """Test cases for SourceExecutor."""

    def test_sequential_run(self):
        seen = []

        def job(item, remaining):
            seen.append((item, remaining))
            return item * 2

        results = SourceExecutor().run([1, 2, 3], job)

        assert results == [2, 4, 6]
        assert seen == [(1, None), (2, None), (3, None)]

    def test_empty_items(self):
        assert SourceExecutor(max_workers=4, deadline=1).run([], Mock()) == []

    def test_failing_job_yields_none(self):
        def job(item, remaining):
            if item == "bad":
                raise RuntimeError("boom")
            return item

        assert SourceExecutor().run(["a", "bad", "c"], job) == ["a", None, "c"]
        assert SourceExecutor(max_workers=3).run(["a", "bad", "c"], job) == ["a", None, "c"]

    def test_pool_keeps_item_order(self):
        def job(item, remaining):
            time.sleep(0.02 * (3 - item))
            return item

        assert SourceExecutor(max_workers=3).run([0, 1, 2, 3], job) == [0, 1, 2, 3]

    def test_pool_runs_jobs_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        def job(item, remaining):
            barrier.wait()
            return item

        assert SourceExecutor(max_workers=3).run([1, 2, 3], job) == [1, 2, 3]

    def test_deadline_aborts_run(self):
        release = threading.Event()
        on_abort = Mock(side_effect=release.set)

        def job(item, remaining):
            if item == "slow":
                release.wait(5)
            return item

        executor = SourceExecutor(max_workers=2, deadline=0.2, on_abort=on_abort)
        results = executor.run(["fast", "slow"], job)

        assert results == ["fast", None]
        assert executor.aborted
        on_abort.assert_called_once_with()

    def test_jobs_receive_remaining_time(self):
        received = []

        def job(item, remaining):
            received.append(remaining)
            return item

        SourceExecutor(deadline=30).run(["a"], job)

        assert 0 < received[0] <= 30

    def test_cancel_event(self):
        cancel = threading.Event()
        on_abort = Mock(side_effect=lambda: release.set())
        release = threading.Event()

        def job(item, remaining):
            cancel.set()
            release.wait(5)
            return item

        executor = SourceExecutor(max_workers=1, cancel_event=cancel, on_abort=on_abort)
        results = executor.run(["a", "b"], job)

        assert results == [None, None]
        assert executor.aborted
        on_abort.assert_called_once_with()

    def test_unset_cancel_event_completes(self):
        executor = SourceExecutor(cancel_event=threading.Event())

        assert executor.run(["a", "b"], lambda item, remaining: item) == ["a", "b"]
        assert not executor.aborted
