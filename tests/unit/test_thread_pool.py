"""
Unit tests for the worker thread pool.
"""

import threading

import pytest

from tinyhttp.core.thread_pool import ThreadPool


class TestThreadPool:
    """Tests for ThreadPool class."""

    def test_runs_tasks(self):
        """Test submitted tasks run on worker threads."""
        pool = ThreadPool(min_workers=2, max_workers=2)
        pool.start()
        done = threading.Event()
        results = []

        def task(value):
            results.append((value, threading.current_thread().name))
            done.set()

        try:
            assert pool.submit(task, args=(42,))
            assert done.wait(timeout=5.0)
        finally:
            pool.shutdown(wait=True, timeout=5.0)

        assert results[0][0] == 42
        assert results[0][1].startswith("Worker-")

    def test_submit_before_start(self):
        """Test submitting to a stopped pool is an error."""
        with pytest.raises(RuntimeError):
            ThreadPool().submit(print)

    def test_full_queue_rejects(self):
        """Test submit() returns False instead of blocking when the queue is full."""
        pool = ThreadPool(min_workers=1, max_workers=1, queue_size=1)
        pool.start()
        release = threading.Event()
        started = threading.Event()

        def blocker():
            started.set()
            release.wait(timeout=5.0)

        try:
            assert pool.submit(blocker)
            assert started.wait(timeout=5.0)
            assert pool.submit(blocker)       # Fills the queue
            assert not pool.submit(blocker)   # Rejected
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5.0)

    def test_failing_task_does_not_kill_worker(self):
        """Test a raising task is counted and the worker keeps serving."""
        pool = ThreadPool(min_workers=1, max_workers=1)
        pool.start()
        done = threading.Event()

        def fail():
            raise RuntimeError("boom")

        try:
            pool.submit(fail)
            pool.submit(done.set)
            assert done.wait(timeout=5.0)
            assert pool.stats["failed"] == 1
        finally:
            pool.shutdown(wait=True, timeout=5.0)

    def test_shutdown_stops_workers(self):
        pool = ThreadPool(min_workers=2, max_workers=2)
        pool.start()
        pool.shutdown(wait=True, timeout=5.0)

        assert pool.stats["workers"] == 0
        with pytest.raises(RuntimeError):
            pool.submit(print)
