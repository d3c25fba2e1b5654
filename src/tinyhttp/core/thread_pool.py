"""
=============================================================================
THREAD POOL
=============================================================================

Worker threads that serve connections, so a slow client or a blocking
file read on one connection never stalls the others.

=============================================================================
ARCHITECTURE
=============================================================================

    accept loop                  task queue                 workers
    ───────────                  ──────────                 ───────
    conn ──submit()──►   [ task | task | task ]   ──get()──► Worker-0
                                                  ──get()──► Worker-1
                                                  ──get()──► ...

    - min_workers threads start with the pool
    - another is added (up to max_workers) when all are busy and tasks
      are waiting
    - submit() returns False instead of blocking when the queue is full
    - shutdown() drains the queue, then sends one None ("poison pill")
      per worker

=============================================================================
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """A deferred call: func(*args)."""
    func: Callable[..., Any]
    args: tuple = ()


class Worker(threading.Thread):
    """Pulls tasks off the shared queue until it receives None."""

    def __init__(self, task_queue: "queue.Queue[Optional[Task]]", worker_id: int):
        # daemon=True: workers never keep the process alive on exit
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            task = self.task_queue.get()
            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args)
            self.tasks_completed += 1
        except Exception as e:
            # One failing connection must not take the worker down with it
            logger.exception(
                f"Worker {self.worker_id} task failed after "
                f"{time.time() - start_time:.3f}s: {e}"
            )
            self.tasks_failed += 1
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-floor, bounded-ceiling pool of worker threads.

        pool = ThreadPool(min_workers=4, max_workers=8)
        pool.start()
        pool.submit(handle_connection, args=(conn,))
        ...
        pool.shutdown(wait=True, timeout=30.0)
    """

    def __init__(self, min_workers: int = 4, max_workers: int = 8, queue_size: int = 100):
        self.min_workers = min_workers
        self.max_workers = max_workers

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._lock = threading.Lock()  # Protects _workers
        self._started = False
        self._shutdown = False

    def start(self):
        """Start the minimum number of workers. Idempotent."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")
        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()
        self._started = True

    def _add_worker(self) -> Worker:
        """Start one more worker. Caller holds _lock."""
        worker = Worker(self._task_queue, worker_id=len(self._workers))
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(self, func: Callable[..., Any], args: tuple = ()) -> bool:
        """
        Queue func(*args) for a worker.

        Returns:
            True if queued, False if the queue is full.

        Raises:
            RuntimeError: If the pool is not running.
        """
        if not self._started or self._shutdown:
            raise RuntimeError("Thread pool is not running")

        try:
            self._task_queue.put(Task(func=func, args=args), block=False)
        except queue.Full:
            return False

        self._maybe_scale_up()
        return True

    def _maybe_scale_up(self):
        """Add a worker when every worker is busy and tasks are waiting."""
        with self._lock:
            busy = sum(1 for w in self._workers if w.state == WorkerState.BUSY)
            if (busy == len(self._workers)
                    and len(self._workers) < self.max_workers
                    and self._task_queue.qsize() > 0):
                logger.debug(f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers")
                self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop the pool.

        Args:
            wait: Let queued tasks finish first.
            timeout: Give up waiting for the queue after this many seconds.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while not self._task_queue.empty():
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.1)

        # One poison pill per worker
        for _ in self._workers:
            try:
                self._task_queue.put(None, block=False)
            except queue.Full:
                break

        for worker in self._workers:
            worker.join(timeout=2.0)

        self._workers.clear()
        self._started = False
        logger.info("Thread pool shutdown complete")

    @property
    def stats(self) -> dict:
        """Worker and task counts, for debugging."""
        return {
            "workers": len(self._workers),
            "busy": sum(1 for w in self._workers if w.state == WorkerState.BUSY),
            "queued": self._task_queue.qsize(),
            "completed": sum(w.tasks_completed for w in self._workers),
            "failed": sum(w.tasks_failed for w in self._workers),
        }
