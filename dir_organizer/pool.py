"""
Fixed-size worker pool for running move tasks in parallel.

Workers share one FIFO queue. Shutdown enqueues one end-of-queue sentinel
per worker behind every task already submitted, so queued work always
drains before the workers exit.
"""

import logging
import queue
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import PoolShutdownError


logger = logging.getLogger(__name__)

Task = Callable[[], None]
ErrorCallback = Callable[[BaseException], None]

_SENTINEL = None


class WorkerPool:
    """
    Pool of long-lived worker threads consuming a shared task queue.

    Example:
        with WorkerPool(worker_count=4) as pool:
            for task in tasks:
                pool.submit(task)
        # every task has run once the block exits

    Attributes:
        worker_count: Number of worker threads.
    """

    def __init__(self, worker_count: int = 4, name: str = "organizer") -> None:
        if worker_count < 1:
            raise ValueError(f"worker_count must be positive, got {worker_count}")

        self.worker_count = worker_count
        self._queue: "queue.Queue[Optional[Tuple[Task, Optional[ErrorCallback]]]]" = queue.Queue()
        self._lock = threading.Lock()
        self._shutting_down = False
        self._stats = {"submitted": 0, "completed": 0, "failed": 0}

        self._workers: List[threading.Thread] = [
            threading.Thread(target=self._worker_loop, name=f"{name}-worker-{i}", daemon=True)
            for i in range(worker_count)
        ]
        for worker in self._workers:
            worker.start()

        logger.debug("Started WorkerPool with %d workers", worker_count)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    @property
    def is_shutting_down(self) -> bool:
        with self._lock:
            return self._shutting_down

    def submit(self, task: Task, on_error: Optional[ErrorCallback] = None) -> None:
        """
        Enqueue a task without waiting for it to run.

        Args:
            task: Zero-argument callable
            on_error: Called with any exception the task raises

        Raises:
            PoolShutdownError: If shutdown has already begun
        """
        with self._lock:
            if self._shutting_down:
                raise PoolShutdownError("Cannot submit a task after the pool has been shut down")
            self._stats["submitted"] += 1
            self._queue.put((task, on_error))

    def shutdown(self) -> None:
        """
        Stop accepting tasks, run everything already queued and join the workers.

        Safe to call more than once.
        """
        with self._lock:
            first_call = not self._shutting_down
            self._shutting_down = True
            if first_call:
                for _ in self._workers:
                    self._queue.put(_SENTINEL)

        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

        if first_call:
            logger.debug(
                "WorkerPool shut down: %d completed, %d failed",
                self._stats["completed"],
                self._stats["failed"],
            )

    def stats(self) -> Dict[str, Any]:
        """Get a snapshot of submitted, completed and failed task counts."""
        with self._lock:
            return dict(self._stats)

    def _worker_loop(self) -> None:
        while True:
            item = self._queue.get()
            try:
                # End-of-queue signal
                if item is _SENTINEL:
                    return
                task, on_error = item
                self._run(task, on_error)
            finally:
                self._queue.task_done()

    def _run(self, task: Task, on_error: Optional[ErrorCallback]) -> None:
        try:
            task()
        except Exception as e:
            logger.exception("Task %r raised", task)
            with self._lock:
                self._stats["failed"] += 1
            if on_error is not None:
                try:
                    on_error(e)
                except Exception:
                    logger.exception("Error callback for task %r raised", task)
        else:
            with self._lock:
                self._stats["completed"] += 1
