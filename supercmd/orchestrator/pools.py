"""
IOPool -- Thread pool for I/O-bound work

Threads suit subprocess and file work: the GIL is released while a thread
waits on a child process. Every task is wrapped so that it always yields a
TaskResult, failed or not, and that result is handed to the pool's
ResultAggregator when one is attached.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

from .aggregator import ResultAggregator
from .task import Task, TaskResult, TaskStatus


class IOPool:
    """
    ThreadPool for I/O-bound operations.

    Suitable for: subprocess probes, file I/O, network requests.
    """

    def __init__(self, max_workers: int, aggregator: Optional[ResultAggregator] = None,
                 thread_name_prefix: str = "supercmd-io-"):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix
        )
        self._aggregator = aggregator
        self._shutdown = False

    def submit(self, task: Task) -> Future:
        """
        Submit an I/O-bound task for execution.

        Returns a Future resolving to the task's TaskResult.
        """
        if self._shutdown:
            raise RuntimeError("Pool is shut down")

        return self._executor.submit(self._execute_task, task)

    def _execute_task(self, task: Task) -> TaskResult:
        """Execute a task, capturing its outcome as a TaskResult."""
        started_at = datetime.now(timezone.utc)

        try:
            value = task.fn(*task.args, **task.kwargs)
            status, error = TaskStatus.COMPLETED, None
        except Exception as e:
            value, status, error = None, TaskStatus.FAILED, e

        completed_at = datetime.now(timezone.utc)
        result = TaskResult(
            task_id=task.id,
            name=task.name,
            status=status,
            result=value,
            error=error,
            started_at=started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_ms=(completed_at - started_at).total_seconds() * 1000
        )

        if self._aggregator is not None:
            self._aggregator.submit(result)
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the pool."""
        self._shutdown = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "IOPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)
