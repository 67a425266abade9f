"""
Task -- Unit of concurrent work

Defines the core abstractions for the orchestrator:
- Task: a callable with its arguments and a name for observability
- TaskStatus: outcome classification
- TaskResult: immutable outcome of one task execution

Design principles:
- Tasks are immutable after creation
- Each task produces exactly one TaskResult; workers share no other state
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

import xxhash


class TaskStatus(Enum):
    """Task outcome states."""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Task:
    """
    Unit of concurrent work.

    Immutable after creation. Carries all context needed for execution.
    """
    id: str = field(default_factory=lambda: _generate_task_id())
    fn: Callable = field(default=None)
    args: tuple = field(default_factory=tuple)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    # Metadata (for observability)
    name: str = ""
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Task):
            return self.id == other.id
        return False


@dataclass(frozen=True)
class TaskResult:
    """Outcome of task execution."""
    task_id: str
    name: str
    status: TaskStatus
    result: Any = None
    error: Optional[BaseException] = None

    # Timing
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED


_task_counter = itertools.count()


def _generate_task_id() -> str:
    """Generate unique task ID using xxhash over time and a process-wide counter."""
    seed = f"{datetime.now(timezone.utc).isoformat()}-{next(_task_counter)}"
    return xxhash.xxh64(seed.encode()).hexdigest()[:12]


def io_task(
    fn: Callable,
    args: tuple = (),
    kwargs: Dict[str, Any] = None,
    name: str = "",
) -> Task:
    """
    Create an I/O-bound task (subprocess, file, network).

    Args:
        fn: Function to execute
        args: Positional arguments tuple for fn
        kwargs: Keyword arguments dict for fn
        name: Optional task name, copied onto the TaskResult

    Example:
        task = io_task(fn=describe, args=("supercmd-foo",), name="supercmd-foo")
    """
    return Task(
        fn=fn,
        args=args,
        kwargs=kwargs or {},
        name=name,
    )
