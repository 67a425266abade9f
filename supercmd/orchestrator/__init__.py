"""
Orchestrator -- Concurrent execution of independent tasks

Components:
- Task / TaskResult: immutable unit of work and its outcome
- IOPool: ThreadPoolExecutor running tasks, one TaskResult each
- ResultAggregator: bounded fan-in queue drained by a single caller
"""

from .aggregator import ResultAggregator
from .pools import IOPool
from .task import Task, TaskResult, TaskStatus, io_task

__all__ = [
    'ResultAggregator',
    'IOPool',
    'Task', 'TaskResult', 'TaskStatus', 'io_task',
]
