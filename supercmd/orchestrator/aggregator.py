"""
ResultAggregator -- Single point of fan-in for concurrent results

Implements the Single Writer pattern:
- Workers put their one immutable TaskResult into a bounded queue
- The owning caller drains the queue; only it builds the merged view

The queue is sized to the number of expected results, so a worker never
blocks on put(), and collect() blocks until every expected result arrived.
There is no timeout: a worker that never finishes keeps
collect() waiting. Callers that need a deadline must wrap the whole gather.
"""

import queue
from typing import List

from .task import TaskResult


class ResultAggregator:
    """
    Collects results from concurrent workers.

    Usage:
        aggregator = ResultAggregator(capacity=len(tasks))

        # Workers submit results
        aggregator.submit(result)

        # Owning thread waits for all of them
        results = aggregator.collect(len(tasks))
    """

    def __init__(self, capacity: int):
        """
        Args:
            capacity: Number of results the queue can hold
        """
        self.capacity = capacity
        self._queue: queue.Queue = queue.Queue(maxsize=capacity)

    def submit(self, result: TaskResult) -> None:
        """
        Submit a result from a worker.

        Thread-safe. Can be called from any thread.
        """
        self._queue.put(result)

    def collect(self, count: int) -> List[TaskResult]:
        """Block until count results have been submitted and return them."""
        return [self._queue.get() for _ in range(count)]
