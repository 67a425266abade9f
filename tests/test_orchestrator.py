"""
Tests for Task Orchestrator -- Concurrent execution with single-writer fan-in

Tests verify:
- Task creation and unique ids
- IOPool always yields one TaskResult per task, failed or not
- Tasks actually run in parallel
- ResultAggregator collects every result exactly once
"""

import threading
import time

import pytest

from supercmd.orchestrator import IOPool, ResultAggregator, Task, TaskResult, TaskStatus, io_task


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def pool():
    """Create a 4-worker pool."""
    p = IOPool(max_workers=4)
    yield p
    p.shutdown(wait=True)


# =============================================================================
# Task Creation Tests
# =============================================================================

class TestTaskCreation:
    """Test task factory functions."""

    def test_io_task(self):
        """io_task carries function, arguments and name."""
        fn = lambda x, y=0: x + y  # noqa: E731
        task = io_task(fn=fn, args=(1,), kwargs={"y": 2}, name="add")

        assert task.fn is fn
        assert task.args == (1,)
        assert task.kwargs == {"y": 2}
        assert task.name == "add"

    def test_unique_ids(self):
        """Every task gets its own id."""
        ids = {io_task(fn=lambda: None).id for _ in range(100)}
        assert len(ids) == 100

    def test_immutable(self):
        """Tasks cannot be changed after creation."""
        task = io_task(fn=lambda: None)
        with pytest.raises(AttributeError):
            task.name = "changed"

    def test_equality_by_id(self):
        task = io_task(fn=lambda: None)
        assert task == Task(id=task.id)
        assert task != io_task(fn=lambda: None)


# =============================================================================
# Pool Tests
# =============================================================================

class TestIOPool:
    """Test task execution."""

    def test_completed_result(self, pool):
        result = pool.submit(io_task(fn=lambda x: x * 2, args=(21,), name="double")).result(timeout=5.0)

        assert isinstance(result, TaskResult)
        assert result.status == TaskStatus.COMPLETED
        assert result.success is True
        assert result.result == 42
        assert result.name == "double"
        assert result.duration_ms is not None

    def test_failed_result(self, pool):
        """Exceptions become failed results instead of propagating."""
        def boom():
            raise ValueError("boom")

        result = pool.submit(io_task(fn=boom)).result(timeout=5.0)

        assert result.failed is True
        assert isinstance(result.error, ValueError)
        assert result.result is None

    def test_runs_in_parallel(self, pool):
        """4 tasks on 4 workers wait on each other without deadlock."""
        barrier = threading.Barrier(4, timeout=5.0)

        start = time.time()
        futures = [pool.submit(io_task(fn=barrier.wait)) for _ in range(4)]
        results = [f.result(timeout=5.0) for f in futures]

        assert all(r.success for r in results)
        assert time.time() - start < 5.0

    def test_submit_after_shutdown(self):
        p = IOPool(max_workers=1)
        p.shutdown()

        with pytest.raises(RuntimeError, match="shut down"):
            p.submit(io_task(fn=lambda: None))

    def test_context_manager(self):
        with IOPool(max_workers=2) as p:
            future = p.submit(io_task(fn=lambda: "done"))
        assert future.result().result == "done"


# =============================================================================
# Aggregator Tests
# =============================================================================

class TestResultAggregator:
    """Test single-writer fan-in."""

    def test_collects_all_results(self):
        aggregator = ResultAggregator(capacity=10)
        with IOPool(max_workers=10, aggregator=aggregator) as p:
            for i in range(10):
                p.submit(io_task(fn=lambda x: x, args=(i,), name=f"task-{i}"))
            results = aggregator.collect(10)

        assert sorted(r.result for r in results) == list(range(10))
        assert len({r.task_id for r in results}) == 10

    def test_failures_are_collected(self):
        """A failed task still delivers its result."""
        def fail():
            raise RuntimeError("nope")

        aggregator = ResultAggregator(capacity=2)
        with IOPool(max_workers=2, aggregator=aggregator) as p:
            p.submit(io_task(fn=fail, name="bad"))
            p.submit(io_task(fn=lambda: "ok", name="good"))
            results = {r.name: r for r in aggregator.collect(2)}

        assert results["bad"].failed
        assert results["good"].result == "ok"

    def test_submit_directly(self):
        aggregator = ResultAggregator(capacity=1)
        result = TaskResult(task_id="abc", name="manual", status=TaskStatus.COMPLETED, result=1)
        aggregator.submit(result)

        assert aggregator.collect(1) == [result]
