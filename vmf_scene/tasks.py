"""
Registry of post-processing tasks for one import session.

The registry only records work: `add_task` queues a fresh instance of a task
type, an external scheduler takes tasks with `pop_task` and reports them with
`complete`. Lookups over completed tasks return the first match in completion
order. Not thread-safe; confine a registry to the thread that owns the import.
"""
from collections import deque


class ParserTask:
    """Base class for post-processing tasks."""

    def __repr__(self):
        return f"{type(self).__name__}()"


class TaskRegistry:
    def __init__(self):
        self._queue = deque()
        self._done = []

    def add_task(self, task_type):
        """Instantiate `task_type` and queue it. Returns the new instance."""
        if not (isinstance(task_type, type) and issubclass(task_type, ParserTask)):
            raise TypeError(f"Expected a ParserTask subclass, got {task_type!r}")
        task = task_type()
        self._queue.append(task)
        return task

    @property
    def pending(self):
        return list(self._queue)

    def pop_task(self):
        """Next queued task, or None when the queue is empty."""
        return self._queue.popleft() if self._queue else None

    def complete(self, task):
        """Record `task` as done, dropping it from the queue if still there."""
        if task in self._queue:
            self._queue.remove(task)
        self._done.append(task)

    @property
    def done(self):
        return list(self._done)

    def get_task(self, task_type):
        """First completed task of exactly `task_type`, or None."""
        for task in self._done:
            if type(task) is task_type:
                return task
        return None

    def task_done(self, task):
        """Whether a task of this type (class or instance) has completed."""
        task_type = task if isinstance(task, type) else type(task)
        return any(type(t) is task_type for t in self._done)
