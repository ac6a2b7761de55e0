"""Virtual-clock scheduler that paces duel turns."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from heapq import heappop, heappush

TaskCallback = Callable[[], None]


def interval_for_speed(speed: int) -> float:
    """Tick interval for a game speed level; each level doubles the pace."""
    if speed < 0:
        raise ValueError("speed must be >= 0")
    return 1.0 / (1 << speed)


@dataclass(frozen=True, slots=True)
class TaskHandle:
    """Reference to a scheduled task."""

    task_id: int
    label: str


@dataclass(slots=True)
class _Task:
    handle: TaskHandle
    due_seconds: float
    callback: TaskCallback
    interval_seconds: float | None = None
    cancelled: bool = False


class Scheduler:
    """Runs one-shot and repeating callbacks as the clock advances.

    The clock only moves when `advance` or `run_due` is called, so hosts
    decide whether it tracks wall time or runs as fast as possible.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._next_id = 1
        self._tasks: dict[int, _Task] = {}
        self._heap: list[tuple[float, int]] = []

    @property
    def now_seconds(self) -> float:
        return self._now

    @property
    def active_task_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.cancelled)

    def next_due_seconds(self) -> float | None:
        """Due time of the earliest live task."""
        live = [task.due_seconds for task in self._tasks.values() if not task.cancelled]
        return min(live) if live else None

    def call_later(
        self, delay_seconds: float, callback: TaskCallback, *, label: str = ""
    ) -> TaskHandle:
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        return self._push(self._now + delay_seconds, callback, None, label)

    def call_every(
        self, interval_seconds: float, callback: TaskCallback, *, label: str = ""
    ) -> TaskHandle:
        if interval_seconds <= 0.0:
            raise ValueError("interval_seconds must be > 0")
        return self._push(self._now + interval_seconds, callback, interval_seconds, label)

    def set_interval(self, handle: TaskHandle, interval_seconds: float) -> None:
        """Change the period of a repeating task from its next run on."""
        if interval_seconds <= 0.0:
            raise ValueError("interval_seconds must be > 0")
        task = self._tasks.get(handle.task_id)
        if task is None or task.cancelled or task.interval_seconds is None:
            return
        task.interval_seconds = interval_seconds

    def cancel(self, handle: TaskHandle) -> None:
        task = self._tasks.get(handle.task_id)
        if task is not None:
            task.cancelled = True

    def advance(self, delta_seconds: float) -> int:
        """Move the clock forward and run everything that became due."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now + delta_seconds)

    def advance_to_next(self) -> int:
        """Jump straight to the next due task; returns callbacks executed."""
        due = self.next_due_seconds()
        if due is None:
            return 0
        return self.run_due(max(due, self._now))

    def run_due(self, now_seconds: float) -> int:
        if now_seconds < self._now:
            raise ValueError("now_seconds cannot move backwards")
        self._now = now_seconds
        executed = 0
        while self._heap and self._heap[0][0] <= self._now:
            due, task_id = heappop(self._heap)
            task = self._tasks.get(task_id)
            if task is None or task.cancelled or task.due_seconds != due:
                if task is not None and task.cancelled:
                    self._tasks.pop(task_id, None)
                continue
            task.callback()
            executed += 1
            if task.cancelled or task.interval_seconds is None:
                self._tasks.pop(task_id, None)
                continue
            task.due_seconds = due + task.interval_seconds
            heappush(self._heap, (task.due_seconds, task_id))
        return executed

    def _push(
        self,
        due_seconds: float,
        callback: TaskCallback,
        interval_seconds: float | None,
        label: str,
    ) -> TaskHandle:
        handle = TaskHandle(self._next_id, label)
        self._next_id += 1
        self._tasks[handle.task_id] = _Task(handle, due_seconds, callback, interval_seconds)
        heappush(self._heap, (due_seconds, handle.task_id))
        return handle
