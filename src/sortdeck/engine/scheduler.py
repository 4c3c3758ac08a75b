from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScheduledTask:
    name: str
    due: float
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not self.cancelled and not self.fired


@dataclass
class Scheduler:
    """Deterministic clock for deferred engine work.

    Time only moves when the host calls `advance(dt)`, the same way a scene
    receives `update(dt)` from the frame loop. Tasks are data (a name), so the
    owning game state stays serializable.
    """

    clock: float = 0.0
    tasks: list[ScheduledTask] = field(default_factory=list)

    def schedule(self, name: str, delay: float) -> ScheduledTask:
        task = ScheduledTask(name=name, due=self.clock + max(0.0, delay))
        self.tasks.append(task)
        return task

    def cancel(self, task: ScheduledTask | None) -> None:
        if task is None or not task.pending:
            return
        task.cancelled = True
        self.tasks = [t for t in self.tasks if t is not task]

    def advance(self, dt: float) -> list[ScheduledTask]:
        """Move the clock forward and return the tasks that came due, oldest first."""
        self.clock += max(0.0, dt)
        due = [t for t in self.tasks if t.pending and t.due <= self.clock]
        due.sort(key=lambda t: t.due)
        for t in due:
            t.fired = True
        self.tasks = [t for t in self.tasks if t.pending]
        return due
