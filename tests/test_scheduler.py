from __future__ import annotations

from sortdeck.engine.scheduler import Scheduler


def test_task_fires_once_when_due() -> None:
    sched = Scheduler()
    task = sched.schedule("complete_round", 2.0)
    assert sched.advance(1.9) == []
    assert task.pending
    assert sched.advance(0.1) == [task]
    assert task.fired
    assert sched.advance(5.0) == []


def test_cancelled_task_never_fires() -> None:
    sched = Scheduler()
    task = sched.schedule("complete_round", 1.0)
    sched.cancel(task)
    assert not task.pending
    assert sched.advance(2.0) == []
    sched.cancel(task)
    sched.cancel(None)


def test_due_tasks_come_back_in_order() -> None:
    sched = Scheduler()
    late = sched.schedule("late", 3.0)
    early = sched.schedule("early", 1.0)
    assert sched.advance(3.0) == [early, late]
