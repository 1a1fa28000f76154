import pytest

from tale_engine.core.actions import Action, ActionType
from tale_engine.core.scheduler import Scheduler


@pytest.fixture
def scheduler():
    return Scheduler()


def test_task_fires_only_when_due(scheduler):
    fired = []
    scheduler.schedule(1.0, "a")

    assert scheduler.advance(0.5, fired.append) == 0
    assert fired == []

    assert scheduler.advance(0.5, fired.append) == 1
    assert fired == ["a"]
    assert scheduler.now == pytest.approx(1.0)


def test_tasks_fire_in_due_order_then_insertion_order(scheduler):
    fired = []
    scheduler.schedule(2.0, "late")
    scheduler.schedule(1.0, "first")
    scheduler.schedule(1.0, "second")

    scheduler.advance(5.0, fired.append)

    assert fired == ["first", "second", "late"]


def test_keyed_schedule_replaces_pending_task(scheduler):
    fired = []
    scheduler.schedule(1.0, "old", key="delegation")
    scheduler.schedule(1.5, "new", key="delegation")

    scheduler.advance(3.0, fired.append)

    assert fired == ["new"]


def test_cancel_suppresses_next_firing(scheduler):
    fired = []
    scheduler.schedule(1.0, "x", key="enemy_phase")

    assert scheduler.is_scheduled("enemy_phase")
    assert scheduler.cancel("enemy_phase")
    assert not scheduler.is_scheduled("enemy_phase")
    assert not scheduler.cancel("enemy_phase")

    scheduler.advance(2.0, fired.append)
    assert fired == []


def test_task_scheduled_while_firing_runs_in_same_window(scheduler):
    fired = []

    def fire(action):
        fired.append((action, scheduler.now))
        if action == "first":
            scheduler.schedule(0.5, "chained")

    scheduler.schedule(1.0, "first")
    scheduler.advance(2.0, fire)

    assert fired == [("first", 1.0), ("chained", 1.5)]
    assert scheduler.now == pytest.approx(2.0)


def test_cancel_all_and_pending(scheduler):
    scheduler.schedule(1.0, "a", key="k")
    scheduler.schedule(2.0, "b")
    assert [t.action for t in scheduler.pending] == ["a", "b"]
    assert scheduler.next_due() == pytest.approx(1.0)

    scheduler.cancel_all()

    assert scheduler.pending == []
    assert scheduler.next_due() is None
    assert not scheduler.is_scheduled("k")


def test_negative_delay_is_due_now(scheduler):
    fired = []
    scheduler.schedule(-3.0, "now")
    scheduler.advance(0.0, fired.append)
    assert fired == ["now"]


def test_actions_carry_payload():
    action = Action(ActionType.SAFE_TRANSITION, {"scene_id": "town"})
    assert action.is_follow_up
    assert action.payload["scene_id"] == "town"
    assert not Action(ActionType.ATTACK).is_follow_up
