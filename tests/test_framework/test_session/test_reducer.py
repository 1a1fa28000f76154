import random

import pytest

from tale_engine.core.actions import Action, ActionType
from tale_engine.core.events import SessionEvent
from tale_framework.errors import ActionNotAllowed, InsufficientGold
from tale_framework.session.config import SessionConfig
from tale_framework.session.reducer import SessionReducer, TransitionContext
from tale_framework.session.state import LogType, SessionState


@pytest.fixture
def reducer(config, catalog):
    return SessionReducer(config, catalog)


def test_input_state_is_not_modified(session, reducer):
    state = session.state
    state.player.hp = 10
    before = state.model_dump()

    transition = reducer.reduce(state, Action(ActionType.REST), random.Random(1))

    assert state.model_dump() == before
    assert transition.state is not state
    assert transition.state.player.hp == 100


def test_snapshots_share_the_script(session):
    copy = session.state.clone()

    assert copy.script is session.state.script
    assert copy.player is not session.state.player


def test_rejected_action_discards_partial_changes(session, config, catalog):
    def greedy(ctx, action):
        ctx.state.player.gold = 0
        ctx.log(LogType.SYSTEM, "All gold taken.")
        ctx.schedule(1.0, ActionType.SAFE_TRANSITION, key="safe_transition", scene_id="town")
        raise ActionNotAllowed("Nope.")

    reducer = SessionReducer(config, catalog, handlers={ActionType.REST: greedy}, evaluate=lambda ctx: None)

    transition = reducer.reduce(session.state, Action(ActionType.REST))

    assert transition.error == "Nope."
    assert transition.state.player.gold == 50
    assert transition.state.log == session.state.log
    assert transition.scheduled == []
    assert transition.events == []


def test_shop_actions_also_set_shop_error(session, config, catalog):
    def broke(ctx, action):
        raise InsufficientGold(60, 50)

    reducer = SessionReducer(config, catalog, handlers={ActionType.BUY: broke, ActionType.SELL: broke},
                             evaluate=lambda ctx: None)

    bought = reducer.reduce(session.state, Action(ActionType.BUY, {"item_id": "x"}))
    rested = SessionReducer(config, catalog, handlers={ActionType.REST: broke},
                            evaluate=lambda ctx: None).reduce(session.state, Action(ActionType.REST))

    assert bought.state.shop_error == bought.error
    assert rested.state.shop_error is None
    assert rested.error is not None


def test_player_action_clears_previous_error(session, reducer):
    state = session.state.clone()
    state.error = "Old problem."

    assert reducer.reduce(state, Action(ActionType.REST)).error is None


def test_follow_up_keeps_previous_error(session, reducer):
    state = session.state.clone()
    state.error = "Old problem."

    transition = reducer.reduce(state, Action(ActionType.RESOLVE_ENEMY_PHASE))

    assert transition.error == "Old problem."


def test_unknown_action_type(session, config, catalog):
    reducer = SessionReducer(config, catalog, handlers={})
    with pytest.raises(ValueError):
        reducer.reduce(session.state, Action(ActionType.REST))


def test_replace_state_resets_schedule(config, catalog):
    ctx = TransitionContext(SessionState(), config, catalog, random.Random(0))
    fresh = SessionState(log_counter=9)

    ctx.replace_state(fresh)

    assert ctx.state is fresh
    assert ctx.transition.state is fresh
    assert ctx.transition.reset_schedule


class TestTransitionContext:
    @pytest.fixture
    def ctx(self, catalog):
        return TransitionContext(SessionState(), SessionConfig(log_limit=3), catalog, random.Random(0))

    def test_log_assigns_increasing_ids(self, ctx):
        first = ctx.log(LogType.SYSTEM, "one")
        second = ctx.log(LogType.COMBAT, "two", speaker="Aria")

        assert (first.id, second.id) == (1, 2)
        assert second.speaker == "Aria"
        assert [e for e, _ in ctx.transition.events] == [SessionEvent.LOG_APPENDED] * 2

    def test_log_evicts_oldest(self, ctx):
        for n in range(5):
            ctx.log(LogType.SYSTEM, f"line {n}")

        assert [e.message for e in ctx.state.log] == ["line 2", "line 3", "line 4"]
        assert ctx.state.log_counter == 5

    def test_schedule_and_cancel(self, ctx):
        ctx.schedule(1.0, ActionType.RESOLVE_ENEMY_PHASE, key="enemy_phase")
        ctx.schedule(1.5, ActionType.DELEGATED_ATTACK, key="delegation")
        assert ctx.is_scheduled("enemy_phase")

        ctx.cancel("enemy_phase")

        assert not ctx.is_scheduled("enemy_phase")
        assert [s.key for s in ctx.transition.scheduled] == ["delegation"]
        assert ctx.transition.cancelled == ["enemy_phase"]

    def test_schedule_payload(self, ctx):
        ctx.schedule(1.5, ActionType.SAFE_TRANSITION, key="safe_transition", scene_id="town")

        entry = ctx.transition.scheduled[0]
        assert entry.delay == 1.5
        assert entry.action == Action(ActionType.SAFE_TRANSITION, {"scene_id": "town"})
