"""
Tests for the reducer (state transitions).

Tests:
- Reveal acceptance and move counting
- Guards (locked board, face-up tiles)
- Match / mismatch application
- Stale resolution tokens
- Precondition violations
"""

import pytest

from ..engine_core.action import Action, ActionType, IgnoredReason
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.state import Resolution, ResolutionToken, TurnPhase, is_complete
from ..errors import UnknownPositionError


def reveal(state, position):
    return apply_action(state, Action.reveal(position)).new_state


def resolve(state):
    return apply_action(state, Action.resolve(state.pending, state.resolution_token)).new_state


class TestReveal:
    """Tests for the reveal action."""

    def test_first_reveal(self, fixed_board):
        result = apply_action(fixed_board, Action.reveal(0))

        assert result.accepted
        assert result.new_state.revealed == (0,)
        assert result.new_state.moves == 0
        assert result.resolution is None
        assert result.new_state.phase == TurnPhase.ONE_REVEALED

    def test_second_reveal_counts_move(self, fixed_board):
        """The move counts the moment the second tile turns."""
        state = reveal(fixed_board, 0)
        result = apply_action(state, Action.reveal(1))

        assert result.accepted
        assert result.new_state.revealed == (0, 1)
        assert result.new_state.moves == 1
        assert result.new_state.phase == TurnPhase.PENDING_RESOLUTION
        assert result.new_state.is_locked

    def test_second_reveal_arms_mismatch(self, fixed_board):
        result = apply_action(reveal(fixed_board, 0), Action.reveal(1))
        assert result.resolution == Resolution.MISMATCH
        assert result.new_state.pending == Resolution.MISMATCH

    def test_second_reveal_arms_match(self, fixed_board):
        result = apply_action(reveal(fixed_board, 0), Action.reveal(2))
        assert result.resolution == Resolution.MATCH
        assert result.new_state.pending == Resolution.MATCH

    def test_input_state_untouched(self, fixed_board):
        apply_action(fixed_board, Action.reveal(0))
        assert fixed_board.revealed == ()
        assert fixed_board.moves == 0


class TestGuards:
    """Ignored clicks return the very same state object."""

    def test_same_tile_twice(self, fixed_board):
        state = reveal(fixed_board, 0)
        result = apply_action(state, Action.reveal(0))

        assert not result.accepted
        assert result.ignored_reason == IgnoredReason.ALREADY_REVEALED
        assert result.new_state is state

    def test_locked_board(self, fixed_board):
        state = reveal(reveal(fixed_board, 0), 1)
        result = apply_action(state, Action.reveal(2))

        assert not result.accepted
        assert result.ignored_reason == IgnoredReason.LOCKED
        assert result.new_state is state
        assert len(result.new_state.revealed) == 2

    def test_matched_tile(self, fixed_board):
        state = resolve(reveal(reveal(fixed_board, 0), 2))
        result = apply_action(state, Action.reveal(2))

        assert not result.accepted
        assert result.ignored_reason == IgnoredReason.ALREADY_MATCHED
        assert result.new_state is state

    def test_matched_tile_as_second_pick(self, fixed_board):
        state = reveal(resolve(reveal(reveal(fixed_board, 0), 2)), 1)
        result = apply_action(state, Action.reveal(0))

        assert result.ignored_reason == IgnoredReason.ALREADY_MATCHED
        assert result.new_state.revealed == (1,)
        assert result.new_state.moves == 1


class TestResolution:
    """Tests for applying armed resolutions."""

    def test_apply_match(self, fixed_board):
        state = resolve(reveal(reveal(fixed_board, 0), 2))

        assert state.matched == frozenset({0, 2})
        assert state.revealed == ()
        assert state.pending is None
        assert state.phase == TurnPhase.IDLE
        assert state.pairs_found == 1

    def test_apply_mismatch(self, fixed_board):
        state = resolve(reveal(reveal(fixed_board, 0), 1))

        assert state.matched == frozenset()
        assert state.revealed == ()
        assert state.pending is None
        assert state.moves == 1

    def test_completion_only_after_last_match(self, fixed_board):
        state = resolve(reveal(reveal(fixed_board, 0), 2))
        state = reveal(reveal(state, 1), 3)

        assert not is_complete(state)
        assert state.phase == TurnPhase.PENDING_RESOLUTION

        state = resolve(state)
        assert is_complete(state)
        assert state.phase == TurnPhase.ROUND_COMPLETE
        assert state.moves == 2

    def test_stale_generation_ignored(self, fixed_board):
        state = reveal(reveal(fixed_board, 0), 2)
        stale = ResolutionToken(generation=state.generation - 1, move=state.moves)
        result = apply_action(state, Action.resolve(Resolution.MATCH, stale))

        assert not result.accepted
        assert result.ignored_reason == IgnoredReason.STALE_RESOLUTION
        assert result.new_state is state

    def test_stale_move_ignored(self, fixed_board):
        """A token from an earlier move of the same round does nothing."""
        state = reveal(reveal(fixed_board, 0), 1)
        old_token = state.resolution_token
        state = resolve(state)
        state = reveal(reveal(state, 0), 2)

        result = apply_action(state, Action.resolve(Resolution.MISMATCH, old_token))
        assert not result.accepted
        assert result.new_state.revealed == (0, 2)

    def test_duplicate_resolution_ignored(self, fixed_board):
        state = reveal(reveal(fixed_board, 0), 1)
        action = Action.resolve(Resolution.MISMATCH, state.resolution_token)
        state = apply_action(state, action).new_state

        result = apply_action(state, action)
        assert not result.accepted
        assert result.new_state is state

    def test_wrong_kind_ignored(self, fixed_board):
        state = reveal(reveal(fixed_board, 0), 1)
        result = apply_action(state, Action.resolve(Resolution.MATCH, state.resolution_token))
        assert not result.accepted
        assert result.new_state.matched == frozenset()

    def test_resolve_factory(self):
        token = ResolutionToken(generation=3, move=5)
        assert Action.resolve(Resolution.MATCH, token).action_type == ActionType.APPLY_MATCH
        assert Action.resolve(Resolution.MISMATCH, token).action_type == ActionType.APPLY_MISMATCH


class TestPreconditions:
    """Unknown positions fail loudly."""

    @pytest.mark.parametrize("position", [-1, 4, 100])
    def test_unknown_position_raises(self, fixed_board, position):
        with pytest.raises(UnknownPositionError) as exc_info:
            apply_action(fixed_board, Action.reveal(position))
        assert exc_info.value.position == position
        assert exc_info.value.tile_count == 4

    def test_unknown_position_raises_even_when_locked(self, fixed_board):
        state = reveal(reveal(fixed_board, 0), 1)
        with pytest.raises(UnknownPositionError):
            apply_action(state, Action.reveal(9))

    def test_reducer_instance(self, fixed_board):
        result = Reducer().apply(fixed_board, Action.reveal(3))
        assert result.accepted
        assert result.changes
