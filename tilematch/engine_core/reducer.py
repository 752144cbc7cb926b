"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation within a round.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> ActionResult
- Guards return the input state object itself, so an ignored click leaves
  the state bit-for-bit unchanged
- Precondition violations (unknown positions) raise instead of returning
"""

from __future__ import annotations

from .state import GameState, Resolution
from .action import Action, ActionType, ActionResult, IgnoredReason


class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state, or the unchanged state and
        the reason it was ignored.
        """
        handler = self._get_handler(action.action_type)
        if handler is None:
            raise ValueError(f"No handler for action type: {action.action_type}")
        return handler(state, action)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.REVEAL: self._handle_reveal,
            ActionType.APPLY_MATCH: self._handle_apply_match,
            ActionType.APPLY_MISMATCH: self._handle_apply_mismatch,
        }
        return handlers.get(action_type)

    def _handle_reveal(self, state: GameState, action: Action) -> ActionResult:
        """Handle a tile click."""
        position = action.position
        tile = state.tile_at(position)

        if state.is_locked:
            return ActionResult.ignored(state, IgnoredReason.LOCKED)
        if position in state.revealed:
            return ActionResult.ignored(state, IgnoredReason.ALREADY_REVEALED)
        if position in state.matched:
            return ActionResult.ignored(state, IgnoredReason.ALREADY_MATCHED)

        revealed = state.revealed + (position,)
        changes = [f"Revealed {tile.label or tile.pair_key} at position {position}"]

        if len(revealed) == 1:
            return ActionResult.applied(state._copy_with(revealed=revealed), changes=changes)

        # Second pick: the move counts now, whatever the outcome
        first = state.tile_at(revealed[0])
        resolution = Resolution.MATCH if first.pair_key == tile.pair_key else Resolution.MISMATCH
        new_state = state._copy_with(
            revealed=revealed,
            moves=state.moves + 1,
            pending=resolution,
        )
        changes.append(f"Move {new_state.moves}: {resolution.value}")
        return ActionResult.applied(new_state, changes=changes, resolution=resolution)

    def _handle_apply_match(self, state: GameState, action: Action) -> ActionResult:
        """Move both face-up tiles into the matched set."""
        if not self._is_current(state, action, Resolution.MATCH):
            return ActionResult.ignored(state, IgnoredReason.STALE_RESOLUTION)

        new_state = state._copy_with(
            matched=state.matched | frozenset(state.revealed),
            revealed=(),
            pending=None,
        )
        changes = [f"Matched positions {state.revealed[0]} and {state.revealed[1]}"]
        if new_state.round_complete:
            changes.append(f"Round complete in {new_state.moves} moves")
        return ActionResult.applied(new_state, changes=changes)

    def _handle_apply_mismatch(self, state: GameState, action: Action) -> ActionResult:
        """Turn both face-up tiles back down."""
        if not self._is_current(state, action, Resolution.MISMATCH):
            return ActionResult.ignored(state, IgnoredReason.STALE_RESOLUTION)

        new_state = state._copy_with(revealed=(), pending=None)
        return ActionResult.applied(
            new_state,
            changes=[f"Hid positions {state.revealed[0]} and {state.revealed[1]}"],
        )

    @staticmethod
    def _is_current(state: GameState, action: Action, expected: Resolution) -> bool:
        """A resolution applies only to the round and move that armed it."""
        return (
            action.token is not None
            and action.token == state.resolution_token
            and state.pending == expected
        )


_REDUCER = Reducer()


def apply_action(state: GameState, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return _REDUCER.apply(state, action)
