"""
Action System - Actions and results.

Actions represent:
1. Player actions (reveal a tile)
2. Deferred system actions (apply an armed match or mismatch)

All state changes within a round flow through actions and the reducer.
Starting a new round is not an action: the engine builds a fresh state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import GameState, Resolution, ResolutionToken


class ActionType(Enum):
    """Types of actions in the system."""
    # Player actions
    REVEAL = "reveal"

    # Deferred system actions
    APPLY_MATCH = "apply_match"
    APPLY_MISMATCH = "apply_mismatch"


class IgnoredReason(str, Enum):
    """Why a well-formed action left the state unchanged."""
    LOCKED = "locked"
    ALREADY_REVEALED = "already_revealed"
    ALREADY_MATCHED = "already_matched"
    STALE_RESOLUTION = "stale_resolution"


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    REVEAL carries a position; the APPLY_* actions carry the token captured
    when the resolution was armed.
    """
    action_type: ActionType
    position: int | None = None
    token: ResolutionToken | None = None

    @classmethod
    def reveal(cls, position: int) -> Action:
        """Factory for a tile click."""
        return cls(action_type=ActionType.REVEAL, position=position)

    @classmethod
    def resolve(cls, resolution: Resolution, token: ResolutionToken) -> Action:
        """Factory for the deferred action matching an armed resolution."""
        action_type = (
            ActionType.APPLY_MATCH if resolution == Resolution.MATCH else ActionType.APPLY_MISMATCH
        )
        return cls(action_type=action_type, token=token)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action changed the state
    - The resulting state (the untouched input state when ignored)
    - The resolution to arm, if the action revealed a second tile
    - Human-readable changes, for logs and UIs
    """
    accepted: bool
    new_state: GameState
    ignored_reason: IgnoredReason | None = None
    resolution: Resolution | None = None
    changes: list[str] = field(default_factory=list)

    @classmethod
    def ignored(cls, state: GameState, reason: IgnoredReason) -> ActionResult:
        """Create a no-op result that hands back the very same state."""
        return cls(accepted=False, new_state=state, ignored_reason=reason)

    @classmethod
    def applied(
        cls,
        state: GameState,
        changes: list[str] | None = None,
        resolution: Resolution | None = None,
    ) -> ActionResult:
        """Create a success result with the new state."""
        return cls(
            accepted=True,
            new_state=state,
            resolution=resolution,
            changes=changes or [],
        )
