"""
Engine Core - Deterministic memory-game state management.

The engine is the runtime that:
1. Builds and shuffles a deck from a catalog
2. Manages the immutable GameState
3. Applies reveals via the reducer
4. Resolves matches and mismatches after a delay
5. Detects the end of a round
"""

from .state import GameState, Item, Tile, TurnPhase, Resolution, ResolutionToken, is_complete
from .action import Action, ActionType, ActionResult, IgnoredReason
from .deck import build_deck, shuffle, validate_catalog
from .reducer import Reducer, apply_action
from .scheduler import Scheduler, AsyncioScheduler, ManualScheduler
from .engine import GameEngine, DEFAULT_MATCH_DELAY_MS, DEFAULT_MISMATCH_DELAY_MS

__all__ = [
    "GameState",
    "Item",
    "Tile",
    "TurnPhase",
    "Resolution",
    "ResolutionToken",
    "is_complete",
    "Action",
    "ActionType",
    "ActionResult",
    "IgnoredReason",
    "build_deck",
    "shuffle",
    "validate_catalog",
    "Reducer",
    "apply_action",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "GameEngine",
    "DEFAULT_MATCH_DELAY_MS",
    "DEFAULT_MISMATCH_DELAY_MS",
]
