"""
Game State - Immutable snapshot of one memory-game round.

Design principles:
- Immutable: every transition returns a new GameState
- Owned by the engine: the presentation layer only ever reads snapshots
- Generation-tagged: each reset starts a new generation, so deferred
  callbacks armed in an older round can recognise themselves as stale
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from ..errors import UnknownPositionError


class TurnPhase(Enum):
    """Turn sub-state, derived from the revealed/matched sets."""
    IDLE = "idle"  # nothing face-up pending
    ONE_REVEALED = "one_revealed"  # waiting for the second pick
    PENDING_RESOLUTION = "pending_resolution"  # two face-up, board locked
    ROUND_COMPLETE = "round_complete"  # every tile matched


class Resolution(Enum):
    """Outcome armed when the second tile of a turn is revealed."""
    MATCH = "match"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class ResolutionToken:
    """
    Identifies one armed resolution.

    A deferred callback carries the token it was armed with; the reducer
    only applies it while the state still has the same generation and move.
    """
    generation: int
    move: int


@dataclass(frozen=True)
class Item:
    """
    A catalog entry.

    Only pair_key matters to the engine. label and display_ref are carried
    through to tiles for the presentation layer.
    """
    pair_key: str
    label: str = ""
    display_ref: Any = None


@dataclass(frozen=True)
class Tile:
    """One face-down/face-up unit on the board."""
    position: int
    pair_key: str
    label: str = ""
    display_ref: Any = None

    @classmethod
    def from_item(cls, position: int, item: Item) -> Tile:
        return cls(
            position=position,
            pair_key=item.pair_key,
            label=item.label,
            display_ref=item.display_ref,
        )


@dataclass(frozen=True)
class GameState:
    """
    Complete state of a round at a point in time.

    revealed keeps click order (first pick, second pick) and never holds
    more than two positions. matched only grows until the next reset.
    """
    generation: int
    tiles: tuple[Tile, ...]
    revealed: tuple[int, ...] = ()
    matched: frozenset[int] = field(default_factory=frozenset)
    moves: int = 0
    pending: Resolution | None = None

    @classmethod
    def new_round(cls, generation: int, tiles: tuple[Tile, ...]) -> GameState:
        """Fresh IDLE state for a freshly built deck."""
        return cls(generation=generation, tiles=tuple(tiles))

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def pairs_total(self) -> int:
        return len(self.tiles) // 2

    @property
    def pairs_found(self) -> int:
        return len(self.matched) // 2

    @property
    def is_locked(self) -> bool:
        """Two tiles face-up and unresolved: all further reveals are rejected."""
        return len(self.revealed) >= 2

    @property
    def round_complete(self) -> bool:
        return is_complete(self)

    @property
    def phase(self) -> TurnPhase:
        if is_complete(self):
            return TurnPhase.ROUND_COMPLETE
        if len(self.revealed) >= 2:
            return TurnPhase.PENDING_RESOLUTION
        if len(self.revealed) == 1:
            return TurnPhase.ONE_REVEALED
        return TurnPhase.IDLE

    @property
    def resolution_token(self) -> ResolutionToken:
        return ResolutionToken(generation=self.generation, move=self.moves)

    def tile_at(self, position: int) -> Tile:
        """Get the tile at a position, failing loudly for unknown positions."""
        if not isinstance(position, int) or not 0 <= position < len(self.tiles):
            raise UnknownPositionError(position, len(self.tiles))
        return self.tiles[position]

    def is_face_up(self, position: int) -> bool:
        return position in self.matched or position in self.revealed

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


def is_complete(state: GameState) -> bool:
    """True iff every tile on the board has been matched."""
    return len(state.matched) == len(state.tiles)
