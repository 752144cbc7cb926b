"""
Game Engine - Owns the authoritative state of one board.

The engine is the runtime that:
1. Builds a deck and starts a round (reset)
2. Routes clicks through the reducer (reveal)
3. Arms the deferred match/mismatch resolution on the scheduler
4. Publishes every new snapshot to observers

Deferred callbacks capture the ResolutionToken of the move that armed them.
After a reset the token no longer matches, so a late callback is discarded
by the reducer instead of touching the new round.
"""

from __future__ import annotations
import logging
import random
from typing import Callable, Sequence

from .action import Action
from .deck import build_deck, validate_catalog
from .reducer import apply_action
from .scheduler import Scheduler, TimerHandle
from .state import GameState, Item, Resolution, ResolutionToken

logger = logging.getLogger(__name__)

DEFAULT_MATCH_DELAY_MS = 600
DEFAULT_MISMATCH_DELAY_MS = 1000

Observer = Callable[[GameState], None]


class GameEngine:
    """
    The turn state machine for one board.

    Usage:
        engine = GameEngine(catalog, scheduler=AsyncioScheduler())
        engine.subscribe(render)

        engine.reveal(3)
        engine.reveal(7)      # second pick: move counted, resolution armed
        ...                   # scheduler fires, observers get the new state
        engine.reset()        # new round, older callbacks become no-ops
    """

    def __init__(
        self,
        catalog: Sequence[Item],
        scheduler: Scheduler,
        rng: random.Random | None = None,
        match_delay_ms: int = DEFAULT_MATCH_DELAY_MS,
        mismatch_delay_ms: int = DEFAULT_MISMATCH_DELAY_MS,
        name: str | None = None,
    ):
        if match_delay_ms < 0 or mismatch_delay_ms < 0:
            raise ValueError("Resolution delays must be non-negative")
        validate_catalog(catalog)

        self.catalog = tuple(catalog)
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.match_delay_ms = match_delay_ms
        self.mismatch_delay_ms = mismatch_delay_ms
        self.name = name

        self._generation = 0
        self._observers: list[Observer] = []
        self._timer: TimerHandle | None = None
        self._state = self._new_round()

    @property
    def state(self) -> GameState:
        """Latest snapshot."""
        return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def reset(self) -> GameState:
        """Discard the current round and start a fresh one."""
        self._state = self._new_round()
        self._publish()
        return self._state

    def reveal(self, position: int) -> GameState:
        """
        Reveal the tile at position.

        Ignored clicks (board locked, tile already face-up) return the current
        state unchanged. Unknown positions raise UnknownPositionError.
        """
        result = apply_action(self._state, Action.reveal(position))
        if not result.accepted:
            logger.debug(
                "Ignored reveal: %s",
                result.ignored_reason.value,
                extra=self._log_extra(position=position),
            )
            return self._state

        self._state = result.new_state
        if result.resolution is not None:
            self._arm(result.resolution, self._state.resolution_token)
        self._publish()
        return self._state

    def close(self) -> None:
        """Cancel any outstanding resolution and drop observers."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._observers.clear()

    def _new_round(self) -> GameState:
        self._generation += 1
        tiles = build_deck(self.catalog, self.rng)
        logger.info(
            "Started round with %d tiles",
            len(tiles),
            extra=self._log_extra(generation=self._generation),
        )
        return GameState.new_round(self._generation, tiles)

    def _arm(self, resolution: Resolution, token: ResolutionToken) -> None:
        delay = self.match_delay_ms if resolution == Resolution.MATCH else self.mismatch_delay_ms

        def fire() -> None:
            self._resolve(resolution, token)

        self._timer = self.scheduler.call_later(delay, fire)

    def _resolve(self, resolution: Resolution, token: ResolutionToken) -> None:
        """Deferred callback body."""
        result = apply_action(self._state, Action.resolve(resolution, token))
        if not result.accepted:
            logger.debug(
                "Discarded stale %s resolution from generation %d",
                resolution.value,
                token.generation,
                extra=self._log_extra(),
            )
            return

        self._timer = None
        self._state = result.new_state
        if self._state.round_complete:
            logger.info(
                "Round complete in %d moves",
                self._state.moves,
                extra=self._log_extra(moves=self._state.moves),
            )
        self._publish()

    def _publish(self) -> None:
        state = self._state
        for observer in list(self._observers):
            observer(state)

    def _log_extra(self, **extra) -> dict:
        extra.setdefault("generation", self._generation)
        if self.name:
            extra["session_id"] = self.name
        return extra
