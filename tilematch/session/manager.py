"""
Session Manager - Creates and manages play sessions.

LIFECYCLE:
1. Browser opens the game -> create session (in-memory only)
2. Each session owns exactly one GameEngine and therefore one board
3. "New game" resets the engine inside the same session
4. Session ends explicitly or is swept after sitting idle

PERSISTENCE RULES:
- No database: sessions vanish with the process
- No score history beyond the move counter of the current round
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging
import random
import time
import uuid

from ..config import Settings, get_settings
from ..engine_core.engine import GameEngine
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import GameState, Item
from ..errors import UnknownCatalogError
from ..games import get_catalog, list_catalogs, load_catalog_file

logger = logging.getLogger(__name__)

CUSTOM_CATALOG = "custom"


class SessionStatus(Enum):
    """State of a play session."""
    ACTIVE = "active"  # Round in progress
    COMPLETE = "complete"  # Round won, waiting for a reset
    ENDED = "ended"  # Session closed


@dataclass
class Session:
    """
    An ephemeral play session.

    The engine holds the game state; the session only adds identity and
    bookkeeping for the manager.
    """
    session_id: str
    catalog_name: str
    engine: GameEngine
    created_at: float
    last_active_at: float
    ended: bool = False
    clock: Callable[[], float] = field(default=time.time, repr=False)

    @property
    def state(self) -> GameState:
        return self.engine.state

    @property
    def status(self) -> SessionStatus:
        if self.ended:
            return SessionStatus.ENDED
        if self.engine.state.round_complete:
            return SessionStatus.COMPLETE
        return SessionStatus.ACTIVE

    def is_active(self) -> bool:
        """Check if session is still open."""
        return not self.ended

    def touch(self) -> None:
        self.last_active_at = self.clock()

    def reveal(self, position: int) -> GameState:
        self.touch()
        return self.engine.reveal(position)

    def reset(self) -> GameState:
        self.touch()
        return self.engine.reset()


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Resolve the catalog for a new session
    - Build one engine per session, sharing the app's scheduler
    - Track, end and sweep sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.scheduler = scheduler
        self.settings = settings or get_settings()
        self.clock = clock
        self._sessions: dict[str, Session] = {}
        self._custom_catalog: tuple[Item, ...] | None = None

    def resolve_catalog(self, catalog_name: str | None = None) -> tuple[str, tuple[Item, ...]]:
        """
        Pick the catalog for a new session.

        An explicit name wins; otherwise a configured catalog file; otherwise
        the configured default catalog.
        """
        wants_custom = catalog_name == CUSTOM_CATALOG or (
            catalog_name is None and self.settings.catalog_path is not None
        )
        if wants_custom:
            if not self.settings.catalog_path:
                raise UnknownCatalogError(CUSTOM_CATALOG, self.available_catalogs())
            if self._custom_catalog is None:
                self._custom_catalog = load_catalog_file(self.settings.catalog_path)
            return CUSTOM_CATALOG, self._custom_catalog

        name = catalog_name or self.settings.default_catalog
        return name, get_catalog(name)

    def available_catalogs(self) -> list[str]:
        """Built-in catalog names, plus "custom" when a catalog file is configured."""
        names = list_catalogs()
        if self.settings.catalog_path:
            names.append(CUSTOM_CATALOG)
        return names

    def create_session(
        self,
        catalog_name: str | None = None,
        random_seed: int | None = None,
    ) -> Session:
        """
        Create a new session with a freshly shuffled board.

        Args:
            catalog_name: Built-in catalog to use (defaults from settings)
            random_seed: Seed for reproducible boards (defaults from settings)

        Returns:
            New Session, round already started
        """
        name, catalog = self.resolve_catalog(catalog_name)
        seed = random_seed if random_seed is not None else self.settings.random_seed
        session_id = str(uuid.uuid4())

        engine = GameEngine(
            catalog,
            scheduler=self.scheduler,
            rng=random.Random(seed),
            match_delay_ms=self.settings.match_delay_ms,
            mismatch_delay_ms=self.settings.mismatch_delay_ms,
            name=session_id,
        )

        now = self.clock()
        session = Session(
            session_id=session_id,
            catalog_name=name,
            engine=engine,
            created_at=now,
            last_active_at=now,
            clock=self.clock,
        )
        self._sessions[session_id] = session
        logger.info("Created session with catalog %s", name, extra={"session_id": session_id})
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and release its engine.

        Any outstanding resolution timer is cancelled. Returns False if the
        session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.engine.close()
        session.ended = True
        logger.info("Ended session (%s)", reason, extra={"session_id": session_id})
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the IDs that were removed.
        """
        if max_age_seconds is None:
            max_age_seconds = self.settings.session_max_age_seconds
        current_time = self.clock()

        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
