"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/engine calls
2. Converts immutable GameState snapshots into response models
3. Hides the identity of face-down tiles

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Errors surface as TileMatchError subclasses; the web layer maps them.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    CatalogListResponse,
    GameStateResponse,
    RevealResponse,
    SessionResponse,
    # Shared
    TileInfo,
    # Enums
    SessionStatus,
    TurnPhase,
)
from ..engine_core.scheduler import AsyncioScheduler
from ..engine_core.state import GameState
from ..errors import SessionNotFoundError
from ..session import SessionManager, Session


def state_to_response(session_id: str, state: GameState) -> GameStateResponse:
    """Render a snapshot for the client."""
    tiles = []
    for tile in state.tiles:
        face_up = state.is_face_up(tile.position)
        tiles.append(TileInfo(
            position=tile.position,
            face_up=face_up,
            matched=tile.position in state.matched,
            pair_key=tile.pair_key if face_up else None,
            label=tile.label if face_up else None,
            display_ref=tile.display_ref if face_up else None,
        ))

    return GameStateResponse(
        session_id=session_id,
        round_number=state.generation,
        phase=TurnPhase(state.phase.value),
        tiles=tiles,
        revealed=list(state.revealed),
        matched=sorted(state.matched),
        moves=state.moves,
        pairs_found=state.pairs_found,
        pairs_total=state.pairs_total,
        locked=state.is_locked,
        is_complete=state.round_complete,
    )


@dataclass
class APIService:
    """
    Main API service for the browser client.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest())
        result = service.reveal(session.session_id, 5)
        if result.state.locked:
            # resolution pending; watch the WebSocket for the next snapshot
            ...
    """
    session_manager: SessionManager = field(
        default_factory=lambda: SessionManager(scheduler=AsyncioScheduler())
    )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Create a new session with a freshly shuffled board."""
        self.session_manager.cleanup_stale_sessions()
        session = self.session_manager.create_session(
            catalog_name=request.catalog,
            random_seed=request.random_seed,
        )
        return self._session_response(session)

    def get_session(self, session_id: str) -> SessionResponse:
        return self._session_response(self._require_session(session_id))

    def get_game_state(self, session_id: str) -> GameStateResponse:
        session = self._require_session(session_id)
        return state_to_response(session_id, session.state)

    def reveal(self, session_id: str, position: int) -> RevealResponse:
        """
        Reveal a tile.

        Ignored clicks are not errors: accepted is False and the state is the
        unchanged current state.
        """
        session = self._require_session(session_id)
        before = session.state
        after = session.reveal(position)
        return RevealResponse(
            accepted=after is not before,
            state=state_to_response(session_id, after),
        )

    def reset(self, session_id: str) -> GameStateResponse:
        """Start a new round in the same session."""
        session = self._require_session(session_id)
        return state_to_response(session_id, session.reset())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def list_catalogs(self) -> CatalogListResponse:
        manager = self.session_manager
        default, _ = manager.resolve_catalog(None)
        return CatalogListResponse(catalogs=manager.available_catalogs(), default=default)

    def _require_session(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.status.value),
            catalog=session.catalog_name,
            created_at=session.created_at,
            state=state_to_response(session.session_id, session.state),
        )
