"""
FastAPI Application - REST + WebSocket API for the browser client.

Endpoints:
    GET    /api/v1/catalogs                   List available catalogs
    POST   /api/v1/sessions                   Create play session (new board)
    GET    /api/v1/sessions                   List active sessions
    GET    /api/v1/sessions/{id}              Get session status
    DELETE /api/v1/sessions/{id}              End session
    GET    /api/v1/sessions/{id}/state        Get board snapshot
    POST   /api/v1/sessions/{id}/reveal       Click a tile
    POST   /api/v1/sessions/{id}/reset        New game in the same session
    WS     /api/v1/sessions/{id}/ws           Snapshot push

Resolution Flow:
    1. POST /reveal for the second tile returns locked=true
    2. After the match/mismatch delay the engine resolves on the event loop
    3. The new snapshot is pushed to every WebSocket of the session
       (clients without a socket can poll GET /state)

All responses are JSON with explicit Pydantic schemas.
"""

from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Any, Optional
import asyncio
import json
import logging

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..engine_core.scheduler import AsyncioScheduler
from ..engine_core.state import GameState
from ..errors import TileMatchError
from ..observability import setup_logging
from ..session import SessionManager
from .schemas import (
    # Request models
    CreateSessionRequest,
    RevealRequest,
    # Response models
    CatalogListResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    RevealResponse,
    SessionListResponse,
    SessionResponse,
    # Enums
    ErrorCode,
)
from .service import APIService, state_to_response

logger = logging.getLogger(__name__)


def create_app(service: APIService | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (process settings if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    api_service = service or APIService(
        session_manager=SessionManager(scheduler=AsyncioScheduler(), settings=settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Tilematch API started")
        yield
        for session_id in api_service.list_sessions():
            api_service.end_session(session_id, reason="shutdown")
        logger.info("Tilematch API shutting down")

    app = FastAPI(
        title="Tilematch API",
        description="""
Tile-matching memory game engine.

## Turn Flow

1. `POST /reveal` the first tile: it turns face-up.
2. `POST /reveal` a second tile: the move counter increments and the board
   locks (`locked=true`) while the pair is resolved.
3. After 600 ms (match) or 1000 ms (mismatch) the engine resolves the pair and
   pushes the new snapshot over the session WebSocket.

Clicks on a locked board, a face-up tile, or a matched tile are ignored
(`accepted=false`), not errors.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_POSITION` | No tile at that position |
| `UNKNOWN_CATALOG` | Catalog name not available |
| `INVALID_CATALOG` | Catalog empty, duplicated or malformed |
| `VALIDATION_ERROR` | Request body invalid |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(TileMatchError)
    async def tilematch_error_handler(request: Request, exc: TileMatchError):
        logger.warning(
            exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return make_error_response(
            ErrorCode(exc.code), exc.message, exc.http_status, exc.details or None,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s", request.url.path)
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status.HTTP_400_BAD_REQUEST,
            {"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # =========================================================================
    # Catalog Endpoint
    # =========================================================================

    @app.get(
        "/api/v1/catalogs",
        response_model=CatalogListResponse,
        tags=["Catalogs"],
        summary="List available catalogs",
    )
    async def list_catalogs() -> CatalogListResponse:
        return api_service.list_catalogs()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown or invalid catalog"}},
        tags=["Sessions"],
        summary="Create a new play session",
    )
    async def create_session(request: Optional[CreateSessionRequest] = None) -> SessionResponse:
        """
        Create a new play session with a freshly shuffled board.

        Pass `random_seed` for a reproducible board.
        """
        return api_service.create_session(request or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> SessionResponse:
        return api_service.get_session(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a play session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session and release its board."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the current board snapshot",
    )
    async def get_game_state(session_id: str) -> GameStateResponse:
        return api_service.get_game_state(session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/reveal",
        response_model=RevealResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Position not on the board"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Reveal a tile",
    )
    async def reveal(session_id: str, request: RevealRequest) -> RevealResponse:
        """
        Click a tile.

        Returns `accepted=false` with the unchanged board when the click is
        ignored (board locked, tile already face-up or matched).
        """
        return api_service.reveal(session_id, request.position)

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start a new round",
    )
    async def reset(session_id: str) -> GameStateResponse:
        """Reshuffle and start over; pending resolutions of the old round are dropped."""
        return api_service.reset(session_id)

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Board changed (reveal, resolution, reset)
        - pong: Reply to ping
        - error: Unparseable client message

        Messages from client:
        - ping: Keep-alive
        """
        session = api_service.session_manager.get_session(session_id)
        if session is None:
            await websocket.close(code=4404)
            return

        await websocket.accept()

        loop = asyncio.get_running_loop()
        outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

        def on_state(state: GameState) -> None:
            # Resolutions may fire outside this loop (e.g. a manual scheduler)
            loop.call_soon_threadsafe(outbox.put_nowait, _state_message(session_id, state))

        async def pump() -> None:
            while True:
                message = await outbox.get()
                await websocket.send_json(message)

        unsubscribe = session.engine.subscribe(on_state)
        outbox.put_nowait(_state_message(session_id, session.state))
        sender = asyncio.create_task(pump())

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    outbox.put_nowait({"type": "error", "payload": {"message": "Invalid JSON"}})
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    outbox.put_nowait({"type": "pong"})
        except WebSocketDisconnect:
            pass
        finally:
            unsubscribe()
            sender.cancel()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="tilematch",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tilematch API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


def _state_message(session_id: str, state: GameState) -> dict[str, Any]:
    return {
        "type": "state_update",
        "payload": state_to_response(session_id, state).model_dump(mode="json"),
    }


# For running directly: uvicorn tilematch.api.app:app
app = create_app()
