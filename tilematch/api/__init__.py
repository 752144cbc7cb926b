"""
API Module - Browser client interface.

Exposes the engine via REST + WebSocket. The client:
1. Creates a session (gets a shuffled, face-down board)
2. Sends tile clicks
3. Receives snapshots (immediately, and pushed after each delayed resolution)
4. Resets for a new game

All state is session-scoped. No user accounts.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    RevealRequest,
    # Responses
    CatalogListResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    RevealResponse,
    SessionListResponse,
    SessionResponse,
    # Shared
    TileInfo,
    # Enums
    ErrorCode,
    SessionStatus,
    TurnPhase,
)
from .service import APIService, state_to_response

__all__ = [
    # Requests
    "CreateSessionRequest",
    "RevealRequest",
    # Responses
    "CatalogListResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "HealthResponse",
    "RevealResponse",
    "SessionListResponse",
    "SessionResponse",
    # Shared
    "TileInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    "TurnPhase",
    # Service
    "APIService",
    "state_to_response",
]
