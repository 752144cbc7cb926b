"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the browser client and the
engine. Face-down tiles never expose their pair key, label or image, so the
client cannot peek at the board.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_POSITION: Reveal referenced a position that is not on the board
- UNKNOWN_CATALOG: Requested catalog is not available
- INVALID_CATALOG: Catalog is empty, has duplicate keys, or is malformed
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    COMPLETE = "complete"
    ENDED = "ended"


class TurnPhase(str, Enum):
    """Turn sub-state of the current round."""
    IDLE = "idle"
    ONE_REVEALED = "one_revealed"
    PENDING_RESOLUTION = "pending_resolution"
    ROUND_COMPLETE = "round_complete"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_POSITION = "INVALID_POSITION"
    UNKNOWN_CATALOG = "UNKNOWN_CATALOG"
    INVALID_CATALOG = "INVALID_CATALOG"
    PRECONDITION_VIOLATION = "PRECONDITION_VIOLATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """One tile as the client may see it."""
    position: int
    face_up: bool = False
    matched: bool = False
    pair_key: Optional[str] = Field(None, description="Only set while face-up")
    label: Optional[str] = Field(None, description="Only set while face-up")
    display_ref: Optional[Any] = Field(None, description="Only set while face-up")


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new play session."""
    catalog: Optional[str] = Field(None, description="Catalog name (server default if omitted)")
    random_seed: Optional[int] = Field(None, description="Seed for a reproducible board")


class RevealRequest(BaseModel):
    """Request to reveal one tile."""
    position: int = Field(..., ge=0, description="Board position of the clicked tile")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete board snapshot for rendering."""
    session_id: str
    round_number: int = Field(..., description="Generation of the current round")
    phase: TurnPhase
    tiles: list[TileInfo] = Field(default_factory=list)
    revealed: list[int] = Field(default_factory=list, description="Face-up, unmatched, in click order")
    matched: list[int] = Field(default_factory=list)
    moves: int = 0
    pairs_found: int = 0
    pairs_total: int = 0
    locked: bool = Field(False, description="Two tiles are awaiting resolution")
    is_complete: bool = False
    api_version: str = "v1"


class RevealResponse(BaseModel):
    """Response to a reveal click."""
    accepted: bool = Field(..., description="False when the click was ignored")
    state: GameStateResponse
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    catalog: str
    created_at: float = 0.0
    state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class CatalogListResponse(BaseModel):
    """Available catalogs."""
    catalogs: list[str]
    default: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
