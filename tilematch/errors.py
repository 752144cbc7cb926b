"""
Error Hierarchy - typed exceptions for every tilematch failure mode.

Two families:
- Precondition violations: caller bugs (unknown tile position, empty or
  duplicated catalog). Raised immediately, never tolerated silently.
- Service errors: things an API client can get wrong (unknown session,
  unknown catalog, malformed catalog file).

Guarded no-ops (clicking a locked board or an already face-up tile) are NOT
errors; they are reported through ActionResult.ignored_reason.
"""

from __future__ import annotations
from typing import Any


class TileMatchError(Exception):
    """Base exception for all tilematch errors."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict[str, Any]:
        """Convert to the standard REST error envelope."""
        return {
            "error": self.message,
            "error_code": self.code,
            "details": self.details or None,
        }


class PreconditionViolation(TileMatchError, ValueError):
    """A caller broke an engine precondition."""

    code = "PRECONDITION_VIOLATION"
    http_status = 400


class EmptyCatalogError(PreconditionViolation):
    code = "INVALID_CATALOG"

    def __init__(self):
        super().__init__("Catalog must contain at least one item")


class DuplicatePairKeyError(PreconditionViolation):
    code = "INVALID_CATALOG"

    def __init__(self, pair_key: str):
        super().__init__(
            f"Duplicate pair key in catalog: {pair_key!r}",
            details={"pair_key": pair_key},
        )
        self.pair_key = pair_key


class UnknownPositionError(PreconditionViolation):
    code = "INVALID_POSITION"

    def __init__(self, position: int, tile_count: int):
        super().__init__(
            f"No tile at position {position} (board has {tile_count} tiles)",
            details={"position": position, "tile_count": tile_count},
        )
        self.position = position
        self.tile_count = tile_count


class SessionNotFoundError(TileMatchError):
    code = "SESSION_NOT_FOUND"
    http_status = 404

    def __init__(self, session_id: str):
        super().__init__(
            f"Session {session_id} not found",
            details={"session_id": session_id},
        )
        self.session_id = session_id


class UnknownCatalogError(TileMatchError):
    code = "UNKNOWN_CATALOG"
    http_status = 400

    def __init__(self, name: str, available: list[str]):
        super().__init__(
            f"Unknown catalog: {name!r}",
            details={"catalog": name, "available": available},
        )
        self.name = name


class CatalogFileError(TileMatchError):
    code = "INVALID_CATALOG"
    http_status = 400
