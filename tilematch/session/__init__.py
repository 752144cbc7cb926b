"""
Session Module - Manages ephemeral play sessions.

A session represents one player at one board:
- Created when the player opens the game
- Owns a GameEngine holding the current round
- Survives "new game" resets
- Destroyed when ended or when idle too long

Sessions are EPHEMERAL: no persistence to database.
"""

from .manager import SessionManager, Session, SessionStatus, CUSTOM_CATALOG

__all__ = [
    "SessionManager",
    "Session",
    "SessionStatus",
    "CUSTOM_CATALOG",
]
