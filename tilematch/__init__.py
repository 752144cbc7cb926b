"""
Tilematch - Tile-Matching Memory Game Engine

A deterministic, event-driven engine for the classic pairs memory game.
A catalog of paired items is shuffled onto a grid of face-down tiles; the
player reveals two tiles per turn, matches stay face-up, mismatches hide
again after a short delay.

The package provides:
- Deck building (Fisher-Yates shuffle with an injectable random source)
- The turn state machine with timed match/mismatch resolution
- Ephemeral play sessions
- A REST/WebSocket API and a terminal client
"""

__version__ = "0.1.0"
