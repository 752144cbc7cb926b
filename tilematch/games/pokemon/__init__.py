"""
Pokémon - The default theme.

Eight Pokémon, sixteen tiles on a 4x4 grid.
"""

from .catalog import POKEMON_CATALOG, CARD_BACK_URL, SPRITE_URL

__all__ = [
    "POKEMON_CATALOG",
    "CARD_BACK_URL",
    "SPRITE_URL",
]
