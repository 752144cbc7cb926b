"""
Pokémon Catalog - The eight starter-era Pokémon of the original board.

display_ref is the official-artwork sprite URL from the PokeAPI sprites
repository; the engine never looks at it.
"""

from ...engine_core.state import Item

SPRITE_URL = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/"
    "sprites/pokemon/other/official-artwork/{dex}.png"
)

# Face-down tiles show this instead
CARD_BACK_URL = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/items/poke-ball.png"


def _pokemon(dex: int, name: str) -> Item:
    return Item(pair_key=str(dex), label=name, display_ref=SPRITE_URL.format(dex=dex))


POKEMON_CATALOG: tuple[Item, ...] = (
    _pokemon(1, "Bulbasaur"),
    _pokemon(4, "Charmander"),
    _pokemon(7, "Squirtle"),
    _pokemon(25, "Pikachu"),
    _pokemon(133, "Eevee"),
    _pokemon(143, "Snorlax"),
    _pokemon(150, "Mewtwo"),
    _pokemon(151, "Mew"),
)
