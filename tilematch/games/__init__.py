"""
Games module - Catalog themes for the board.

Each theme has its own subpackage with a catalog of distinct items.
Custom catalogs can also be loaded from JSON (see loader.py).
"""

from __future__ import annotations

from ..engine_core.state import Item
from ..errors import UnknownCatalogError
from .loader import load_catalog_file, parse_catalog
from .pokemon import POKEMON_CATALOG

CATALOGS: dict[str, tuple[Item, ...]] = {
    "pokemon": POKEMON_CATALOG,
}


def list_catalogs() -> list[str]:
    """Names of the built-in catalogs."""
    return sorted(CATALOGS)


def get_catalog(name: str) -> tuple[Item, ...]:
    """Get a built-in catalog by name."""
    catalog = CATALOGS.get(name)
    if catalog is None:
        raise UnknownCatalogError(name, list_catalogs())
    return catalog


__all__ = [
    "CATALOGS",
    "list_catalogs",
    "get_catalog",
    "load_catalog_file",
    "parse_catalog",
    "POKEMON_CATALOG",
]
