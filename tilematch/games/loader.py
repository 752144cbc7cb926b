"""
Catalog Loader - Reads custom catalogs from JSON files.

File format: a list of objects

    [
        {"pair_key": "apple", "label": "Apple", "display_ref": "/img/apple.png"},
        {"pair_key": "pear", "label": "Pear"}
    ]

Entries are validated with pydantic. Catalog-level rules (non-empty, unique
pair keys) are checked too, so a bad file fails at load time rather than at
the first reset.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from ..engine_core.deck import validate_catalog
from ..engine_core.state import Item
from ..errors import CatalogFileError


class CatalogEntry(BaseModel):
    """One item of a catalog file."""
    pair_key: str = Field(..., min_length=1, description="Identifier shared by the two tiles of a pair")
    label: str = ""
    display_ref: Optional[str] = None

    @field_validator("pair_key", mode="before")
    @classmethod
    def coerce_pair_key(cls, v: Union[str, int]) -> str:
        """Numeric ids (e.g. Pokédex numbers) are accepted and stored as strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_item(self) -> Item:
        return Item(pair_key=self.pair_key, label=self.label, display_ref=self.display_ref)


_ENTRIES = TypeAdapter(list[CatalogEntry])


def parse_catalog(data: Union[str, bytes]) -> tuple[Item, ...]:
    """Parse and validate catalog JSON."""
    try:
        entries = _ENTRIES.validate_json(data)
    except ValidationError as e:
        raise CatalogFileError(
            "Catalog file is not a valid list of items",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e

    items = tuple(entry.to_item() for entry in entries)
    validate_catalog(items)
    return items


def load_catalog_file(path: Union[str, Path]) -> tuple[Item, ...]:
    """Load a catalog from a JSON file on disk."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise CatalogFileError(
            f"Cannot read catalog file: {path}",
            details={"path": str(path)},
        ) from e
    return parse_catalog(data)
