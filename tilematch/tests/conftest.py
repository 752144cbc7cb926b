"""
Pytest fixtures for Tilematch tests.
"""

import random

import pytest

from ..config import Settings
from ..engine_core.engine import GameEngine
from ..engine_core.scheduler import ManualScheduler
from ..engine_core.state import GameState, Item, Tile
from ..games import POKEMON_CATALOG
from ..session import SessionManager


def positions_of(state: GameState, pair_key: str) -> list[int]:
    """Board positions holding the given pair key."""
    return [tile.position for tile in state.tiles if tile.pair_key == pair_key]


def mismatched_pair(state: GameState) -> tuple[int, int]:
    """Two unmatched positions with different pair keys."""
    first = next(t for t in state.tiles if t.position not in state.matched)
    second = next(
        t for t in state.tiles
        if t.position not in state.matched and t.pair_key != first.pair_key
    )
    return first.position, second.position


@pytest.fixture
def ab_catalog() -> tuple[Item, ...]:
    """Two-item catalog: four tiles."""
    return (
        Item(pair_key="A", label="Apple"),
        Item(pair_key="B", label="Banana"),
    )


@pytest.fixture
def pokemon_catalog() -> tuple[Item, ...]:
    return POKEMON_CATALOG


@pytest.fixture
def fixed_board() -> GameState:
    """A, B, A, B laid out in that order."""
    tiles = (
        Tile(position=0, pair_key="A", label="Apple"),
        Tile(position=1, pair_key="B", label="Banana"),
        Tile(position=2, pair_key="A", label="Apple"),
        Tile(position=3, pair_key="B", label="Banana"),
    )
    return GameState.new_round(generation=1, tiles=tiles)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def engine(ab_catalog, scheduler) -> GameEngine:
    """Seeded two-pair engine on a manual clock with default delays."""
    return GameEngine(ab_catalog, scheduler=scheduler, rng=random.Random(7))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        match_delay_ms=600,
        mismatch_delay_ms=1000,
        default_catalog="pokemon",
        catalog_path=None,
        random_seed=None,
        session_max_age_seconds=3600,
    )


@pytest.fixture
def session_manager(scheduler, settings) -> SessionManager:
    return SessionManager(scheduler=scheduler, settings=settings)
