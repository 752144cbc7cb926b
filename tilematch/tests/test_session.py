"""
Tests for session management.
"""

import json

import pytest

from ..config import Settings
from ..errors import CatalogFileError, UnknownCatalogError
from ..session import CUSTOM_CATALOG, SessionManager, SessionStatus
from .conftest import positions_of


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(scheduler, settings, clock):
    return SessionManager(scheduler=scheduler, settings=settings, clock=clock)


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "fruit.json"
    path.write_text(json.dumps([
        {"pair_key": "apple", "label": "Apple"},
        {"pair_key": "pear", "label": "Pear"},
        {"pair_key": "plum", "label": "Plum"},
    ]))
    return path


class TestCreateSession:

    def test_default_catalog(self, manager):
        session = manager.create_session()

        assert session.catalog_name == "pokemon"
        assert session.state.tile_count == 16
        assert session.state.generation == 1
        assert session.status == SessionStatus.ACTIVE
        assert manager.get_session(session.session_id) is session

    def test_unique_ids(self, manager):
        first = manager.create_session()
        second = manager.create_session()
        assert first.session_id != second.session_id

    def test_seed_gives_reproducible_board(self, manager):
        first = manager.create_session(random_seed=5)
        second = manager.create_session(random_seed=5)
        assert first.state.tiles == second.state.tiles

    def test_settings_seed_used(self, scheduler, clock):
        settings = Settings(random_seed=99)
        manager = SessionManager(scheduler=scheduler, settings=settings, clock=clock)
        assert manager.create_session().state.tiles == manager.create_session().state.tiles

    def test_unknown_catalog(self, manager):
        with pytest.raises(UnknownCatalogError) as exc_info:
            manager.create_session(catalog_name="digimon")
        assert exc_info.value.details["available"] == ["pokemon"]

    def test_custom_without_path(self, manager):
        with pytest.raises(UnknownCatalogError):
            manager.create_session(catalog_name=CUSTOM_CATALOG)

    def test_settings_delays_applied(self, scheduler, clock):
        settings = Settings(match_delay_ms=10, mismatch_delay_ms=20)
        manager = SessionManager(scheduler=scheduler, settings=settings, clock=clock)
        session = manager.create_session()
        assert session.engine.match_delay_ms == 10
        assert session.engine.mismatch_delay_ms == 20


class TestCustomCatalog:

    def test_configured_path_is_default(self, scheduler, clock, catalog_file):
        settings = Settings(catalog_path=str(catalog_file))
        manager = SessionManager(scheduler=scheduler, settings=settings, clock=clock)

        session = manager.create_session()
        assert session.catalog_name == CUSTOM_CATALOG
        assert session.state.tile_count == 6
        assert manager.available_catalogs() == ["pokemon", CUSTOM_CATALOG]

    def test_builtin_still_selectable(self, scheduler, clock, catalog_file):
        settings = Settings(catalog_path=str(catalog_file))
        manager = SessionManager(scheduler=scheduler, settings=settings, clock=clock)

        session = manager.create_session(catalog_name="pokemon")
        assert session.state.tile_count == 16

    def test_missing_file(self, scheduler, clock, tmp_path):
        settings = Settings(catalog_path=str(tmp_path / "nope.json"))
        manager = SessionManager(scheduler=scheduler, settings=settings, clock=clock)
        with pytest.raises(CatalogFileError):
            manager.create_session()


class TestSessionPlay:

    def test_reveal_touches_session(self, manager, clock):
        session = manager.create_session()
        clock.now += 30
        session.reveal(0)
        assert session.last_active_at == clock.now
        assert session.state.revealed == (0,)

    def test_status_complete(self, manager, scheduler):
        session = manager.create_session()
        for tile in session.state.tiles:
            if tile.position in session.state.matched:
                continue
            first, second = positions_of(session.state, tile.pair_key)
            session.reveal(first)
            session.reveal(second)
            scheduler.advance(600)

        assert session.status == SessionStatus.COMPLETE

        session.reset()
        assert session.status == SessionStatus.ACTIVE
        assert session.state.generation == 2


class TestEndAndCleanup:

    def test_end_session(self, manager, scheduler):
        session = manager.create_session()
        session.reveal(0)
        session.reveal(1)
        assert scheduler.pending == 1

        assert manager.end_session(session.session_id)
        assert session.status == SessionStatus.ENDED
        assert manager.get_session(session.session_id) is None
        assert scheduler.pending == 0

    def test_end_unknown_session(self, manager):
        assert not manager.end_session("missing")

    def test_list_active(self, manager):
        first = manager.create_session()
        second = manager.create_session()
        manager.end_session(first.session_id)
        assert manager.list_active_sessions() == [second.session_id]

    def test_cleanup_stale(self, manager, clock):
        idle = manager.create_session()
        busy = manager.create_session()

        clock.now += 3000
        busy.reveal(0)
        clock.now += 1000

        removed = manager.cleanup_stale_sessions()
        assert removed == [idle.session_id]
        assert manager.list_active_sessions() == [busy.session_id]

    def test_cleanup_custom_age(self, manager, clock):
        session = manager.create_session()
        clock.now += 11
        assert manager.cleanup_stale_sessions(max_age_seconds=10) == [session.session_id]
