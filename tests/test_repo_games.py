# Area: Registry Tests
"""Tests for the created-games repository."""

import os
import tempfile

import pytest

from fhe_battleship._registry import GameRecordRepository, init_database
from fhe_battleship.factory import GameFactory
from fhe_battleship.mock import PlaintextCompute
from fhe_battleship.types import GameCreated

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20


def created(address_byte: str, creator: str = ALICE, board_size: int = 5, ship_count: int = 5):
    return GameCreated(
        game_address="0x" + address_byte * 20,
        creator=creator,
        board_size=board_size,
        ship_count=ship_count,
    )


class TestGameRecordRepository:
    """Tests for GameRecordRepository class."""

    @pytest.fixture
    def db_path(self):
        """Create temporary database for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        init_database(path)
        yield path
        os.unlink(path)

    @pytest.fixture
    def repo(self, db_path):
        """Create repository with test database."""
        return GameRecordRepository(db_path)

    def test_record_game(self, repo):
        """Test recording a new game."""
        repo.record(created("01", board_size=4, ship_count=3))

        record = repo.get_game("0x" + "01" * 20)
        assert record is not None
        assert record["creator"] == ALICE
        assert record["board_size"] == 4
        assert record["ship_count"] == 3
        assert record["sequence"] == 0

    def test_get_game_not_found(self, repo):
        """Test retrieving an unknown game returns None."""
        assert repo.get_game("0x" + "ff" * 20) is None

    def test_lookup_is_case_insensitive(self, repo):
        """Test upper-case addresses find the stored record."""
        repo.record(created("ab"))
        assert repo.get_game("0x" + "AB" * 20) is not None

    def test_duplicate_is_ignored(self, repo):
        """Test a record is never overwritten."""
        repo.record(created("01", board_size=4))
        repo.record(created("01", board_size=9))
        assert repo.count() == 1
        assert repo.get_game("0x" + "01" * 20)["board_size"] == 4

    def test_newest_first(self, repo):
        """Test listings are ordered newest first."""
        for byte in ("01", "02", "03"):
            repo.record(created(byte))
        addresses = [r["game_address"] for r in repo.get_all_games()]
        assert addresses == ["0x" + b * 20 for b in ("03", "02", "01")]

    def test_by_creator(self, repo):
        """Test filtering by creator."""
        repo.record(created("01", creator=ALICE))
        repo.record(created("02", creator=BOB))
        repo.record(created("03", creator=ALICE))
        rows = repo.get_games_by_creator(ALICE.upper().replace("0X", "0x"))
        assert [r["game_address"] for r in rows] == ["0x" + "03" * 20, "0x" + "01" * 20]

    def test_empty(self, repo):
        """Test an empty feed."""
        assert repo.get_all_games() == []
        assert repo.count() == 0

    def test_subscribed_to_factory(self, repo):
        """Test the repository records every game a factory creates."""
        factory = GameFactory(PlaintextCompute())
        factory.subscribe(repo)
        first = factory.create_game(ALICE, 5, 5)
        second = factory.create_game(BOB, 3, 2)
        assert repo.count() == 2
        assert repo.get_game(second)["creator"] == BOB
        assert [r["game_address"] for r in repo.get_all_games()] == [second, first]

    def test_record_returns_sequence(self, repo):
        """Test record reports the assigned feed position."""
        assert repo.record(created("01")) == 0
        assert repo.record(created("02")) == 1
        assert repo.record(created("01")) is None


class TestFeedInitialisation:
    """Tests for schema creation."""

    def test_repository_creates_schema(self, tmp_path):
        """Test a fresh file is usable without calling init_database."""
        repo = GameRecordRepository(str(tmp_path / "fresh.db"))
        assert repo.count() == 0
        assert repo.record(created("0a")) == 0

    def test_reopen_keeps_records(self, tmp_path):
        """Test a second repository on the same file sees earlier rows."""
        path = str(tmp_path / "feed.db")
        GameRecordRepository(path).record(created("0b"))
        assert GameRecordRepository(path).count() == 1
