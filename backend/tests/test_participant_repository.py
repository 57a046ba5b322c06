"""Tests for the DuckDB participant repository."""
from datetime import datetime, timedelta, timezone

import pytest

from rift_teams.exceptions import PersistenceError
from rift_teams.models.match import MatchEntry, MatchRecord, RatingField, RecordField
from rift_teams.models.participant import Participant
from rift_teams.models.team import Side
from rift_teams.repositories.participant_repository import DuckDBParticipantRepository
from rift_teams.utils.role_normalizer import Role


@pytest.fixture
def repository(tmp_path):
    repo = DuckDBParticipantRepository(tmp_path / "nested" / "roster.duckdb")
    yield repo
    repo.close()


@pytest.fixture
def faker():
    return Participant(
        id="faker",
        name="Faker",
        primary_role=Role.MID,
        primary_rating=3000,
        secondary_rating=2400,
        wins=3,
        losses=1,
        labels=("captain", "veteran"),
        excluded_roles=frozenset({Role.SUP, Role.JUNGLE}),
    )


def make_record(played_at, winner=Side.BLUE):
    entries = tuple(
        MatchEntry(participant_id=f"p{i}", role=role, side=Side.BLUE if i < 5 else Side.RED)
        for i, role in enumerate([Role.TOP, Role.JUNGLE, Role.MID, Role.ADC, Role.SUP] * 2)
    )
    return MatchRecord(played_at=played_at, entries=entries, winner=winner)


class TestRoster:
    def test_creates_parent_directory(self, tmp_path, repository):
        assert (tmp_path / "nested").is_dir()

    def test_round_trip(self, repository, faker):
        assert repository.upsert_participants([faker]) == 1

        assert repository.get_participant("faker") == faker

    def test_empty_lists_are_stored(self, repository):
        bare = Participant("zeus", "Zeus", Role.TOP, 2000, 1600)
        repository.upsert_participants([bare])

        stored = repository.get_participant("zeus")
        assert stored.labels == ()
        assert stored.excluded_roles == frozenset()

    def test_list_is_ordered_by_name(self, repository, faker):
        repository.upsert_participants([faker, Participant("a", "Aria", Role.ADC, 1000, 800)])

        assert [p.name for p in repository.list_participants()] == ["Aria", "Faker"]

    def test_missing_participant(self, repository):
        assert repository.get_participant("nobody") is None

    def test_update_rating_and_record(self, repository, faker):
        repository.upsert_participants([faker])

        repository.update_participant_rating("faker", RatingField.SECONDARY, 2450)
        repository.increment_participant_record("faker", RecordField.WINS)

        stored = repository.get_participant("faker")
        assert stored.secondary_rating == 2450
        assert stored.primary_rating == 3000
        assert (stored.wins, stored.losses) == (4, 1)

    def test_update_unknown_participant(self, repository):
        with pytest.raises(PersistenceError) as exc_info:
            repository.update_participant_rating("ghost", RatingField.PRIMARY, 100)

        assert exc_info.value.participant_id == "ghost"

    def test_data_survives_reopen(self, tmp_path, faker):
        path = tmp_path / "reopen.duckdb"
        first = DuckDBParticipantRepository(path)
        first.upsert_participants([faker])
        first.close()

        second = DuckDBParticipantRepository(path)
        try:
            assert second.get_participant("faker") == faker
        finally:
            second.close()


class TestMatches:
    def test_create_assigns_id(self, repository):
        match_id = repository.create_match_record(make_record(datetime.now(timezone.utc)))

        assert match_id
        [stored] = repository.list_match_records()
        assert stored.id == match_id
        assert len(stored.entries) == 10
        assert stored.entries[0] == MatchEntry("p0", Role.TOP, Side.BLUE)
        assert stored.entries[9] == MatchEntry("p9", Role.SUP, Side.RED)

    def test_history_is_newest_first(self, repository):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        old_id = repository.create_match_record(make_record(now - timedelta(hours=2), Side.RED))
        new_id = repository.create_match_record(make_record(now))

        history = repository.list_match_records()

        assert [m.id for m in history] == [new_id, old_id]
        assert history[0].played_at == now
        assert history[1].winner == Side.RED

    def test_history_limit(self, repository):
        now = datetime.now(timezone.utc)
        for minutes in range(3):
            repository.create_match_record(make_record(now - timedelta(minutes=minutes)))

        assert len(repository.list_match_records(limit=2)) == 2

    def test_empty_history(self, repository):
        assert repository.list_match_records() == []


def test_negative_rating_is_refused(repository, faker):
    repository.upsert_participants([faker])

    with pytest.raises(PersistenceError):
        repository.update_participant_rating("faker", RatingField.PRIMARY, -1)

    assert repository.get_participant("faker").primary_rating == 3000
