"""Tests for export/import and snapshot storage."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from tournaments import TournamentDatabaseManager, TournamentManager
from tournaments.exceptions import InvalidSnapshotError, MalformedSnapshotError
from tournaments.models import TournamentState
from tournaments.transfer import (
    dumps_export,
    export_filename,
    export_state,
    parse_import,
)


@pytest.fixture
def played_manager(four_player_manager: TournamentManager) -> TournamentManager:
    match = four_player_manager.create_tournament().matches[0]
    four_player_manager.record_result(match.id, 4, 2)
    return four_player_manager


def test_export_carries_timestamp_and_version(played_manager: TournamentManager) -> None:
    exported_at = datetime(2024, 5, 1, 12, 30)

    document = export_state(played_manager.state, exported_at=exported_at)

    assert set(document) == {"participants", "config", "export_date", "version"}
    assert document["export_date"] == "2024-05-01T12:30:00"
    assert document["version"] == "1.0"
    assert document["config"]["created"] is True
    assert document["config"]["match_format"] == "round_trip"


def test_export_then_import_restores_state(played_manager: TournamentManager) -> None:
    restored = parse_import(dumps_export(played_manager.state))

    assert restored == played_manager.state


def test_export_filename_uses_date() -> None:
    assert export_filename(datetime(2024, 5, 1, 23, 59)) == "tournament_export_2024-05-01.json"


@pytest.mark.parametrize("content", ["not json", "{", b"\xff\xfe"])
def test_import_rejects_malformed_content(content) -> None:
    with pytest.raises(MalformedSnapshotError):
        parse_import(content)


@pytest.mark.parametrize(
    "document",
    [
        {"config": {}},
        {"participants": []},
        [],
        {"participants": [], "config": "nope"},
        {"participants": [{"id": "x"}], "config": {}},
        {"participants": [], "config": {"mode": "bracket"}},
    ],
)
def test_import_rejects_invalid_documents(document) -> None:
    with pytest.raises(InvalidSnapshotError):
        parse_import(json.dumps(document))


def person(competitor_id: str) -> dict:
    return {"id": competitor_id, "display_name": competitor_id, "full_name": competitor_id}


def duel(match_id: int, first: str, second: str, round_number: int = 1) -> dict:
    return {
        "id": match_id,
        "round": round_number,
        "sides": {"kind": "individual", "competitor1": first, "competitor2": second},
    }


def created_config(**overrides) -> dict:
    config = {
        "created": True,
        "participants": [person("p1"), person("p2")],
        "matches": [duel(1, "p1", "p2"), duel(2, "p2", "p1")],
    }
    config.update(overrides)
    return config


@pytest.mark.parametrize(
    "config",
    [
        created_config(matches=[duel(1, "p1", "ghost")]),
        created_config(matches=[duel(1, "p1", "p2", round_number=2)]),
        created_config(matches=[duel(1, "p1", "p2"), duel(1, "p2", "p1")]),
        created_config(mode="doubles"),
        created_config(created=False),
        created_config(
            teams=[
                {"id": "t1", "name": "One", "member_a": "p1", "member_b": "p2"},
                {"id": "t2", "name": "Two", "member_a": "p1", "member_b": "p3"},
            ]
        ),
    ],
)
def test_import_rejects_inconsistent_schedules(config: dict) -> None:
    document = {"participants": [person("p1"), person("p2")], "config": config}

    with pytest.raises(InvalidSnapshotError):
        parse_import(json.dumps(document))


def test_import_rejects_team_with_unregistered_member() -> None:
    document = {
        "participants": [person("p1")],
        "config": {
            "mode": "doubles",
            "teams": [{"id": "t1", "name": "One", "member_a": "p1", "member_b": "p9"}],
        },
    }

    with pytest.raises(InvalidSnapshotError):
        parse_import(json.dumps(document))


def test_consistent_created_document_is_accepted() -> None:
    document = {"participants": [person("p1"), person("p2")], "config": created_config()}

    state = parse_import(json.dumps(document))

    assert [m.id for m in state.config.matches] == [1, 2]


def test_minimal_document_is_accepted() -> None:
    state = parse_import(json.dumps({"participants": [], "config": {}}))

    assert state == TournamentState()


def test_failed_import_leaves_state_untouched(played_manager: TournamentManager) -> None:
    before = played_manager.state

    with pytest.raises(InvalidSnapshotError):
        played_manager.import_data(json.dumps({"participants": []}))
    with pytest.raises(MalformedSnapshotError):
        played_manager.import_data("garbage")

    assert played_manager.state == before
    assert played_manager.store.load() == before


def test_import_replaces_state_and_store(played_manager: TournamentManager) -> None:
    content = json.dumps(played_manager.export_data())
    fresh = TournamentManager()

    state = fresh.import_data(content)

    assert fresh.state == state == played_manager.state
    assert fresh.store.load() == state


def test_database_store_round_trip(tmp_path: Path, played_manager: TournamentManager) -> None:
    store = TournamentDatabaseManager(str(tmp_path / "tournament.db"))

    assert store.load() is None
    store.save(played_manager.state)
    assert store.load() == played_manager.state

    store.save(TournamentState())
    assert store.load() == TournamentState()

    store.clear()
    assert store.load() is None


def test_database_store_keys_are_isolated(tmp_path: Path) -> None:
    db_path = str(tmp_path / "tournament.db")
    first = TournamentDatabaseManager(db_path, snapshot_key="first")
    second = TournamentDatabaseManager(db_path, snapshot_key="second")

    first.save(TournamentState())

    assert first.load() == TournamentState()
    assert second.load() is None


def test_manager_persists_through_database(tmp_path: Path) -> None:
    db_path = str(tmp_path / "tournament.db")
    manager = TournamentManager(store=TournamentDatabaseManager(db_path))
    manager.add_competitor("Ace", "Alice")
    manager.add_competitor("Bee", "Bob")
    manager.create_tournament()

    reopened = TournamentManager(store=TournamentDatabaseManager(db_path))

    assert reopened.state == manager.state
