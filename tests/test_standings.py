"""Tests for standings computation and tie-breaks."""

from __future__ import annotations

import pytest

from tournaments.fixtures import generate_fixtures
from tournaments.models import (
    IndividualSides,
    Match,
    MatchFormat,
    Stat,
    TeamSides,
    TournamentMode,
)
from tournaments.standings import compute_standings


def played(
    match_id: int, home: str, away: str, score1: int, score2: int, round_number: int = 1
) -> Match:
    return Match(
        id=match_id,
        round=round_number,
        sides=IndividualSides(competitor1=home, competitor2=away),
        score1=score1,
        score2=score2,
        completed=True,
    )


def by_id(standings: list[Stat]) -> dict[str, Stat]:
    return {s.id: s for s in standings}


def test_win_awards_three_points() -> None:
    standings = compute_standings(["A", "B"], [played(1, "A", "B", 3, 1)])
    stats = by_id(standings)

    assert [s.id for s in standings] == ["A", "B"]
    a, b = stats["A"], stats["B"]
    assert (a.wins, a.points, a.goals_for, a.goals_against) == (1, 3, 3, 1)
    assert (a.goal_difference, a.matches_played) == (2, 1)
    assert (b.losses, b.points, b.goals_for, b.goals_against) == (1, 0, 1, 3)
    assert (b.goal_difference, b.matches_played) == (-2, 1)


def test_away_win_is_mirrored() -> None:
    standings = compute_standings(["A", "B"], [played(1, "A", "B", 0, 2)])

    assert [s.id for s in standings] == ["B", "A"]
    assert standings[0].wins == 1
    assert standings[1].losses == 1


def test_draw_gives_each_side_a_point_and_keeps_roster_order() -> None:
    standings = compute_standings(["A", "B"], [played(1, "A", "B", 2, 2)])

    assert [s.id for s in standings] == ["A", "B"]
    for stat in standings:
        assert stat.draws == 1
        assert stat.points == 1
        assert stat.goal_difference == 0


def test_goal_difference_beats_goals_for_and_arrival_order() -> None:
    """A: 6 pts, GD 0, GF 4. B: 6 pts, GD 2, GF 3. B ranks first."""
    matches = [
        played(1, "A", "X", 1, 0),
        played(2, "A", "Y", 3, 4),
        played(3, "A", "Z", 0, 0),
        played(4, "A", "W", 0, 0),
        played(5, "A", "V", 0, 0),
        played(6, "B", "X", 2, 0),
        played(7, "B", "Y", 1, 0),
        played(8, "B", "Z", 0, 1),
    ]
    stats = by_id(compute_standings(["A", "B", "X", "Y", "Z", "W", "V"], matches))

    assert (stats["A"].points, stats["A"].goal_difference, stats["A"].goals_for) == (6, 0, 4)
    assert (stats["B"].points, stats["B"].goal_difference, stats["B"].goals_for) == (6, 2, 3)

    ranked = [
        s.id
        for s in compute_standings(["A", "B", "X", "Y", "Z", "W", "V"], matches)
        if s.id in {"A", "B"}
    ]
    assert ranked == ["B", "A"]


def test_goals_for_breaks_equal_goal_difference() -> None:
    matches = [played(1, "A", "C", 1, 0), played(2, "B", "C", 3, 2)]

    ranked = [s.id for s in compute_standings(["A", "B", "C"], matches)]

    assert ranked == ["B", "A", "C"]


def test_entities_without_matches_stay_zeroed() -> None:
    standings = compute_standings(["A", "B", "C"], [played(1, "A", "B", 1, 0)])
    c = by_id(standings)["C"]

    assert c == Stat(id="C")
    assert c.win_rate == 0
    assert c.goals_per_game == 0
    assert c.conceded_per_game == 0


def test_incomplete_matches_are_ignored() -> None:
    ids = ["A", "B", "C"]
    completed = [played(1, "A", "B", 2, 0)]
    unplayed = generate_fixtures(ids, 1, MatchFormat.ROUND_TRIP)

    assert compute_standings(ids, completed) == compute_standings(
        ids, completed + unplayed
    )


def test_standings_are_idempotent() -> None:
    ids = ["A", "B", "C"]
    matches = [played(1, "A", "B", 2, 0), played(2, "B", "C", 1, 1)]

    assert compute_standings(ids, matches) == compute_standings(ids, matches)


def test_input_matches_are_not_mutated() -> None:
    matches = [played(1, "A", "B", 2, 0)]
    snapshot = [m.model_copy(deep=True) for m in matches]

    compute_standings(["A", "B"], matches)

    assert matches == snapshot


def test_unknown_and_mode_mismatched_references_are_skipped() -> None:
    team_match = Match(
        id=2,
        round=1,
        sides=TeamSides(team1="A", team2="B"),
        score1=5,
        score2=0,
        completed=True,
    )
    matches = [played(1, "A", "ghost", 4, 0), team_match]

    standings = compute_standings(["A", "B"], matches)

    assert all(s.matches_played == 0 for s in standings)


def test_doubles_mode_reads_team_sides() -> None:
    match = Match(
        id=1,
        round=1,
        sides=TeamSides(team1="t1", team2="t2"),
        score1=1,
        score2=4,
        completed=True,
    )

    standings = compute_standings(["t1", "t2"], [match], TournamentMode.DOUBLES)

    assert [s.id for s in standings] == ["t2", "t1"]
    assert standings[0].points == 3


def test_derived_rates() -> None:
    matches = [played(1, "A", "B", 3, 1), played(2, "B", "A", 2, 2)]
    a = by_id(compute_standings(["A", "B"], matches))["A"]

    assert a.win_rate == pytest.approx(0.5)
    assert a.goals_per_game == pytest.approx(2.5)
    assert a.conceded_per_game == pytest.approx(1.5)
