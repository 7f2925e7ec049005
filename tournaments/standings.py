"""Standings computation from completed matches."""

from collections.abc import Iterable, Sequence

from .models import Match, Stat, TournamentMode

WIN_POINTS = 3
DRAW_POINTS = 1


def _apply_result(home: Stat, away: Stat, score1: int, score2: int) -> None:
    home.matches_played += 1
    away.matches_played += 1

    home.goals_for += score1
    home.goals_against += score2
    away.goals_for += score2
    away.goals_against += score1

    if score1 > score2:
        home.wins += 1
        home.points += WIN_POINTS
        away.losses += 1
    elif score1 < score2:
        away.wins += 1
        away.points += WIN_POINTS
        home.losses += 1
    else:
        home.draws += 1
        home.points += DRAW_POINTS
        away.draws += 1
        away.points += DRAW_POINTS


def compute_standings(
    entity_ids: Sequence[str],
    matches: Iterable[Match],
    mode: TournamentMode = TournamentMode.INDIVIDUAL,
) -> list[Stat]:
    """Fold completed matches into a ranked standings table.

    Every id gets a line even without a played match. Matches that are not
    completed, belong to the other mode, or reference ids outside
    ``entity_ids`` are skipped. Ranking is points, then goal difference, then
    goals scored, all descending; the sort is stable so ``entity_ids`` order
    settles any remaining tie.
    """
    stats = {entity_id: Stat(id=entity_id) for entity_id in entity_ids}

    for match in matches:
        if not match.completed or match.score1 is None or match.score2 is None:
            continue
        if match.mode != mode:
            continue

        home = stats.get(match.side1)
        away = stats.get(match.side2)
        if home is None or away is None:
            continue

        _apply_result(home, away, match.score1, match.score2)

    for stat in stats.values():
        stat.goal_difference = stat.goals_for - stat.goals_against

    return sorted(
        stats.values(),
        key=lambda s: (s.points, s.goal_difference, s.goals_for),
        reverse=True,
    )
