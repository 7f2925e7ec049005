"""Round-robin fixture generation and random team pairing."""

import logging
import random
from collections.abc import Sequence

from .exceptions import ValidationFailure
from .models import (
    Competitor,
    IndividualSides,
    Match,
    MatchFormat,
    Team,
    TeamSides,
    TournamentMode,
)

logger = logging.getLogger(__name__)

MIN_RANDOM_TEAM_COMPETITORS = 4


def expected_match_count(
    entity_count: int, round_count: int, match_format: MatchFormat
) -> int:
    """Number of matches a full schedule holds.

    ``n * (n - 1)`` is always even, so the single-leg count is exact.
    """
    if entity_count < 2 or round_count < 1:
        return 0
    per_round = entity_count * (entity_count - 1)
    if match_format == MatchFormat.SINGLE:
        per_round //= 2
    return per_round * round_count


def _sides(mode: TournamentMode, first: str, second: str) -> IndividualSides | TeamSides:
    if mode == TournamentMode.INDIVIDUAL:
        return IndividualSides(competitor1=first, competitor2=second)
    return TeamSides(team1=first, team2=second)


def generate_fixtures(
    entity_ids: Sequence[str],
    round_count: int,
    match_format: MatchFormat,
    mode: TournamentMode = TournamentMode.INDIVIDUAL,
) -> list[Match]:
    """Generate every match of the tournament in schedule order.

    Each round pairs every entity with every entity after it in roster order.
    Round-trip format adds the reversed leg right after the forward one, in
    the same round. Match ids count up from 1 across all rounds.

    Args:
        entity_ids: Competitor ids (individual mode) or team ids (doubles)
        round_count: Number of full round-robin cycles
        match_format: Single leg or round trip
        mode: Selects the kind of side references on each match

    Returns:
        Unplayed matches ordered by id
    """
    ids = list(entity_ids)
    matches: list[Match] = []
    match_id = 1

    for round_number in range(1, round_count + 1):
        for i, first in enumerate(ids):
            for second in ids[i + 1 :]:
                matches.append(
                    Match(
                        id=match_id,
                        round=round_number,
                        sides=_sides(mode, first, second),
                    )
                )
                match_id += 1

                if match_format == MatchFormat.ROUND_TRIP:
                    matches.append(
                        Match(
                            id=match_id,
                            round=round_number,
                            sides=_sides(mode, second, first),
                        )
                    )
                    match_id += 1

    expected = expected_match_count(len(ids), round_count, match_format)
    if len(matches) != expected:
        raise RuntimeError(
            f"Generated {len(matches)} matches, expected {expected}"
        )

    logger.info(
        f"Generated {len(matches)} {mode.value} matches for {len(ids)} entries "
        f"over {round_count} round(s) ({match_format.value})"
    )
    return matches


def synthesize_random_teams(
    competitors: Sequence[Competitor], rng: random.Random | None = None
) -> list[Team]:
    """Shuffle competitors and pair them up into numbered teams."""
    if (
        len(competitors) < MIN_RANDOM_TEAM_COMPETITORS
        or len(competitors) % 2 != 0
    ):
        raise ValidationFailure(
            "An even number of participants (minimum 4) is required for random teams"
        )

    shuffled = list(competitors)
    (rng or random.Random()).shuffle(shuffled)

    teams = []
    for i in range(0, len(shuffled), 2):
        number = i // 2 + 1
        teams.append(
            Team(
                id=f"team-{number}",
                name=f"Team {number}",
                member_a=shuffled[i].id,
                member_b=shuffled[i + 1].id,
            )
        )

    logger.info(f"Paired {len(shuffled)} competitors into {len(teams)} random teams")
    return teams
