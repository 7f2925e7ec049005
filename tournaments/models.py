"""Tournament system data models."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TournamentMode(Enum):
    """Who competes in each match."""

    INDIVIDUAL = "individual"
    DOUBLES = "doubles"


class TeamAssignmentMode(Enum):
    """How doubles teams are formed."""

    RANDOM = "random"  # Shuffled pairing at creation time
    PREDEFINED = "predefined"  # Declared by the organizer


class MatchFormat(Enum):
    """How many legs each pairing plays per round."""

    SINGLE = "single"
    ROUND_TRIP = "round_trip"  # Home and away, sides swapped


class Competitor(BaseModel):
    """A registered individual competitor."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    full_name: str


class Team(BaseModel):
    """A team of two competitors used in doubles mode."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    member_a: str
    member_b: str

    @model_validator(mode="after")
    def check_distinct_members(self) -> "Team":
        if self.member_a == self.member_b:
            raise ValueError("Team members must be different competitors")
        return self

    @property
    def members(self) -> tuple[str, str]:
        return (self.member_a, self.member_b)


class IndividualSides(BaseModel):
    """Competitor references for an individual match."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["individual"] = "individual"
    competitor1: str
    competitor2: str


class TeamSides(BaseModel):
    """Team references for a doubles match."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["team"] = "team"
    team1: str
    team2: str


MatchSides = Annotated[IndividualSides | TeamSides, Field(discriminator="kind")]


class Match(BaseModel):
    """A single scheduled match.

    Scores stay unset until a result is recorded; both are then set together
    and ``completed`` becomes true for good.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    round: int = Field(..., ge=1)
    sides: MatchSides
    score1: int | None = Field(default=None, ge=0)
    score2: int | None = Field(default=None, ge=0)
    completed: bool = False

    @model_validator(mode="after")
    def check_scores(self) -> "Match":
        has_score1 = self.score1 is not None
        has_score2 = self.score2 is not None
        if has_score1 != has_score2:
            raise ValueError("Both scores must be set together")
        if self.completed and not has_score1:
            raise ValueError("A completed match must carry both scores")
        return self

    @property
    def side1(self) -> str:
        if isinstance(self.sides, IndividualSides):
            return self.sides.competitor1
        return self.sides.team1

    @property
    def side2(self) -> str:
        if isinstance(self.sides, IndividualSides):
            return self.sides.competitor2
        return self.sides.team2

    @property
    def mode(self) -> TournamentMode:
        if isinstance(self.sides, IndividualSides):
            return TournamentMode.INDIVIDUAL
        return TournamentMode.DOUBLES


class TournamentConfig(BaseModel):
    """Tournament configuration plus the roster frozen at creation."""

    round_count: int = Field(default=1, ge=1, description="Full round-robin cycles")
    mode: TournamentMode = TournamentMode.INDIVIDUAL
    team_assignment_mode: TeamAssignmentMode = TeamAssignmentMode.RANDOM
    match_format: MatchFormat = MatchFormat.ROUND_TRIP
    created: bool = False
    participants: list[Competitor] = Field(
        default_factory=list, description="Roster snapshot taken at creation"
    )
    teams: list[Team] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_schedule(self) -> "TournamentConfig":
        team_ids = [t.id for t in self.teams]
        if len(team_ids) != len(set(team_ids)):
            raise ValueError("Team ids must be unique")

        members = [m for t in self.teams for m in t.members]
        if len(members) != len(set(members)):
            raise ValueError("A competitor belongs to more than one team")

        if self.matches and not self.created:
            raise ValueError("Matches exist only once the tournament is created")

        match_ids = [m.id for m in self.matches]
        if len(match_ids) != len(set(match_ids)):
            raise ValueError("Match ids must be unique")

        if self.mode == TournamentMode.INDIVIDUAL:
            side_ids = {p.id for p in self.participants}
        else:
            side_ids = set(team_ids)

        for match in self.matches:
            if match.round > self.round_count:
                raise ValueError(
                    f"Match {match.id} is in round {match.round} "
                    f"but the tournament has {self.round_count}"
                )
            if match.mode != self.mode:
                raise ValueError(f"Match {match.id} does not fit {self.mode.value} mode")
            if match.side1 not in side_ids or match.side2 not in side_ids:
                raise ValueError(f"Match {match.id} references an unknown side")

        if self.created:
            roster = {p.id for p in self.participants}
            if not set(members) <= roster:
                raise ValueError("A team member is missing from the roster snapshot")
        return self


class TournamentState(BaseModel):
    """Everything persisted between sessions."""

    participants: list[Competitor] = Field(default_factory=list)
    config: TournamentConfig = Field(default_factory=TournamentConfig)

    @model_validator(mode="after")
    def check_team_members(self) -> "TournamentState":
        if not self.config.created:
            roster = {p.id for p in self.participants}
            if any(m not in roster for t in self.config.teams for m in t.members):
                raise ValueError("A team member is not a registered competitor")
        return self


class Stat(BaseModel):
    """Aggregated standings line for one competitor or team."""

    id: str
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    matches_played: int = 0

    @property
    def win_rate(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.wins / self.matches_played

    @property
    def goals_per_game(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.goals_for / self.matches_played

    @property
    def conceded_per_game(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.goals_against / self.matches_played


class CompetitorCreateRequest(BaseModel):
    """Request to register a competitor."""

    display_name: str = Field(..., description="Nickname shown in fixtures")
    full_name: str = Field(..., description="Full name")


class TeamCreateRequest(BaseModel):
    """Request to declare a predefined team."""

    name: str = Field(..., description="Team name")
    member_a: str = Field(..., description="First competitor ID")
    member_b: str = Field(..., description="Second competitor ID")


class TournamentSettingsRequest(BaseModel):
    """Partial update of the tournament settings before creation."""

    round_count: int | None = None
    mode: TournamentMode | None = None
    team_assignment_mode: TeamAssignmentMode | None = None
    match_format: MatchFormat | None = None


class MatchResultRequest(BaseModel):
    """Scores entered for one match, validated by the manager."""

    score1: int | str | None = None
    score2: int | str | None = None


class RoundStatus(BaseModel):
    """Status of all matches in a round."""

    round_number: int
    total_matches: int
    completed_matches: int
    pending_matches: int
    all_completed: bool
