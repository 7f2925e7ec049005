"""Tournament management: registration, fixtures, results and standings."""

import logging
import random
import threading
import uuid
from typing import Any

from .database import InMemorySnapshotStore, SnapshotStore
from .exceptions import MatchNotFoundError, ValidationFailure
from .fixtures import (
    MIN_RANDOM_TEAM_COMPETITORS,
    expected_match_count,
    generate_fixtures,
    synthesize_random_teams,
)
from .models import (
    Competitor,
    Match,
    MatchFormat,
    RoundStatus,
    Stat,
    Team,
    TeamAssignmentMode,
    TournamentConfig,
    TournamentMode,
    TournamentState,
)
from .standings import compute_standings
from .transfer import EXPORT_VERSION, export_state, parse_import

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNKNOWN_MEMBER = "N/A"


class TournamentManager:
    """Owns the live roster and tournament configuration.

    Every mutation validates first, then swaps in the new state and writes it
    through the snapshot store, so a rejected operation leaves both untouched.
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        defaults: TournamentConfig | None = None,
        export_version: str = EXPORT_VERSION,
    ):
        self.store = store or InMemorySnapshotStore()
        self.defaults = defaults or TournamentConfig()
        self.export_version = export_version
        self._lock = threading.RLock()

        loaded = self.store.load()
        if loaded is not None:
            self.state = loaded
            logger.info(
                f"Loaded tournament state: {len(loaded.participants)} participants, "
                f"created={loaded.config.created}"
            )
        else:
            self.state = self._initial_state()

    def _initial_state(self) -> TournamentState:
        return TournamentState(config=self.defaults.model_copy(deep=True))

    def _commit(self, state: TournamentState) -> None:
        self.store.save(state)
        self.state = state

    @property
    def participants(self) -> list[Competitor]:
        return list(self.state.participants)

    @property
    def config(self) -> TournamentConfig:
        return self.state.config

    def _uses_random_teams(self) -> bool:
        config = self.state.config
        return (
            config.mode == TournamentMode.DOUBLES
            and config.team_assignment_mode == TeamAssignmentMode.RANDOM
        )

    def _teams_cover_roster(self) -> bool:
        members = sorted(m for t in self.state.config.teams for m in t.members)
        return members == sorted(p.id for p in self.state.participants)

    def _require_not_created(self, action: str) -> None:
        if self.state.config.created:
            raise ValidationFailure(
                f"Cannot {action} after the tournament has been created"
            )

    # ========== Roster ==========

    def add_competitor(self, display_name: str, full_name: str) -> Competitor:
        """Register a new competitor."""
        with self._lock:
            display_name = (display_name or "").strip()
            full_name = (full_name or "").strip()
            if not display_name or not full_name:
                raise ValidationFailure("Name and nickname are required")
            self._require_not_created("add participants")

            competitor = Competitor(
                id=str(uuid.uuid4()), display_name=display_name, full_name=full_name
            )
            config = self.state.config
            # Pre-generated random pairs no longer cover the roster
            stale_teams = self._uses_random_teams() and bool(config.teams)
            if stale_teams:
                config = config.model_copy(update={"teams": []})

            self._commit(
                self.state.model_copy(
                    update={
                        "participants": [*self.state.participants, competitor],
                        "config": config,
                    }
                )
            )

        if stale_teams:
            logger.info("Cleared pre-generated random teams after roster change")
        logger.info(f"Added competitor {competitor.id}: {competitor.display_name}")
        return competitor

    def remove_competitor(self, competitor_id: str) -> None:
        """Remove a competitor before the tournament is created."""
        with self._lock:
            self._require_not_created("remove participants")
            if not any(p.id == competitor_id for p in self.state.participants):
                raise ValidationFailure(f"Participant {competitor_id} not found")
            if any(competitor_id in t.members for t in self.state.config.teams):
                raise ValidationFailure(
                    "Participant belongs to a team; remove the team first"
                )

            remaining = [p for p in self.state.participants if p.id != competitor_id]
            self._commit(self.state.model_copy(update={"participants": remaining}))

        logger.info(f"Removed competitor {competitor_id}")

    # ========== Teams ==========

    def add_team(self, name: str, member_a: str, member_b: str) -> Team:
        """Declare a predefined team of two registered competitors."""
        with self._lock:
            name = (name or "").strip()
            if not name or not member_a or not member_b:
                raise ValidationFailure("Team name and both players are required")
            if member_a == member_b:
                raise ValidationFailure("Team players must be different")
            self._require_not_created("add teams")

            known = {p.id for p in self.state.participants}
            missing = [m for m in (member_a, member_b) if m not in known]
            if missing:
                raise ValidationFailure(f"Unknown participant(s): {', '.join(missing)}")

            taken = {m for t in self.state.config.teams for m in t.members}
            if member_a in taken or member_b in taken:
                raise ValidationFailure(
                    "One or both players are already in another team"
                )

            team = Team(
                id=str(uuid.uuid4()), name=name, member_a=member_a, member_b=member_b
            )
            self._commit_config(teams=[*self.state.config.teams, team])

        logger.info(f"Added team {team.id}: {team.name}")
        return team

    def remove_team(self, team_id: str) -> None:
        with self._lock:
            self._require_not_created("remove teams")
            if not any(t.id == team_id for t in self.state.config.teams):
                raise ValidationFailure(f"Team {team_id} not found")

            self._commit_config(
                teams=[t for t in self.state.config.teams if t.id != team_id]
            )

        logger.info(f"Removed team {team_id}")

    def generate_random_teams(self, rng: random.Random | None = None) -> list[Team]:
        """Pair all registered competitors into random teams ahead of creation."""
        with self._lock:
            self._require_not_created("generate teams")
            teams = synthesize_random_teams(self.state.participants, rng)
            self._commit_config(teams=teams)
        return teams

    # ========== Settings ==========

    def update_settings(
        self,
        round_count: int | None = None,
        mode: TournamentMode | None = None,
        team_assignment_mode: TeamAssignmentMode | None = None,
        match_format: MatchFormat | None = None,
    ) -> TournamentConfig:
        """Change tournament settings before creation."""
        update: dict[str, Any] = {}
        if round_count is not None:
            if isinstance(round_count, bool) or not isinstance(round_count, int):
                raise ValidationFailure("Round count must be a whole number")
            if round_count < 1:
                raise ValidationFailure("Round count must be at least 1")
            update["round_count"] = round_count
        try:
            if mode is not None:
                update["mode"] = TournamentMode(mode)
            if team_assignment_mode is not None:
                update["team_assignment_mode"] = TeamAssignmentMode(
                    team_assignment_mode
                )
            if match_format is not None:
                update["match_format"] = MatchFormat(match_format)
        except ValueError as e:
            raise ValidationFailure(str(e)) from e

        with self._lock:
            self._require_not_created("change settings")
            if update:
                self._commit_config(**update)
                logger.info(f"Updated tournament settings: {update}")
            return self.state.config

    def _commit_config(self, **update: Any) -> None:
        config = self.state.config.model_copy(update=update)
        self._commit(self.state.model_copy(update={"config": config}))

    # ========== Creation ==========

    def _validate_creation(self) -> None:
        config = self.state.config
        count = len(self.state.participants)

        if config.mode == TournamentMode.INDIVIDUAL:
            if count < 2:
                raise ValidationFailure("At least 2 participants are required")
        elif config.team_assignment_mode == TeamAssignmentMode.RANDOM:
            if config.teams and not self._teams_cover_roster():
                raise ValidationFailure(
                    "The current teams do not include every participant; "
                    "generate the teams again"
                )
            if count < MIN_RANDOM_TEAM_COMPETITORS or count % 2 != 0:
                raise ValidationFailure(
                    "An even number of participants (minimum 4) is required for doubles"
                )
        else:
            if len(config.teams) < 2:
                raise ValidationFailure("At least 2 teams are required")
            members = [m for t in config.teams for m in t.members]
            if len(members) != len(set(members)):
                raise ValidationFailure("A participant appears in more than one team")

    def create_tournament(self, rng: random.Random | None = None) -> TournamentConfig:
        """Freeze the roster and generate the full match schedule."""
        with self._lock:
            self._require_not_created("create the tournament again")
            self._validate_creation()

            config = self.state.config
            participants = list(self.state.participants)
            teams = list(config.teams)

            if config.mode == TournamentMode.INDIVIDUAL:
                entity_ids = [p.id for p in participants]
            else:
                if (
                    config.team_assignment_mode == TeamAssignmentMode.RANDOM
                    and not teams
                ):
                    teams = synthesize_random_teams(participants, rng)
                entity_ids = [t.id for t in teams]

            matches = generate_fixtures(
                entity_ids, config.round_count, config.match_format, config.mode
            )
            self._commit_config(
                participants=participants, teams=teams, matches=matches, created=True
            )

        logger.info(
            f"Created {config.mode.value} tournament with {len(entity_ids)} entries "
            f"and {len(matches)} matches"
        )
        return self.state.config

    def preview_match_count(self) -> int:
        """Matches the current settings would generate, 0 if not yet valid."""
        config = self.state.config
        count = len(self.state.participants)

        if config.mode == TournamentMode.INDIVIDUAL:
            entities = count
        elif config.team_assignment_mode == TeamAssignmentMode.PREDEFINED:
            entities = len(config.teams)
        elif config.teams:
            entities = len(config.teams) if self._teams_cover_roster() else 0
        elif count >= MIN_RANDOM_TEAM_COMPETITORS and count % 2 == 0:
            entities = count // 2
        else:
            entities = 0

        return expected_match_count(entities, config.round_count, config.match_format)

    # ========== Results ==========

    @staticmethod
    def _parse_score(value: Any) -> int:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationFailure("Enter both scores")
        if isinstance(value, bool):
            raise ValidationFailure("Scores must be valid numbers")
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ValidationFailure("Scores must be valid numbers")
        if not isinstance(value, int) or value < 0:
            raise ValidationFailure("Scores must be valid numbers")
        return value

    def record_result(self, match_id: int, score1: Any, score2: Any) -> Match:
        """Record or correct the result of one match."""
        with self._lock:
            if not self.state.config.created:
                raise ValidationFailure("The tournament has not been created yet")

            # Both scores must validate before either is written
            parsed1 = self._parse_score(score1)
            parsed2 = self._parse_score(score2)

            matches = self.state.config.matches
            index = next((i for i, m in enumerate(matches) if m.id == match_id), None)
            if index is None:
                raise MatchNotFoundError(match_id)

            updated = matches[index].model_copy(
                update={"score1": parsed1, "score2": parsed2, "completed": True}
            )
            self._commit_config(
                matches=[*matches[:index], updated, *matches[index + 1 :]]
            )

        logger.info(f"Recorded match {match_id}: {parsed1} - {parsed2}")
        return updated

    # ========== Queries ==========

    def get_matches(self, round_number: int | None = None) -> list[Match]:
        matches = self.state.config.matches
        if round_number is None:
            return list(matches)
        return [m for m in matches if m.round == round_number]

    def get_match(self, match_id: int) -> Match:
        for match in self.state.config.matches:
            if match.id == match_id:
                return match
        raise MatchNotFoundError(match_id)

    def get_round_status(self, round_number: int) -> RoundStatus:
        matches = self.get_matches(round_number)
        completed = sum(1 for m in matches if m.completed)
        return RoundStatus(
            round_number=round_number,
            total_matches=len(matches),
            completed_matches=completed,
            pending_matches=len(matches) - completed,
            all_completed=completed == len(matches) and len(matches) > 0,
        )

    def get_progress(self) -> dict[str, int]:
        matches = self.state.config.matches
        return {
            "completed_matches": sum(1 for m in matches if m.completed),
            "total_matches": len(matches),
        }

    def get_standings(self) -> list[Stat]:
        """Rank competitors (individual) or teams (doubles) by current results."""
        with self._lock:
            config = self.state.config

        if config.mode == TournamentMode.INDIVIDUAL:
            entity_ids = [p.id for p in config.participants]
        else:
            entity_ids = [t.id for t in config.teams]
        return compute_standings(entity_ids, config.matches, config.mode)

    def _roster(self) -> list[Competitor]:
        config = self.state.config
        return config.participants if config.created else self.state.participants

    def competitor_name(self, competitor_id: str) -> str:
        for competitor in self._roster():
            if competitor.id == competitor_id:
                return competitor.display_name
        return UNKNOWN_NAME

    def team_name(self, team_id: str) -> str:
        team = next((t for t in self.state.config.teams if t.id == team_id), None)
        if team is None:
            return UNKNOWN_NAME

        names = {p.id: p.display_name for p in self._roster()}
        member_a = names.get(team.member_a, UNKNOWN_MEMBER)
        member_b = names.get(team.member_b, UNKNOWN_MEMBER)
        return f"{team.name} ({member_a} + {member_b})"

    def display_name(self, entity_id: str) -> str:
        """Name of a match side in the current mode, 'Unknown' when stale."""
        if self.state.config.mode == TournamentMode.INDIVIDUAL:
            return self.competitor_name(entity_id)
        return self.team_name(entity_id)

    # ========== Lifecycle ==========

    def reset(self) -> None:
        """Discard all tournament data and return to the initial settings."""
        with self._lock:
            self.store.clear()
            self.state = self._initial_state()
        logger.info("Tournament reset")

    def export_data(self) -> dict[str, Any]:
        return export_state(self.state, version=self.export_version)

    def import_data(self, content: str | bytes) -> TournamentState:
        """Replace the current state with an exported document.

        Nothing changes unless the document validates.
        """
        state = parse_import(content)
        with self._lock:
            self._commit(state)
        logger.info(
            f"Imported tournament data: {len(state.participants)} participants, "
            f"{len(state.config.matches)} matches"
        )
        return state
