"""Tournament API endpoint handlers."""

import logging
from typing import Any

from fastapi import HTTPException

from .exceptions import MatchNotFoundError, SnapshotError, ValidationFailure
from .manager import TournamentManager
from .models import (
    CompetitorCreateRequest,
    Match,
    MatchResultRequest,
    Stat,
    TeamCreateRequest,
    TournamentConfig,
    TournamentSettingsRequest,
)
from .transfer import export_filename

logger = logging.getLogger(__name__)


class TournamentAPI:
    """FastAPI endpoint handlers for tournament operations."""

    def __init__(self, tournament_manager: TournamentManager):
        self.manager = tournament_manager

    def _settings(self, config: TournamentConfig) -> dict[str, Any]:
        return {
            "round_count": config.round_count,
            "mode": config.mode.value,
            "team_assignment_mode": config.team_assignment_mode.value,
            "match_format": config.match_format.value,
            "created": config.created,
        }

    def _match(self, m: Match) -> dict[str, Any]:
        return {
            "id": m.id,
            "round": m.round,
            "side1_id": m.side1,
            "side2_id": m.side2,
            "side1_name": self.manager.display_name(m.side1),
            "side2_name": self.manager.display_name(m.side2),
            "score1": m.score1,
            "score2": m.score2,
            "completed": m.completed,
        }

    def _stat(self, position: int, s: Stat) -> dict[str, Any]:
        return {
            "position": position,
            "id": s.id,
            "name": self.manager.display_name(s.id),
            "points": s.points,
            "matches_played": s.matches_played,
            "wins": s.wins,
            "draws": s.draws,
            "losses": s.losses,
            "goals_for": s.goals_for,
            "goals_against": s.goals_against,
            "goal_difference": s.goal_difference,
            "win_rate": round(s.win_rate * 100, 1),
            "goals_per_game": round(s.goals_per_game, 2),
            "conceded_per_game": round(s.conceded_per_game, 2),
        }

    # ========== Participants ==========

    async def list_participants(self) -> dict[str, Any]:
        participants = self.manager.participants
        return {
            "participants": [p.model_dump() for p in participants],
            "count": len(participants),
        }

    async def add_participant(self, request: CompetitorCreateRequest) -> dict[str, Any]:
        """Register a competitor."""
        try:
            competitor = self.manager.add_competitor(
                request.display_name, request.full_name
            )
            return {
                "participant": competitor.model_dump(),
                "message": "Participant added successfully",
            }

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to add participant: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def remove_participant(self, competitor_id: str) -> dict[str, Any]:
        try:
            self.manager.remove_competitor(competitor_id)
            return {
                "participant_id": competitor_id,
                "message": "Participant removed successfully",
            }

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to remove participant {competitor_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ========== Teams ==========

    async def list_teams(self) -> dict[str, Any]:
        teams = self.manager.config.teams
        return {
            "teams": [
                {**t.model_dump(), "display_name": self.manager.team_name(t.id)}
                for t in teams
            ],
            "count": len(teams),
        }

    async def add_team(self, request: TeamCreateRequest) -> dict[str, Any]:
        """Declare a predefined team."""
        try:
            team = self.manager.add_team(
                request.name, request.member_a, request.member_b
            )
            return {"team": team.model_dump(), "message": "Team added successfully"}

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to add team: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def remove_team(self, team_id: str) -> dict[str, Any]:
        try:
            self.manager.remove_team(team_id)
            return {"team_id": team_id, "message": "Team removed successfully"}

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to remove team {team_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def generate_random_teams(self) -> dict[str, Any]:
        """Pair registered competitors into random teams."""
        try:
            teams = self.manager.generate_random_teams()
            return {
                "teams": [t.model_dump() for t in teams],
                "count": len(teams),
                "message": "Random teams generated",
            }

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to generate random teams: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ========== Tournament ==========

    async def get_tournament(self) -> dict[str, Any]:
        """Get tournament settings and progress."""
        config = self.manager.config
        return {
            **self._settings(config),
            **self.manager.get_progress(),
            "participant_count": len(self.manager.participants),
            "team_count": len(config.teams),
            "preview_match_count": self.manager.preview_match_count(),
        }

    async def get_settings(self) -> dict[str, Any]:
        return {
            **self._settings(self.manager.config),
            "preview_match_count": self.manager.preview_match_count(),
        }

    async def update_settings(
        self, request: TournamentSettingsRequest
    ) -> dict[str, Any]:
        try:
            config = self.manager.update_settings(
                round_count=request.round_count,
                mode=request.mode,
                team_assignment_mode=request.team_assignment_mode,
                match_format=request.match_format,
            )
            return {
                **self._settings(config),
                "preview_match_count": self.manager.preview_match_count(),
            }

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to update tournament settings: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def create_tournament(self) -> dict[str, Any]:
        """Create the tournament and its fixtures."""
        try:
            config = self.manager.create_tournament()
            return {
                **self._settings(config),
                "total_matches": len(config.matches),
                "message": "Tournament created successfully",
            }

        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to create tournament: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def reset_tournament(self) -> dict[str, Any]:
        """Delete all tournament data."""
        try:
            self.manager.reset()
            return {"message": "Tournament reset successfully", "created": False}

        except Exception as e:
            logger.error(f"Failed to reset tournament: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ========== Matches ==========

    async def get_matches(self, round_number: int | None = None) -> dict[str, Any]:
        """Get tournament matches, optionally filtered by round."""
        try:
            matches = self.manager.get_matches(round_number)

            return {
                "round_number": round_number,
                "matches": [self._match(m) for m in matches],
                "count": len(matches),
            }

        except Exception as e:
            logger.error(f"Failed to get matches: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def record_result(
        self, match_id: int, request: MatchResultRequest
    ) -> dict[str, Any]:
        """Save the score of a match."""
        try:
            match = self.manager.record_result(
                match_id, request.score1, request.score2
            )
            return {"match": self._match(match), "message": "Result saved successfully"}

        except MatchNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValidationFailure as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to record result for match {match_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def get_round_status(self, round_number: int) -> dict[str, Any]:
        """Get status of all matches in a specific round."""
        round_status = self.manager.get_round_status(round_number)

        return {
            **round_status.model_dump(),
            "completion_percentage": (
                round_status.completed_matches / round_status.total_matches * 100
                if round_status.total_matches > 0
                else 0
            ),
        }

    # ========== Standings ==========

    async def get_standings(self) -> dict[str, Any]:
        """Get the ranking table."""
        try:
            standings = self.manager.get_standings()

            return {
                "mode": self.manager.config.mode.value,
                "standings": [
                    self._stat(position, s)
                    for position, s in enumerate(standings, start=1)
                ],
                **self.manager.get_progress(),
            }

        except Exception as e:
            logger.error(f"Failed to compute standings: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ========== Import / Export ==========

    async def export_data(self) -> tuple[dict[str, Any], str]:
        """Get the export document and a suggested file name."""
        return self.manager.export_data(), export_filename()

    async def import_data(self, content: str | bytes) -> dict[str, Any]:
        try:
            state = self.manager.import_data(content)
            return {
                "message": "Tournament data imported successfully",
                "participant_count": len(state.participants),
                "created": state.config.created,
            }

        except SnapshotError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to import tournament data: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")
