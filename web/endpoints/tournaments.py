"""Tournament management endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config.settings import get_default_config
from tournaments import TournamentAPI, TournamentDatabaseManager, TournamentManager
from tournaments.models import (
    CompetitorCreateRequest,
    MatchResultRequest,
    TeamCreateRequest,
    TournamentSettingsRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

tournament_api: TournamentAPI | None = None


def get_tournament_api() -> TournamentAPI:
    """Get or create tournament API instance."""
    global tournament_api
    if tournament_api is None:
        config = get_default_config()
        store = TournamentDatabaseManager(
            db_path=config.storage.db_path,
            snapshot_key=config.storage.snapshot_key,
        )
        tournament_manager = TournamentManager(
            store=store,
            defaults=config.defaults.to_tournament_config(),
            export_version=config.system.export_version,
        )
        tournament_api = TournamentAPI(tournament_manager)
        logger.info(f"Tournament API ready (storage: {config.storage.db_path})")

    return tournament_api


# Participants


@router.get("/participants")
async def list_participants(api: TournamentAPI = Depends(get_tournament_api)):
    """List registered participants."""
    return await api.list_participants()


@router.post("/participants")
async def add_participant(
    request: CompetitorCreateRequest, api: TournamentAPI = Depends(get_tournament_api)
):
    """Register a participant."""
    return await api.add_participant(request)


@router.delete("/participants/{participant_id}")
async def remove_participant(
    participant_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Remove a participant before the tournament is created."""
    return await api.remove_participant(participant_id)


# Teams


@router.get("/teams")
async def list_teams(api: TournamentAPI = Depends(get_tournament_api)):
    """List declared or generated teams."""
    return await api.list_teams()


@router.post("/teams")
async def add_team(
    request: TeamCreateRequest, api: TournamentAPI = Depends(get_tournament_api)
):
    """Declare a predefined team."""
    return await api.add_team(request)


@router.post("/teams/random")
async def generate_random_teams(api: TournamentAPI = Depends(get_tournament_api)):
    """Pair all participants into random teams."""
    return await api.generate_random_teams()


@router.delete("/teams/{team_id}")
async def remove_team(team_id: str, api: TournamentAPI = Depends(get_tournament_api)):
    """Remove a team before the tournament is created."""
    return await api.remove_team(team_id)


# Tournament


@router.get("/tournament")
async def get_tournament(api: TournamentAPI = Depends(get_tournament_api)):
    """Get tournament settings and progress."""
    return await api.get_tournament()


@router.get("/tournament/settings")
async def get_settings(api: TournamentAPI = Depends(get_tournament_api)):
    """Get the current tournament settings."""
    return await api.get_settings()


@router.put("/tournament/settings")
async def update_settings(
    request: TournamentSettingsRequest,
    api: TournamentAPI = Depends(get_tournament_api),
):
    """Change tournament settings before creation."""
    return await api.update_settings(request)


@router.post("/tournament")
async def create_tournament(api: TournamentAPI = Depends(get_tournament_api)):
    """Create the tournament and generate all matches."""
    return await api.create_tournament()


@router.delete("/tournament")
async def reset_tournament(api: TournamentAPI = Depends(get_tournament_api)):
    """Reset all tournament data."""
    return await api.reset_tournament()


# Matches and standings


@router.get("/matches")
async def get_matches(
    round_number: int | None = None, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get matches, optionally filtered by round."""
    return await api.get_matches(round_number)


@router.put("/matches/{match_id}/result")
async def record_result(
    match_id: int,
    request: MatchResultRequest,
    api: TournamentAPI = Depends(get_tournament_api),
):
    """Save a match result."""
    return await api.record_result(match_id, request)


@router.get("/rounds/{round_number}/status")
async def get_round_status(
    round_number: int, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get status of all matches in a specific round."""
    return await api.get_round_status(round_number)


@router.get("/standings")
async def get_standings(api: TournamentAPI = Depends(get_tournament_api)):
    """Get the ranking table."""
    return await api.get_standings()


# Import / export


@router.get("/export")
async def export_data(api: TournamentAPI = Depends(get_tournament_api)):
    """Download all tournament data as a JSON file."""
    document, filename = await api.export_data()
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_data(
    request: Request, api: TournamentAPI = Depends(get_tournament_api)
):
    """Replace tournament data with a previously exported JSON document."""
    content = await request.body()
    return await api.import_data(content)
