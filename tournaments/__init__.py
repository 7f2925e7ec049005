"""Round-robin tournament system: fixtures, results and standings."""

from .manager import TournamentManager
from .database import InMemorySnapshotStore, SnapshotStore, TournamentDatabaseManager
from .api import TournamentAPI
from .fixtures import expected_match_count, generate_fixtures, synthesize_random_teams
from .standings import compute_standings
from .transfer import dumps_export, export_state, parse_import
from .exceptions import (
    InvalidSnapshotError,
    MalformedSnapshotError,
    MatchNotFoundError,
    SnapshotError,
    TournamentError,
    ValidationFailure,
)
from .models import (
    Competitor,
    IndividualSides,
    Match,
    MatchFormat,
    RoundStatus,
    Stat,
    Team,
    TeamAssignmentMode,
    TeamSides,
    TournamentConfig,
    TournamentMode,
    TournamentState,
)

__all__ = [
    "TournamentManager",
    "TournamentDatabaseManager",
    "InMemorySnapshotStore",
    "SnapshotStore",
    "TournamentAPI",
    "expected_match_count",
    "generate_fixtures",
    "synthesize_random_teams",
    "compute_standings",
    "dumps_export",
    "export_state",
    "parse_import",
    "TournamentError",
    "ValidationFailure",
    "MatchNotFoundError",
    "SnapshotError",
    "InvalidSnapshotError",
    "MalformedSnapshotError",
    "Competitor",
    "IndividualSides",
    "Match",
    "MatchFormat",
    "RoundStatus",
    "Stat",
    "Team",
    "TeamAssignmentMode",
    "TeamSides",
    "TournamentConfig",
    "TournamentMode",
    "TournamentState",
]
