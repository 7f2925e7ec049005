"""Portable JSON export and import of tournament data."""

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .exceptions import InvalidSnapshotError, MalformedSnapshotError
from .models import TournamentConfig, TournamentState

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


def export_state(
    state: TournamentState,
    version: str = EXPORT_VERSION,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the export document for a tournament state."""
    return {
        "participants": [p.model_dump(mode="json") for p in state.participants],
        "config": state.config.model_dump(mode="json"),
        "export_date": (exported_at or datetime.now()).isoformat(),
        "version": version,
    }


def dumps_export(
    state: TournamentState,
    version: str = EXPORT_VERSION,
    exported_at: datetime | None = None,
) -> str:
    return json.dumps(export_state(state, version, exported_at), indent=2)


def export_filename(exported_at: datetime | None = None) -> str:
    return f"tournament_export_{(exported_at or datetime.now()).date().isoformat()}.json"


def parse_import(content: str | bytes) -> TournamentState:
    """Parse an export document back into a tournament state.

    Raises:
        MalformedSnapshotError: The content is not valid JSON
        InvalidSnapshotError: The JSON lacks the participants/config sections
            or they do not describe a tournament
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected import, content is not JSON: {e}")
        raise MalformedSnapshotError(
            "Could not read the file. Check that it is valid JSON."
        ) from e

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("participants"), list)
        or not isinstance(data.get("config"), dict)
    ):
        raise InvalidSnapshotError("Invalid file: format not recognized")

    try:
        state = TournamentState(
            participants=data["participants"],
            config=TournamentConfig.model_validate(data["config"]),
        )
    except ValidationError as e:
        logger.warning(f"Rejected import, snapshot failed validation: {e}")
        raise InvalidSnapshotError("Invalid file: format not recognized") from e

    logger.info(
        f"Parsed import (version {data.get('version', 'unknown')}): "
        f"{len(state.participants)} participants, "
        f"{len(state.config.matches)} matches"
    )
    return state
