"""Configuration settings and data models."""

import json
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from tournaments.models import (
    MatchFormat,
    TeamAssignmentMode,
    TournamentConfig,
    TournamentMode,
)


class StorageConfig(BaseModel):
    """Where the tournament snapshot is persisted."""

    db_path: str = Field(default="tournament.db", description="SQLite database file")
    snapshot_key: str = Field(
        default="tournament-state", description="Key the snapshot is stored under"
    )


class TournamentDefaults(BaseModel):
    """Settings a fresh or reset tournament starts with."""

    round_count: int = Field(default=1, description="Full round-robin cycles")
    mode: TournamentMode = Field(default=TournamentMode.INDIVIDUAL)
    team_assignment_mode: TeamAssignmentMode = Field(
        default=TeamAssignmentMode.RANDOM
    )
    match_format: MatchFormat = Field(default=MatchFormat.ROUND_TRIP)

    @field_validator("round_count")
    @classmethod
    def validate_round_count(cls, v):
        if v < 1:
            raise ValueError("round_count must be at least 1")
        return v

    def to_tournament_config(self) -> TournamentConfig:
        return TournamentConfig(
            round_count=self.round_count,
            mode=self.mode,
            team_assignment_mode=self.team_assignment_mode,
            match_format=self.match_format,
        )


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    export_version: str = Field(
        default="1.0", description="Version tag written into export files"
    )


class AppConfig(BaseModel):
    """Complete application configuration."""

    storage: StorageConfig
    defaults: TournamentDefaults
    system: SystemConfig

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        # Validate required sections
        required_sections = ["storage", "defaults", "system"]
        missing_sections = [
            section for section in required_sections if section not in data
        ]
        if missing_sections:
            raise ValueError(f"Missing required config sections: {missing_sections}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json", exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
            )


def get_default_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from tournament_config.json, creating it if needed."""
    config_path = config_path or Path("tournament_config.json")
    if not config_path.exists():
        template_config = get_template_config()
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(template_config.model_dump(mode="json"), f, indent=2)
    return AppConfig.load_from_file(config_path)


def get_template_config() -> AppConfig:
    """Get template configuration for config file generation."""
    return AppConfig(
        storage=StorageConfig(
            db_path="tournament.db",
            snapshot_key="tournament-state",
        ),
        defaults=TournamentDefaults(
            round_count=1,
            mode=TournamentMode.INDIVIDUAL,
            team_assignment_mode=TeamAssignmentMode.RANDOM,
            match_format=MatchFormat.ROUND_TRIP,
        ),
        system=SystemConfig(
            log_level="INFO",
            export_version="1.0",
        ),
    )
