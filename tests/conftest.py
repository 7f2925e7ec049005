"""Pytest configuration and shared fixtures.

Fixtures defined here are available to all test modules without importing.
"""

import random

import pytest

from tournaments import InMemorySnapshotStore, TournamentManager
from tournaments.models import Competitor


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def competitors() -> list[Competitor]:
    """Provide six competitors in registration order."""
    return [
        Competitor(id=f"p{i}", display_name=f"Nick{i}", full_name=f"Player {i}")
        for i in range(1, 7)
    ]


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so team pairing is reproducible."""
    return random.Random(1234)


@pytest.fixture
def store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def manager(store: InMemorySnapshotStore) -> TournamentManager:
    """Manager backed by an in-memory store."""
    return TournamentManager(store=store)


@pytest.fixture
def four_player_manager(manager: TournamentManager) -> TournamentManager:
    """Manager with four registered competitors."""
    for name in ("Ana", "Bruno", "Carla", "Davi"):
        manager.add_competitor(name, f"{name} Silva")
    return manager


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
