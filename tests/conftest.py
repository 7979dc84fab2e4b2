"""
Basic test fixtures for the whack-a-mole test suite.

Provides fresh schedulers, buses and engines wired on a virtual clock.
"""

import sys
import os

import numpy as np
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from whackamole.core.difficulty import DifficultyLevel
from whackamole.core.engine.game_engine import GameEngine
from whackamole.core.engine.scheduler import Scheduler
from whackamole.core.events import EventBus


class EventRecorder:
    """Universal bus subscriber that keeps every event in order."""

    def __init__(self, event_bus: EventBus):
        self.events = []
        event_bus.subscribe_all(self)

    def __call__(self, event):
        self.events.append(event)

    def kinds(self) -> list[str]:
        return [event.event_type.value for event in self.events]

    def of_kind(self, kind: str) -> list:
        return [event for event in self.events if event.event_type.value == kind]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def scheduler():
    """Create a fresh scheduler at time zero."""
    return Scheduler()


@pytest.fixture
def event_bus():
    """Create an event bus for testing."""
    return EventBus(enable_debug_logging=False)


@pytest.fixture
def engine(scheduler, event_bus):
    """Create a 4x4 medium-difficulty engine with a seeded random source."""
    return GameEngine(
        grid_size=4,
        difficulty=DifficultyLevel.MEDIUM,
        scheduler=scheduler,
        event_bus=event_bus,
        rng=np.random.default_rng(1234),
    )


@pytest.fixture
def recorder(event_bus):
    """Record every event published on the bus."""
    return EventRecorder(event_bus)
