"""Difficulty levels and their immutable parameter profiles.

Each level maps to exactly one :class:`DifficultyProfile`. Harder levels spawn
faster, keep moles up for less time, award more points per hit and allow more
moles on the board at once.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional, Union


class DifficultyLevel(Enum):
    """Named difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    """Parameters governing spawn timing, mole lifetime and scoring."""
    name: str
    spawn_interval_ms: int
    mole_lifetime_ms: int
    points_per_hit: int
    max_concurrent_moles: int

    def __post_init__(self):
        for field_name in ("spawn_interval_ms", "mole_lifetime_ms",
                           "points_per_hit", "max_concurrent_moles"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(
                    f"{self.name}: {field_name} must be a positive integer, got {value!r}"
                )

    def with_overrides(self, overrides: Mapping[str, Any]) -> DifficultyProfile:
        """Return a copy with the given fields replaced."""
        unknown = set(overrides) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown difficulty fields: {', '.join(sorted(unknown))}")
        return replace(self, **dict(overrides))


PROFILE_FIELDS = frozenset({
    "spawn_interval_ms",
    "mole_lifetime_ms",
    "points_per_hit",
    "max_concurrent_moles",
})


DEFAULT_PROFILES: dict[DifficultyLevel, DifficultyProfile] = {
    DifficultyLevel.EASY: DifficultyProfile(
        name="Easy",
        spawn_interval_ms=1200,  # slow spawn
        mole_lifetime_ms=1500,
        points_per_hit=1,
        max_concurrent_moles=1,
    ),
    DifficultyLevel.MEDIUM: DifficultyProfile(
        name="Medium",
        spawn_interval_ms=800,
        mole_lifetime_ms=1000,
        points_per_hit=2,
        max_concurrent_moles=2,
    ),
    DifficultyLevel.HARD: DifficultyProfile(
        name="Hard",
        spawn_interval_ms=400,  # rapid spawn
        mole_lifetime_ms=800,
        points_per_hit=3,
        max_concurrent_moles=3,
    ),
}


DifficultyLike = Union[DifficultyLevel, str]


def to_difficulty_level(level: DifficultyLike) -> DifficultyLevel:
    """Coerce a level name into a :class:`DifficultyLevel`.

    Raises:
        ValueError: if ``level`` does not name a known difficulty
    """
    if isinstance(level, DifficultyLevel):
        return level
    return DifficultyLevel(level)


def get_difficulty_profile(
    level: DifficultyLike,
    profiles: Optional[Mapping[DifficultyLevel, DifficultyProfile]] = None
) -> DifficultyProfile:
    """Resolve the profile for a difficulty level.

    Args:
        level: Level enum member or its string value ("easy", "medium", "hard")
        profiles: Optional replacement profile table (e.g. from config)

    Returns:
        The immutable profile for that level
    """
    table = profiles if profiles is not None else DEFAULT_PROFILES
    return table[to_difficulty_level(level)]
