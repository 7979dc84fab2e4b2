"""
Unit tests for difficulty levels and profiles.
"""
import pytest

from whackamole.core.difficulty import (
    DEFAULT_PROFILES,
    DifficultyLevel,
    DifficultyProfile,
    get_difficulty_profile,
    to_difficulty_level,
)


class TestDifficultyLevel:
    """Test the DifficultyLevel enumeration."""

    def test_level_values(self):
        assert [level.value for level in DifficultyLevel] == ["easy", "medium", "hard"]

    @pytest.mark.parametrize("name", ["easy", "medium", "hard"])
    def test_coerce_from_string(self, name: str):
        assert to_difficulty_level(name) is DifficultyLevel(name)

    def test_coerce_passes_enum_through(self):
        assert to_difficulty_level(DifficultyLevel.HARD) is DifficultyLevel.HARD

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError):
            to_difficulty_level("nightmare")


class TestDifficultyProfile:
    """Test profile values and invariants."""

    def test_medium_profile(self):
        profile = get_difficulty_profile("medium")

        assert profile.spawn_interval_ms == 800
        assert profile.mole_lifetime_ms == 1000
        assert profile.points_per_hit == 2
        assert profile.max_concurrent_moles == 2

    def test_easy_and_hard_profiles(self):
        easy = get_difficulty_profile(DifficultyLevel.EASY)
        hard = get_difficulty_profile(DifficultyLevel.HARD)

        assert (easy.spawn_interval_ms, easy.mole_lifetime_ms, easy.points_per_hit, easy.max_concurrent_moles) == (1200, 1500, 1, 1)
        assert (hard.spawn_interval_ms, hard.mole_lifetime_ms, hard.points_per_hit, hard.max_concurrent_moles) == (400, 800, 3, 3)

    def test_difficulty_and_reward_scale_together(self):
        easy, medium, hard = (DEFAULT_PROFILES[level] for level in DifficultyLevel)

        assert easy.spawn_interval_ms > medium.spawn_interval_ms > hard.spawn_interval_ms
        assert easy.mole_lifetime_ms > medium.mole_lifetime_ms > hard.mole_lifetime_ms
        assert easy.points_per_hit < medium.points_per_hit < hard.points_per_hit
        assert easy.max_concurrent_moles < medium.max_concurrent_moles < hard.max_concurrent_moles

    def test_profile_is_frozen(self):
        profile = get_difficulty_profile("easy")

        with pytest.raises((AttributeError, Exception)):
            profile.points_per_hit = 10  # type: ignore[misc]

    @pytest.mark.parametrize("field_name", [
        "spawn_interval_ms", "mole_lifetime_ms", "points_per_hit", "max_concurrent_moles"
    ])
    def test_non_positive_values_rejected(self, field_name: str):
        values = dict(spawn_interval_ms=100, mole_lifetime_ms=100,
                      points_per_hit=1, max_concurrent_moles=1)
        values[field_name] = 0

        with pytest.raises(ValueError, match=field_name):
            DifficultyProfile(name="Broken", **values)

    def test_with_overrides(self):
        base = get_difficulty_profile("hard")
        faster = base.with_overrides({"spawn_interval_ms": 300})

        assert faster.spawn_interval_ms == 300
        assert faster.points_per_hit == base.points_per_hit
        assert base.spawn_interval_ms == 400

    def test_with_unknown_override_rejected(self):
        with pytest.raises(ValueError, match="speed"):
            get_difficulty_profile("hard").with_overrides({"speed": 3})

    def test_custom_profile_table(self):
        table = dict(DEFAULT_PROFILES)
        table[DifficultyLevel.EASY] = DifficultyProfile("Tiny", 50, 60, 7, 1)

        assert get_difficulty_profile("easy", table).points_per_hit == 7
        assert get_difficulty_profile("easy").points_per_hit == 1
