"""
Configuration loader for game settings.

This module handles loading and validating the YAML file that sets the board
size, session length, starting difficulty and per-level profile overrides.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import numpy as np
import yaml

from .difficulty import (
    DEFAULT_PROFILES,
    DifficultyLevel,
    DifficultyProfile,
    to_difficulty_level,
)


DEFAULT_CONFIG_PATH = "assets/config/game.yaml"


@dataclass
class GameConfig:
    """Settings used to build a game engine."""
    grid_size: int = 4
    session_seconds: int = 60
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    spawn_on_resume: bool = True
    seed: Optional[int] = None
    profiles: dict[DifficultyLevel, DifficultyProfile] = field(
        default_factory=lambda: dict(DEFAULT_PROFILES)
    )

    def create_engine(self, **kwargs):
        """Build a :class:`GameEngine` from these settings.

        Keyword arguments are passed through to the engine and take precedence.
        """
        from .engine.game_engine import GameEngine

        options: dict[str, Any] = {
            'grid_size': self.grid_size,
            'difficulty': self.difficulty,
            'session_seconds': self.session_seconds,
            'profiles': self.profiles,
            'spawn_on_resume': self.spawn_on_resume,
            'rng': np.random.default_rng(self.seed),
        }
        options.update(kwargs)
        return GameEngine(**options)


class GameConfigLoader:
    """Loads game settings from a YAML file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self._raw: dict[str, Any] = {}

    def resolve_path(self) -> Path:
        # Relative paths are relative to the project root
        if os.path.isabs(self.config_path):
            return Path(self.config_path)
        project_root = Path(__file__).parent.parent.parent
        return project_root / self.config_path

    def load_config(self) -> GameConfig:
        """Load settings from the YAML file.

        A missing file yields the default settings.

        Raises:
            ValueError: if the file cannot be parsed or holds invalid values
        """
        config_file = self.resolve_path()
        if not config_file.exists():
            print(f"Warning: Game config file not found: {config_file}, using defaults")
            return GameConfig()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self._raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse game config {config_file}: {e}")

        return self.parse(self._raw)

    @staticmethod
    def parse(data: dict[str, Any]) -> GameConfig:
        """Build a :class:`GameConfig` from already-parsed YAML data."""
        if not isinstance(data, dict):
            raise ValueError("Game config must be a mapping")

        game_section = _section(data, 'game')
        config = GameConfig()

        config.grid_size = _positive_int(game_section, 'grid_size', config.grid_size)
        config.session_seconds = _positive_int(game_section, 'session_seconds', config.session_seconds)
        spawn_on_resume = game_section.get('spawn_on_resume', config.spawn_on_resume)
        if not isinstance(spawn_on_resume, bool):
            raise ValueError(f"game.spawn_on_resume must be true or false, got {spawn_on_resume!r}")
        config.spawn_on_resume = spawn_on_resume

        seed = game_section.get('seed')
        if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
            raise ValueError(f"game.seed must be an integer, got {seed!r}")
        config.seed = seed

        difficulty = game_section.get('difficulty', config.difficulty.value)
        try:
            config.difficulty = to_difficulty_level(difficulty)
        except ValueError:
            raise ValueError(f"game.difficulty: unknown difficulty '{difficulty}'")

        overrides = _section(data, 'difficulties')
        for level_name, level_overrides in overrides.items():
            try:
                level = to_difficulty_level(level_name)
            except ValueError:
                raise ValueError(f"difficulties: unknown difficulty '{level_name}'")
            if not level_overrides:
                continue
            if not isinstance(level_overrides, dict):
                raise ValueError(f"difficulties.{level_name} must be a mapping, got {level_overrides!r}")
            config.profiles[level] = config.profiles[level].with_overrides(level_overrides)

        return config


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{key} must be a mapping, got {section!r}")
    return section


def _positive_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"game.{key} must be a positive integer, got {value!r}")
    return value


def load_game_config(config_path: Optional[str] = None) -> GameConfig:
    """Convenience wrapper around :class:`GameConfigLoader`."""
    return GameConfigLoader(config_path).load_config()
