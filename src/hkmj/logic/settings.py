"""Centralized table settings for Hong Kong Mahjong - all configurable gameplay rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import Difficulty
from hkmj.logic.exceptions import UnsupportedSettingsError

MAX_FAN = 13
POINTS_FAN_CAP = 10
NUM_PLAYERS = 4
HUMAN_SEAT = 0
ROUNDS_PER_WIND = 4


class GameSettings(BaseModel):
    """
    Configuration consumed by the table.

    Defaults match a standard single-player table: medium AI, 1 fan minimum,
    24 rounds, 10000 starting points.
    """

    model_config = ConfigDict(frozen=True)

    # --- Table Rules ---
    difficulty: Difficulty = Difficulty.MEDIUM
    minimum_fan: int = 1
    max_rounds: int = 24
    starting_score: int = 10000

    # --- Cosmetic (stored, never interpreted) ---
    tile_theme: int = 0
    player_character: int = 0


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are supported by the engine.

    Raises UnsupportedSettingsError listing every offending value.
    """
    errors: list[str] = []

    if settings.minimum_fan < 1:
        errors.append(f"minimum_fan={settings.minimum_fan} must be a positive integer")

    if settings.minimum_fan > MAX_FAN:
        errors.append(f"minimum_fan={settings.minimum_fan} exceeds the {MAX_FAN}-fan limit, no hand could win")

    if settings.max_rounds < 1:
        errors.append(f"max_rounds={settings.max_rounds} must be at least 1")

    if settings.starting_score < 1:
        errors.append(f"starting_score={settings.starting_score} must be positive")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
