"""Batch simulation configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from hkmj.logic.enums import Difficulty
from hkmj.logic.rng import validate_seed_hex


class SimulationSettings(BaseSettings):
    model_config = {"env_prefix": "HKMJ_SIM_"}

    games: int = Field(default=1, ge=1)
    seed: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    minimum_fan: int = Field(default=1, ge=1)
    max_rounds: int = Field(default=24, ge=1)
    log_dir: str | None = None
    max_steps: int = Field(default=20000, ge=1)  # per match, guards against a stuck state machine

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v: str | None) -> str | None:
        if v is not None:
            validate_seed_hex(v)
        return v
