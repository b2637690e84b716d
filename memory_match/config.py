"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from memory_match.models.card import DEFAULT_SYMBOLS
from memory_match.models.difficulty import DEFAULT_DIFFICULTIES, Difficulty


class GameConfig(BaseModel):
    """Game configuration."""

    difficulty: str = "easy"
    seed: int | None = None  # Fixed seed for reproducible deals

    symbols: list[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    difficulties: dict[str, Difficulty] = Field(
        default_factory=lambda: dict(DEFAULT_DIFFICULTIES)
    )

    @model_validator(mode="after")
    def check_presets(self) -> "GameConfig":
        """Reject presets that cannot be dealt from the symbol alphabet."""
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError("symbols must be distinct")
        if not self.difficulties:
            raise ValueError("at least one difficulty is required")
        for key, difficulty in self.difficulties.items():
            if difficulty.pairs > len(self.symbols):
                raise ValueError(
                    f"difficulty {key!r} needs {difficulty.pairs} symbols, "
                    f"only {len(self.symbols)} available"
                )
        if self.difficulty not in self.difficulties:
            raise ValueError(f"unknown default difficulty {self.difficulty!r}")
        return self


class TimingConfig(BaseModel):
    """Delays in seconds."""

    match_delay: float = Field(default=0.5, gt=0)
    mismatch_delay: float = Field(default=1.0, gt=0)
    win_delay: float = Field(default=1.25, gt=0)  # Before the next round is dealt
    tick_interval: float = Field(default=1.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class GameLogConfig(BaseModel):
    """Configuration for the JSONL game event log."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class Config(BaseModel):
    """Root configuration."""

    game: GameConfig = GameConfig()
    timing: TimingConfig = TimingConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogConfig = GameLogConfig()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.

    Raises:
        pydantic.ValidationError: If the file describes invalid presets.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
