"""Engine configuration.

Level parameters (moves, target score) and board shape come from the caller;
everything defaults to the values in :mod:`ghostmatch.constants`. Invalid
values raise :class:`~ghostmatch.errors.ConfigError` at construction.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ghostmatch.components.scoring import ScoringConfig
from ghostmatch.constants import (
    BOARD_COLS,
    BOARD_ROWS,
    DEFAULT_TOKENS,
    INITIAL_MOVES,
    LARGE_MATCH_MIN,
    MATCH_MIN,
    MAX_CASCADE_DEPTH,
    MAX_GENERATE_ROUNDS,
    MAX_RESHUFFLE_ATTEMPTS,
    TARGET_SCORE,
)
from ghostmatch.errors import AlphabetError, ConfigError, config_errors
from ghostmatch.systems.board_generator import validate_board_config


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rows: StrictInt = Field(default=BOARD_ROWS, ge=1, description="Board rows")
    cols: StrictInt = Field(default=BOARD_COLS, ge=1, description="Board columns")
    tokens: List[StrictStr] = Field(
        default_factory=lambda: list(DEFAULT_TOKENS), description="Token alphabet"
    )
    spawnable: List[StrictStr] = Field(
        default_factory=list, description="Tokens drawn for fills; empty means the whole alphabet"
    )
    match_min: StrictInt = Field(default=MATCH_MIN, ge=2, description="Shortest run that clears")
    large_match_min: StrictInt = Field(default=LARGE_MATCH_MIN, ge=2, description="Cells for a large match")
    initial_moves: StrictInt = Field(default=INITIAL_MOVES, ge=1, description="Moves per game")
    target_score: StrictInt = Field(default=TARGET_SCORE, ge=0, description="Score needed to win")
    max_generate_rounds: StrictInt = Field(default=MAX_GENERATE_ROUNDS, ge=1)
    max_reshuffle_attempts: StrictInt = Field(default=MAX_RESHUFFLE_ATTEMPTS, ge=1)
    max_cascade_depth: StrictInt = Field(default=MAX_CASCADE_DEPTH, ge=1)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    def __init__(self, **data: Any) -> None:
        with config_errors():
            super().__init__(**data)

    @field_validator("tokens", "spawnable")
    @classmethod
    def check_distinct(cls, value: List[str], info: ValidationInfo) -> List[str]:
        repeated = sorted({name for name in value if value.count(name) > 1})
        if repeated:
            raise AlphabetError(f"{info.field_name} repeats tokens: {repeated}")
        return value

    @model_validator(mode="after")
    def check_playable(self) -> "EngineConfig":
        unknown = [name for name in self.spawnable if name not in self.tokens]
        if unknown:
            raise ConfigError(f"spawnable tokens not in alphabet: {unknown!r}")
        if self.large_match_min < self.match_min:
            raise ConfigError("large_match_min cannot be below match_min")
        validate_board_config(self.spawn_tokens(), self.rows, self.cols, self.match_min)
        return self

    def spawn_tokens(self) -> List[str]:
        return list(self.spawnable or self.tokens)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineConfig":
        with config_errors():
            return cls.model_validate(data)


def load_config(path: str | Path) -> EngineConfig:
    text = Path(path).read_text(encoding="utf-8")
    with config_errors(str(path)):
        return EngineConfig.model_validate_json(text)
