from __future__ import annotations

from typing import Any, Dict, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from ghostmatch.components.resolution_step import ResolutionStep
from ghostmatch.constants import LARGE_MATCH_MULTIPLIER, POINTS_PER_CELL
from ghostmatch.errors import config_errors


class ScoringConfig(BaseModel):
    """Score weights consulted by the score tally.

    By default a step is worth ``points_per_cell`` per cleared cell, times
    ``large_match_multiplier`` when the step cleared at least
    ``large_match_min`` cells. With ``large_match_rule="line"`` the bonus
    needs a single straight run of that length instead. ``size_points`` maps
    a cleared-cell count to a flat value and wins over the per-cell rule when
    the count is listed.
    """

    model_config = ConfigDict(extra="forbid")

    points_per_cell: StrictInt = Field(default=POINTS_PER_CELL, ge=0, description="Points per cleared cell")
    large_match_multiplier: StrictInt = Field(
        default=LARGE_MATCH_MULTIPLIER, ge=1, description="Multiplier applied to large matches"
    )
    large_match_rule: Literal["cleared", "line"] = Field(
        default="cleared", description="What makes a step large: cleared-cell count or one long line"
    )
    size_points: Dict[int, StrictInt] = Field(
        default_factory=dict, description="Flat score per cleared-cell count"
    )

    def __init__(self, **data: Any) -> None:
        with config_errors("scoring configuration"):
            super().__init__(**data)

    @field_validator("size_points")
    @classmethod
    def check_sizes(cls, value: Dict[int, int]) -> Dict[int, int]:
        bad = sorted(size for size in value if size < 1)
        if bad:
            raise ValueError(f"size_points keys must be positive cell counts, got {bad}")
        return value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoringConfig":
        with config_errors("scoring configuration"):
            return cls.model_validate(data)

    def score_for(self, step: ResolutionStep) -> int:
        if step.cleared_count in self.size_points:
            return self.size_points[step.cleared_count]
        base = step.cleared_count * self.points_per_cell
        large = step.has_long_line if self.large_match_rule == "line" else step.is_large_match
        if large:
            base *= self.large_match_multiplier
        return base
