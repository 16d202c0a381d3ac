"""Every percentage, multiplier and duration the heal resolver uses."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealTuning(BaseModel):
    """Balance surface. Percentages are percent of max health, durations in ms."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Base percent of max health a targeted heal restores
    base_heal_percent: float = Field(default=30, ge=0)
    # Multiplicative penalty, in percent, per additional party member
    heal_percent_reduction_per_target: float = Field(default=5, ge=0, lt=100)
    overheal_decay_interval_ms: int = Field(default=1000, gt=0)
    overheal_decay_factor: float = Field(default=0.5, ge=0, lt=1)

    red_target_multiplier: float = Field(default=1.0, ge=0)
    red_target_cooldown_ms: int = Field(default=500, ge=0)
    red_party_multiplier: float = Field(default=1.0, ge=0)
    red_party_cooldown_ms: int = Field(default=1000, ge=0)

    tricolor_status_effect_cooldown_ms: int = Field(default=500, ge=0)
    tricolor_target_multiplier: float = Field(default=1.0, ge=0)
    tricolor_target_cooldown_ms: int = Field(default=1000, ge=0)
    tricolor_party_multiplier: float = Field(default=1.0, ge=0)
    tricolor_party_cooldown_ms: int = Field(default=1500, ge=0)

    color_status_effect_cooldown_ms: int = Field(default=250, ge=0)
    color_target_cooldown_ms: int = Field(default=500, ge=0)
    color_party_cooldown_ms: int = Field(default=1000, ge=0)
    # Any failed status-effect heal (wrong color, nothing of that color found)
    wrong_color_cooldown_ms: int = Field(default=250, ge=0)

    @property
    def red_target_percent(self) -> float:
        return self.base_heal_percent * self.red_target_multiplier

    @property
    def red_party_percent(self) -> float:
        return self.base_heal_percent * self.red_party_multiplier

    @property
    def tricolor_target_percent(self) -> float:
        return self.base_heal_percent * self.tricolor_target_multiplier

    @property
    def tricolor_party_percent(self) -> float:
        return self.base_heal_percent * self.tricolor_party_multiplier


def load_tuning(config: dict[str, Any]) -> HealTuning:
    """Build tuning from the ``[tuning]`` table. Raises pydantic.ValidationError."""
    return HealTuning(**config)
