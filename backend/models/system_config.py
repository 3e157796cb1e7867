"""System configuration contracts.

A single versioned struct replaces scattered partial merges: defaults are
filled in once, when the config is loaded, and everything downstream reads
named fields.
"""

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


CONFIG_VERSION = 1

CoachTone = Literal["gentle", "neutral", "direct"]


class XPRules(BaseModel):
    """XP awarded by the daily scorer."""

    model_config = ConfigDict(extra="ignore")

    domain_xp: Dict[str, int] = Field(
        default_factory=lambda: {"health": 1, "faith": 1, "career": 1}
    )
    default_domain_xp: int = Field(default=1, ge=0)
    perfect_day_bonus: int = Field(default=1, ge=0)
    xp_per_level: int = Field(default=30, ge=1)

    def xp_for(self, domain_id: str) -> int:
        return max(0, self.domain_xp.get(domain_id, self.default_domain_xp))


class CoachSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tone: CoachTone = "neutral"
    tip_rotation_hours: int = Field(default=1, ge=1)
    enable_tips: bool = True


class FeatureFlags(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dynamic_domains: bool = True
    reflections: bool = True
    streak_display: bool = True
    perfect_day_confetti: bool = True


class SystemConfig(BaseModel):
    """Versioned system configuration. Unknown keys are ignored on load."""

    model_config = ConfigDict(extra="ignore")

    version: int = CONFIG_VERSION
    xp_rules: XPRules = Field(default_factory=XPRules)
    coach: CoachSettings = Field(default_factory=CoachSettings)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
