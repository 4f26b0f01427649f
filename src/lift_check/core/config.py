"""
Configuration constants for the program validation rules.

All adjustable thresholds are centralized here.  The bundled rules.yaml
repeats these defaults so they can be overridden per user; see
core/engine/config_loader.py.
"""

from dataclasses import dataclass, field
from typing import Final

# =============================================================================
# RULE TAGS
# =============================================================================

RULE_DELOAD_REQUIRED: Final[str] = "DeloadRequired"
RULE_DELOAD_VOLUME_INVALID: Final[str] = "DeloadVolumeInvalid"
RULE_VOLUME_EXCEEDS_MRV: Final[str] = "VolumeExceedsMRV"
RULE_CNS_OVERLOAD: Final[str] = "CnsOverload"
RULE_BEGINNER_OVERTRAINING: Final[str] = "BeginnerOvertraining"
RULE_INSUFFICIENT_RECOVERY: Final[str] = "InsufficientRecovery"

ALL_RULES: Final[tuple[str, ...]] = (
    RULE_DELOAD_REQUIRED,
    RULE_DELOAD_VOLUME_INVALID,
    RULE_VOLUME_EXCEEDS_MRV,
    RULE_CNS_OVERLOAD,
    RULE_BEGINNER_OVERTRAINING,
    RULE_INSUFFICIENT_RECOVERY,
)

# =============================================================================
# DELOAD
# =============================================================================

DELOAD_REQUIRED_MIN_WEEKS: Final[int] = 4  # Programs this long need a deload week
DELOAD_MULTIPLIER_MIN: Final[float] = 0.40  # Inclusive
DELOAD_MULTIPLIER_MAX: Final[float] = 0.65  # Inclusive
NORMAL_MULTIPLIER_MIN: Final[float] = 0.70
NORMAL_MULTIPLIER_MAX: Final[float] = 1.30

# =============================================================================
# VOLUME (sets / muscle / week)
# =============================================================================

# Maximum recoverable volume per experience level
MRV_BY_LEVEL: Final[dict[str, int]] = {
    "beginner": 12,
    "novice": 12,
    "intermediate": 20,
    "advanced": 25,
    "elite": 25,
}
MRV_DEFAULT: Final[int] = 16  # Unknown or missing experience level

# =============================================================================
# CNS / FREQUENCY / RECOVERY
# =============================================================================

CNS_MAX_CONSECUTIVE_DAYS: Final[int] = 2  # Third high-CNS day in a row is a violation
BEGINNER_MAX_TRAINING_DAYS: Final[int] = 3
MIN_RECOVERY_DAYS: Final[int] = 2  # 48 h between sessions for the same muscle

# =============================================================================
# PROGRAM SHAPE (input documents)
# =============================================================================

MIN_PROGRAM_WEEKS: Final[int] = 1
MAX_PROGRAM_WEEKS: Final[int] = 52
MAX_PROGRAM_NAME_LENGTH: Final[int] = 200


@dataclass(frozen=True)
class RuleThresholds:
    """Numeric thresholds consumed by the validator."""

    deload_required_min_weeks: int = DELOAD_REQUIRED_MIN_WEEKS
    deload_multiplier_min: float = DELOAD_MULTIPLIER_MIN
    deload_multiplier_max: float = DELOAD_MULTIPLIER_MAX
    normal_multiplier_min: float = NORMAL_MULTIPLIER_MIN
    normal_multiplier_max: float = NORMAL_MULTIPLIER_MAX
    mrv_by_level: dict[str, int] = field(default_factory=lambda: dict(MRV_BY_LEVEL))
    mrv_default: int = MRV_DEFAULT
    cns_max_consecutive_days: int = CNS_MAX_CONSECUTIVE_DAYS
    beginner_max_training_days: int = BEGINNER_MAX_TRAINING_DAYS
    min_recovery_days: int = MIN_RECOVERY_DAYS

    def mrv_for(self, level) -> int:
        """
        Return the MRV tier for an experience level.

        Args:
            level: ExperienceLevel, level string, or None

        Returns:
            Sets per muscle per week; ``mrv_default`` for anything unrecognized
        """
        if level is None:
            return self.mrv_default
        key = getattr(level, "value", level)
        if not isinstance(key, str):
            return self.mrv_default
        return self.mrv_by_level.get(key.lower(), self.mrv_default)


DEFAULT_THRESHOLDS: Final[RuleThresholds] = RuleThresholds()
