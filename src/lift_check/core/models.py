"""
Data models for lift-check.

Read-only snapshot of a training program as the validator sees it:
program -> weeks -> days -> workout template -> template exercises -> exercise.
Enum tags are plain str/int enums so program files can spell them as
lower-case strings ("quads", "strength") or weekday ordinals (1 = Monday).
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .config import DEFAULT_THRESHOLDS, RuleThresholds


class ExperienceLevel(str, Enum):
    """Lifter experience tiers."""

    BEGINNER = "beginner"          # 0-6 months
    NOVICE = "novice"              # 6-18 months
    INTERMEDIATE = "intermediate"  # 1.5-3 years
    ADVANCED = "advanced"          # 3-5 years
    ELITE = "elite"                # 5+ years

    @property
    def label(self) -> str:
        return self.value.title()


class ExerciseCategory(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    POWER = "power"
    REHABILITATION = "rehabilitation"
    WARMUP = "warmup"
    COOLDOWN = "cooldown"


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    FULL_BODY = "full_body"
    TRAPS = "traps"
    LATS = "lats"

    @property
    def label(self) -> str:
        """Display name, e.g. "Full Body"."""
        return self.value.replace("_", " ").title()


class Equipment(str, Enum):
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    BODYWEIGHT = "bodyweight"
    KETTLEBELL = "kettlebell"
    BANDS = "bands"
    TRX = "trx"
    NONE = "none"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ELITE = "elite"


class DayOfWeek(IntEnum):
    """Weekday tag. The ordinal drives day sorting and recovery gaps."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def label(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Exercise:
    """
    Exercise library entry.

    Only ``primary_muscles``, ``is_compound`` and ``category`` are read by
    the validation rules; secondary muscles are informational.
    """

    name: str
    category: ExerciseCategory
    primary_muscles: list[MuscleGroup] = field(default_factory=list)
    secondary_muscles: list[MuscleGroup] = field(default_factory=list)
    is_compound: bool = False
    equipment: Equipment = Equipment.NONE
    difficulty: Difficulty = Difficulty.BEGINNER
    description: str = ""

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.name or not self.name.strip():
            raise ValueError("Exercise name must be non-empty")

    def is_high_cns_demand(self) -> bool:
        """Heavy compounds, Olympic lifts and plyometrics: compound Strength/Power work."""
        return self.is_compound and self.category in (
            ExerciseCategory.STRENGTH,
            ExerciseCategory.POWER,
        )

    def primary_muscles_display(self) -> str:
        return ", ".join(m.label for m in self.primary_muscles)


@dataclass(frozen=True)
class TemplateExercise:
    """
    One prescribed exercise inside a workout template.

    ``exercise`` may be None when the snapshot was built from partial data;
    such entries contribute nothing to volume, CNS or recovery accounting.
    """

    exercise: Exercise | None
    set_count: int
    min_reps: int = 8
    max_reps: int = 12
    rest_seconds: int = 120
    order_index: int = 0
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate prescription data."""
        if self.set_count < 0:
            raise ValueError("set_count must be non-negative")
        if self.min_reps < 0:
            raise ValueError("min_reps must be non-negative")
        if self.max_reps < 0:
            raise ValueError("max_reps must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")

    def rep_range_display(self) -> str:
        """Rep range as "8-12"."""
        return f"{self.min_reps}-{self.max_reps}"

    def is_rep_range_valid(self) -> bool:
        return self.min_reps > 0 and self.max_reps >= self.min_reps


@dataclass(frozen=True)
class WorkoutTemplate:
    """A named bundle of template exercises, reusable across days and weeks."""

    name: str
    exercises: list[TemplateExercise] = field(default_factory=list)
    description: str = ""
    tags: list[str] = field(default_factory=list)

    def total_set_count(self) -> int:
        return sum(te.set_count for te in self.exercises or [])

    def targeted_muscles(self) -> list[MuscleGroup]:
        """Distinct primary muscles of the template, in first-seen order."""
        seen: list[MuscleGroup] = []
        for te in self.exercises or []:
            if te.exercise is None:
                continue
            for muscle in te.exercise.primary_muscles:
                if muscle not in seen:
                    seen.append(muscle)
        return seen


@dataclass(frozen=True)
class ProgramDay:
    """A single weekday slot: either a rest day or a workout template."""

    day_of_week: DayOfWeek
    rest_day: bool = False
    template: WorkoutTemplate | None = None
    focus: str | None = None

    def is_training_session(self) -> bool:
        """True for a non-rest day that actually carries a template."""
        return not self.rest_day and self.template is not None


@dataclass(frozen=True)
class ProgramWeek:
    """
    One week of a program.

    ``volume_multiplier`` is relative to a 1.0 baseline; deload weeks are
    expected to sit at 40-65% of normal volume.
    """

    week_number: int
    days: list[ProgramDay] = field(default_factory=list)
    deload_week: bool = False
    volume_multiplier: float = 1.0

    def __post_init__(self) -> None:
        if self.week_number < 1:
            raise ValueError("week_number must be positive (1-indexed)")
        if self.volume_multiplier < 0:
            raise ValueError("volume_multiplier must be non-negative")

    def training_day_count(self) -> int:
        """Number of non-rest days, with or without a template attached."""
        return sum(1 for d in self.days if not d.rest_day)

    def is_volume_multiplier_valid(self, thresholds: RuleThresholds = DEFAULT_THRESHOLDS) -> bool:
        """Deload weeks: 0.40-0.65. Normal weeks: 0.70-1.30 (bands from ``thresholds``)."""
        if self.deload_week:
            lo, hi = thresholds.deload_multiplier_min, thresholds.deload_multiplier_max
        else:
            lo, hi = thresholds.normal_multiplier_min, thresholds.normal_multiplier_max
        return lo <= self.volume_multiplier <= hi

    def sorted_days(self) -> list[ProgramDay]:
        """Days in weekday order (Monday first), regardless of insertion order."""
        return sorted(self.days, key=lambda d: int(d.day_of_week))


@dataclass(frozen=True)
class TrainingProgram:
    """
    Multi-week training program.

    ``duration_weeks`` is the declared length; ``weeks`` is whatever the
    author actually supplied.  The two are not required to agree.
    """

    name: str
    duration_weeks: int
    weeks: list[ProgramWeek] = field(default_factory=list)
    goal_description: str = ""
    generated_by_ai: bool = False
    ai_reasoning: str | None = None

    def __post_init__(self) -> None:
        if self.duration_weeks < 0:
            raise ValueError("duration_weeks must be non-negative")

    def has_required_deload_week(self, thresholds: RuleThresholds = DEFAULT_THRESHOLDS) -> bool:
        """Programs shorter than 4 weeks never need a deload week."""
        if self.duration_weeks < thresholds.deload_required_min_weeks:
            return True
        return any(w.deload_week for w in self.weeks)

    def get_week(self, week_number: int) -> ProgramWeek | None:
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        return None


@dataclass(frozen=True)
class Violation:
    """A single broken rule: stable rule tag plus a human-readable message."""

    rule: str
    message: str


@dataclass
class ValidationResult:
    """
    Accumulator filled by the rule passes of one validation call.
    """

    violations: list[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.violations) == 0

    def add_violation(self, rule: str, message: str) -> None:
        self.violations.append(Violation(rule=rule, message=message))

    def rules(self) -> list[str]:
        """Rule tags in emission order (duplicates kept)."""
        return [v.rule for v in self.violations]

    def by_rule(self, rule: str) -> list[Violation]:
        return [v for v in self.violations if v.rule == rule]
