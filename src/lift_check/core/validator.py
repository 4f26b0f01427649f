"""
Program validation rules.

Checks a training program against exercise-science constraints:

1. Deload requirement   - long programs need a recovery week at 40-65% volume
2. Volume limits        - weekly sets per primary muscle must stay under MRV
3. CNS load             - no more than 2 consecutive high-CNS-demand days
4. Beginner constraints - beginners train at most 3 days per week
5. Recovery windows     - 48 h between sessions hitting the same muscle

Every rule is a plain function that reads the program and appends to a
shared ValidationResult.  Nothing here mutates the program or does I/O.
Incomplete nested data (rest days without templates, templates without
exercises, entries whose exercise is missing) contributes nothing and is
never an error.
"""

from .config import (
    DEFAULT_THRESHOLDS,
    RULE_BEGINNER_OVERTRAINING,
    RULE_CNS_OVERLOAD,
    RULE_DELOAD_REQUIRED,
    RULE_DELOAD_VOLUME_INVALID,
    RULE_INSUFFICIENT_RECOVERY,
    RULE_VOLUME_EXCEEDS_MRV,
    RuleThresholds,
)
from .models import (
    DayOfWeek,
    ExperienceLevel,
    MuscleGroup,
    ProgramWeek,
    TrainingProgram,
    ValidationResult,
)


def coerce_level(level) -> ExperienceLevel | None:
    """
    Normalise an experience level argument.

    Accepts an ExperienceLevel, a case-insensitive level name, or None.
    Anything unrecognized becomes None, which every rule treats as the
    default branch.
    """
    if isinstance(level, ExperienceLevel):
        return level
    if isinstance(level, str):
        try:
            return ExperienceLevel(level.strip().lower())
        except ValueError:
            return None
    return None


def weekly_muscle_volume(week: ProgramWeek) -> dict[MuscleGroup, int]:
    """
    Sum working sets per primary muscle across the training days of a week.

    An exercise with several primary muscles credits its full set count to
    each of them.

    Args:
        week: Week to total

    Returns:
        {muscle: sets}, in first-seen order
    """
    volume: dict[MuscleGroup, int] = {}
    for day in week.days or []:
        if not day.is_training_session():
            continue
        for te in day.template.exercises or []:
            if te.exercise is None:
                continue
            for muscle in te.exercise.primary_muscles:
                volume[muscle] = volume.get(muscle, 0) + te.set_count
    return volume


def muscle_schedule(week: ProgramWeek) -> dict[MuscleGroup, list[DayOfWeek]]:
    """Map each primary muscle to the weekdays it is trained on (one entry per session)."""
    schedule: dict[MuscleGroup, list[DayOfWeek]] = {}
    for day in week.days or []:
        if not day.is_training_session():
            continue
        for muscle in day.template.targeted_muscles():
            schedule.setdefault(muscle, []).append(day.day_of_week)
    return schedule


# =============================================================================
# RULE PASSES
# =============================================================================


def check_deload_requirement(
    program: TrainingProgram,
    result: ValidationResult,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    """
    Programs of 4+ weeks must include a deload week; every deload week must
    sit inside the allowed volume multiplier band.
    """
    weeks = program.weeks or []
    lo = thresholds.deload_multiplier_min
    hi = thresholds.deload_multiplier_max

    if not program.has_required_deload_week(thresholds):
        result.add_violation(
            RULE_DELOAD_REQUIRED,
            f"Programs of {program.duration_weeks} weeks must include at least one "
            "deload week (50-60% volume reduction). No deload week found.",
        )

    for week in weeks:
        if not week.deload_week:
            continue
        if not week.is_volume_multiplier_valid(thresholds):
            result.add_violation(
                RULE_DELOAD_VOLUME_INVALID,
                f"Week {week.week_number} is marked as deload but has volume multiplier "
                f"{week.volume_multiplier:.0%}. Deload weeks should be "
                f"{lo:.0%}-{hi:.0%} of normal volume.",
            )


def check_volume_limits(
    program: TrainingProgram,
    level,
    result: ValidationResult,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    """
    Weekly sets per primary muscle must not exceed MRV for the level.

    Deload weeks are skipped.
    """
    level = coerce_level(level)
    mrv = thresholds.mrv_for(level)
    level_label = level.label if level is not None else "unspecified"

    for week in program.weeks or []:
        if week.deload_week:
            continue
        for muscle, sets in weekly_muscle_volume(week).items():
            if sets > mrv:
                result.add_violation(
                    RULE_VOLUME_EXCEEDS_MRV,
                    f"Week {week.week_number}: {muscle.label} has {sets} sets, "
                    f"exceeding MRV of {mrv} for {level_label} level.",
                )


def check_cns_load(
    program: TrainingProgram,
    result: ValidationResult,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    """
    No more than N consecutive days of high-CNS-demand training.

    Days are scanned Monday to Sunday.  A rest day or a day without a
    template resets the streak.  Once the streak passes the limit, every
    further day of the streak adds another violation.
    """
    limit = thresholds.cns_max_consecutive_days

    for week in program.weeks or []:
        streak = 0
        for day in week.sorted_days():
            if not day.is_training_session():
                streak = 0
                continue

            high_cns = any(
                te.exercise is not None and te.exercise.is_high_cns_demand()
                for te in day.template.exercises or []
            )
            if not high_cns:
                streak = 0
                continue

            streak += 1
            if streak > limit:
                result.add_violation(
                    RULE_CNS_OVERLOAD,
                    f"Week {week.week_number}: More than {limit} consecutive days of "
                    "high-CNS-demand training. Add a rest or low-intensity day "
                    "between heavy sessions.",
                )


def check_beginner_constraints(
    program: TrainingProgram,
    level,
    result: ValidationResult,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    """Beginners: at most 3 training days in every non-deload week."""
    if coerce_level(level) is not ExperienceLevel.BEGINNER:
        return

    limit = thresholds.beginner_max_training_days
    for week in program.weeks or []:
        if week.deload_week:
            continue
        training_days = week.training_day_count()
        if training_days > limit:
            result.add_violation(
                RULE_BEGINNER_OVERTRAINING,
                f"Week {week.week_number}: Beginners should have max {limit} training "
                f"sessions per week (found {training_days}). Prioritize motor "
                "learning over split training.",
            )


def check_recovery_windows(
    program: TrainingProgram,
    result: ValidationResult,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    """
    Minimum spacing between sessions that train the same primary muscle.

    Applies to deload weeks too.  Two hits on the same weekday (gap 0) are
    not flagged.
    """
    min_gap = thresholds.min_recovery_days
    hours = min_gap * 24

    for week in program.weeks or []:
        for muscle, days in muscle_schedule(week).items():
            ordered = sorted(days, key=int)
            for prev, cur in zip(ordered, ordered[1:]):
                gap = int(cur) - int(prev)
                if 0 < gap < min_gap:
                    result.add_violation(
                        RULE_INSUFFICIENT_RECOVERY,
                        f"Week {week.week_number}: {muscle.label} is trained on "
                        f"consecutive days ({prev.label} and {cur.label}). "
                        f"Minimum {hours}-hour recovery recommended.",
                    )


# =============================================================================
# ORCHESTRATION
# =============================================================================


class ProgramValidator:
    """
    Runs every rule pass over a program, in a fixed order.

    Stateless apart from the thresholds, so one instance can be shared
    between threads.
    """

    def __init__(self, thresholds: RuleThresholds | None = None):
        self.thresholds = thresholds if thresholds is not None else DEFAULT_THRESHOLDS

    def validate(self, program: TrainingProgram, level) -> ValidationResult:
        """
        Validate a program for a lifter of the given experience level.

        Args:
            program: Program snapshot (not modified)
            level: ExperienceLevel, level name, or None

        Returns:
            ValidationResult with violations in rule order

        Raises:
            ValueError: If program is None
        """
        if program is None:
            raise ValueError("program is required")

        result = ValidationResult()
        t = self.thresholds

        check_deload_requirement(program, result, t)
        check_volume_limits(program, level, result, t)
        check_cns_load(program, result, t)
        check_beginner_constraints(program, level, result, t)
        check_recovery_windows(program, result, t)

        return result


def validate_program(
    program: TrainingProgram,
    level,
    thresholds: RuleThresholds | None = None,
) -> ValidationResult:
    """Shortcut for ``ProgramValidator(thresholds).validate(program, level)``."""
    return ProgramValidator(thresholds).validate(program, level)
