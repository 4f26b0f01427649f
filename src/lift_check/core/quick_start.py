"""
Curated quick-start program templates.

Static data, no storage dependency.  build_program() turns a template into
a full TrainingProgram snapshot (seven days per week, deload weeks placed
on a fixed cadence) that can be validated, saved, or exported.
"""

from dataclasses import dataclass, field

from .config import MAX_PROGRAM_WEEKS, MIN_PROGRAM_WEEKS
from .exercises.registry import get_exercise
from .models import (
    DayOfWeek,
    ExperienceLevel,
    ProgramDay,
    ProgramWeek,
    TemplateExercise,
    TrainingProgram,
    WorkoutTemplate,
)


@dataclass(frozen=True)
class TemplateDay:
    """One training day of a quick-start template."""

    focus: str
    exercise_names: list[str]


@dataclass(frozen=True)
class QuickStartTemplate:
    template_id: str
    name: str
    description: str
    min_experience_level: ExperienceLevel
    primary_goal: str
    duration_weeks: int
    split_type: str
    session_length_minutes: int
    days: list[TemplateDay] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    @property
    def days_per_week(self) -> int:
        return len(self.days)


_TEMPLATES: list[QuickStartTemplate] = [
    QuickStartTemplate(
        template_id="3day-fullbody",
        name="3-Day Full Body",
        description=(
            "Full-body sessions 3x/week. Ideal for beginners learning compound "
            "movements with adequate recovery between sessions."
        ),
        min_experience_level=ExperienceLevel.BEGINNER,
        primary_goal="general_fitness",
        duration_weeks=8,
        split_type="full_body",
        session_length_minutes=45,
        tags=["Beginner", "Full Body", "3x/week"],
        days=[
            TemplateDay("Full Body", ["Barbell Back Squat", "Barbell Bench Press", "Barbell Row", "Overhead Press (Barbell)", "Romanian Deadlift"]),
            TemplateDay("Full Body", ["Leg Press", "Incline Dumbbell Press", "Pull-Up / Chin-Up", "Lateral Raise", "Leg Curl"]),
            TemplateDay("Full Body", ["Conventional Deadlift", "Dumbbell Overhead Press", "Single-Arm Dumbbell Row", "Leg Extension", "Plank"]),
        ],
    ),
    QuickStartTemplate(
        template_id="ppl-hypertrophy",
        name="Push / Pull / Legs",
        description=(
            "Classic 6-day PPL split targeting each muscle group twice per week. "
            "High volume for hypertrophy-focused intermediate lifters."
        ),
        min_experience_level=ExperienceLevel.INTERMEDIATE,
        primary_goal="muscle_hypertrophy",
        duration_weeks=8,
        split_type="ppl",
        session_length_minutes=60,
        tags=["Intermediate", "Hypertrophy", "6x/week"],
        days=[
            TemplateDay("Push", ["Barbell Bench Press", "Incline Dumbbell Press", "Overhead Press (Barbell)", "Lateral Raise", "Tricep Pushdown"]),
            TemplateDay("Pull", ["Lat Pulldown", "Seated Cable Row", "Single-Arm Dumbbell Row", "Barbell Curl", "Hanging Leg Raise"]),
            TemplateDay("Legs", ["Barbell Back Squat", "Romanian Deadlift", "Leg Press", "Leg Curl", "Standing Calf Raise"]),
            TemplateDay("Push", ["Dumbbell Overhead Press", "Incline Dumbbell Press", "Cable Fly", "Lateral Raise", "Skull Crusher"]),
            TemplateDay("Pull", ["Barbell Row", "Pull-Up / Chin-Up", "Lat Pulldown", "Hammer Curl", "Plank"]),
            TemplateDay("Legs", ["Leg Press", "Hip Thrust", "Walking Lunge", "Leg Extension", "Standing Calf Raise"]),
        ],
    ),
    QuickStartTemplate(
        template_id="upper-lower",
        name="Upper / Lower Split",
        description=(
            "4-day upper/lower rotation balancing strength and size. Good recovery "
            "between sessions hitting the same muscles."
        ),
        min_experience_level=ExperienceLevel.INTERMEDIATE,
        primary_goal="strength_gain",
        duration_weeks=10,
        split_type="upper_lower",
        session_length_minutes=60,
        tags=["Intermediate", "Strength + Size", "4x/week"],
        days=[
            TemplateDay("Upper", ["Barbell Bench Press", "Barbell Row", "Overhead Press (Barbell)", "Pull-Up / Chin-Up", "Lateral Raise"]),
            TemplateDay("Lower", ["Barbell Back Squat", "Romanian Deadlift", "Leg Press", "Leg Curl", "Standing Calf Raise"]),
            TemplateDay("Upper", ["Incline Dumbbell Press", "Single-Arm Dumbbell Row", "Dumbbell Overhead Press", "Face Pull", "Hammer Curl"]),
            TemplateDay("Lower", ["Romanian Deadlift", "Leg Press", "Hip Thrust", "Leg Extension", "Standing Calf Raise"]),
        ],
    ),
    QuickStartTemplate(
        template_id="531-strength",
        name="5/3/1 Strength",
        description=(
            "Wendler's 5/3/1 progression on main lifts with assistance work. "
            "Proven strength builder for intermediate to advanced lifters."
        ),
        min_experience_level=ExperienceLevel.INTERMEDIATE,
        primary_goal="strength_gain",
        duration_weeks=12,
        split_type="custom",
        session_length_minutes=75,
        tags=["Intermediate+", "Strength", "4x/week"],
        days=[
            TemplateDay("Squat Day", ["Barbell Back Squat", "Leg Press", "Leg Curl", "Plank"]),
            TemplateDay("Bench Day", ["Barbell Bench Press", "Incline Dumbbell Press", "Dip", "Tricep Pushdown"]),
            TemplateDay("Deadlift Day", ["Conventional Deadlift", "Barbell Row", "Pull-Up / Chin-Up", "Hanging Leg Raise"]),
            TemplateDay("Press Day", ["Overhead Press (Barbell)", "Lateral Raise", "Face Pull", "Barbell Curl"]),
        ],
    ),
    QuickStartTemplate(
        template_id="hypertrophy-block",
        name="Hypertrophy Block",
        description=(
            "High-volume mesocycle with progressive overload across 6 weeks. "
            "Each muscle group hit 2x/week with escalating sets."
        ),
        min_experience_level=ExperienceLevel.INTERMEDIATE,
        primary_goal="muscle_hypertrophy",
        duration_weeks=6,
        split_type="custom",
        session_length_minutes=60,
        tags=["Intermediate", "High Volume", "5x/week"],
        days=[
            TemplateDay("Push", ["Barbell Bench Press", "Incline Dumbbell Press", "Overhead Press (Barbell)", "Lateral Raise", "Tricep Pushdown"]),
            TemplateDay("Pull", ["Lat Pulldown", "Seated Cable Row", "Single-Arm Dumbbell Row", "Barbell Curl", "Hanging Leg Raise"]),
            TemplateDay("Legs", ["Barbell Back Squat", "Romanian Deadlift", "Leg Press", "Leg Curl", "Standing Calf Raise"]),
            TemplateDay("Upper", ["Dumbbell Overhead Press", "Barbell Row", "Cable Fly", "Rear Delt Fly", "Hammer Curl"]),
            TemplateDay("Lower", ["Romanian Deadlift", "Hip Thrust", "Walking Lunge", "Leg Extension", "Standing Calf Raise"]),
        ],
    ),
]


def get_all_templates() -> list[QuickStartTemplate]:
    return list(_TEMPLATES)


def get_template(template_id: str) -> QuickStartTemplate | None:
    for t in _TEMPLATES:
        if t.template_id == template_id:
            return t
    return None


def weekday_layout(days_per_week: int) -> list[DayOfWeek]:
    """
    Fixed weekday placement for N training days.

    Spreads sessions so that 3-day programs keep a rest day between every
    session:
      1-day: Mon
      2-day: Mon, Thu
      3-day: Mon, Wed, Fri
      4-day: Mon, Tue, Thu, Fri
      5-day: Mon, Tue, Wed, Fri, Sat
      6-day: Mon..Sat
      7-day: every day

    Raises:
        ValueError: If days_per_week is outside 1..7
    """
    d = DayOfWeek
    layouts = {
        1: [d.MONDAY],
        2: [d.MONDAY, d.THURSDAY],
        3: [d.MONDAY, d.WEDNESDAY, d.FRIDAY],
        4: [d.MONDAY, d.TUESDAY, d.THURSDAY, d.FRIDAY],
        5: [d.MONDAY, d.TUESDAY, d.WEDNESDAY, d.FRIDAY, d.SATURDAY],
        6: [d.MONDAY, d.TUESDAY, d.WEDNESDAY, d.THURSDAY, d.FRIDAY, d.SATURDAY],
        7: list(d),
    }
    if days_per_week not in layouts:
        raise ValueError(f"days_per_week must be between 1 and 7, got {days_per_week}")
    return layouts[days_per_week]


def _build_workout(
    template: QuickStartTemplate,
    index: int,
    day: TemplateDay,
    set_count: int,
    suffix: str = "",
) -> WorkoutTemplate:
    exercises = [
        TemplateExercise(exercise=get_exercise(name), set_count=set_count, order_index=i)
        for i, name in enumerate(day.exercise_names)
    ]
    return WorkoutTemplate(
        name=f"{template.name} - Day {index + 1} ({day.focus}){suffix}",
        exercises=exercises,
        tags=list(template.tags),
    )


def build_program(
    template: QuickStartTemplate,
    duration_weeks: int | None = None,
    set_count: int = 3,
    deload_every: int = 4,
    deload_multiplier: float = 0.5,
) -> TrainingProgram:
    """
    Materialize a quick-start template as a TrainingProgram.

    Args:
        template: Template to expand
        duration_weeks: Program length (default: the template's own length)
        set_count: Working sets per exercise in normal weeks
        deload_every: Every N-th week is a deload week (0 disables deloads)
        deload_multiplier: Volume multiplier of deload weeks; set counts are
            scaled by it (at least 1 set per exercise)

    Returns:
        Program with seven days per week

    Raises:
        ValueError: If duration or set_count is out of range
    """
    weeks_total = duration_weeks if duration_weeks is not None else template.duration_weeks
    if not MIN_PROGRAM_WEEKS <= weeks_total <= MAX_PROGRAM_WEEKS:
        raise ValueError(
            f"duration_weeks must be between {MIN_PROGRAM_WEEKS} and {MAX_PROGRAM_WEEKS}, "
            f"got {weeks_total}"
        )
    if set_count < 1:
        raise ValueError("set_count must be at least 1")

    layout = weekday_layout(template.days_per_week)
    deload_sets = max(1, round(set_count * deload_multiplier))

    normal_workouts = [
        _build_workout(template, i, day, set_count) for i, day in enumerate(template.days)
    ]
    deload_workouts = [
        _build_workout(template, i, day, deload_sets, " (deload)")
        for i, day in enumerate(template.days)
    ]

    by_day = {weekday: i for i, weekday in enumerate(layout)}
    weeks: list[ProgramWeek] = []
    for week_number in range(1, weeks_total + 1):
        is_deload = deload_every > 0 and week_number % deload_every == 0
        workouts = deload_workouts if is_deload else normal_workouts
        days = []
        for weekday in DayOfWeek:
            if weekday in by_day:
                i = by_day[weekday]
                days.append(
                    ProgramDay(
                        day_of_week=weekday,
                        template=workouts[i],
                        focus=template.days[i].focus,
                    )
                )
            else:
                days.append(ProgramDay(day_of_week=weekday, rest_day=True))

        weeks.append(
            ProgramWeek(
                week_number=week_number,
                days=days,
                deload_week=is_deload,
                volume_multiplier=deload_multiplier if is_deload else 1.0,
            )
        )

    return TrainingProgram(
        name=template.name,
        duration_weeks=weeks_total,
        weeks=weeks,
        goal_description=template.description,
    )
