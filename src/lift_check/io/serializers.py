"""
JSON/YAML serialization for program snapshots.

Handles conversion between the program dataclasses and JSON-compatible
dicts, plus the input checks applied to program documents before they are
validated.

Program document layout::

    name: "Upper / Lower"
    duration_weeks: 5
    templates:                       # optional, reusable by key
      upper-a: {name: "Upper A", exercises: [...]}
    weeks:
      - week_number: 1
        deload_week: false
        volume_multiplier: 1.0
        days:
          - day_of_week: monday      # name or 1..7
            rest_day: false
            template: upper-a        # key into templates, or an inline mapping
          - {day_of_week: tuesday, rest_day: true}

Template exercises refer to the exercise library by name
(``exercise: "Barbell Row"``) or embed a full exercise mapping.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from ..core.config import MAX_PROGRAM_NAME_LENGTH, MAX_PROGRAM_WEEKS, MIN_PROGRAM_WEEKS
from ..core.exercises.loader import exercise_from_dict, exercise_to_dict, parse_enum
from ..core.exercises.registry import EXERCISE_REGISTRY, get_exercise
from ..core.models import (
    DayOfWeek,
    Exercise,
    ProgramDay,
    ProgramWeek,
    TemplateExercise,
    TrainingProgram,
    ValidationResult,
    WorkoutTemplate,
)


class ValidationError(Exception):
    """Raised when a program document is malformed."""

    pass


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a non-negative number.

    Raises:
        ValidationError: If value is negative or not a number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_non_negative_int(value: Any, name: str) -> int:
    """
    Validate that a value is a non-negative whole number.

    Raises:
        ValidationError: If value is negative or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_bool(value: Any, name: str) -> bool:
    """Flags must be real booleans; the string "false" is rejected, not read as true."""
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false, got {value!r}")
    return value


def validate_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _list_field(data: dict[str, Any], key: str) -> list:
    """Return ``data[key]`` as a list; missing or null means empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def validate_program_name(name: Any) -> str:
    """Program name is required and at most 200 characters."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Program name is required.")
    if len(name) > MAX_PROGRAM_NAME_LENGTH:
        raise ValidationError(
            f"Program name is too long ({len(name)} chars, max {MAX_PROGRAM_NAME_LENGTH})."
        )
    return name


def validate_duration_weeks(value: Any) -> int:
    """Duration must be a whole number of weeks between 1 and 52."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"duration_weeks must be an integer, got {value!r}")
    if not MIN_PROGRAM_WEEKS <= value <= MAX_PROGRAM_WEEKS:
        raise ValidationError(
            f"Duration must be between {MIN_PROGRAM_WEEKS} and {MAX_PROGRAM_WEEKS} weeks, got {value}."
        )
    return value


def parse_day_of_week(value: Any) -> DayOfWeek:
    """
    Parse a weekday given by full name ("monday") or ordinal 1..7.

    Raises:
        ValidationError: If the value is not a weekday
    """
    try:
        return parse_enum(DayOfWeek, value, "day_of_week")
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# dict -> model
# =============================================================================


def dict_to_exercise_ref(value: Any) -> Exercise | None:
    """Resolve a template exercise's ``exercise`` field."""
    if value is None:
        return None
    try:
        if isinstance(value, str):
            return get_exercise(value)
        if isinstance(value, dict):
            return exercise_from_dict(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    raise ValidationError(f"Invalid exercise reference: {value!r}")


def dict_to_template_exercise(data: dict[str, Any], index: int = 0) -> TemplateExercise:
    """
    Convert dict to TemplateExercise.

    Raises:
        ValidationError: If data is invalid
    """
    validate_mapping(data, "Template exercise")
    if "set_count" not in data:
        raise ValidationError("Template exercise is missing 'set_count'")

    return TemplateExercise(
        exercise=dict_to_exercise_ref(data.get("exercise")),
        set_count=validate_non_negative_int(data["set_count"], "set_count"),
        min_reps=validate_non_negative_int(data.get("min_reps", 8), "min_reps"),
        max_reps=validate_non_negative_int(data.get("max_reps", 12), "max_reps"),
        rest_seconds=validate_non_negative_int(data.get("rest_seconds", 120), "rest_seconds"),
        order_index=validate_non_negative_int(data.get("order_index", index), "order_index"),
        notes=data.get("notes"),
    )


def dict_to_workout_template(data: dict[str, Any]) -> WorkoutTemplate:
    """
    Convert dict to WorkoutTemplate.

    Raises:
        ValidationError: If data is invalid
    """
    validate_mapping(data, "Workout template")
    return WorkoutTemplate(
        name=str(data.get("name", "")),
        exercises=[dict_to_template_exercise(e, i) for i, e in enumerate(_list_field(data, "exercises"))],
        description=str(data.get("description") or ""),
        tags=[str(t) for t in _list_field(data, "tags")],
    )


def dict_to_program_day(
    data: dict[str, Any],
    templates: dict[str, WorkoutTemplate] | None = None,
) -> ProgramDay:
    """
    Convert dict to ProgramDay.

    ``template`` may be an inline mapping, a key into ``templates``, or null.

    Raises:
        ValidationError: If data is invalid or the template key is unknown
    """
    validate_mapping(data, "Program day")
    if "day_of_week" not in data:
        raise ValidationError("Program day is missing 'day_of_week'")

    raw_template = data.get("template")
    template: WorkoutTemplate | None
    if raw_template is None:
        template = None
    elif isinstance(raw_template, str):
        if templates is None or raw_template not in templates:
            raise ValidationError(f"Unknown template reference: {raw_template!r}")
        template = templates[raw_template]
    else:
        template = dict_to_workout_template(raw_template)

    return ProgramDay(
        day_of_week=parse_day_of_week(data["day_of_week"]),
        rest_day=validate_bool(data.get("rest_day", False), "rest_day"),
        template=template,
        focus=data.get("focus"),
    )


def dict_to_program_week(
    data: dict[str, Any],
    templates: dict[str, WorkoutTemplate] | None = None,
) -> ProgramWeek:
    """
    Convert dict to ProgramWeek.

    Raises:
        ValidationError: If data is invalid
    """
    validate_mapping(data, "Program week")
    week_number = data.get("week_number")
    if isinstance(week_number, bool) or not isinstance(week_number, int) or week_number < 1:
        raise ValidationError(f"week_number must be a positive integer, got {week_number!r}")
    multiplier = validate_non_negative(data.get("volume_multiplier", 1.0), "volume_multiplier")

    return ProgramWeek(
        week_number=week_number,
        days=[dict_to_program_day(d, templates) for d in _list_field(data, "days")],
        deload_week=validate_bool(data.get("deload_week", False), "deload_week"),
        volume_multiplier=float(multiplier),
    )


def dict_to_program(data: dict[str, Any]) -> TrainingProgram:
    """
    Convert a program document to TrainingProgram.

    Args:
        data: Dict representation (see module docstring)

    Returns:
        TrainingProgram instance

    Raises:
        ValidationError: If the document is malformed
    """
    validate_mapping(data, "Program document")

    name = validate_program_name(data.get("name"))
    duration = validate_duration_weeks(data.get("duration_weeks"))

    raw_templates = validate_mapping(data.get("templates") or {}, "'templates'")
    templates = {
        str(key): dict_to_workout_template(value)
        for key, value in raw_templates.items()
    }

    return TrainingProgram(
        name=name,
        duration_weeks=duration,
        weeks=[dict_to_program_week(w, templates) for w in _list_field(data, "weeks")],
        goal_description=str(data.get("goal_description") or ""),
        generated_by_ai=validate_bool(data.get("generated_by_ai", False), "generated_by_ai"),
        ai_reasoning=data.get("ai_reasoning"),
    )


# =============================================================================
# model -> dict
# =============================================================================


def _exercise_ref(exercise: Exercise | None) -> str | dict[str, Any] | None:
    """Library exercises are written by name, anything else inline."""
    if exercise is None:
        return None
    if EXERCISE_REGISTRY.get(exercise.name.lower()) == exercise:
        return exercise.name
    return exercise_to_dict(exercise)


def template_exercise_to_dict(te: TemplateExercise) -> dict[str, Any]:
    d: dict[str, Any] = {
        "exercise": _exercise_ref(te.exercise),
        "set_count": te.set_count,
        "min_reps": te.min_reps,
        "max_reps": te.max_reps,
        "rest_seconds": te.rest_seconds,
        "order_index": te.order_index,
    }
    if te.notes:
        d["notes"] = te.notes
    return d


def workout_template_to_dict(template: WorkoutTemplate) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": template.name,
        "exercises": [template_exercise_to_dict(te) for te in template.exercises],
    }
    if template.description:
        d["description"] = template.description
    if template.tags:
        d["tags"] = list(template.tags)
    return d


def program_day_to_dict(day: ProgramDay) -> dict[str, Any]:
    d: dict[str, Any] = {
        "day_of_week": day.day_of_week.name.lower(),
        "rest_day": day.rest_day,
    }
    if day.template is not None:
        d["template"] = workout_template_to_dict(day.template)
    if day.focus:
        d["focus"] = day.focus
    return d


def program_week_to_dict(week: ProgramWeek) -> dict[str, Any]:
    return {
        "week_number": week.week_number,
        "deload_week": week.deload_week,
        "volume_multiplier": week.volume_multiplier,
        "days": [program_day_to_dict(d) for d in week.days],
    }


def program_to_dict(program: TrainingProgram) -> dict[str, Any]:
    """
    Convert TrainingProgram to a JSON-compatible dict.

    Templates are written inline on every day that uses them.
    """
    d: dict[str, Any] = {
        "name": program.name,
        "duration_weeks": program.duration_weeks,
        "goal_description": program.goal_description,
        "generated_by_ai": program.generated_by_ai,
        "weeks": [program_week_to_dict(w) for w in program.weeks],
    }
    if program.ai_reasoning:
        d["ai_reasoning"] = program.ai_reasoning
    return d


def validation_result_to_dict(result: ValidationResult) -> dict[str, Any]:
    return {
        "valid": result.is_valid,
        "violations": [{"rule": v.rule, "message": v.message} for v in result.violations],
    }


# =============================================================================
# Files
# =============================================================================


def program_to_json(program: TrainingProgram) -> str:
    return json.dumps(program_to_dict(program), indent=2)


def load_program_file(path: str | Path) -> TrainingProgram:
    """
    Load a program from a .json, .yaml or .yml file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file cannot be parsed or the document is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Program file not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ValidationError(
                f"Unsupported program file type: {path.suffix!r}. Use .json, .yaml or .yml"
            )
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}") from e

    return dict_to_program(data)
