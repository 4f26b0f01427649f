"""
YAML -> Exercise loader.

Loads the exercise library from the bundled ``src/lift_check/exercises.yaml``
(a top-level ``exercises:`` list).  Each entry matches the Exercise schema;
enum tags (category, muscles, equipment, difficulty) are case-insensitive.

User overrides: ``~/.lift-check/exercises.yaml`` with the same layout.  A
user entry whose name matches a bundled exercise is merged over it, so only
changed keys need to be listed.  Any other user entry is added as a new
exercise.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()   # {lower-case name: Exercise}
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from enum import Enum
from pathlib import Path
from typing import TypeVar

import yaml

from ..models import Difficulty, Equipment, Exercise, ExerciseCategory, MuscleGroup

E = TypeVar("E", bound=Enum)

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "category",
        "primary_muscles",
    }
)


def parse_enum(enum_cls: type[E], value, field_name: str) -> E:
    """
    Parse an enum tag case-insensitively by value or member name.

    Args:
        enum_cls: Target enum class
        value: Raw value from YAML/JSON
        field_name: Field name for the error message

    Raises:
        ValueError: If the value matches no member
    """
    if isinstance(value, enum_cls):
        return value
    raw = str(value).strip()
    for member in enum_cls:
        if raw.lower() == str(member.value).lower() or raw.upper() == member.name:
            return member
    valid = ", ".join(str(m.value) for m in enum_cls)
    raise ValueError(f"Invalid {field_name} {value!r}. Valid values: {valid}")


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML or JSON) to an Exercise.

    Raises ValueError if a required field is absent or a tag is unknown.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")
    is_compound = d.get("is_compound", False)
    if not isinstance(is_compound, bool):
        raise ValueError(f"is_compound must be true or false, got {is_compound!r}")

    return Exercise(
        name=str(d["name"]).strip(),
        category=parse_enum(ExerciseCategory, d["category"], "category"),
        primary_muscles=[
            parse_enum(MuscleGroup, m, "primary muscle") for m in d["primary_muscles"] or []
        ],
        secondary_muscles=[
            parse_enum(MuscleGroup, m, "secondary muscle")
            for m in d.get("secondary_muscles") or []
        ],
        is_compound=is_compound,
        equipment=parse_enum(Equipment, d.get("equipment", "none"), "equipment"),
        difficulty=parse_enum(Difficulty, d.get("difficulty", "beginner"), "difficulty"),
        description=str(d.get("description") or ""),
    )


def exercise_to_dict(ex: Exercise) -> dict:
    """Inverse of exercise_from_dict."""
    return {
        "name": ex.name,
        "category": ex.category.value,
        "primary_muscles": [m.value for m in ex.primary_muscles],
        "secondary_muscles": [m.value for m in ex.secondary_muscles],
        "is_compound": ex.is_compound,
        "equipment": ex.equipment.value,
        "difficulty": ex.difficulty.value,
        "description": ex.description,
    }


def _load_entries(path: Path) -> list[dict]:
    """Return the ``exercises`` list of a catalog file."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not data:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
        raise ValueError(f"{path}: expected a top-level 'exercises' list")
    return [e for e in data["exercises"] if isinstance(e, dict)]


def get_bundled_catalog_path() -> Path | None:
    """Return path to the bundled exercises.yaml, or None if not found."""
    ref = importlib.resources.files("lift_check").joinpath("exercises.yaml")
    with importlib.resources.as_file(ref) as p:
        return p if p.exists() else None


def get_user_catalog_path() -> Path | None:
    """Return ~/.lift-check/exercises.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-check" / "exercises.yaml"
    return p if p.exists() else None


def load_exercises_from_yaml(user_path: str | Path | None = None) -> dict[str, Exercise]:
    """Return {lower-case name: Exercise} from the bundled and user catalogs.

    The bundled catalog is authoritative: a bad bundled entry raises.  User
    entries that fail to parse are skipped with a warning.

    Args:
        user_path: Override catalog; defaults to ~/.lift-check/exercises.yaml

    Returns:
        Mapping keyed by lower-cased exercise name, in catalog order
    """
    raw: dict[str, dict] = {}

    bundled = get_bundled_catalog_path()
    if bundled is not None:
        for entry in _load_entries(bundled):
            raw[str(entry.get("name", "")).strip().lower()] = entry

    result: dict[str, Exercise] = {key: exercise_from_dict(entry) for key, entry in raw.items()}

    user = Path(user_path) if user_path is not None else get_user_catalog_path()
    if user is None:
        return result

    try:
        user_entries = _load_entries(user)
    except (yaml.YAMLError, ValueError, OSError) as exc:
        warnings.warn(f"lift-check: ignoring user exercise file {user} ({exc})", stacklevel=2)
        return result

    for entry in user_entries:
        key = str(entry.get("name", "")).strip().lower()
        merged = {**raw[key], **entry} if key in raw else entry
        try:
            result[key] = exercise_from_dict(merged)
        except ValueError as exc:
            warnings.warn(
                f"lift-check: skipping user exercise {entry.get('name')!r} ({exc})",
                stacklevel=2,
            )

    return result
