"""
Exercise registry.

All library exercises are registered here at import time.  Use
get_exercise() to look one up by name (case-insensitive).

Exercises are loaded from the bundled ``src/lift_check/exercises.yaml``
merged with ``~/.lift-check/exercises.yaml``.  If nothing can be loaded a
RuntimeError is raised; program files that reference exercises by name
cannot be resolved without the library.
"""

from ..models import Exercise, ExerciseCategory, MuscleGroup


def _build_registry() -> dict[str, Exercise]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift-check: no exercise definitions could be loaded from YAML. "
            "Check that src/lift_check/exercises.yaml is present and valid."
        )
    return loaded


EXERCISE_REGISTRY: dict[str, Exercise] = _build_registry()


def get_exercise(name: str) -> Exercise:
    """
    Return the library Exercise with the given name.

    Args:
        name: Exercise name, e.g. "Barbell Back Squat" (case-insensitive)

    Returns:
        Exercise for the requested name

    Raises:
        ValueError: If the name is not in the library
    """
    key = name.strip().lower()
    if key not in EXERCISE_REGISTRY:
        raise ValueError(
            f"Unknown exercise '{name}'. Run 'lift-check exercises' to list the library."
        )
    return EXERCISE_REGISTRY[key]


def find_exercises(
    muscle: MuscleGroup | None = None,
    category: ExerciseCategory | None = None,
) -> list[Exercise]:
    """Library exercises filtered by primary muscle and/or category, in catalog order."""
    found = []
    for ex in EXERCISE_REGISTRY.values():
        if muscle is not None and muscle not in ex.primary_muscles:
            continue
        if category is not None and ex.category is not category:
            continue
        found.append(ex)
    return found
