"""
Exercise library for lift-check.

Exercises are defined in YAML and resolved by name when program files
refer to them.
"""

from .loader import exercise_from_dict, exercise_to_dict
from .registry import EXERCISE_REGISTRY, find_exercises, get_exercise

__all__ = [
    "EXERCISE_REGISTRY",
    "exercise_from_dict",
    "exercise_to_dict",
    "find_exercises",
    "get_exercise",
]
