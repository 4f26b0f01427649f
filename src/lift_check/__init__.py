"""
lift-check: science-based validation of multi-week training programs.
"""

from .core.models import ExperienceLevel, TrainingProgram, ValidationResult, Violation
from .core.validator import ProgramValidator, validate_program

__version__ = "0.3.0"

__all__ = [
    "ExperienceLevel",
    "ProgramValidator",
    "TrainingProgram",
    "ValidationResult",
    "Violation",
    "validate_program",
]
