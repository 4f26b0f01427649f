"""
CLI entry point using Typer.

Provides commands for training program checks:
- validate: Validate a program file or stored program
- show: Week-by-week program summary
- templates / generate: Quick-start templates
- list / delete: Stored programs
- exercises: Exercise library
"""

from .app import app
from .commands import library, programs  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
