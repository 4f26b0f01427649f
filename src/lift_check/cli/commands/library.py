"""Library commands: templates, exercises."""

from typing import Annotated, Optional

import typer

from ...core.exercises.loader import parse_enum
from ...core.exercises.registry import find_exercises
from ...core.models import ExerciseCategory, MuscleGroup
from ...core.quick_start import get_all_templates
from .. import views
from ..app import app


@app.command()
def templates() -> None:
    """List quick-start program templates."""
    views.console.print(views.format_templates_table(get_all_templates()))
    views.console.print("[dim]Build one with: lift-check generate <ID> [--weeks N] [--save][/dim]")


@app.command()
def exercises(
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Filter by primary muscle, e.g. quads"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Filter by category, e.g. power"),
    ] = None,
) -> None:
    """List the exercise library."""
    try:
        muscle_tag = parse_enum(MuscleGroup, muscle, "muscle") if muscle else None
        category_tag = parse_enum(ExerciseCategory, category, "category") if category else None
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    found = find_exercises(muscle=muscle_tag, category=category_tag)
    if not found:
        views.print_info("No exercises match.")
        return
    views.console.print(views.format_exercises_table(found))
