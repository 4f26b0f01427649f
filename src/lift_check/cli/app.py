"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.program_store import ProgramStore, get_default_programs_dir

# Shared --level option type used by validating commands
LevelOption = Annotated[
    str,
    typer.Option(
        "--level", "-l",
        help="Experience level: beginner, novice, intermediate (default), advanced, elite",
    ),
]

# Shared --programs-dir option type used by store commands
ProgramsDirOption = Annotated[
    Optional[Path],
    typer.Option("--programs-dir", help="Directory of stored programs (default ~/.lift-check/programs)"),
]

app = typer.Typer(
    name="lift-check",
    help="Science-based validator for multi-week strength training programs.",
    no_args_is_help=True,
)


def get_store(programs_dir: Path | None) -> ProgramStore:
    """Get program store from a directory or the default location."""
    if programs_dir is None:
        programs_dir = get_default_programs_dir()
    return ProgramStore(programs_dir)
