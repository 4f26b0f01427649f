"""Program commands: validate, show, generate, list, delete."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from ...core.engine.config_loader import load_rule_thresholds
from ...core.models import TrainingProgram
from ...core.quick_start import build_program, get_template
from ...core.validator import ProgramValidator, coerce_level
from ...io.program_store import ProgramStore
from ...io.serializers import (
    ValidationError,
    load_program_file,
    program_to_dict,
    program_to_json,
    validation_result_to_dict,
)
from .. import views
from ..app import LevelOption, ProgramsDirOption, app, get_store


def _load_target(target: str, store: ProgramStore) -> TrainingProgram:
    """Load ``target`` as a program file if it exists, else as a stored program name."""
    path = Path(target)
    if path.exists():
        return load_program_file(path)
    return store.load(target)


@app.command()
def validate(
    target: Annotated[str, typer.Argument(help="Program file (.json/.yaml) or stored program name")],
    level: LevelOption = "intermediate",
    rules: Annotated[
        Optional[Path],
        typer.Option("--rules", help="YAML file overriding rule thresholds"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    programs_dir: ProgramsDirOption = None,
) -> None:
    """
    Validate a training program against the science-based rules.

    Exit code is 0 when the program is valid and 1 otherwise.
    """
    store = get_store(programs_dir)
    try:
        program = _load_target(target, store)
        thresholds = load_rule_thresholds(rules)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if coerce_level(level) is None and not as_json:
        views.print_warning(f"Unrecognized level {level!r}; using default thresholds.")

    result = ProgramValidator(thresholds).validate(program, level)

    if as_json:
        typer.echo(json.dumps(validation_result_to_dict(result), indent=2))
    else:
        views.print_validation_result(program, result, level)

    if not result.is_valid:
        raise typer.Exit(1)


@app.command()
def show(
    target: Annotated[str, typer.Argument(help="Program file (.json/.yaml) or stored program name")],
    level: LevelOption = "intermediate",
    rules: Annotated[
        Optional[Path],
        typer.Option("--rules", help="YAML file overriding rule thresholds"),
    ] = None,
    programs_dir: ProgramsDirOption = None,
) -> None:
    """
    Show a week-by-week summary: deloads, volume, schedule, sets per muscle.
    """
    store = get_store(programs_dir)
    try:
        program = _load_target(target, store)
        thresholds = load_rule_thresholds(rules)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_program(program, level, thresholds)


@app.command()
def generate(
    template_id: Annotated[str, typer.Argument(help="Quick-start template ID (see 'templates')")],
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", help="Program length in weeks (default: template length)"),
    ] = None,
    sets: Annotated[int, typer.Option("--sets", help="Working sets per exercise")] = 3,
    deload_every: Annotated[
        int,
        typer.Option("--deload-every", help="Every N-th week is a deload week (0 = never)"),
    ] = 4,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write to this file (.json or .yaml)"),
    ] = None,
    save: Annotated[bool, typer.Option("--save", help="Save to the program store")] = False,
    programs_dir: ProgramsDirOption = None,
) -> None:
    """
    Build a program from a quick-start template.

    Prints JSON to stdout unless --out or --save is given.
    """
    template = get_template(template_id)
    if template is None:
        views.print_error(f"Unknown template '{template_id}'. Run 'lift-check templates'.")
        raise typer.Exit(1)

    try:
        program = build_program(template, duration_weeks=weeks, set_count=sets, deload_every=deload_every)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if out is None and not save:
        typer.echo(program_to_json(program))
        return

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        if out.suffix.lower() in (".yaml", ".yml"):
            out.write_text(yaml.safe_dump(program_to_dict(program), sort_keys=False), encoding="utf-8")
        else:
            out.write_text(program_to_json(program), encoding="utf-8")
        views.print_success(f"Wrote {program.name} ({program.duration_weeks} weeks) to {out}")

    if save:
        path = get_store(programs_dir).save(program)
        views.print_success(f"Saved {program.name} to {path}")


@app.command("list")
def list_programs(programs_dir: ProgramsDirOption = None) -> None:
    """List stored programs."""
    store = get_store(programs_dir)
    names = store.list_names()
    if not names:
        views.print_info(f"No stored programs in {store.directory}")
        return
    for name in names:
        views.console.print(f"  {name}")


@app.command()
def delete(
    name: Annotated[str, typer.Argument(help="Stored program name")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Do not ask for confirmation")] = False,
    programs_dir: ProgramsDirOption = None,
) -> None:
    """Delete a stored program."""
    store = get_store(programs_dir)
    if not store.exists(name):
        views.print_error(f"No stored program named '{name}'")
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete program '{name}'?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete(name)
    views.print_success(f"Deleted program '{name}'")
