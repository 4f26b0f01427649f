"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of programs and validation results.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import DEFAULT_THRESHOLDS, RuleThresholds
from ..core.models import Exercise, TrainingProgram, ValidationResult
from ..core.quick_start import QuickStartTemplate
from ..core.validator import coerce_level, weekly_muscle_volume

console = Console()


def format_violations_table(result: ValidationResult) -> Table:
    """
    Create a Rich table listing violations in emission order.

    Args:
        result: Validation result to display

    Returns:
        Rich Table object
    """
    table = Table(title="Violations")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Rule", style="magenta", no_wrap=True)
    table.add_column("Message")

    for i, violation in enumerate(result.violations, 1):
        table.add_row(str(i), violation.rule, escape(violation.message))

    return table


def print_validation_result(program: TrainingProgram, result: ValidationResult, level) -> None:
    """
    Print a validation verdict followed by the violations table.

    Args:
        program: Program that was validated
        result: Its validation result
        level: Experience level used for validation
    """
    resolved = coerce_level(level)
    level_str = resolved.label if resolved is not None else f"{escape(str(level))} (unrecognized)"
    console.print(
        f"[bold]{escape(program.name)}[/bold]  ·  {program.duration_weeks} weeks  ·  level: {level_str}"
    )

    if result.is_valid:
        print_success("Program is valid: no rule violations.")
        return

    console.print(format_violations_table(result))
    console.print(f"[red]{len(result.violations)} violation(s) found.[/red]")


def format_program_table(
    program: TrainingProgram,
    level=None,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> Table:
    """
    Create a week-by-week summary table.

    Muscles above the level's MRV and volume multipliers outside their band
    are highlighted in red.

    Args:
        program: Program to summarize
        level: Experience level used for MRV highlighting
        thresholds: Rule thresholds

    Returns:
        Rich Table object
    """
    mrv = thresholds.mrv_for(coerce_level(level))
    table = Table(title=escape(program.name))

    table.add_column("Wk", justify="right", style="cyan")
    table.add_column("Deload", justify="center")
    table.add_column("Vol", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Schedule")
    table.add_column("Sets / muscle")

    for week in program.weeks:
        schedule = " ".join(
            (d.day_of_week.label[:3] if not d.rest_day else "[dim]---[/dim]")
            for d in week.sorted_days()
        )
        multiplier = f"{week.volume_multiplier:.0%}"
        if not week.is_volume_multiplier_valid(thresholds):
            multiplier = f"[red]{multiplier}[/red]"
        total_sets = sum(
            d.template.total_set_count() for d in week.days if d.is_training_session()
        )

        volume_cells = []
        for muscle, sets in sorted(weekly_muscle_volume(week).items(), key=lambda kv: -kv[1]):
            cell = f"{muscle.label} {sets}"
            if not week.deload_week and sets > mrv:
                cell = f"[red]{cell}[/red]"
            volume_cells.append(cell)

        table.add_row(
            str(week.week_number),
            "yes" if week.deload_week else "",
            multiplier,
            str(week.training_day_count()),
            str(total_sets),
            schedule,
            ", ".join(volume_cells) or "-",
        )

    return table


def print_program(
    program: TrainingProgram,
    level=None,
    thresholds: RuleThresholds = DEFAULT_THRESHOLDS,
) -> None:
    console.print(format_program_table(program, level, thresholds))
    for template_name, exercise_name, rep_range in invalid_rep_ranges(program):
        print_warning(f"{escape(template_name)}: {escape(exercise_name)} has rep range {rep_range}.")
    if len(program.weeks) != program.duration_weeks:
        print_warning(
            f"Program declares {program.duration_weeks} weeks but contains {len(program.weeks)}."
        )


def invalid_rep_ranges(program: TrainingProgram) -> list[tuple[str, str, str]]:
    """
    Template exercises whose rep range is empty or inverted.

    Templates reused across days and weeks are reported once.

    Returns:
        (template name, exercise name, "min-max") tuples in program order
    """
    found: list[tuple[str, str, str]] = []
    for week in program.weeks:
        for day in week.sorted_days():
            if not day.is_training_session():
                continue
            for te in day.template.exercises or []:
                if te.is_rep_range_valid():
                    continue
                name = te.exercise.name if te.exercise is not None else "(no exercise)"
                entry = (day.template.name, name, te.rep_range_display())
                if entry not in found:
                    found.append(entry)
    return found


def format_templates_table(templates: list[QuickStartTemplate]) -> Table:
    table = Table(title="Quick-start templates")

    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Level")
    table.add_column("Days/wk", justify="right")
    table.add_column("Weeks", justify="right")
    table.add_column("Goal")

    for t in templates:
        table.add_row(
            t.template_id,
            t.name,
            f"{t.min_experience_level.label}+",
            str(t.days_per_week),
            str(t.duration_weeks),
            t.primary_goal.replace("_", " "),
        )

    return table


def format_exercises_table(exercises: list[Exercise]) -> Table:
    table = Table(title="Exercise library")

    table.add_column("Name", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Primary")
    table.add_column("Compound", justify="center")
    table.add_column("High CNS", justify="center")

    for ex in exercises:
        table.add_row(
            escape(ex.name),
            ex.category.value,
            ex.primary_muscles_display(),
            "yes" if ex.is_compound else "",
            "[red]yes[/red]" if ex.is_high_cns_demand() else "",
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
