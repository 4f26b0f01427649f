"""
JSON file storage for training programs.

One file per program in a programs directory, named from a slug of the
program name (``Upper / Lower Split`` -> ``upper-lower-split.json``).
"""

import json
import re
from pathlib import Path

from ..core.models import TrainingProgram
from .serializers import ValidationError, dict_to_program, program_to_dict


def slugify(name: str) -> str:
    """Lower-case, dash-separated file stem for a program name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "program"


class ProgramStore:
    """
    Manages programs stored as JSON files in one directory.
    """

    def __init__(self, directory: str | Path):
        """
        Initialize the program store.

        Args:
            directory: Directory holding the program files
        """
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{slugify(name)}.json"

    def exists(self, name: str) -> bool:
        """Check if a program with this name is stored."""
        return self.path_for(name).exists()

    def save(self, program: TrainingProgram, overwrite: bool = True) -> Path:
        """
        Write a program to its JSON file.

        Creates the directory if needed.

        Args:
            program: Program to save
            overwrite: Replace an existing file of the same name

        Returns:
            Path of the written file

        Raises:
            FileExistsError: If the file exists and overwrite is False
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(program.name)
        if path.exists() and not overwrite:
            raise FileExistsError(f"Program already exists: {path}")

        with open(path, "w", encoding="utf-8") as f:
            json.dump(program_to_dict(program), f, indent=2)
        return path

    def load(self, name: str) -> TrainingProgram:
        """
        Load a stored program by name (or slug).

        Raises:
            FileNotFoundError: If no such program is stored
            ValidationError: If the stored file is corrupt
        """
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"No stored program named {name!r} ({path})")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e
        return dict_to_program(data)

    def list_names(self) -> list[str]:
        """
        Return the program names of all readable stored files, sorted by slug.

        Files that are not valid JSON are skipped.
        """
        if not self.directory.exists():
            return []

        names = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict) and data.get("name"):
                names.append(str(data["name"]))
        return names

    def delete(self, name: str) -> None:
        """
        Remove a stored program.

        Raises:
            FileNotFoundError: If no such program is stored
        """
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"No stored program named {name!r} ({path})")
        path.unlink()


def get_default_programs_dir() -> Path:
    """Default programs directory: ~/.lift-check/programs."""
    return Path.home() / ".lift-check" / "programs"


def get_default_store() -> ProgramStore:
    return ProgramStore(get_default_programs_dir())
