"""
YAML -> typed rule thresholds.

Loads rule thresholds from rules.yaml (bundled with the package) and
optionally merges user overrides from ~/.lift-check/rules.yaml.

Usage:
    from lift_check.core.engine.config_loader import load_rule_thresholds
    thresholds = load_rule_thresholds()
    ProgramValidator(thresholds).validate(program, "intermediate")

If the user override file exists but cannot be parsed, a warning is
emitted and the file is ignored.  Keys the loader does not know are
ignored as well.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_THRESHOLDS, RuleThresholds

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; raise ValueError if it is not one."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _thresholds_from_dict(cfg: dict[str, Any]) -> RuleThresholds:
    """Build RuleThresholds from the merged config, defaulting missing keys."""
    d = DEFAULT_THRESHOLDS
    deload = cfg.get("deload") or {}
    volume = cfg.get("volume") or {}
    cns = cfg.get("cns") or {}
    beginner = cfg.get("beginner") or {}
    recovery = cfg.get("recovery") or {}

    mrv_by_level = dict(d.mrv_by_level)
    for level, sets in (volume.get("mrv_by_level") or {}).items():
        mrv_by_level[str(level).lower()] = int(sets)

    return RuleThresholds(
        deload_required_min_weeks=int(deload.get("required_min_weeks", d.deload_required_min_weeks)),
        deload_multiplier_min=float(deload.get("multiplier_min", d.deload_multiplier_min)),
        deload_multiplier_max=float(deload.get("multiplier_max", d.deload_multiplier_max)),
        normal_multiplier_min=float(volume.get("multiplier_min", d.normal_multiplier_min)),
        normal_multiplier_max=float(volume.get("multiplier_max", d.normal_multiplier_max)),
        mrv_by_level=mrv_by_level,
        mrv_default=int(volume.get("mrv_default", d.mrv_default)),
        cns_max_consecutive_days=int(cns.get("max_consecutive_days", d.cns_max_consecutive_days)),
        beginner_max_training_days=int(beginner.get("max_training_days", d.beginner_max_training_days)),
        min_recovery_days=int(recovery.get("min_days", d.min_recovery_days)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled rules.yaml, or None if not found."""
    ref = importlib.resources.files("lift_check").joinpath("rules.yaml")
    with importlib.resources.as_file(ref) as p:
        return p if p.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-check/rules.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-check" / "rules.yaml"
    return p if p.exists() else None


def load_rule_config(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load and merge raw rule configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_check/rules.yaml
    2. ``path`` if given, else ~/.lift-check/rules.yaml when present

    Args:
        path: Explicit override file

    Returns:
        Merged dict of config sections.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist
        ValueError: If an explicit ``path`` is not a YAML mapping
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise FileNotFoundError(f"Rules file not found: {explicit}")
        try:
            return _deep_merge(config, _load_yaml_file(explicit))
        except yaml.YAMLError as exc:
            raise ValueError(f"{explicit}: {exc}") from exc

    user = get_user_yaml_path()
    if user is not None:
        try:
            config = _deep_merge(config, _load_yaml_file(user))
        except (yaml.YAMLError, ValueError, OSError) as exc:
            warnings.warn(
                f"lift-check: ignoring user rules file {user} ({exc})",
                stacklevel=2,
            )

    return config


def load_rule_thresholds(path: str | Path | None = None) -> RuleThresholds:
    """Load rule thresholds (bundled defaults + user override) as RuleThresholds."""
    return _thresholds_from_dict(load_rule_config(path))
