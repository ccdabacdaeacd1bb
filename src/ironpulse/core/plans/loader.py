"""
YAML → TrainingPlan loader.

Loads preset plans from individual YAML files in the bundled
``src/ironpulse/plans/`` directory.  Each file (e.g. push_pull_legs.yaml)
holds one plan in the authored-plan format understood by
``io.serializers.plan_from_dict``.

User presets: YAML files placed in ``~/.ironpulse/plans/`` are loaded
after the bundled ones.  A user file whose plan id matches a bundled
preset replaces it.

Usage (internal, called by registry.py):
    from .loader import load_plans_from_yaml
    plans = load_plans_from_yaml()
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any

import yaml

from ...io.serializers import ValidationError, plan_from_dict
from ..engine.config_loader import get_data_dir
from ..models import TrainingPlan

logger = logging.getLogger(__name__)


def _with_positional_ids(data: dict[str, Any], plan_id: str) -> dict[str, Any]:
    """Copy of a plan document with missing plan, day and exercise ids filled from position."""
    doc = {**data, "id": data.get("id") or plan_id}
    days = doc.get("days")
    if not isinstance(days, list):
        return doc

    filled_days = []
    for i, day in enumerate(days, 1):
        if not isinstance(day, dict):
            filled_days.append(day)
            continue
        day = {**day, "id": day.get("id") or f"{doc['id']}-day-{i}"}
        exercises = day.get("exercises")
        if isinstance(exercises, list):
            day["exercises"] = [
                {**ex, "id": ex.get("id") or f"{day['id']}-ex-{j}"} if isinstance(ex, dict) else ex
                for j, ex in enumerate(exercises, 1)
            ]
        filled_days.append(day)
    doc["days"] = filled_days
    return doc


def load_plan_file(path: Path) -> TrainingPlan:
    """
    Load one preset plan document (YAML or JSON; JSON is valid YAML).

    Presets are addressed by id across runs, so missing ids are derived
    from the file name and positions instead of being generated: a file
    mine.yaml without ids yields plan "mine", days "mine-day-1", ... and
    exercises "mine-day-1-ex-1", ...

    Args:
        path: Path to the plan file

    Returns:
        Parsed TrainingPlan

    Raises:
        ValidationError: If the file is not a valid plan document
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ValidationError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: expected a mapping at top level")
    return plan_from_dict(_with_positional_ids(data, path.stem))


def _get_bundled_plans_dir() -> Path | None:
    """Return path to the bundled plans/ data directory, or None if not found."""
    # loader.py lives at src/ironpulse/core/plans/loader.py
    # three levels up → src/ironpulse/
    candidate = Path(__file__).parent.parent.parent / "plans"
    return candidate if candidate.is_dir() else None


def _get_user_plans_dir() -> Path | None:
    """Return ~/.ironpulse/plans/ if it exists, else None."""
    p = get_data_dir() / "plans"
    return p if p.is_dir() else None


def load_plans_from_yaml() -> dict[str, TrainingPlan]:
    """Return {plan_id: TrainingPlan} loaded from the preset YAML files.

    Bundled files are read first, then user files; an invalid file is
    skipped with a warning so one broken preset does not hide the others.
    """
    result: dict[str, TrainingPlan] = {}

    for directory in (_get_bundled_plans_dir(), _get_user_plans_dir()):
        if directory is None:
            continue
        for path in sorted(directory.glob("*.yaml")):
            try:
                plan = load_plan_file(path)
            except (OSError, ValidationError) as exc:
                warnings.warn(f"ironpulse: skipping plan file '{path.name}' ({exc})", stacklevel=2)
                continue
            result[plan.id] = plan
            logger.debug("Loaded preset plan %r from %s", plan.name, path)

    return result
