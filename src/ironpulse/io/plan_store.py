"""
JSON-based storage for user training plans.

Preset plans come from the bundled YAML registry and are read-only; plans
the user imports or authors are kept in a single plans.json file.
"""

import json
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile

from ..core.config import PLANS_FILE_NAME
from ..core.engine.config_loader import get_data_dir
from ..core.errors import StoreError
from ..core.models import TrainingPlan
from ..core.plans import get_preset_plans, is_preset
from .serializers import ValidationError, plan_from_dict, plan_to_dict

logger = logging.getLogger(__name__)


class PlanStore:
    """
    Manages user plans stored as a JSON list in plans.json.

    load_plans() presents presets first, then user plans in the order
    they were added.
    """

    def __init__(self, plans_path: str | Path):
        """
        Initialize the plan store.

        Args:
            plans_path: Path to the JSON plans file
        """
        self.plans_path = Path(plans_path)

    def load_user_plans(self) -> list[TrainingPlan]:
        """
        Load user plans from plans.json.

        Returns:
            List of TrainingPlan (empty if the file does not exist)

        Raises:
            StoreError: If the file cannot be read
            ValidationError: If the file content is invalid
        """
        if not self.plans_path.exists():
            return []

        try:
            raw = self.plans_path.read_text(encoding="utf-8").strip() or "[]"
        except UnicodeDecodeError as e:
            raise ValidationError(f"{self.plans_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreError(f"Cannot read {self.plans_path}: {e}", self.plans_path) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Could not parse {self.plans_path}: {e}") from e

        if not isinstance(data, list):
            raise ValidationError(f"{self.plans_path} must contain a JSON list")

        return [plan_from_dict(d) for d in data]

    def load_plans(self) -> list[TrainingPlan]:
        """Return preset plans followed by user plans."""
        return [*get_preset_plans(), *self.load_user_plans()]

    def get_plan(self, plan_id: str) -> TrainingPlan | None:
        """Return the plan with the given id (preset or user), or None."""
        for plan in self.load_plans():
            if plan.id == plan_id:
                return plan
        return None

    def add_plan(self, plan: TrainingPlan) -> None:
        """
        Add a user plan.

        Raises:
            ValueError: If a plan with the same id already exists
            StoreError: If the file cannot be written
        """
        if self.get_plan(plan.id) is not None:
            raise ValueError(f"A plan with id {plan.id!r} already exists")
        plans = self.load_user_plans()
        plans.append(plan)
        self._write_plans(plans)
        logger.info("Added plan %r (%s)", plan.name, plan.id)

    def delete_plan(self, plan_id: str) -> TrainingPlan:
        """
        Delete a user plan.

        History records keep their own copy of plan and day names, so
        deleting a plan never affects history.

        Returns:
            The deleted plan

        Raises:
            ValueError: If plan_id names a preset
            KeyError: If no user plan has that id
        """
        if is_preset(plan_id):
            raise ValueError(f"Plan {plan_id!r} is a preset and cannot be deleted")
        plans = self.load_user_plans()
        for i, plan in enumerate(plans):
            if plan.id == plan_id:
                del plans[i]
                self._write_plans(plans)
                logger.info("Deleted plan %r (%s)", plan.name, plan.id)
                return plan
        raise KeyError(f"No user plan with id {plan_id!r}")

    def _write_plans(self, plans: list[TrainingPlan]) -> None:
        """Atomically replace plans.json."""
        payload = json.dumps([plan_to_dict(p) for p in plans], indent=2) + "\n"
        try:
            self.plans_path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=self.plans_path.parent, delete=False, encoding="utf-8"
            ) as tmp:
                tmp.write(payload)
                temp_path = Path(tmp.name)
            temp_path.replace(self.plans_path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.plans_path}: {e}", self.plans_path) from e


def get_default_plans_path() -> Path:
    """Return <data dir>/plans.json."""
    return get_data_dir() / PLANS_FILE_NAME
