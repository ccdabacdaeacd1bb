"""
Preset plan registry.

Preset plans are loaded from per-plan YAML files in the bundled
``src/ironpulse/plans/`` directory on first use.  If none can be loaded a
RuntimeError is raised: the bundled presets are part of the package.

User presets: place plan files in ``~/.ironpulse/plans/``.
"""

from functools import lru_cache

from ..models import TrainingPlan


@lru_cache(maxsize=1)
def _build_registry() -> dict[str, TrainingPlan]:
    from .loader import load_plans_from_yaml

    loaded = load_plans_from_yaml()
    if not loaded:
        raise RuntimeError(
            "ironpulse: no preset plans could be loaded from YAML. "
            "Check that src/ironpulse/plans/*.yaml files are present and valid."
        )
    return loaded


def get_preset_plans() -> list[TrainingPlan]:
    """Return all preset plans in load order."""
    return list(_build_registry().values())


def get_preset_plan(plan_id: str) -> TrainingPlan:
    """
    Return the preset plan with the given id.

    Raises:
        ValueError: If plan_id is not a preset
    """
    registry = _build_registry()
    if plan_id not in registry:
        valid = ", ".join(registry)
        raise ValueError(f"Unknown preset plan '{plan_id}'. Valid IDs: {valid}")
    return registry[plan_id]


def is_preset(plan_id: str) -> bool:
    """True if plan_id names a preset (read-only) plan."""
    return plan_id in _build_registry()
