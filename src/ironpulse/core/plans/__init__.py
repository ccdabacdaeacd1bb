"""
Preset training plans for ironpulse.

Presets are read-only plans shipped as YAML; user-created plans live in
the plan store (io/plan_store.py).
"""

from .loader import load_plan_file
from .registry import get_preset_plan, get_preset_plans, is_preset

__all__ = [
    "load_plan_file",
    "get_preset_plan",
    "get_preset_plans",
    "is_preset",
]
