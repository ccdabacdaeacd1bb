"""Plan commands: plans, plan-show, plan-import, plan-delete."""

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml

from ...core.clock import now_ms
from ...core.errors import StoreError
from ...core.models import TrainingPlan
from ...io.plan_store import PlanStore
from ...io.serializers import ValidationError, plan_from_dict, plan_from_generated, plan_to_dict
from .. import views
from ..app import JsonOption, PlansPathOption, app, get_plan_store


def _load_plans_or_exit(store: PlanStore) -> list[TrainingPlan]:
    try:
        return store.load_plans()
    except (StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def plans(
    plans_path: PlansPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List available training plans (presets and your own).
    """
    available = _load_plans_or_exit(get_plan_store(plans_path))

    if json_out:
        print(json.dumps([plan_to_dict(p) for p in available], indent=2))
        return

    views.print_plans(available)


@app.command("plan-show")
def plan_show(
    plan_id: Annotated[str, typer.Argument(help="Plan ID (see 'ironpulse plans')")],
    plans_path: PlansPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show a plan's days and exercises.
    """
    store = get_plan_store(plans_path)
    plan = next((p for p in _load_plans_or_exit(store) if p.id == plan_id), None)
    if plan is None:
        views.print_error(f"Unknown plan: {plan_id}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(plan_to_dict(plan), indent=2))
        return

    views.print_plan(plan)


@app.command("plan-import")
def plan_import(
    file: Annotated[
        Path,
        typer.Argument(help="Plan document (YAML or JSON)", exists=True, dir_okay=False),
    ],
    generated: Annotated[
        bool,
        typer.Option("--generated", "-g", help="File is a plan-generation service response"),
    ] = False,
    plans_path: PlansPathOption = None,
) -> None:
    """
    Add a plan from a YAML or JSON file.

    Authored plans use snake_case keys (name, days, target_sets,
    target_reps).  With --generated the file is read as the camelCase
    response of the plan-generation service (planName, targetSets, ...).
    """
    try:
        with open(file, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        views.print_error(f"Cannot read {file}: {e}")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        views.print_error(f"{file}: expected a mapping at top level")
        raise typer.Exit(1)

    try:
        plan = plan_from_generated(data, now=now_ms()) if generated else plan_from_dict(data, now=now_ms())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        get_plan_store(plans_path).add_plan(plan)
    except (ValueError, StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Imported plan '{plan.name}' ({plan.id})")
    views.print_plan(plan)


@app.command("plan-delete")
def plan_delete(
    plan_id: Annotated[str, typer.Argument(help="ID of a plan you imported")],
    plans_path: PlansPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
) -> None:
    """
    Delete one of your plans.  Presets cannot be deleted; history is kept.
    """
    store = get_plan_store(plans_path)

    if not force and not views.confirm_action(f"Delete plan {plan_id}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        removed = store.delete_plan(plan_id)
    except KeyError:
        views.print_error(f"No plan of yours has id {plan_id}")
        raise typer.Exit(1)
    except (ValueError, StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted plan '{removed.name}'")
