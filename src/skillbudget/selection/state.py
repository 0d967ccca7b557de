"""Session plan persistence in .skillbudget/plan.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

from skillbudget.catalog.models import Catalog
from skillbudget.errors import PlanStateError
from skillbudget.selection.models import SELECTION_MODES, LoadPlan, SelectionMode


@dataclass(frozen=True)
class PlanState:
    """A session's current plan plus the settings it was built with."""

    plan: LoadPlan
    mode: SelectionMode
    framework: str | None


def get_plan_path(project_dir: Path) -> Path:
    return project_dir / ".skillbudget" / "plan.toml"


def load_plan_state(project_dir: Path, catalog: Catalog) -> PlanState | None:
    """Load the session plan.

    Total cost is recomputed from the catalog rather than trusted from disk.

    Returns:
        The saved PlanState, or None if no plan has been saved

    Raises:
        PlanStateError: If the file is malformed, names unknown artifacts,
            or no longer fits its budget
    """
    path = get_plan_path(project_dir)
    if not path.exists():
        return None

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise PlanStateError(f"{path}: invalid TOML: {e}") from e

    section = data.get("plan")
    if not isinstance(section, dict):
        raise PlanStateError(f"{path}: missing [plan] table")

    budget = section.get("budget")
    mode = section.get("mode")
    selected = section.get("selected")
    framework = section.get("framework") or None

    if not isinstance(budget, int) or budget <= 0:
        raise PlanStateError(f"{path}: budget must be a positive integer")
    if mode not in SELECTION_MODES:
        raise PlanStateError(f"{path}: mode must be one of {', '.join(SELECTION_MODES)}")
    if not isinstance(selected, list) or not all(isinstance(s, str) for s in selected):
        raise PlanStateError(f"{path}: selected must be a list of artifact ids")
    if len(set(selected)) != len(selected):
        raise PlanStateError(f"{path}: selected contains duplicate artifact ids")

    unknown = [artifact_id for artifact_id in selected if artifact_id not in catalog]
    if unknown:
        raise PlanStateError(f"{path}: unknown artifacts {', '.join(unknown)}")

    total = catalog.cost_of(selected)
    if total > budget:
        raise PlanStateError(
            f"{path}: selected artifacts cost {total} tokens, over the {budget} budget"
        )

    return PlanState(
        plan=LoadPlan(selected=tuple(selected), total_cost=total, budget=budget),
        mode=mode,
        framework=framework if isinstance(framework, str) else None,
    )


def save_plan_state(project_dir: Path, state: PlanState) -> Path:
    """Write the session plan, returning the file path."""
    path = get_plan_path(project_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "plan": {
            "budget": state.plan.budget,
            "mode": state.mode,
            "framework": state.framework if state.framework is not None else "",
            "total_cost": state.plan.total_cost,
            "selected": list(state.plan.selected),
        }
    }
    with open(path, "wb") as f:
        tomli_w.dump(data, f)
    return path
