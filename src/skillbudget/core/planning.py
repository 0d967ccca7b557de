"""The two public operations: build a plan, and apply it to targets."""

from collections.abc import Sequence
from dataclasses import dataclass

from skillbudget.catalog.models import Catalog
from skillbudget.core.context import SkillContext
from skillbudget.detection.agents import agent_marker_dirs
from skillbudget.detection.detector import DetectionResult, describe_project, detect
from skillbudget.detection.signatures import ProjectSignatures, read_project_signatures
from skillbudget.install.installer import InstallReport, install
from skillbudget.install.targets import TargetProfile
from skillbudget.selection.models import BudgetOverageAdvisory, LoadPlan, SelectionMode
from skillbudget.selection.selector import BudgetedSelector
from skillbudget.triggers.matcher import match_all


@dataclass(frozen=True)
class PlanOutcome:
    """A freshly built plan with the detection and hint results behind it."""

    plan: LoadPlan
    detection: DetectionResult
    matched: frozenset[str]
    added: tuple[str, ...]
    evicted: tuple[str, ...]
    advisories: tuple[BudgetOverageAdvisory, ...]


def gather_signatures(ctx: SkillContext) -> ProjectSignatures:
    return read_project_signatures(ctx.cwd, ctx.home, agent_marker_dirs())


def build_plan(
    catalog: Catalog,
    signatures: ProjectSignatures,
    *,
    budget: int,
    mode: SelectionMode,
    hints: Sequence[str] = (),
) -> PlanOutcome:
    """Detect, initialize and optionally extend with free-text hints.

    Raises:
        BudgetDeficitError: If mandatory artifacts exceed the budget
    """
    detection = detect(signatures)
    selector = BudgetedSelector(catalog=catalog, mode=mode)
    plan = selector.initialize(detection, budget)

    matched = match_all(hints, catalog)
    if not matched:
        return PlanOutcome(
            plan=plan, detection=detection, matched=matched, added=(), evicted=(), advisories=()
        )

    extended = selector.extend(plan, matched)
    return PlanOutcome(
        plan=extended.plan,
        detection=detection,
        matched=matched,
        added=extended.added,
        evicted=extended.evicted,
        advisories=extended.advisories,
    )


def apply_plan(
    ctx: SkillContext,
    plan: LoadPlan,
    targets: list[TargetProfile],
    signatures: ProjectSignatures,
) -> InstallReport:
    """Install a plan to targets using the context's catalog, documents and config."""
    return install(
        plan,
        targets,
        catalog=ctx.catalog,
        content=ctx.content,
        home=ctx.home,
        project_dir=ctx.cwd,
        profile=describe_project(signatures),
        bundle_name=ctx.config.bundle_name,
        max_workers=ctx.config.max_workers,
    )
