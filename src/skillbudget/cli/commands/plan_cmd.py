"""Build the session's load plan."""

import click

from skillbudget.cli.core import (
    budget_option,
    mode_option,
    print_plan,
    report_advisories,
    report_deficit,
    resolve_session_settings,
)
from skillbudget.core.context import SkillContext
from skillbudget.core.planning import build_plan, gather_signatures
from skillbudget.errors import BudgetDeficitError
from skillbudget.output import user_output
from skillbudget.selection.state import PlanState, save_plan_state


@click.command("plan")
@budget_option
@mode_option
@click.option(
    "--hint",
    "hints",
    multiple=True,
    help="Task description used to pull in on-demand references. Repeatable.",
)
@click.option("--no-save", is_flag=True, help="Print the plan without saving the session.")
@click.pass_obj
def plan_cmd(
    ctx: SkillContext,
    budget: str | None,
    mode: str | None,
    hints: tuple[str, ...],
    no_save: bool,
) -> None:
    """Build a budgeted load plan for the current project.

    Mandatory artifacts are always selected; the detected framework's
    reference and shared references follow while they fit. Hints add
    on-demand references.

    Examples:
        skillbudget plan
        skillbudget plan --budget core
        skillbudget plan --budget 40000 --hint "fix race condition in checkout"
    """
    resolved_budget, resolved_mode = resolve_session_settings(ctx, budget, mode)
    signatures = gather_signatures(ctx)

    try:
        outcome = build_plan(
            ctx.catalog, signatures, budget=resolved_budget, mode=resolved_mode, hints=hints
        )
    except BudgetDeficitError as e:
        report_deficit(e)
        raise SystemExit(1) from e

    framework = outcome.detection.framework
    user_output(
        click.style("◆ ", fg="cyan")
        + f"Framework: {framework if framework is not None else 'none'} · mode: {resolved_mode}"
    )
    if hints:
        matched = ", ".join(sorted(outcome.matched)) if outcome.matched else "nothing"
        user_output(click.style("◆ ", fg="cyan") + f"Hints matched: {matched}")

    print_plan(outcome.plan, ctx.catalog, highlight=outcome.added)
    for evicted_id in outcome.evicted:
        user_output(click.style("↺ ", fg="yellow") + f"Evicted {evicted_id}")
    report_advisories(outcome.advisories)

    if no_save:
        return

    path = save_plan_state(
        ctx.cwd, PlanState(plan=outcome.plan, mode=resolved_mode, framework=framework)
    )
    user_output(click.style("✓ ", fg="green") + f"Plan saved to {path}")
