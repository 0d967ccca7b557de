"""Extend the saved session plan with on-demand references."""

import click

from skillbudget.cli.core import print_plan, report_advisories
from skillbudget.core.context import SkillContext
from skillbudget.errors import PlanStateError, SkillBudgetError
from skillbudget.output import error_output, user_output
from skillbudget.selection.selector import BudgetedSelector
from skillbudget.selection.state import PlanState, load_plan_state, save_plan_state
from skillbudget.triggers.matcher import match_all


@click.command("extend")
@click.argument("hints", nargs=-1)
@click.option(
    "--artifact",
    "artifact_ids",
    multiple=True,
    help="Request an artifact by id, bypassing keyword matching. Repeatable.",
)
@click.pass_obj
def extend_cmd(ctx: SkillContext, hints: tuple[str, ...], artifact_ids: tuple[str, ...]) -> None:
    """Add references matching task HINTS to the saved plan.

    The plan's budget is never exceeded. In strict mode, tier 5-6 artifacts
    are evicted (most recent first) when that makes room.

    Examples:
        skillbudget extend "race condition when two workers lock an order"
        skillbudget extend --artifact humanizer
    """
    if not hints and not artifact_ids:
        error_output("Give at least one hint or --artifact.")
        raise SystemExit(1)

    try:
        state = load_plan_state(ctx.cwd, ctx.catalog)
    except PlanStateError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    if state is None:
        error_output("No saved plan. Run 'skillbudget plan' first.")
        raise SystemExit(1)

    candidates = match_all(hints, ctx.catalog) | frozenset(artifact_ids)
    if not candidates:
        user_output("No on-demand references match these hints; plan unchanged.")
        return

    selector = BudgetedSelector(catalog=ctx.catalog, mode=state.mode)
    try:
        result = selector.extend(state.plan, candidates)
    except SkillBudgetError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    for added_id in result.added:
        user_output(click.style("✓ ", fg="green") + f"Added {added_id}")
    for evicted_id in result.evicted:
        user_output(click.style("↺ ", fg="yellow") + f"Evicted {evicted_id}")
    for already in sorted(candidates):
        if state.plan.contains(already):
            user_output(click.style("· ", dim=True) + f"{already} already loaded")
    report_advisories(result.advisories)

    if not result.changed:
        return

    print_plan(result.plan, ctx.catalog, highlight=result.added)
    save_plan_state(
        ctx.cwd, PlanState(plan=result.plan, mode=state.mode, framework=state.framework)
    )
