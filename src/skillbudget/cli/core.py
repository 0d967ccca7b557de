"""Helpers shared by CLI commands."""

from collections.abc import Iterable

import click
from rich.console import Console
from rich.table import Table

from skillbudget.catalog.models import Catalog
from skillbudget.catalog.stats import resolve_budget
from skillbudget.core.context import SkillContext
from skillbudget.errors import BudgetDeficitError
from skillbudget.output import error_output, user_output
from skillbudget.selection.models import BudgetOverageAdvisory, LoadPlan, SelectionMode

budget_option = click.option(
    "--budget",
    "budget",
    default=None,
    help="Token budget: an integer or a preset (core, smart, full). Defaults to config.",
)
mode_option = click.option(
    "--mode",
    "mode",
    type=click.Choice(["strict", "relaxed"]),
    default=None,
    help="strict evicts tier 5-6 artifacts to make room; relaxed only skips. Defaults to config.",
)


def resolve_session_settings(
    ctx: SkillContext, budget: str | None, mode: str | None
) -> tuple[int, SelectionMode]:
    """Apply CLI overrides on top of config, exiting on an invalid budget."""
    raw_budget: str | int = budget if budget is not None else ctx.config.budget
    try:
        resolved = resolve_budget(raw_budget, ctx.catalog)
    except ValueError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    resolved_mode: SelectionMode = ctx.config.mode
    if mode == "strict" or mode == "relaxed":
        resolved_mode = mode
    return resolved, resolved_mode


def report_deficit(error: BudgetDeficitError) -> None:
    error_output(f"budget {error.budget} is {error.deficit} tokens short of the mandatory set")
    for artifact_id, cost in error.artifacts:
        user_output(f"    {artifact_id:30} {cost:>7,} tokens")
    user_output("  Raise --budget or trim the mandatory tier.")


def report_advisories(advisories: Iterable[BudgetOverageAdvisory]) -> None:
    for advisory in advisories:
        user_output(click.style("⚠ ", fg="yellow") + advisory.message)


def print_plan(plan: LoadPlan, catalog: Catalog, highlight: Iterable[str] = ()) -> None:
    highlighted = set(highlight)
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Artifact", style="cyan", no_wrap=True)
    table.add_column("Tier", justify="right")
    table.add_column("Category")
    table.add_column("Tokens", justify="right")

    for index, artifact_id in enumerate(plan.selected, start=1):
        artifact = catalog.get(artifact_id)
        name = f"[green]{artifact.id}[/green]" if artifact.id in highlighted else artifact.id
        table.add_row(
            str(index), name, str(artifact.tier), artifact.category, f"{artifact.cost:,}"
        )

    console = Console(stderr=True, width=200)
    console.print(table)
    user_output(
        f"  Total: {plan.total_cost:,} / {plan.budget:,} tokens ({plan.remaining:,} free)"
    )
