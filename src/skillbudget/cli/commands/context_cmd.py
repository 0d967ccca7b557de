"""Show the token cost of the artifact catalog."""

import click
from rich.console import Console
from rich.table import Table

from skillbudget.catalog.models import Artifact
from skillbudget.catalog.stats import BUDGET_PRESETS, estimate_tokens, summarize_catalog
from skillbudget.core.context import SkillContext
from skillbudget.gateway.content.abc import ContentSource
from skillbudget.output import user_output


@click.command("context")
@click.option(
    "--all", "show_all", is_flag=True, help="List every artifact with declared and measured cost."
)
@click.pass_obj
def context_cmd(ctx: SkillContext, show_all: bool) -> None:
    """Show the context budget of the catalog by category."""
    summary = summarize_catalog(ctx.catalog)

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Artifacts", justify="right")
    table.add_column("Tokens", justify="right")
    for total in summary.categories:
        table.add_row(total.category, str(total.artifact_count), f"~{total.cost:,}")

    console = Console(stderr=True, width=200)
    console.print(table)
    user_output(f"  All loaded:               ~{summary.total_cost:,} tokens")
    user_output(f"  Smart load (1 platform):  ~{summary.smart_load_cost:,} tokens")
    presets = ", ".join(f"{name}={value:,}" for name, value in BUDGET_PRESETS.items())
    user_output(click.style(f"  Budget presets: {presets}, full={summary.total_cost:,}", dim=True))

    if not show_all:
        return

    artifacts = Table(show_header=True, header_style="bold", box=None)
    artifacts.add_column("Artifact", style="cyan", no_wrap=True)
    artifacts.add_column("Tier", justify="right")
    artifacts.add_column("Category")
    artifacts.add_column("Tokens", justify="right")
    artifacts.add_column("Measured", justify="right")
    artifacts.add_column("Description")
    for artifact in ctx.catalog:
        artifacts.add_row(
            artifact.id,
            str(artifact.tier),
            artifact.category,
            f"{artifact.cost:,}",
            _measured_cost(ctx.content, artifact),
            artifact.description,
        )
    console.print(artifacts)


def _measured_cost(content: ContentSource, artifact: Artifact) -> str:
    """Estimate tokens from the document itself, flagging missing documents."""
    if not content.has_content(artifact):
        return "[red]missing[/red]"
    return f"~{estimate_tokens(content.read(artifact)):,}"
