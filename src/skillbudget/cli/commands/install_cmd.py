"""Install the session plan for one or more agents."""

from pathlib import Path

import click

from skillbudget.cli.core import (
    budget_option,
    mode_option,
    report_advisories,
    report_deficit,
    resolve_session_settings,
)
from skillbudget.core.context import SkillContext
from skillbudget.core.planning import apply_plan, build_plan, gather_signatures
from skillbudget.detection.agents import DEFAULT_AGENT_ID, HOST_AGENTS
from skillbudget.detection.detector import detect
from skillbudget.detection.signatures import ProjectSignatures
from skillbudget.errors import BudgetDeficitError, PlanStateError
from skillbudget.install.targets import (
    RULE_FILE_AGENT_IDS,
    TargetProfile,
    custom_target,
    global_targets,
    rule_file_targets,
)
from skillbudget.output import error_output, user_output
from skillbudget.selection.models import LoadPlan
from skillbudget.selection.state import PlanState, load_plan_state, save_plan_state


def _select_targets(
    ctx: SkillContext,
    signatures: ProjectSignatures,
    *,
    agents: tuple[str, ...],
    all_agents: bool,
    auto: bool,
    rules: tuple[str, ...],
    path: Path | None,
) -> list[TargetProfile]:
    if not (agents or all_agents or auto or rules or path is not None):
        agents = ctx.config.agents
        rules = ctx.config.rules
        auto = not agents and not rules

    agent_ids: list[str] = list(agents)
    if all_agents:
        agent_ids = [agent.agent_id for agent in HOST_AGENTS]
    elif auto:
        detected = detect(signatures).host_agents
        if not detected:
            user_output(f"No agents found. Using {DEFAULT_AGENT_ID}.")
        agent_ids.extend(sorted(detected) if detected else [DEFAULT_AGENT_ID])

    targets = global_targets(agent_ids) + rule_file_targets(rules)
    if path is not None:
        targets.append(custom_target(path))
    return targets


def _resolve_plan(
    ctx: SkillContext, signatures: ProjectSignatures, budget: str | None, mode: str | None
) -> LoadPlan:
    """Use the saved session plan unless budget or mode are overridden."""
    if budget is None and mode is None:
        try:
            state = load_plan_state(ctx.cwd, ctx.catalog)
        except PlanStateError as e:
            error_output(str(e))
            raise SystemExit(1) from e
        if state is not None:
            return state.plan

    resolved_budget, resolved_mode = resolve_session_settings(ctx, budget, mode)
    try:
        outcome = build_plan(ctx.catalog, signatures, budget=resolved_budget, mode=resolved_mode)
    except BudgetDeficitError as e:
        report_deficit(e)
        raise SystemExit(1) from e
    report_advisories(outcome.advisories)
    save_plan_state(
        ctx.cwd,
        PlanState(plan=outcome.plan, mode=resolved_mode, framework=outcome.detection.framework),
    )
    return outcome.plan


@click.command("install")
@click.option("--agent", "agents", multiple=True, help="Install for this agent. Repeatable.")
@click.option("--all", "all_agents", is_flag=True, help="Install for every known agent.")
@click.option("--auto", is_flag=True, help="Install for every agent found in your home directory.")
@click.option(
    "--rules",
    multiple=True,
    help="Generate the project rules file for this agent (or 'all'). Repeatable.",
)
@click.option(
    "--path",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Also install the bundle under this directory.",
)
@budget_option
@mode_option
@click.pass_obj
def install_cmd(
    ctx: SkillContext,
    agents: tuple[str, ...],
    all_agents: bool,
    auto: bool,
    rules: tuple[str, ...],
    path: Path | None,
    budget: str | None,
    mode: str | None,
) -> None:
    """Install the session plan for the selected agents.

    Without target flags, installs for the agents listed in
    .skillbudget/config.toml, or for every detected agent. Re-running with
    an unchanged plan writes nothing.

    Exits non-zero only if every target fails; partial failures are
    reported per target.

    Examples:
        skillbudget install --auto
        skillbudget install --agent claude --rules cursor
        skillbudget install --rules all
    """
    signatures = gather_signatures(ctx)
    try:
        targets = _select_targets(
            ctx, signatures, agents=agents, all_agents=all_agents, auto=auto, rules=rules, path=path
        )
    except ValueError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    plan = _resolve_plan(ctx, signatures, budget, mode)
    user_output(
        click.style("Installing ", bold=True)
        + f"{len(plan.selected)} artifacts ({plan.total_cost:,} tokens)...\n"
    )

    report = apply_plan(ctx, plan, targets, signatures)
    by_key = {target.key: target for target in targets}
    for key, result in report.results.items():
        name = by_key[key].display_name
        if result.status == "written":
            user_output(
                click.style("✓ ", fg="green")
                + f"{name}: {result.files_written} file(s) updated "
                + click.style(f"({result.path})", dim=True)
            )
        elif result.status == "unchanged":
            user_output(
                click.style("✓ ", fg="green")
                + f"{name}: up to date "
                + click.style(f"({result.path})", dim=True)
            )
        else:
            reason = result.error.reason if result.error is not None else "unknown error"
            user_output(click.style("✗ ", fg="red") + f"{name}: {reason}")

    installed_global = {t.agent_id for t in targets if t.layout_kind == "single-global-dir"}
    needs_rules = sorted((installed_global & RULE_FILE_AGENT_IDS) - set(rules))
    if needs_rules and "all" not in rules:
        user_output(
            click.style("\n💡 ", fg="yellow")
            + f"{', '.join(needs_rules)} read rules from project-level files. Run in your project:"
        )
        user_output(click.style("     skillbudget install --rules all", fg="cyan"))

    if report.any_failed and not report.all_failed:
        user_output(click.style("\n⚠ ", fg="yellow") + "Some targets failed (partial success).")
    if report.exit_code != 0:
        raise SystemExit(report.exit_code)
