"""Show what detection sees in the current project."""

from pathlib import Path

import click

from skillbudget.core.context import SkillContext
from skillbudget.core.planning import gather_signatures
from skillbudget.detection.agents import HOST_AGENTS, agent_marker_dirs
from skillbudget.detection.detector import describe_project, detect
from skillbudget.detection.frameworks import framework_display_name
from skillbudget.detection.signatures import read_project_signatures
from skillbudget.output import user_output


@click.command("detect")
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project to inspect. Defaults to the current directory.",
)
@click.pass_obj
def detect_cmd(ctx: SkillContext, project_dir: Path | None) -> None:
    """Detect the project's framework and the host agents installed for this user."""
    if project_dir is None:
        project_dir = ctx.cwd
        signatures = gather_signatures(ctx)
    else:
        signatures = read_project_signatures(project_dir, ctx.home, agent_marker_dirs())
    detection = detect(signatures)
    profile = describe_project(signatures)

    user_output(click.style("Project: ", bold=True) + str(project_dir))
    if detection.framework is None:
        user_output("  Framework:       none (generic references only)")
    else:
        name = framework_display_name(detection.framework)
        user_output(f"  Framework:       {click.style(name, fg='cyan')} ({detection.framework})")
    user_output(f"  Language:        {profile.language}")
    user_output(f"  ORM:             {profile.orm}")
    user_output(f"  API style:       {profile.api_style}")
    user_output(f"  Package manager: {profile.package_manager}")

    user_output(click.style("\nHost agents:", bold=True))
    if not detection.host_agents:
        user_output("  none detected")
        return
    for agent in HOST_AGENTS:
        if agent.agent_id in detection.host_agents:
            user_output(f"  {click.style('●', fg='green')} {agent.name:14} ~/{agent.skills_dir}")
