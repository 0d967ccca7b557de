"""Target profiles: where and how a plan is materialized for a host agent.

Two layouts exist:
- single-global-dir: one file per artifact under a bundle directory in the
  agent's global skills dir (e.g. ~/.claude/skills/backend-skill/)
- project-rule-file: one concatenated rules file inside the project, for
  agents that only read project-level rules (e.g. .cursorrules)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from skillbudget.detection.agents import HOST_AGENTS, HostAgent, get_host_agent

LayoutKind = Literal["single-global-dir", "project-rule-file"]

DEFAULT_BUNDLE_NAME = "backend-skill"

CUSTOM_AGENT_ID = "custom"


@dataclass(frozen=True)
class TargetProfile:
    """Describes where a plan's artifacts land for one agent.

    path_template placeholders: {home}, {project}, {bundle}.
    """

    agent_id: str
    layout_kind: LayoutKind
    path_template: str
    display_name: str

    @property
    def key(self) -> str:
        """Identifier unique across global and rule-file targets of one agent."""
        if self.layout_kind == "project-rule-file":
            return f"{self.agent_id}-rules"
        return self.agent_id

    def resolve(self, *, home: Path, project_dir: Path, bundle_name: str) -> Path:
        return Path(
            self.path_template.format(home=home, project=project_dir, bundle=bundle_name)
        )


@dataclass(frozen=True)
class RuleFileSpec:
    agent_id: str
    name: str
    relative_path: str


# Agents that read rules from project-level files rather than a skills dir
PROJECT_RULE_FILES: tuple[RuleFileSpec, ...] = (
    RuleFileSpec("cursor", "Cursor", ".cursorrules"),
    RuleFileSpec("copilot", "GitHub Copilot", ".github/copilot-instructions.md"),
    RuleFileSpec("windsurf", "Windsurf", ".windsurfrules"),
    RuleFileSpec("cline", "Cline", ".clinerules/backend-rules.md"),
    RuleFileSpec("roocode", "Roo Code", ".roo/rules/backend-rules.md"),
    RuleFileSpec("kilocode", "Kilo Code", ".kilocode/rules/backend-rules.md"),
    RuleFileSpec("kiro", "Kiro", ".kiro/steering/backend-rules.md"),
)

RULE_FILE_AGENT_IDS: frozenset[str] = frozenset(rule.agent_id for rule in PROJECT_RULE_FILES)


def global_target(agent: HostAgent) -> TargetProfile:
    return TargetProfile(
        agent_id=agent.agent_id,
        layout_kind="single-global-dir",
        path_template="{home}/" + agent.skills_dir + "/{bundle}",
        display_name=agent.name,
    )


def global_targets(agent_ids: list[str] | tuple[str, ...]) -> list[TargetProfile]:
    """Global skill-dir targets for the given agents, in HOST_AGENTS order.

    Raises:
        ValueError: If an agent id is unknown
    """
    unknown = [agent_id for agent_id in agent_ids if get_host_agent(agent_id) is None]
    if unknown:
        available = ", ".join(agent.agent_id for agent in HOST_AGENTS)
        raise ValueError(f"Unknown agent: {', '.join(unknown)}. Available: {available}")
    wanted = set(agent_ids)
    return [global_target(agent) for agent in HOST_AGENTS if agent.agent_id in wanted]


def rule_file_target(rule: RuleFileSpec) -> TargetProfile:
    return TargetProfile(
        agent_id=rule.agent_id,
        layout_kind="project-rule-file",
        path_template="{project}/" + rule.relative_path,
        display_name=rule.name,
    )


def rule_file_targets(agent_ids: list[str] | tuple[str, ...]) -> list[TargetProfile]:
    """Project rule-file targets; "all" selects every rule-file agent.

    Raises:
        ValueError: If an agent id has no rule-file layout
    """
    if "all" in agent_ids:
        return [rule_file_target(rule) for rule in PROJECT_RULE_FILES]
    unknown = [agent_id for agent_id in agent_ids if agent_id not in RULE_FILE_AGENT_IDS]
    if unknown:
        available = ", ".join(rule.agent_id for rule in PROJECT_RULE_FILES)
        raise ValueError(f"Unknown agent: {', '.join(unknown)}. Available: {available}, all")
    wanted = set(agent_ids)
    return [rule_file_target(rule) for rule in PROJECT_RULE_FILES if rule.agent_id in wanted]


def custom_target(directory: Path) -> TargetProfile:
    """Install the bundle under an arbitrary directory."""
    escaped = str(directory).replace("{", "{{").replace("}", "}}")
    return TargetProfile(
        agent_id=CUSTOM_AGENT_ID,
        layout_kind="single-global-dir",
        path_template=escaped + "/{bundle}",
        display_name="Custom",
    )
