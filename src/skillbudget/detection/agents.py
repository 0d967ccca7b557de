"""Host agents that can consume installed skills.

An agent is considered present when its config directory exists in the
user's home. Several agents can be present at once.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HostAgent:
    agent_id: str
    name: str
    marker_dir: str  # Directory under $HOME, e.g. ".claude"

    @property
    def skills_dir(self) -> str:
        """Global skills directory relative to $HOME."""
        return f"{self.marker_dir}/skills"


HOST_AGENTS: tuple[HostAgent, ...] = (
    HostAgent("claude", "Claude Code", ".claude"),
    HostAgent("cline", "Cline", ".cline"),
    HostAgent("roocode", "Roo Code", ".roo"),
    HostAgent("cursor", "Cursor", ".cursor"),
    HostAgent("windsurf", "Windsurf", ".windsurf"),
    HostAgent("copilot", "Copilot", ".copilot"),
    HostAgent("codex", "Codex", ".codex"),
    HostAgent("gemini", "Gemini CLI", ".gemini"),
    HostAgent("kimi", "Kimi", ".kimi"),
    HostAgent("kilocode", "Kilo Code", ".kilocode"),
    HostAgent("kiro", "Kiro", ".kiro"),
    HostAgent("antigravity", "Antigravity", ".agents"),
)

# Installed when no agent is detected
DEFAULT_AGENT_ID = "claude"


def agent_marker_dirs() -> tuple[str, ...]:
    return tuple(agent.marker_dir for agent in HOST_AGENTS)


def get_host_agent(agent_id: str) -> HostAgent | None:
    for agent in HOST_AGENTS:
        if agent.agent_id == agent_id:
            return agent
    return None


def detect_host_agents(home_entries: frozenset[str]) -> frozenset[str]:
    """Return the ids of every agent whose marker directory is present."""
    return frozenset(agent.agent_id for agent in HOST_AGENTS if agent.marker_dir in home_entries)
