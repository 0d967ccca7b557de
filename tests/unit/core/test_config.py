"""Tests for loading .skillbudget/config.toml."""

from pathlib import Path

import pytest

from skillbudget.core.config import ConfigError, SkillConfig, get_config_path, load_config


def _write_config(project: Path, body: str) -> None:
    path = get_config_path(project)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")


def test_load_config_defaults_when_missing(tmp_project: Path) -> None:
    """Test that a project without config gets defaults."""
    assert load_config(tmp_project) == SkillConfig.default()


def test_load_config_reads_all_options(tmp_project: Path) -> None:
    """Test reading both [session] and [install] tables."""
    _write_config(
        tmp_project,
        """
[session]
budget = 40000
mode = "relaxed"

[install]
agents = ["claude", "gemini"]
rules = ["cursor"]
bundle_name = "team-skill"
max_workers = 2
""",
    )

    config = load_config(tmp_project)

    assert config == SkillConfig(
        budget=40000,
        mode="relaxed",
        agents=("claude", "gemini"),
        rules=("cursor",),
        bundle_name="team-skill",
        max_workers=2,
    )


def test_load_config_partial_keeps_defaults(tmp_project: Path) -> None:
    """Test that unspecified options fall back to defaults."""
    _write_config(tmp_project, '[session]\nbudget = "core"\n')

    config = load_config(tmp_project)

    assert config.budget == "core"
    assert config.mode == SkillConfig.default().mode
    assert config.agents == ()


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ("[session\n", "invalid TOML"),
        ("[session]\nbudget = true\n", "session.budget"),
        ('[session]\nmode = "lazy"\n', "session.mode"),
        ('[install]\nagents = "claude"\n', "install.agents"),
        ('[install]\nbundle_name = "a/b"\n', "install.bundle_name"),
        ("[install]\nmax_workers = 0\n", "install.max_workers"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_project: Path, body: str, expected: str) -> None:
    """Test that malformed options raise ConfigError naming the option."""
    _write_config(tmp_project, body)

    with pytest.raises(ConfigError, match=expected):
        load_config(tmp_project)
