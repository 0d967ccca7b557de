"""Project configuration loaded from .skillbudget/config.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from skillbudget.errors import SkillBudgetError
from skillbudget.install.installer import DEFAULT_MAX_WORKERS
from skillbudget.install.targets import DEFAULT_BUNDLE_NAME
from skillbudget.selection.models import SELECTION_MODES, SelectionMode

DEFAULT_BUDGET = "smart"
DEFAULT_MODE: SelectionMode = "strict"


class ConfigError(SkillBudgetError):
    """config.toml holds a value of the wrong type or an unknown option."""


@dataclass(frozen=True)
class SkillConfig:
    """In-memory representation of `.skillbudget/config.toml`.

    Example config.toml:
      [session]
      budget = 31740      # or "core", "smart", "full"
      mode = "strict"     # or "relaxed"

      [install]
      agents = ["claude", "cursor"]
      rules = ["cursor"]
      bundle_name = "backend-skill"
      max_workers = 4
    """

    budget: str | int
    mode: SelectionMode
    agents: tuple[str, ...]
    rules: tuple[str, ...]
    bundle_name: str
    max_workers: int

    @staticmethod
    def default() -> "SkillConfig":
        return SkillConfig(
            budget=DEFAULT_BUDGET,
            mode=DEFAULT_MODE,
            agents=(),
            rules=(),
            bundle_name=DEFAULT_BUNDLE_NAME,
            max_workers=DEFAULT_MAX_WORKERS,
        )


def get_config_path(project_dir: Path) -> Path:
    return project_dir / ".skillbudget" / "config.toml"


def _string_list(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(value)


def load_config(project_dir: Path) -> SkillConfig:
    """Load config.toml if present; otherwise return defaults.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = get_config_path(project_dir)
    defaults = SkillConfig.default()
    if not cfg_path.exists():
        return defaults

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{cfg_path}: invalid TOML: {e}") from e

    session = data.get("session", {})
    install = data.get("install", {})

    budget = session.get("budget", defaults.budget)
    if isinstance(budget, bool) or not isinstance(budget, (int, str)):
        raise ConfigError("session.budget must be an integer or a preset name")

    mode = session.get("mode", defaults.mode)
    if mode not in SELECTION_MODES:
        raise ConfigError(f"session.mode must be one of {', '.join(SELECTION_MODES)}")

    bundle_name = install.get("bundle_name", defaults.bundle_name)
    if not isinstance(bundle_name, str) or not bundle_name or "/" in bundle_name:
        raise ConfigError("install.bundle_name must be a non-empty directory name")

    max_workers = install.get("max_workers", defaults.max_workers)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigError("install.max_workers must be a positive integer")

    return SkillConfig(
        budget=budget,
        mode=mode,
        agents=_string_list(install.get("agents", []), "install.agents"),
        rules=_string_list(install.get("rules", []), "install.rules"),
        bundle_name=bundle_name,
        max_workers=max_workers,
    )
