"""Dependency container threaded through CLI commands."""

from dataclasses import dataclass
from pathlib import Path

from skillbudget.catalog.loader import get_data_dir, load_bundled_catalog
from skillbudget.catalog.models import Catalog
from skillbudget.core.config import SkillConfig, load_config
from skillbudget.gateway.content.abc import ContentSource
from skillbudget.gateway.content.real import RealContentSource


@dataclass(frozen=True)
class SkillContext:
    """Immutable context holding all dependencies for skillbudget operations.

    Created at the CLI entry point and passed to commands via Click's obj.
    Tests construct one with for_test() and pass it to CliRunner.invoke.
    """

    cwd: Path  # Project directory
    home: Path  # Holds global agent config dirs
    catalog: Catalog
    content: ContentSource
    config: SkillConfig

    @staticmethod
    def for_test(
        *,
        cwd: Path,
        home: Path,
        catalog: Catalog | None = None,
        content: ContentSource | None = None,
        config: SkillConfig | None = None,
    ) -> "SkillContext":
        """Create a SkillContext with test defaults: bundled catalog and documents."""
        return SkillContext(
            cwd=cwd,
            home=home,
            catalog=catalog if catalog is not None else load_bundled_catalog(),
            content=(
                content if content is not None else RealContentSource(get_data_dir() / "skills")
            ),
            config=config if config is not None else SkillConfig.default(),
        )


def create_context(*, cwd: Path | None = None) -> SkillContext:
    """Create the production context with real implementations."""
    project_dir = cwd if cwd is not None else Path.cwd()
    return SkillContext(
        cwd=project_dir,
        home=Path.home(),
        catalog=load_bundled_catalog(),
        content=RealContentSource(get_data_dir() / "skills"),
        config=load_config(project_dir),
    )
