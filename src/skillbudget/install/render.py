"""Render a LoadPlan into the files a target should contain.

Rendering is a pure function of the plan, the catalog, the documents and
the project profile, so re-rendering an unchanged plan yields identical
text and lets the installer skip writes entirely.
"""

import frontmatter

from skillbudget.catalog.models import Catalog
from skillbudget.detection.frameworks import ProjectProfile
from skillbudget.gateway.content.abc import ContentSource
from skillbudget.selection.models import LoadPlan

# First line of every generated rule file; files without it are user-owned
GENERATED_MARKER = "<!-- generated by skillbudget -->"

SECTION_SEPARATOR = "\n\n---\n\n"


def render_skill_dir(plan: LoadPlan, catalog: Catalog, content: ContentSource) -> dict[str, str]:
    """Map each selected artifact's relative path to its document text."""
    files: dict[str, str] = {}
    for artifact_id in plan.selected:
        artifact = catalog.get(artifact_id)
        files[artifact.path] = content.read(artifact)
    return files


def _strip_frontmatter(text: str) -> str:
    return frontmatter.loads(text).content.strip()


def render_rule_file(
    plan: LoadPlan,
    catalog: Catalog,
    content: ContentSource,
    *,
    profile: ProjectProfile,
    agent_name: str,
    bundle_name: str,
) -> str:
    """Concatenate the plan into one project-level rules file.

    Document frontmatter is dropped; rule files are read as plain markdown.
    """
    header_lines = [
        GENERATED_MARKER,
        f"# {profile.framework} Project - {agent_name} Rules",
        "",
        "## Project",
        f"- Framework: {profile.framework}",
        f"- Language: {profile.language}",
        f"- ORM: {profile.orm}",
        f"- API Style: {profile.api_style}",
        f"- Package Manager: {profile.package_manager}",
        "",
        f"## Loaded references ({bundle_name}, {plan.total_cost}/{plan.budget} tokens)",
    ]
    for artifact_id in plan.selected:
        artifact = catalog.get(artifact_id)
        header_lines.append(f"- {artifact.id} ({artifact.cost} tokens)")

    sections = ["\n".join(header_lines)]
    for artifact_id in plan.selected:
        sections.append(_strip_frontmatter(content.read(catalog.get(artifact_id))))
    return SECTION_SEPARATOR.join(sections) + "\n"
