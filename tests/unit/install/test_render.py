"""Tests for rendering plans into target files."""

from skillbudget.detection.frameworks import ProjectProfile
from skillbudget.gateway.content.fake import FakeContentSource
from skillbudget.install.render import GENERATED_MARKER, render_rule_file, render_skill_dir
from skillbudget.selection.models import LoadPlan
from tests.test_utils.catalog_builders import small_catalog

DOCUMENTS = {
    "core": "---\nname: backend-skill\ndescription: Core\n---\n\n# Core\n\nCore body.\n",
    "guide": "# Guide\n\nGuide body.\n",
}

PLAN = LoadPlan(selected=("core", "guide"), total_cost=120, budget=200)

PROFILE = ProjectProfile(
    framework="NestJS",
    language="TypeScript",
    orm="Prisma",
    api_style="REST",
    package_manager="pnpm",
)


def test_render_skill_dir_keeps_documents_verbatim() -> None:
    """Test that skill directories keep frontmatter for agents that read it."""
    files = render_skill_dir(PLAN, small_catalog(), FakeContentSource(documents=DOCUMENTS))

    assert files == {"core.md": DOCUMENTS["core"], "guide.md": DOCUMENTS["guide"]}


def test_render_skill_dir_reads_only_selected() -> None:
    """Test that unselected artifacts are never read."""
    content = FakeContentSource(documents=DOCUMENTS)

    render_skill_dir(PLAN, small_catalog(), content)

    assert content.read_ids == ["core", "guide"]


def _render_rule_file(content: FakeContentSource) -> str:
    return render_rule_file(
        PLAN,
        small_catalog(),
        content,
        profile=PROFILE,
        agent_name="Cursor",
        bundle_name="backend-skill",
    )


def test_render_rule_file_header_and_order() -> None:
    """Test the rule file starts with the marker and lists the plan."""
    text = _render_rule_file(FakeContentSource(documents=DOCUMENTS))

    assert text.splitlines()[0] == GENERATED_MARKER
    assert "# NestJS Project - Cursor Rules" in text
    assert "- ORM: Prisma" in text
    assert "## Loaded references (backend-skill, 120/200 tokens)" in text
    assert text.index("Core body.") < text.index("Guide body.")


def test_render_rule_file_strips_frontmatter() -> None:
    """Test that document frontmatter does not leak into rule files."""
    text = _render_rule_file(FakeContentSource(documents=DOCUMENTS))

    assert "name: backend-skill" not in text
    assert "# Core\n\nCore body." in text


def test_render_rule_file_is_stable() -> None:
    """Test that rendering the same plan twice yields identical text."""
    content = FakeContentSource(documents=DOCUMENTS)

    first = _render_rule_file(content)
    second = _render_rule_file(content)

    assert first == second
