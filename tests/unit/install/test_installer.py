"""Tests for installing plans to targets."""

import os
from pathlib import Path

import pytest

from skillbudget.detection.frameworks import ProjectProfile
from skillbudget.gateway.content.fake import FakeContentSource
from skillbudget.install.installer import InstallReport, install
from skillbudget.install.render import GENERATED_MARKER
from skillbudget.install.targets import (
    TargetProfile,
    custom_target,
    global_targets,
    rule_file_targets,
)
from skillbudget.selection.models import LoadPlan
from tests.test_utils.catalog_builders import documents_for, small_catalog

PLAN = LoadPlan(selected=("core", "guide"), total_cost=120, budget=200)
CORE_ONLY = LoadPlan(selected=("core",), total_cost=100, budget=200)


def _install(
    plan: LoadPlan,
    targets: list[TargetProfile],
    project: Path,
    home: Path,
    content: FakeContentSource | None = None,
) -> InstallReport:
    catalog = small_catalog()
    return install(
        plan,
        targets,
        catalog=catalog,
        content=content if content is not None else documents_for(catalog),
        home=home,
        project_dir=project,
        profile=ProjectProfile.unknown(),
        bundle_name="backend-skill",
        max_workers=2,
    )


def test_install_writes_global_skill_dir(tmp_project: Path, tmp_home: Path) -> None:
    """Test that each selected artifact lands in the bundle directory."""
    report = _install(PLAN, global_targets(["claude"]), tmp_project, tmp_home)

    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    result = report.results["claude"]
    assert result.status == "written"
    assert result.files_written == 2
    assert result.path == bundle
    assert sorted(p.name for p in bundle.iterdir()) == ["core.md", "guide.md"]
    assert (bundle / "core.md").read_text(encoding="utf-8").startswith("# core")
    assert report.exit_code == 0


def test_install_unchanged_plan_writes_nothing(tmp_project: Path, tmp_home: Path) -> None:
    """Test that re-installing an unchanged plan performs zero writes."""
    targets = global_targets(["claude"]) + rule_file_targets(["cursor"])
    _install(PLAN, targets, tmp_project, tmp_home)
    core_file = tmp_home / ".claude" / "skills" / "backend-skill" / "core.md"
    rules_file = tmp_project / ".cursorrules"
    before = (core_file.stat().st_mtime_ns, rules_file.stat().st_mtime_ns)

    report = _install(PLAN, targets, tmp_project, tmp_home)

    assert [r.status for r in report.results.values()] == ["unchanged", "unchanged"]
    assert all(r.files_written == 0 for r in report.results.values())
    assert (core_file.stat().st_mtime_ns, rules_file.stat().st_mtime_ns) == before


def test_install_removes_artifacts_dropped_from_plan(tmp_project: Path, tmp_home: Path) -> None:
    """Test that the bundle directory holds exactly the current plan."""
    targets = global_targets(["claude"])
    _install(PLAN, targets, tmp_project, tmp_home)

    report = _install(CORE_ONLY, targets, tmp_project, tmp_home)

    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    assert report.results["claude"].files_written == 1
    assert sorted(p.name for p in bundle.iterdir()) == ["core.md"]


def test_install_leaves_no_staging_dirs(tmp_project: Path, tmp_home: Path) -> None:
    """Test that staging and backup directories are cleaned up."""
    targets = global_targets(["claude"])
    _install(PLAN, targets, tmp_project, tmp_home)
    _install(CORE_ONLY, targets, tmp_project, tmp_home)

    skills_dir = tmp_home / ".claude" / "skills"
    assert [p.name for p in skills_dir.iterdir()] == ["backend-skill"]


def test_install_rule_file_starts_with_marker(tmp_project: Path, tmp_home: Path) -> None:
    """Test that rule files are generated inside the project."""
    report = _install(PLAN, rule_file_targets(["copilot"]), tmp_project, tmp_home)

    rules = tmp_project / ".github" / "copilot-instructions.md"
    assert report.results["copilot-rules"].status == "written"
    assert rules.read_text(encoding="utf-8").startswith(GENERATED_MARKER)


def test_install_refuses_to_overwrite_user_rule_file(tmp_project: Path, tmp_home: Path) -> None:
    """Test that a hand-written rules file is never replaced."""
    rules = tmp_project / ".cursorrules"
    rules.write_text("my own rules\n", encoding="utf-8")

    report = _install(PLAN, rule_file_targets(["cursor"]), tmp_project, tmp_home)

    result = report.results["cursor-rules"]
    assert result.status == "failed"
    assert result.error is not None
    assert "not generated by skillbudget" in result.error.reason
    assert rules.read_text(encoding="utf-8") == "my own rules\n"
    assert report.exit_code == 1


def test_install_updates_previously_generated_rule_file(
    tmp_project: Path, tmp_home: Path
) -> None:
    """Test that a rules file we generated earlier is refreshed."""
    rules = tmp_project / ".windsurfrules"
    rules.write_text(GENERATED_MARKER + "\nold plan\n", encoding="utf-8")

    report = _install(PLAN, rule_file_targets(["windsurf"]), tmp_project, tmp_home)

    assert report.results["windsurf-rules"].status == "written"
    assert "old plan" not in rules.read_text(encoding="utf-8")


def test_install_isolates_failing_target(tmp_project: Path, tmp_home: Path) -> None:
    """Test that one broken target does not affect the other."""
    (tmp_home / ".gemini").write_text("a file where a directory should be", encoding="utf-8")

    report = _install(PLAN, global_targets(["claude", "gemini"]), tmp_project, tmp_home)

    assert report.results["claude"].status == "written"
    assert report.results["gemini"].status == "failed"
    assert report.results["gemini"].error is not None
    assert report.any_failed
    assert not report.all_failed
    assert report.exit_code == 0
    assert (tmp_home / ".claude" / "skills" / "backend-skill" / "core.md").is_file()


@pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
def test_install_read_only_target_dir(tmp_project: Path, tmp_home: Path) -> None:
    """Test that a read-only skills directory fails only its own target."""
    read_only = tmp_home / ".cursor" / "skills"
    read_only.mkdir(parents=True)
    read_only.chmod(0o555)
    try:
        report = _install(PLAN, global_targets(["claude", "cursor"]), tmp_project, tmp_home)
    finally:
        read_only.chmod(0o755)

    assert report.results["claude"].success
    assert report.results["cursor"].status == "failed"
    assert not (read_only / "backend-skill").exists()


def test_install_all_targets_failing_exits_non_zero(tmp_project: Path, tmp_home: Path) -> None:
    """Test that the exit code is non-zero only when every target fails."""
    (tmp_home / ".claude").write_text("", encoding="utf-8")
    (tmp_home / ".gemini").write_text("", encoding="utf-8")

    report = _install(PLAN, global_targets(["claude", "gemini"]), tmp_project, tmp_home)

    assert report.all_failed
    assert report.exit_code == 1


def test_install_duplicate_path_fails_later_target(tmp_project: Path, tmp_home: Path) -> None:
    """Test that two targets resolving to one path do not race."""
    targets = global_targets(["claude"]) + [custom_target(tmp_home / ".claude" / "skills")]

    report = _install(PLAN, targets, tmp_project, tmp_home)

    assert report.results["claude"].status == "written"
    custom = report.results["custom"]
    assert custom.status == "failed"
    assert custom.error is not None
    assert "already used by target claude" in custom.error.reason


def test_install_nested_path_fails_later_target(tmp_project: Path, tmp_home: Path) -> None:
    """Test that a target inside another target's bundle is rejected on every run."""
    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    targets = global_targets(["claude"]) + [custom_target(bundle)]

    first = _install(PLAN, targets, tmp_project, tmp_home)
    second = _install(PLAN, targets, tmp_project, tmp_home)

    assert first.results["claude"].status == "written"
    assert second.results["claude"].status == "unchanged"
    for report in (first, second):
        custom = report.results["custom"]
        assert custom.status == "failed"
        assert custom.error is not None
        assert "overlaps target claude" in custom.error.reason
    assert not (bundle / "backend-skill").exists()


def test_install_enclosing_path_fails_later_target(tmp_project: Path, tmp_home: Path) -> None:
    """Test that a target containing an earlier target's bundle is rejected."""
    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    targets = [custom_target(bundle)] + global_targets(["claude"])

    report = _install(PLAN, targets, tmp_project, tmp_home)

    assert report.results["custom"].status == "written"
    claude = report.results["claude"]
    assert claude.status == "failed"
    assert claude.error is not None
    assert "overlaps target custom" in claude.error.reason
    assert sorted(p.name for p in bundle.iterdir()) == ["backend-skill"]


def test_install_missing_document_keeps_previous_install(
    tmp_project: Path, tmp_home: Path
) -> None:
    """Test that a render failure leaves the published bundle untouched."""
    targets = global_targets(["claude"])
    _install(CORE_ONLY, targets, tmp_project, tmp_home)
    content = FakeContentSource(documents={"core": "# changed core\n"})

    report = _install(PLAN, targets, tmp_project, tmp_home, content=content)

    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    assert report.results["claude"].status == "failed"
    assert sorted(p.name for p in bundle.iterdir()) == ["core.md"]
    assert (bundle / "core.md").read_text(encoding="utf-8").startswith("# core")


def test_install_results_follow_target_order(tmp_project: Path, tmp_home: Path) -> None:
    """Test that results are reported in the order targets were given."""
    targets = rule_file_targets(["kiro"]) + global_targets(["codex", "claude"])

    report = _install(PLAN, targets, tmp_project, tmp_home)

    assert list(report.results) == ["kiro-rules", "claude", "codex"]
