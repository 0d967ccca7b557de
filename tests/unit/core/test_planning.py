"""Tests for building plans end to end from project files."""

import json
from pathlib import Path

from skillbudget.catalog.loader import load_bundled_catalog
from skillbudget.core.context import SkillContext
from skillbudget.core.planning import apply_plan, build_plan, gather_signatures
from skillbudget.install.targets import global_targets, rule_file_targets


def _nest_project(project: Path) -> None:
    (project / "package.json").write_text(
        json.dumps({"dependencies": {"@nestjs/core": "^10.0.0", "@prisma/client": "^5.0.0"}}),
        encoding="utf-8",
    )


def test_build_plan_uses_detected_framework(tmp_project: Path, tmp_home: Path) -> None:
    """Test that the framework reference follows the mandatory artifact."""
    _nest_project(tmp_project)
    ctx = SkillContext.for_test(cwd=tmp_project, home=tmp_home)

    outcome = build_plan(ctx.catalog, gather_signatures(ctx), budget=31740, mode="strict")

    assert outcome.detection.framework == "nestjs"
    assert outcome.plan.selected[:2] == ("skill", "nodejs/nestjs")
    assert outcome.matched == frozenset()


def test_build_plan_with_hints_extends(tmp_project: Path, tmp_home: Path) -> None:
    """Test that hints pull on-demand references into a roomy plan."""
    ctx = SkillContext.for_test(cwd=tmp_project, home=tmp_home)
    catalog = load_bundled_catalog()

    outcome = build_plan(
        catalog,
        gather_signatures(ctx),
        budget=catalog.total_cost,
        mode="strict",
        hints=["deadlock in the job queue"],
    )

    assert outcome.matched == frozenset({"shared/concurrency", "shared/queues"})
    assert outcome.added == ("shared/concurrency", "shared/queues")
    assert outcome.plan.total_cost <= outcome.plan.budget


def test_apply_plan_installs_bundled_documents(tmp_project: Path, tmp_home: Path) -> None:
    """Test installing a real plan with the bundled documents."""
    _nest_project(tmp_project)
    ctx = SkillContext.for_test(cwd=tmp_project, home=tmp_home)
    signatures = gather_signatures(ctx)
    outcome = build_plan(ctx.catalog, signatures, budget=31740, mode="strict")

    report = apply_plan(
        ctx, outcome.plan, global_targets(["claude"]) + rule_file_targets(["cursor"]), signatures
    )

    assert report.exit_code == 0
    bundle = tmp_home / ".claude" / "skills" / "backend-skill"
    assert (bundle / "SKILL.md").is_file()
    assert (bundle / "nodejs" / "nestjs.md").is_file()
    rules = (tmp_project / ".cursorrules").read_text(encoding="utf-8")
    assert "- Framework: NestJS" in rules
    assert "- ORM: Prisma" in rules
