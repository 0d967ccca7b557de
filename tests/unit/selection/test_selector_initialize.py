"""Tests for BudgetedSelector.initialize."""

import pytest

from skillbudget.catalog.loader import load_bundled_catalog
from skillbudget.detection.detector import DetectionResult
from skillbudget.errors import BudgetDeficitError
from skillbudget.selection.selector import BudgetedSelector, initialize
from tests.test_utils.catalog_builders import (
    make_artifact,
    make_catalog,
    no_detection,
    small_catalog,
)


def test_core_budget_without_framework() -> None:
    """Test the core auto-load: shared references fill up in declared order.

    shared/database (4620) would bring the total to 33360, so it is skipped
    and the smaller prompt-patterns reference after it still fits.
    """
    catalog = load_bundled_catalog()

    plan = initialize(catalog, no_detection(), 29740, "strict")

    assert plan.selected == (
        "skill",
        "agents",
        "shared/code-review",
        "shared/error-recovery",
        "shared/api-design",
        "shared/security",
        "shared/prompt-patterns",
    )
    assert plan.total_cost == 29640
    assert plan.total_cost <= plan.budget
    assert not plan.contains("shared/database")


def test_smart_budget_with_nestjs() -> None:
    """Test the smart load for a detected NestJS project."""
    catalog = load_bundled_catalog()
    detection = DetectionResult(framework="nestjs", host_agents=frozenset({"claude"}))

    plan = initialize(catalog, detection, 31740, "strict")

    assert plan.selected == (
        "skill",
        "nodejs/nestjs",
        "agents",
        "shared/code-review",
        "shared/error-recovery",
        "shared/api-design",
        "shared/prompt-patterns",
    )
    assert plan.total_cost == 30840


def test_initialize_loads_only_detected_framework() -> None:
    """Test that other framework references are never loaded by initialize."""
    catalog = load_bundled_catalog()
    detection = DetectionResult(framework="django", host_agents=frozenset())

    plan = initialize(catalog, detection, catalog.total_cost, "strict")

    frameworks = [a for a in plan.selected if catalog.get(a).category == "framework"]
    assert frameworks == ["python/django"]


def test_initialize_never_loads_on_demand_artifacts() -> None:
    """Test that tier-6 references are left for extend() even with room to spare."""
    catalog = small_catalog()

    plan = initialize(catalog, no_detection(), 10_000, "strict")

    assert plan.selected == ("core", "guide", "shared", "extra-a", "extra-b")
    assert plan.total_cost == 175


def test_initialize_unknown_framework_loads_generic_content() -> None:
    """Test that a framework with no reference is treated like no framework."""
    catalog = small_catalog()
    detection = DetectionResult(framework="phoenix", host_agents=frozenset())

    plan = initialize(catalog, detection, 10_000, "strict")

    assert "nestjs" not in plan.selected


def test_initialize_exact_fit_is_allowed() -> None:
    """Test that a budget equal to the mandatory cost succeeds."""
    plan = initialize(small_catalog(), no_detection(), 100, "relaxed")

    assert plan.selected == ("core",)
    assert plan.remaining == 0


def test_initialize_deficit_reports_shortfall() -> None:
    """Test that mandatory artifacts over budget fail with the exact deficit."""
    catalog = make_catalog(
        make_artifact("core-a", cost=60, tier=1, category="core"),
        make_artifact("core-b", cost=50, tier=2, category="core"),
        make_artifact("shared", cost=5, tier=3),
    )

    with pytest.raises(BudgetDeficitError) as exc_info:
        initialize(catalog, no_detection(), 100, "strict")

    assert exc_info.value.deficit == 10
    assert exc_info.value.budget == 100
    assert exc_info.value.artifacts == (("core-a", 60), ("core-b", 50))


@pytest.mark.parametrize("budget", [0, -1])
def test_initialize_rejects_non_positive_budget(budget: int) -> None:
    """Test that a zero or negative budget is a caller error."""
    with pytest.raises(ValueError, match="Budget must be positive"):
        initialize(small_catalog(), no_detection(), budget, "strict")


def test_initialize_is_deterministic() -> None:
    """Test that identical inputs give identical plans."""
    selector = BudgetedSelector(catalog=load_bundled_catalog(), mode="strict")
    detection = DetectionResult(framework="fastapi", host_agents=frozenset())

    assert selector.initialize(detection, 31740) == selector.initialize(detection, 31740)
