"""Token accounting for the catalog: estimates, totals and budget presets."""

import math
from dataclasses import dataclass

from skillbudget.catalog.models import ARTIFACT_CATEGORIES, ArtifactCategory, Catalog

# Rough characters-per-token ratio for English markdown
CHARS_PER_TOKEN = 3.5

# Share of the full catalog a single-platform project typically loads
SMART_LOAD_RATIO = 0.55

# Named budgets accepted wherever a budget is expected. "full" is resolved
# against the catalog since it depends on its contents.
BUDGET_PRESETS: dict[str, int] = {
    "core": 29740,
    "smart": 31740,
}
FULL_BUDGET_PRESET = "full"


def estimate_tokens(text: str) -> int:
    """Estimate the token cost of a document from its length."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


@dataclass(frozen=True)
class CategoryTotal:
    category: ArtifactCategory
    artifact_count: int
    cost: int


@dataclass(frozen=True)
class CatalogSummary:
    """Per-category totals plus the all-loaded and smart-load estimates."""

    categories: tuple[CategoryTotal, ...]
    total_cost: int

    @property
    def smart_load_cost(self) -> int:
        return math.ceil(self.total_cost * SMART_LOAD_RATIO)


def summarize_catalog(catalog: Catalog) -> CatalogSummary:
    totals: list[CategoryTotal] = []
    for category in ARTIFACT_CATEGORIES:
        members = [a for a in catalog if a.category == category]
        totals.append(
            CategoryTotal(
                category=category,
                artifact_count=len(members),
                cost=sum(a.cost for a in members),
            )
        )
    return CatalogSummary(categories=tuple(totals), total_cost=catalog.total_cost)


def resolve_budget(value: str | int, catalog: Catalog) -> int:
    """Turn a budget given as an integer or preset name into a token count.

    Raises:
        ValueError: If the value is neither a positive integer nor a preset
    """
    if isinstance(value, int):
        budget = value
    elif value == FULL_BUDGET_PRESET:
        budget = catalog.total_cost
    elif value in BUDGET_PRESETS:
        budget = BUDGET_PRESETS[value]
    elif value.strip().isdigit():
        budget = int(value.strip())
    else:
        presets = ", ".join([*BUDGET_PRESETS, FULL_BUDGET_PRESET])
        raise ValueError(
            f"Invalid budget '{value}': expected a positive integer or one of {presets}"
        )

    if budget <= 0:
        raise ValueError(f"Budget must be positive, got {budget}")
    return budget
