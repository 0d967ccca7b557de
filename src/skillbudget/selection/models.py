"""Data models for budgeted selection."""

from dataclasses import dataclass
from typing import Literal

SelectionMode = Literal["strict", "relaxed"]

SELECTION_MODES: tuple[SelectionMode, ...] = ("strict", "relaxed")

# Why a candidate was skipped during extension
OverageReason = Literal["over-budget", "not-evictable"]


@dataclass(frozen=True)
class LoadPlan:
    """The selected, ordered, budget-respecting set of artifacts for a session.

    Invariants (enforced by the selector):
    - total_cost <= budget
    - selected holds no duplicate id
    - selected is in selection order
    """

    selected: tuple[str, ...]
    total_cost: int
    budget: int

    def contains(self, artifact_id: str) -> bool:
        return artifact_id in self.selected

    @property
    def remaining(self) -> int:
        return self.budget - self.total_cost


@dataclass(frozen=True)
class BudgetOverageAdvisory:
    """A candidate skipped because it did not fit. Non-fatal."""

    artifact_id: str
    cost: int
    remaining: int
    reason: OverageReason

    @property
    def message(self) -> str:
        if self.reason == "not-evictable":
            return (
                f"{self.artifact_id} ({self.cost} tokens) skipped: only {self.remaining} tokens "
                "free and evicting every tier 5-6 artifact would not make room"
            )
        return (
            f"{self.artifact_id} ({self.cost} tokens) skipped: over budget, "
            f"only {self.remaining} tokens free"
        )


@dataclass(frozen=True)
class ExtendResult:
    """Outcome of extending a plan with candidate artifacts."""

    plan: LoadPlan
    added: tuple[str, ...]
    evicted: tuple[str, ...]
    advisories: tuple[BudgetOverageAdvisory, ...]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.evicted)
