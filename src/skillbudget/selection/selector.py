"""Budgeted selection of artifacts into a LoadPlan.

initialize() builds the session's first plan from mandatory artifacts, the
detected framework's reference and tiers 2..5. extend() adds candidates
proposed by the trigger matcher, evicting low-priority artifacts in strict
mode when that makes room.

Both operations are pure: they return new LoadPlan values and never mutate
their inputs. For identical inputs the result is identical; catalog order
and tier order are the only tie-breaks.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from skillbudget.catalog.models import EVICTABLE_TIER, MAX_TIER, Artifact, Catalog
from skillbudget.detection.detector import DetectionResult
from skillbudget.errors import BudgetDeficitError
from skillbudget.selection.models import (
    BudgetOverageAdvisory,
    ExtendResult,
    LoadPlan,
    OverageReason,
    SelectionMode,
)

logger = logging.getLogger(__name__)

# Tiers considered by initialize() after the mandatory set and framework
INITIAL_TIERS = range(2, EVICTABLE_TIER + 1)

# Categories initialize() may load from INITIAL_TIERS. Framework references
# come only from detection; on-demand artifacts only from extend().
INITIAL_CATEGORIES = frozenset({"core", "shared-always"})


@dataclass(frozen=True)
class BudgetedSelector:
    """Selects artifacts from a catalog under a token budget."""

    catalog: Catalog
    mode: SelectionMode

    def initialize(self, detection: DetectionResult, budget: int) -> LoadPlan:
        """Build the initial plan for a session.

        Raises:
            ValueError: If budget is not positive
            BudgetDeficitError: If mandatory artifacts alone exceed the budget
        """
        if budget <= 0:
            raise ValueError(f"Budget must be positive, got {budget}")

        mandatory = self.catalog.mandatory()
        mandatory_cost = sum(a.cost for a in mandatory)
        if mandatory_cost > budget:
            raise BudgetDeficitError(
                deficit=mandatory_cost - budget,
                budget=budget,
                artifacts=tuple((a.id, a.cost) for a in mandatory),
            )

        selected = [a.id for a in mandatory]
        total = mandatory_cost

        optional: list[Artifact] = []
        framework_artifact = self.catalog.framework_artifact(detection.framework)
        if framework_artifact is not None:
            optional.append(framework_artifact)
        for tier in INITIAL_TIERS:
            optional.extend(
                a
                for a in self.catalog.tier(tier)
                if a.category in INITIAL_CATEGORIES and not a.is_mandatory
            )

        for artifact in optional:
            if artifact.id in selected:
                continue
            if total + artifact.cost > budget:
                logger.debug(
                    "Skipping %s (%d tokens): %d of %d used",
                    artifact.id,
                    artifact.cost,
                    total,
                    budget,
                )
                continue
            selected.append(artifact.id)
            total += artifact.cost

        logger.debug("Initial plan: %d artifacts, %d/%d tokens", len(selected), total, budget)
        return LoadPlan(selected=tuple(selected), total_cost=total, budget=budget)

    def extend(self, plan: LoadPlan, candidate_ids: Iterable[str]) -> ExtendResult:
        """Add candidates to a plan without exceeding its budget.

        Candidates are processed in ascending id order. Artifacts that are
        themselves candidates in this call are never evicted, so calling
        extend() again with the same candidates changes nothing.

        In strict mode a candidate that does not fit is first checked against
        the room that evicting every eligible tier 5-6 artifact would free. If
        that is still not enough nothing is evicted and the candidate is
        skipped with a not-evictable advisory, so a skipped candidate never
        costs the plan any artifacts.

        Raises:
            UnknownArtifactError: If a candidate id is not in the catalog
        """
        candidates = sorted(set(candidate_ids))
        protected = frozenset(candidates)
        candidate_artifacts = [self.catalog.get(artifact_id) for artifact_id in candidates]

        selected = list(plan.selected)
        total = plan.total_cost
        added: list[str] = []
        evicted: list[str] = []
        advisories: list[BudgetOverageAdvisory] = []

        for artifact in candidate_artifacts:
            if artifact.id in selected:
                continue

            if total + artifact.cost <= plan.budget:
                selected.append(artifact.id)
                total += artifact.cost
                added.append(artifact.id)
                continue

            if self.mode == "relaxed":
                advisories.append(self._advise(artifact, plan.budget - total, "over-budget"))
                continue

            victims = self._eviction_order(selected, protected)
            reclaimable = sum(self.catalog.get(v).cost for v in victims)
            if total - reclaimable + artifact.cost > plan.budget:
                advisories.append(self._advise(artifact, plan.budget - total, "not-evictable"))
                continue

            for victim_id in victims:
                if total + artifact.cost <= plan.budget:
                    break
                selected.remove(victim_id)
                total -= self.catalog.get(victim_id).cost
                evicted.append(victim_id)
                logger.info("Evicted %s to make room for %s", victim_id, artifact.id)

            selected.append(artifact.id)
            total += artifact.cost
            added.append(artifact.id)

        return ExtendResult(
            plan=LoadPlan(selected=tuple(selected), total_cost=total, budget=plan.budget),
            added=tuple(added),
            evicted=tuple(evicted),
            advisories=tuple(advisories),
        )

    def _eviction_order(self, selected: list[str], protected: frozenset[str]) -> list[str]:
        """Evictable artifacts, highest tier first, most recently selected first."""
        ordered: list[str] = []
        for tier in range(MAX_TIER, EVICTABLE_TIER - 1, -1):
            ordered.extend(
                artifact_id
                for artifact_id in reversed(selected)
                if artifact_id not in protected and self.catalog.get(artifact_id).tier == tier
            )
        return ordered

    def _advise(
        self, artifact: Artifact, remaining: int, reason: OverageReason
    ) -> BudgetOverageAdvisory:
        advisory = BudgetOverageAdvisory(
            artifact_id=artifact.id, cost=artifact.cost, remaining=remaining, reason=reason
        )
        logger.info("Budget overage avoided: %s", advisory.message)
        return advisory


def initialize(
    catalog: Catalog, detection: DetectionResult, budget: int, mode: SelectionMode
) -> LoadPlan:
    """Build the initial LoadPlan. See BudgetedSelector.initialize."""
    return BudgetedSelector(catalog=catalog, mode=mode).initialize(detection, budget)


def extend(
    plan: LoadPlan, candidate_ids: Iterable[str], catalog: Catalog, mode: SelectionMode
) -> ExtendResult:
    """Extend a LoadPlan with candidates. See BudgetedSelector.extend."""
    return BudgetedSelector(catalog=catalog, mode=mode).extend(plan, candidate_ids)
