"""Data models for the artifact catalog."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

from skillbudget.errors import UnknownArtifactError

# 1 = mandatory, 6 = install-time / on-demand only
MIN_TIER = 1
MAX_TIER = 6

# Artifacts at or above this tier may be evicted in strict mode
EVICTABLE_TIER = 5

ArtifactCategory = Literal["core", "framework", "shared-always", "on-demand"]

ARTIFACT_CATEGORIES: tuple[ArtifactCategory, ...] = (
    "core",
    "framework",
    "shared-always",
    "on-demand",
)


@dataclass(frozen=True)
class Artifact:
    """A single unit of loadable reference content."""

    id: str
    path: str  # Relative to the bundle root, e.g. "shared/code-review.md"
    cost: int  # Token estimate
    tier: int
    category: ArtifactCategory
    trigger_keywords: frozenset[str] = frozenset()
    framework: str | None = None  # Only set for category="framework"
    description: str = ""

    @property
    def is_mandatory(self) -> bool:
        return self.tier == MIN_TIER or self.category == "core"


@dataclass(frozen=True)
class Catalog:
    """Ordered, immutable registry of artifacts.

    Declaration order is significant: it is the tie-break for selection
    within a tier. Use skillbudget.catalog.loader to build one; the loader
    enforces id uniqueness and value ranges.
    """

    artifacts: tuple[Artifact, ...]
    _by_id: dict[str, Artifact] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {a.id: a for a in self.artifacts})

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self.artifacts)

    def __len__(self) -> int:
        return len(self.artifacts)

    def __contains__(self, artifact_id: object) -> bool:
        return artifact_id in self._by_id

    def get(self, artifact_id: str) -> Artifact:
        """Return the artifact with the given id.

        Raises:
            UnknownArtifactError: If no artifact has that id
        """
        if artifact_id not in self._by_id:
            raise UnknownArtifactError(artifact_id)
        return self._by_id[artifact_id]

    def cost_of(self, artifact_ids: tuple[str, ...] | list[str]) -> int:
        return sum(self.get(artifact_id).cost for artifact_id in artifact_ids)

    def mandatory(self) -> tuple[Artifact, ...]:
        """Tier-1 and core artifacts, in catalog order."""
        return tuple(a for a in self.artifacts if a.is_mandatory)

    def tier(self, tier: int) -> tuple[Artifact, ...]:
        return tuple(a for a in self.artifacts if a.tier == tier)

    def on_demand(self) -> tuple[Artifact, ...]:
        return tuple(a for a in self.artifacts if a.category == "on-demand")

    def framework_artifact(self, framework: str | None) -> Artifact | None:
        """Return the artifact documenting a framework, if the catalog has one."""
        if framework is None:
            return None
        for artifact in self.artifacts:
            if artifact.category == "framework" and artifact.framework == framework:
                return artifact
        return None

    @property
    def total_cost(self) -> int:
        return sum(a.cost for a in self.artifacts)
