"""Map free-text task hints to candidate on-demand artifacts.

Matching is a case-insensitive substring test against each on-demand
artifact's trigger keywords. The result is a set built in one pass with no
early exit, so it does not depend on the order artifacts or keywords are
visited. Several artifacts may match the same text; choosing among them
is the selector's job.
"""

from collections.abc import Iterable

from skillbudget.catalog.models import Artifact, Catalog


def _matches(artifact: Artifact, folded_text: str) -> bool:
    return any(keyword.casefold() in folded_text for keyword in artifact.trigger_keywords)


def match(free_text: str, catalog: Catalog) -> frozenset[str]:
    """Return the ids of on-demand artifacts triggered by the text."""
    folded_text = free_text.casefold()
    return frozenset(a.id for a in catalog.on_demand() if _matches(a, folded_text))


def match_all(hints: Iterable[str], catalog: Catalog) -> frozenset[str]:
    """Union of match() over several hints."""
    matched: frozenset[str] = frozenset()
    for hint in hints:
        matched = matched | match(hint, catalog)
    return matched
