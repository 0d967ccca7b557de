"""Fake ContentSource for testing.

FakeContentSource is an in-memory implementation backed by a dict mapping
artifact ids to document text.
"""

from skillbudget.catalog.models import Artifact
from skillbudget.gateway.content.abc import ContentSource


class FakeContentSource(ContentSource):
    """In-memory fake backed by a dict.

    This class has NO public setup methods. All state is provided via the
    constructor or captured during execution.
    """

    def __init__(self, *, documents: dict[str, str] | None = None) -> None:
        """Create FakeContentSource with pre-seeded documents.

        Args:
            documents: Dict mapping artifact ids to content. Defaults to empty.
        """
        self._documents = documents if documents is not None else {}
        self._read_ids: list[str] = []

    @property
    def read_ids(self) -> list[str]:
        """Artifact ids passed to read(), in call order.

        This property is for test assertions only.
        """
        return list(self._read_ids)

    def has_content(self, artifact: Artifact) -> bool:
        return artifact.id in self._documents

    def read(self, artifact: Artifact) -> str:
        self._read_ids.append(artifact.id)
        if artifact.id not in self._documents:
            raise FileNotFoundError(f"No document for artifact {artifact.id}")
        return self._documents[artifact.id]
