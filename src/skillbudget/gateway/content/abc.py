"""Artifact content gateway ABC.

Provides the bytes behind catalog artifacts. Paths are the artifact's
`path` field, relative to the skills root.
"""

from abc import ABC, abstractmethod

from skillbudget.catalog.models import Artifact


class ContentSource(ABC):
    """Abstract gateway for reading artifact documents."""

    @abstractmethod
    def has_content(self, artifact: Artifact) -> bool:
        """Check whether the artifact's document exists."""
        ...

    @abstractmethod
    def read(self, artifact: Artifact) -> str:
        """Read the artifact's document.

        Args:
            artifact: Catalog artifact whose document to read

        Returns:
            Document text

        Raises:
            OSError: If the document cannot be read
        """
        ...
