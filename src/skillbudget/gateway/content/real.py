"""Real ContentSource reading skill documents from a directory."""

from pathlib import Path

from skillbudget.catalog.models import Artifact
from skillbudget.gateway.content.abc import ContentSource


class RealContentSource(ContentSource):
    """Production implementation backed by a skills directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def has_content(self, artifact: Artifact) -> bool:
        return (self._root / artifact.path).is_file()

    def read(self, artifact: Artifact) -> str:
        return (self._root / artifact.path).read_text(encoding="utf-8")
