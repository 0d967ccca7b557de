"""Observable project signatures: marker files, manifest text, agent dirs.

This is the only part of detection that touches the filesystem. Everything
downstream (frameworks, profile, host agents) is a pure function of the
ProjectSignatures value gathered here.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Marker files whose presence identifies a stack. Files in MANIFEST_MARKERS
# are also read so predicates can inspect their content.
KNOWN_MARKERS: tuple[str, ...] = (
    "nest-cli.json",
    "package.json",
    "tsconfig.json",
    "next.config.js",
    "next.config.mjs",
    "next.config.ts",
    "nuxt.config.js",
    "nuxt.config.ts",
    "bun.lockb",
    "pnpm-lock.yaml",
    "yarn.lock",
    "package-lock.json",
    "manage.py",
    "requirements.txt",
    "pyproject.toml",
    "poetry.lock",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "composer.json",
    "composer.lock",
    "go.mod",
    "Gemfile",
    "Gemfile.lock",
    "Cargo.toml",
    "Cargo.lock",
)

MANIFEST_MARKERS: frozenset[str] = frozenset(
    {
        "package.json",
        "manage.py",
        "requirements.txt",
        "pyproject.toml",
        "pom.xml",
        "build.gradle",
        "build.gradle.kts",
        "composer.json",
        "go.mod",
        "Gemfile",
        "Cargo.toml",
    }
)


class MalformedSignatureError(Exception):
    """A marker exists but its content cannot be interpreted."""


@dataclass(frozen=True)
class ProjectSignatures:
    """Everything detection is allowed to know about a project and its host.

    markers: Marker file names present in the project directory
    contents: Text of manifest markers, keyed by marker name
    home_entries: Agent marker directories present in the home directory
    unreadable: Markers that exist but could not be read
    """

    markers: frozenset[str] = frozenset()
    contents: Mapping[str, str] = field(default_factory=dict)
    home_entries: frozenset[str] = frozenset()
    unreadable: frozenset[str] = frozenset()

    def has(self, marker: str) -> bool:
        return marker in self.markers

    def text(self, marker: str) -> str:
        """Content of a manifest marker, or "" when absent."""
        return self.contents.get(marker, "")

    def python_requirements(self) -> str:
        """Lowercased requirements.txt + pyproject.toml text."""
        return (self.text("requirements.txt") + "\n" + self.text("pyproject.toml")).lower()

    def json_manifest(self, marker: str) -> dict[str, object]:
        """Parse a JSON manifest.

        Returns:
            The parsed object, or {} when the marker is absent

        Raises:
            MalformedSignatureError: If the marker is unreadable or not a JSON object
        """
        if marker in self.unreadable:
            raise MalformedSignatureError(f"{marker} could not be read")
        if marker not in self.contents:
            return {}
        try:
            data = json.loads(self.contents[marker])
        except json.JSONDecodeError as e:
            raise MalformedSignatureError(f"{marker} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedSignatureError(f"{marker} is not a JSON object")
        return data

    def dependency_names(self, marker: str, sections: tuple[str, ...]) -> frozenset[str]:
        """Collect dependency names from sections of a JSON manifest."""
        manifest = self.json_manifest(marker)
        names: set[str] = set()
        for section in sections:
            deps = manifest.get(section)
            if isinstance(deps, dict):
                names.update(str(name) for name in deps)
        return frozenset(names)

    def node_dependencies(self) -> frozenset[str]:
        return self.dependency_names("package.json", ("dependencies", "devDependencies"))

    def composer_dependencies(self) -> frozenset[str]:
        return self.dependency_names("composer.json", ("require", "require-dev"))


def read_project_signatures(
    project_dir: Path,
    home: Path,
    agent_markers: tuple[str, ...],
) -> ProjectSignatures:
    """Gather signatures from a project directory and the user's home.

    Read failures never raise: the marker is recorded as unreadable and
    detection degrades accordingly.

    Args:
        project_dir: Root of the project being installed into
        home: User home directory holding global agent config dirs
        agent_markers: Directory names (e.g. ".claude") that mark a host agent
    """
    markers: set[str] = set()
    contents: dict[str, str] = {}
    unreadable: set[str] = set()

    for marker in KNOWN_MARKERS:
        marker_path = project_dir / marker
        if not marker_path.is_file():
            continue
        markers.add(marker)
        if marker not in MANIFEST_MARKERS:
            continue
        try:
            contents[marker] = marker_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", marker_path, e)
            unreadable.add(marker)

    home_entries = frozenset(m for m in agent_markers if (home / m).is_dir())

    return ProjectSignatures(
        markers=frozenset(markers),
        contents=contents,
        home_entries=home_entries,
        unreadable=frozenset(unreadable),
    )
