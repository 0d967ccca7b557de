"""Load and validate the artifact catalog.

The catalog is static configuration data: a TOML table of artifact records
bundled with the package at skillbudget/data/catalog.toml. Records are
validated field-by-field with Pydantic, then checked as a whole for
duplicate ids/paths and framework collisions. Every problem found is
reported in a single CatalogError.
"""

import tomllib
from collections.abc import Mapping, Sequence
from functools import cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError, field_validator

from skillbudget.catalog.models import (
    ARTIFACT_CATEGORIES,
    MAX_TIER,
    MIN_TIER,
    Artifact,
    ArtifactCategory,
    Catalog,
)
from skillbudget.errors import CatalogError


class ArtifactRecord(BaseModel):
    """One [[artifact]] entry of catalog.toml.

    Required fields:
        id: Unique identifier (e.g., "shared/code-review")
        path: Content path relative to the skills root (e.g., "shared/code-review.md")
        cost: Positive token estimate (an integer; booleans and strings are rejected)
        tier: Priority tier, 1 (mandatory) to 6 (on-demand only)
        category: One of core, framework, shared-always, on-demand

    Optional fields:
        triggers: Keywords that select an on-demand artifact from task text
        framework: Framework id documented by a framework artifact
        description: One-line summary for listings
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    path: str
    cost: StrictInt
    tier: StrictInt
    category: str
    triggers: tuple[str, ...] = ()
    framework: str | None = None
    description: str = ""

    @field_validator("id", "path")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("cost")
    @classmethod
    def validate_cost(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"must be a positive integer, got {v}")
        return v

    @field_validator("tier")
    @classmethod
    def validate_tier(cls, v: int) -> int:
        if v < MIN_TIER or v > MAX_TIER:
            raise ValueError(f"must be between {MIN_TIER} and {MAX_TIER}, got {v}")
        return v

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in ARTIFACT_CATEGORIES:
            raise ValueError(f"must be one of {', '.join(ARTIFACT_CATEGORIES)}, got {v}")
        return v

    @field_validator("triggers")
    @classmethod
    def validate_triggers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for i, keyword in enumerate(v):
            if not keyword.strip():
                raise ValueError(f"triggers[{i}] must not be empty")
        return v


def _describe_record(index: int, raw: object) -> str:
    if isinstance(raw, Mapping) and "id" in raw:
        return f"artifact[{index}] ({raw['id']})"
    return f"artifact[{index}]"


def _extract_pydantic_errors(label: str, exc: ValidationError) -> list[str]:
    problems: list[str] = []
    for error in exc.errors():
        field_path = ".".join(str(part) for part in error.get("loc", ()))
        msg = error.get("msg", "validation error")
        if error.get("type") == "missing":
            problems.append(f"{label}: missing required field '{field_path}'")
        elif field_path:
            problems.append(f"{label}: field '{field_path}' {msg}")
        else:
            problems.append(f"{label}: {msg}")
    return problems


def _to_artifact(record: ArtifactRecord) -> Artifact:
    category: ArtifactCategory = record.category  # type: ignore[assignment]
    return Artifact(
        id=record.id,
        path=record.path,
        cost=record.cost,
        tier=record.tier,
        category=category,
        trigger_keywords=frozenset(k.strip() for k in record.triggers),
        framework=record.framework,
        description=record.description,
    )


def _check_catalog(artifacts: list[Artifact]) -> list[str]:
    problems: list[str] = []
    seen_ids: set[str] = set()
    seen_paths: set[str] = set()
    framework_owner: dict[str, str] = {}

    for artifact in artifacts:
        if artifact.id in seen_ids:
            problems.append(f"duplicate artifact id: {artifact.id}")
        seen_ids.add(artifact.id)

        if artifact.path in seen_paths:
            problems.append(f"duplicate artifact path: {artifact.path} ({artifact.id})")
        seen_paths.add(artifact.path)

        if artifact.category == "framework":
            if artifact.framework is None:
                problems.append(f"{artifact.id}: framework artifact without a framework id")
            elif artifact.framework in framework_owner:
                owner = framework_owner[artifact.framework]
                problems.append(
                    f"{artifact.id}: framework '{artifact.framework}' already documented by {owner}"
                )
            else:
                framework_owner[artifact.framework] = artifact.id
        elif artifact.framework is not None:
            problems.append(f"{artifact.id}: only framework artifacts may set a framework id")

    return problems


def load_catalog(records: Sequence[object]) -> Catalog:
    """Build a Catalog from raw artifact records.

    Args:
        records: Sequence of mappings, one per artifact, in declaration order

    Returns:
        The validated Catalog

    Raises:
        CatalogError: If any record is malformed or records conflict
    """
    problems: list[str] = []
    artifacts: list[Artifact] = []

    for index, raw in enumerate(records):
        label = _describe_record(index, raw)
        try:
            record = ArtifactRecord.model_validate(raw)
        except ValidationError as e:
            problems.extend(_extract_pydantic_errors(label, e))
            continue
        artifacts.append(_to_artifact(record))

    problems.extend(_check_catalog(artifacts))
    if problems:
        raise CatalogError(problems)
    return Catalog(artifacts=tuple(artifacts))


def load_catalog_file(path: Path) -> Catalog:
    """Load a catalog TOML file with an [[artifact]] array of tables."""
    if not path.exists():
        raise CatalogError([f"catalog file not found: {path}"])

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise CatalogError([f"{path.name}: invalid TOML: {e}"]) from e

    records = data.get("artifact", [])
    if not isinstance(records, list):
        raise CatalogError([f"{path.name}: 'artifact' must be an array of tables"])
    return load_catalog(records)


def get_data_dir() -> Path:
    """Directory holding the bundled catalog and skill documents."""
    return Path(__file__).parent.parent / "data"


@cache
def load_bundled_catalog() -> Catalog:
    """Load the catalog shipped with the package. Cached for the process."""
    return load_catalog_file(get_data_dir() / "catalog.toml")
