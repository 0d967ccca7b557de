"""Error taxonomy for skillbudget.

CatalogError and BudgetDeficitError are fatal for the process or session.
InstallError is isolated to a single target and collected by the installer.
Budget overages during extension are not errors; see
skillbudget.selection.models.BudgetOverageAdvisory.
"""

from pathlib import Path


class SkillBudgetError(Exception):
    """Base class for all skillbudget errors."""


class CatalogError(SkillBudgetError):
    """Static catalog data is malformed. Never recoverable at runtime."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = tuple(problems)
        super().__init__("Invalid artifact catalog:\n" + "\n".join(f"  - {p}" for p in problems))


class BudgetDeficitError(SkillBudgetError):
    """The mandatory artifacts alone cost more than the budget."""

    def __init__(
        self, *, deficit: int, budget: int, artifacts: tuple[tuple[str, int], ...]
    ) -> None:
        self.deficit = deficit
        self.budget = budget
        self.artifacts = artifacts
        listing = ", ".join(f"{artifact_id} ({cost})" for artifact_id, cost in artifacts)
        super().__init__(
            f"Mandatory artifacts need {budget + deficit} tokens but the budget is {budget} "
            f"(deficit {deficit}): {listing}"
        )


class UnknownArtifactError(SkillBudgetError):
    """An artifact id that is not in the catalog."""

    def __init__(self, artifact_id: str) -> None:
        self.artifact_id = artifact_id
        super().__init__(f"Unknown artifact: {artifact_id}")


class PlanStateError(SkillBudgetError):
    """A persisted plan file cannot be used with the current catalog."""


class InstallError(SkillBudgetError):
    """Staging or publishing failed for one target."""

    def __init__(self, *, agent_id: str, path: Path, reason: str) -> None:
        self.agent_id = agent_id
        self.path = path
        self.reason = reason
        super().__init__(f"{agent_id}: {reason} ({path})")
