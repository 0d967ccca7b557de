"""Detect the framework and host agents that apply to a project."""

import logging
from dataclasses import dataclass

from skillbudget.detection.agents import detect_host_agents
from skillbudget.detection.frameworks import (
    ProjectProfile,
    match_framework_rule,
    profile_project,
)
from skillbudget.detection.signatures import MalformedSignatureError, ProjectSignatures

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    """Derived per invocation; never persisted."""

    framework: str | None
    host_agents: frozenset[str]


def detect(signatures: ProjectSignatures) -> DetectionResult:
    """Map project signatures to a framework id and the set of present agents.

    Detection failure never blocks installation of generic content: if any
    marker is unreadable or malformed the framework degrades to None. Host
    agents are evaluated independently and are unaffected.
    """
    host_agents = detect_host_agents(signatures.home_entries)

    if signatures.unreadable:
        logger.warning(
            "Framework detection skipped, unreadable markers: %s",
            ", ".join(sorted(signatures.unreadable)),
        )
        return DetectionResult(framework=None, host_agents=host_agents)

    try:
        rule = match_framework_rule(signatures)
    except MalformedSignatureError as e:
        logger.warning("Framework detection skipped: %s", e)
        return DetectionResult(framework=None, host_agents=host_agents)

    framework = rule.framework_id if rule is not None else None
    logger.debug("Detected framework=%s agents=%s", framework, sorted(host_agents))
    return DetectionResult(framework=framework, host_agents=host_agents)


def describe_project(signatures: ProjectSignatures) -> ProjectProfile:
    """Profile the project for rule-file headers, degrading to placeholders."""
    if signatures.unreadable:
        return ProjectProfile.unknown()
    try:
        return profile_project(signatures, match_framework_rule(signatures))
    except MalformedSignatureError as e:
        logger.warning("Project profile unavailable: %s", e)
        return ProjectProfile.unknown()
