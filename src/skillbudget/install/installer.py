"""Apply a LoadPlan to target profiles.

Each target is independent: it is rendered, compared with what is already
on disk, and only when different staged next to its final location and
published with a rename. Readers never observe a half-written target, and
a failed target never affects its siblings. Replacing an existing skill
directory takes two renames (old tree aside, staged tree in), so between
them the directory is briefly absent, though never partial. Targets run
concurrently on a thread pool because they own disjoint paths; a target
whose path overlaps an earlier one fails before anything is written.

Concurrent invocations against the same target are not supported.
"""

import logging
import os
import shutil
import tempfile
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

from skillbudget.catalog.models import Catalog
from skillbudget.detection.frameworks import ProjectProfile
from skillbudget.errors import InstallError
from skillbudget.gateway.content.abc import ContentSource
from skillbudget.install.render import GENERATED_MARKER, render_rule_file, render_skill_dir
from skillbudget.install.targets import TargetProfile
from skillbudget.selection.models import LoadPlan

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4

TargetStatus = Literal["written", "unchanged", "failed"]


@dataclass(frozen=True)
class TargetResult:
    """Outcome of installing a plan to one target."""

    key: str
    agent_id: str
    path: Path
    status: TargetStatus
    files_written: int = 0
    error: InstallError | None = None

    @property
    def success(self) -> bool:
        return self.status != "failed"


@dataclass(frozen=True)
class InstallReport:
    """Per-target results keyed by TargetProfile.key, in target order.

    Exit policy: partial success is success. The overall exit code is
    non-zero only when every target failed.
    """

    results: dict[str, TargetResult] = field(default_factory=dict)

    @property
    def any_failed(self) -> bool:
        return any(not r.success for r in self.results.values())

    @property
    def all_failed(self) -> bool:
        return bool(self.results) and all(not r.success for r in self.results.values())

    @property
    def exit_code(self) -> int:
        return 1 if self.all_failed else 0


@dataclass(frozen=True)
class InstallRequest:
    """Everything a single target install needs besides the target itself."""

    plan: LoadPlan
    catalog: Catalog
    content: ContentSource
    profile: ProjectProfile
    bundle_name: str


def install(
    plan: LoadPlan,
    targets: list[TargetProfile],
    *,
    catalog: Catalog,
    content: ContentSource,
    home: Path,
    project_dir: Path,
    profile: ProjectProfile,
    bundle_name: str,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> InstallReport:
    """Install a plan to every target, isolating failures per target.

    If interrupted, targets that have not started are cancelled; targets
    already published stay complete, and an in-flight target's staging
    area is discarded rather than published.
    """
    request = InstallRequest(
        plan=plan, catalog=catalog, content=content, profile=profile, bundle_name=bundle_name
    )

    resolved: list[tuple[TargetProfile, Path]] = []
    results: dict[str, TargetResult] = {}
    claimed: dict[Path, str] = {}
    for target in targets:
        path = target.resolve(home=home, project_dir=project_dir, bundle_name=bundle_name)
        conflict = _overlapping_claim(path, claimed)
        if conflict is not None:
            error = InstallError(agent_id=target.agent_id, path=path, reason=conflict)
            results[target.key] = _failed(target, path, error)
            continue
        claimed[path] = target.key
        resolved.append((target, path))

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    futures: dict[str, Future[TargetResult]] = {}
    try:
        for target, path in resolved:
            futures[target.key] = executor.submit(_install_target, request, target, path)
        completed = {key: future.result() for key, future in futures.items()}
    except BaseException:
        executor.shutdown(wait=True, cancel_futures=True)
        raise
    executor.shutdown(wait=True)

    ordered: dict[str, TargetResult] = {}
    for target in targets:
        if target.key in completed:
            ordered[target.key] = completed[target.key]
        elif target.key in results:
            ordered[target.key] = results[target.key]
    return InstallReport(results=ordered)


def _failed(target: TargetProfile, path: Path, error: InstallError) -> TargetResult:
    logger.warning("Install failed for %s: %s", target.key, error.reason)
    return TargetResult(
        key=target.key, agent_id=target.agent_id, path=path, status="failed", error=error
    )


def _overlapping_claim(path: Path, claimed: dict[Path, str]) -> str | None:
    """Describe the earlier target whose path is path or nests with it."""
    for other, key in claimed.items():
        if path == other:
            return f"path already used by target {key}"
        if path.is_relative_to(other) or other.is_relative_to(path):
            return f"path overlaps target {key} at {other}"
    return None


def _install_target(request: InstallRequest, target: TargetProfile, path: Path) -> TargetResult:
    try:
        if target.layout_kind == "project-rule-file":
            text = render_rule_file(
                request.plan,
                request.catalog,
                request.content,
                profile=request.profile,
                agent_name=target.display_name,
                bundle_name=request.bundle_name,
            )
            written = _sync_rule_file(target, path, text)
        else:
            files = render_skill_dir(request.plan, request.catalog, request.content)
            written = _sync_directory(target, path, files)
    except InstallError as e:
        return _failed(target, path, e)
    except (OSError, UnicodeError, yaml.YAMLError) as e:
        error = InstallError(agent_id=target.agent_id, path=path, reason=str(e))
        return _failed(target, path, error)

    if written == 0:
        logger.debug("%s already up to date at %s", target.key, path)
        return TargetResult(
            key=target.key, agent_id=target.agent_id, path=path, status="unchanged"
        )

    logger.info("Installed %d file(s) for %s at %s", written, target.key, path)
    return TargetResult(
        key=target.key,
        agent_id=target.agent_id,
        path=path,
        status="written",
        files_written=written,
    )


def _read_text_or_none(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None


def _read_tree(root: Path) -> dict[str, str | None]:
    """Existing files under root keyed by POSIX relative path.

    Undecodable files map to None so they always compare as different.
    """
    if not root.is_dir():
        return {}
    tree: dict[str, str | None] = {}
    for file_path in root.rglob("*"):
        if file_path.is_file():
            tree[file_path.relative_to(root).as_posix()] = _read_text_or_none(file_path)
    return tree


def _sync_directory(target: TargetProfile, path: Path, files: dict[str, str]) -> int:
    """Make the directory hold exactly `files`. Returns files changed."""
    if path.exists() and not path.is_dir():
        raise InstallError(
            agent_id=target.agent_id, path=path, reason="target exists and is not a directory"
        )

    existing = _read_tree(path)
    changed = [rel for rel, text in files.items() if existing.get(rel) != text]
    stale = [rel for rel in existing if rel not in files]
    if not changed and not stale:
        return 0

    _publish_directory(path, files)
    return len(changed) + len(stale)


def _publish_directory(path: Path, files: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{path.name}.staging-", dir=path.parent))
    staging.chmod(0o755)
    backup = path.parent / f".{path.name}.old-{uuid.uuid4().hex[:8]}"
    try:
        for rel, text in files.items():
            staged = staging / rel
            staged.parent.mkdir(parents=True, exist_ok=True)
            staged.write_text(text, encoding="utf-8")

        if path.exists():
            os.replace(path, backup)
            try:
                os.replace(staging, path)
            except OSError:
                os.replace(backup, path)
                raise
            shutil.rmtree(backup, ignore_errors=True)
        else:
            os.replace(staging, path)
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)


def _sync_rule_file(target: TargetProfile, path: Path, text: str) -> int:
    """Write a rule file unless it already matches. Returns files changed."""
    if path.exists():
        if not path.is_file():
            raise InstallError(
                agent_id=target.agent_id, path=path, reason="target exists and is not a file"
            )
        existing = _read_text_or_none(path)
        if existing == text:
            return 0
        if existing is None or not existing.startswith(GENERATED_MARKER):
            raise InstallError(
                agent_id=target.agent_id,
                path=path,
                reason="existing file was not generated by skillbudget; refusing to overwrite",
            )

    _publish_file(path, text)
    return 1


def _publish_file(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    staged = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        staged.chmod(0o644)
        os.replace(staged, path)
    finally:
        if staged.exists():
            staged.unlink()
