"""Idempotent, non-destructive preparation of the learner's practice workspace.

Mutation is split in two: `plan` diffs the desired layout against a read-only
view of the workspace, and `apply` carries out the plan against the disk. A
path that already exists is never rewritten or removed; when its content
differs from what would be generated it is reported as a conflict instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, cast

from .errors import SessionIOError
from .models import (
    CONFLICT,
    CREATED,
    PRESENT,
    ConceptualFolder,
    MutationReport,
    PathChange,
    Topic,
    WorkspaceStrategy,
)
from .templates import PROJECT_MANIFESTS, skeleton_files, topic_files

logger = logging.getLogger(__name__)

FILE = "file"
DIRECTORY = "dir"

CREATE = "create"
KEEP = "keep"
SKIP = "skip"


class WorkspaceView(Protocol):
    """Read-only access to workspace paths relative to its root."""

    def kind(self, path: str) -> str | None:
        """Return ``"file"``, ``"dir"`` or None when nothing exists at path."""
        ...

    def read_text(self, path: str) -> str:
        """Return the text of an existing file."""
        ...


class DiskWorkspace:
    """Workspace view backed by the real filesystem."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def kind(self, path: str) -> str | None:
        target = self.root / path
        if target.is_dir():
            return DIRECTORY
        if target.exists() or target.is_symlink():
            return FILE
        return None

    def read_text(self, path: str) -> str:
        return (self.root / path).read_text(encoding="utf-8", errors="replace")


@dataclass(frozen=True)
class DesiredPath:
    """A path the strategy wants; `content` is None for directories."""

    path: str
    content: str | None


@dataclass(frozen=True)
class PlannedChange:
    """Decision for one desired path."""

    path: str
    action: str
    content: str | None

    @property
    def is_directory(self) -> bool:
        return self.content is None


def desired_layout(strategy: WorkspaceStrategy, topic: Topic, view: WorkspaceView) -> list[DesiredPath]:
    """Return every path the strategy expects for this topic.

    The skeleton is wanted until the project manifest exists, so a scaffold
    interrupted part way is completed by the next run.
    """
    if isinstance(strategy, ConceptualFolder):
        return [DesiredPath(strategy.name, None)]

    project = strategy.name
    project_kind = view.kind(project)
    if project_kind == FILE:
        return [DesiredPath(project, None)]

    layout: list[DesiredPath] = []
    if view.kind(f"{project}/{PROJECT_MANIFESTS[strategy.kind]}") != FILE:
        layout.append(DesiredPath(project, None))
        for relative, content in skeleton_files(strategy.kind, project).items():
            layout.append(DesiredPath(f"{project}/{relative}", content))
    for relative, content in topic_files(strategy.kind, topic).items():
        layout.append(DesiredPath(f"{project}/{relative}", content))
    return _dedupe(layout)


def _dedupe(layout: list[DesiredPath]) -> list[DesiredPath]:
    """Keep the first occurrence of each path; topic files never replace skeleton files."""
    seen: set[str] = set()
    unique: list[DesiredPath] = []
    for item in layout:
        if item.path in seen:
            continue
        seen.add(item.path)
        unique.append(item)
    return unique


def plan(strategy: WorkspaceStrategy, topic: Topic, view: WorkspaceView) -> tuple[PlannedChange, ...]:
    """Diff the desired layout against the current workspace without touching it."""
    changes: list[PlannedChange] = []
    for desired in desired_layout(strategy, topic, view):
        current = view.kind(desired.path)
        if current is None:
            action = CREATE
        elif desired.content is None:
            action = KEEP if current == DIRECTORY else SKIP
        elif current != FILE:
            action = SKIP
        else:
            action = KEEP if _same_text(view.read_text(desired.path), desired.content) else SKIP
        changes.append(PlannedChange(desired.path, action, desired.content))
    return tuple(changes)


def _same_text(existing: str, desired: str) -> bool:
    return existing.replace("\r\n", "\n") == desired


def apply(workspace_root: Path | str, strategy: WorkspaceStrategy, topic: Topic) -> MutationReport:
    """Bring the workspace in line with the strategy for this topic.

    Creates what is missing, leaves everything else alone, and reports each
    path as created, present or conflict.
    """
    root = Path(workspace_root)
    try:
        root.mkdir(parents=True, exist_ok=True)
        planned = plan(strategy, topic, DiskWorkspace(root))
    except OSError as exc:
        raise SessionIOError("inspect workspace", root, exc) from exc

    results: list[PathChange] = []
    for change in planned:
        if change.action == KEEP:
            results.append(PathChange(change.path, PRESENT))
            continue
        if change.action == SKIP:
            logger.warning("Leaving existing %s untouched; it differs from the generated version", change.path)
            results.append(PathChange(change.path, CONFLICT))
            continue
        results.append(PathChange(change.path, _create(root, change)))

    report = MutationReport(root=root, strategy=strategy, changes=tuple(results))
    logger.info(
        "Workspace for %s: %d created, %d present, %d conflicts",
        topic.id,
        len(report.created),
        len(report.present),
        len(report.conflicts),
    )
    return report


def _create(root: Path, change: PlannedChange) -> str:
    """Create one planned path without ever replacing something that appeared meanwhile."""
    target = root / change.path
    try:
        if change.is_directory:
            try:
                target.mkdir(parents=True, exist_ok=False)
            except FileExistsError:
                return PRESENT if target.is_dir() else CONFLICT
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                handle = target.open("x", encoding="utf-8", newline="\n")
            except FileExistsError:
                logger.warning("%s appeared before it could be created; leaving it untouched", change.path)
                return CONFLICT
            try:
                with handle:
                    handle.write(cast(str, change.content))
            except OSError:
                # Only ever removes the partial file this call created.
                target.unlink(missing_ok=True)
                raise
    except OSError as exc:
        raise SessionIOError(f"create {change.path}", target, exc) from exc
    logger.debug("Created %s", change.path)
    return CREATED
