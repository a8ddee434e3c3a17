"""Core domain models for curriculum sessions."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

TOPIC_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

CREATED = "created"
PRESENT = "present"
CONFLICT = "conflict"


@dataclass(frozen=True)
class Topic:
    """One curriculum unit."""

    id: str
    category: str
    description: str
    steps: tuple[str, ...] = ()
    files: tuple[str, ...] = ()


@dataclass(frozen=True)
class Catalog:
    """Ordered, read-only list of all topics."""

    topics: tuple[Topic, ...] = ()
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, int] = {}
        for position, topic in enumerate(self.topics):
            if topic.id in index:
                raise ValueError(f"Duplicate topic id: {topic.id}")
            index[topic.id] = position
        object.__setattr__(self, "_index", index)

    def __iter__(self) -> Iterator[Topic]:
        return iter(self.topics)

    def __len__(self) -> int:
        return len(self.topics)

    def __contains__(self, topic_id: object) -> bool:
        return topic_id in self._index

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(topic.id for topic in self.topics)

    def get(self, topic_id: str) -> Topic | None:
        """Return topic by id."""
        position = self._index.get(topic_id)
        return None if position is None else self.topics[position]

    def index_of(self, topic_id: str) -> int | None:
        """Return catalog position of a topic id."""
        return self._index.get(topic_id)


class CurriculumCompleteType:
    """Sentinel returned when every catalog topic has been completed."""

    _instance: CurriculumCompleteType | None = None

    def __new__(cls) -> CurriculumCompleteType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CurriculumComplete"

    def __bool__(self) -> bool:
        return False


CurriculumComplete = CurriculumCompleteType()


@dataclass(frozen=True)
class LedgerEntry:
    """One completed topic."""

    topic_id: str
    description: str
    completed_at: str | None


@dataclass(frozen=True)
class Ledger:
    """Append-only snapshot of completed topics in completion order."""

    entries: tuple[LedgerEntry, ...] = ()

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def completed_ids(self) -> set[str]:
        return {entry.topic_id for entry in self.entries}

    def append(self, entry: LedgerEntry) -> Ledger:
        """Return a new ledger with the entry added last."""
        return Ledger(entries=self.entries + (entry,))


class ProjectKind(Enum):
    """Kind of consolidated practice project."""

    PRIMARY = "primary-language-project"
    SECONDARY = "secondary-language-project"


@dataclass(frozen=True)
class ConsolidatedProject:
    """One cohesive, growing project shared by many topics."""

    name: str
    kind: ProjectKind


@dataclass(frozen=True)
class ConceptualFolder:
    """Standalone folder for non-project exercises."""

    name: str


WorkspaceStrategy = ConsolidatedProject | ConceptualFolder


@dataclass(frozen=True)
class PathChange:
    """Outcome for one workspace path."""

    path: str
    status: str


@dataclass(frozen=True)
class MutationReport:
    """Every path the mutator created, found in place, or refused to touch."""

    root: Path
    strategy: WorkspaceStrategy
    changes: tuple[PathChange, ...]

    def _paths(self, status: str) -> list[str]:
        return [change.path for change in self.changes if change.status == status]

    @property
    def created(self) -> list[str]:
        return self._paths(CREATED)

    @property
    def present(self) -> list[str]:
        return self._paths(PRESENT)

    @property
    def conflicts(self) -> list[str]:
        return self._paths(CONFLICT)
