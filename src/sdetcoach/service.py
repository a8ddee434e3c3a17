"""Session controller: resolve, classify, prepare the workspace, record completion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import cast

from . import workspace
from .config import SessionConfig
from .content_loader import LessonStore, load_catalog
from .errors import SessionError, SessionStateError
from .models import (
    Catalog,
    CurriculumComplete,
    CurriculumCompleteType,
    Ledger,
    LedgerEntry,
    MutationReport,
    Topic,
    WorkspaceStrategy,
)
from .progress import LedgerStore
from .resolver import ProgressSummary, find_out_of_order, find_stale_references, resolve, summarize
from .strategies import STRATEGY_TABLE, classify

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SessionState(Enum):
    """Lifecycle of one session step."""

    IDLE = "idle"
    RESOLVING = "resolving"
    AWAITING_CLASSIFICATION = "awaiting-classification"
    MUTATING = "mutating"
    AWAITING_LEARNER_WORK = "awaiting-learner-work"
    LOGGING = "logging"
    DONE = "done"


@dataclass(frozen=True)
class SessionStep:
    """Everything the learner needs to work on the current topic."""

    topic: Topic
    strategy: WorkspaceStrategy
    report: MutationReport
    lesson_path: Path
    has_lesson: bool


@dataclass(frozen=True)
class TopicStatus:
    """Status row for one catalog topic."""

    topic: Topic
    completed: bool
    is_next: bool


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionController:
    """Drives one learner through the catalog, one topic at a time.

    The ledger snapshot is re-read from disk at every resolve, so edits made
    between runs (or by another session) are always picked up.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        strategies: Mapping[str, WorkspaceStrategy] = STRATEGY_TABLE,
        clock: Clock = _utcnow,
    ) -> None:
        self.config = config
        self.catalog: Catalog = load_catalog(config.catalog_path)
        self.ledger_store = LedgerStore(config.ledger_path)
        self.lessons = LessonStore(config.lessons_dir)
        self.workspace_root = Path(config.workspace_root)
        self.strategies = strategies
        self._clock = clock
        self.ledger = Ledger()
        self.state = SessionState.IDLE
        self.topic: Topic | None = None
        self.strategy: WorkspaceStrategy | None = None
        self.report: MutationReport | None = None

    def _require(self, operation: str, expected: SessionState) -> None:
        if self.state is not expected:
            raise SessionStateError(operation, self.state.value)

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.topic = None
        self.strategy = None
        self.report = None

    def resolve(self) -> Topic | CurriculumCompleteType:
        """Load the latest ledger and pick the next topic."""
        self._require("resolve", SessionState.IDLE)
        self.state = SessionState.RESOLVING
        try:
            self.ledger = self.ledger_store.load()
        except SessionError:
            self._reset()
            raise

        for stale in find_stale_references(self.catalog, self.ledger):
            logger.warning("%s; ignoring it", stale)
        out_of_order = find_out_of_order(self.catalog, self.ledger)
        if out_of_order:
            logger.info("Completed ahead of catalog order: %s", ", ".join(out_of_order))

        result = resolve(self.catalog, self.ledger)
        if result is CurriculumComplete:
            self.state = SessionState.DONE
            logger.info("Curriculum complete: %d topics", len(self.catalog))
            return CurriculumComplete
        topic = cast(Topic, result)
        self.topic = topic
        self.state = SessionState.AWAITING_CLASSIFICATION
        logger.debug("Next topic: %s", topic.id)
        return topic

    def classify(self) -> WorkspaceStrategy:
        """Choose the workspace strategy for the resolved topic."""
        self._require("classify", SessionState.AWAITING_CLASSIFICATION)
        topic = cast(Topic, self.topic)
        try:
            strategy = classify(topic, self.strategies)
        except SessionError:
            self._reset()
            raise
        self.strategy = strategy
        self.state = SessionState.MUTATING
        return strategy

    def mutate(self) -> MutationReport:
        """Prepare the workspace for the resolved topic."""
        self._require("mutate", SessionState.MUTATING)
        topic = cast(Topic, self.topic)
        strategy = cast(WorkspaceStrategy, self.strategy)
        try:
            report = workspace.apply(self.workspace_root, strategy, topic)
        except SessionError:
            self._reset()
            raise
        self.report = report
        self.state = SessionState.AWAITING_LEARNER_WORK
        return report

    def step(self) -> SessionStep | CurriculumCompleteType:
        """Resolve, classify and mutate in one go, stopping where the learner takes over."""
        resolved = self.resolve()
        if resolved is CurriculumComplete:
            return CurriculumComplete
        topic = cast(Topic, resolved)
        strategy = self.classify()
        report = self.mutate()
        lesson_path = self.lessons.path_for(topic.id)
        has_lesson = self.lessons.has_lesson(topic.id)
        if not has_lesson:
            logger.warning("No lesson content for %s at %s", topic.id, lesson_path)
        return SessionStep(
            topic=topic,
            strategy=strategy,
            report=report,
            lesson_path=lesson_path,
            has_lesson=has_lesson,
        )

    def confirm(self) -> LedgerEntry:
        """Record the learner's confirmation that the current topic is done."""
        self._require("confirm", SessionState.AWAITING_LEARNER_WORK)
        topic = cast(Topic, self.topic)
        self.state = SessionState.LOGGING
        entry = LedgerEntry(
            topic_id=topic.id,
            description=topic.description,
            completed_at=self._clock().isoformat(timespec="seconds"),
        )
        try:
            self.ledger = self.ledger_store.append(entry)
        except SessionError:
            self.state = SessionState.AWAITING_LEARNER_WORK
            raise
        self._reset()
        return entry

    def status(self) -> list[TopicStatus]:
        """Return catalog topics with completion flags from the latest ledger."""
        self.ledger = self.ledger_store.load()
        completed_ids = self.ledger.completed_ids
        next_topic = resolve(self.catalog, self.ledger)
        return [
            TopicStatus(topic=topic, completed=topic.id in completed_ids, is_next=topic is next_topic)
            for topic in self.catalog
        ]

    def summary(self) -> ProgressSummary:
        """Return completion totals for the last loaded ledger."""
        return summarize(self.catalog, self.ledger)

    def stale_topic_ids(self) -> list[str]:
        """Return ledger ids that no longer exist in the catalog."""
        return [stale.topic_id for stale in find_stale_references(self.catalog, self.ledger)]

    def out_of_order_ids(self) -> list[str]:
        """Return ids completed ahead of an earlier open topic."""
        return find_out_of_order(self.catalog, self.ledger)
