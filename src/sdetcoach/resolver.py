"""Pick the next topic from the catalog and the ledger."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import StaleLedgerReference
from .models import Catalog, CurriculumComplete, CurriculumCompleteType, Ledger, Topic


@dataclass(frozen=True)
class ProgressSummary:
    """Completion counts over catalog topics only."""

    total: int
    completed: int
    next_topic: Topic | None

    @property
    def remaining(self) -> int:
        return self.total - self.completed


def resolve(catalog: Catalog, ledger: Ledger) -> Topic | CurriculumCompleteType:
    """Return the first catalog topic not yet in the ledger.

    Ledger ids that are not in the catalog never affect the result.
    """
    completed_ids = ledger.completed_ids
    for topic in catalog:
        if topic.id not in completed_ids:
            return topic
    return CurriculumComplete


def find_stale_references(catalog: Catalog, ledger: Ledger) -> list[StaleLedgerReference]:
    """Return one reference per unknown ledger id, in ledger order."""
    seen: set[str] = set()
    stale: list[StaleLedgerReference] = []
    for entry in ledger:
        if entry.topic_id in catalog or entry.topic_id in seen:
            continue
        seen.add(entry.topic_id)
        stale.append(StaleLedgerReference(entry.topic_id))
    return stale


def find_out_of_order(catalog: Catalog, ledger: Ledger) -> list[str]:
    """Return completed ids that sit after the first still-open catalog topic."""
    completed_ids = ledger.completed_ids
    first_open: int | None = None
    for position, topic in enumerate(catalog):
        if topic.id not in completed_ids:
            first_open = position
            break
    if first_open is None:
        return []
    return [topic.id for topic in catalog.topics[first_open + 1 :] if topic.id in completed_ids]


def summarize(catalog: Catalog, ledger: Ledger) -> ProgressSummary:
    """Return completion totals and the next topic, if any."""
    completed_ids = ledger.completed_ids
    completed = sum(1 for topic in catalog if topic.id in completed_ids)
    next_topic = resolve(catalog, ledger)
    return ProgressSummary(
        total=len(catalog),
        completed=completed,
        next_topic=next_topic if isinstance(next_topic, Topic) else None,
    )
