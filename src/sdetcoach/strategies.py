"""Map topic categories to workspace strategies."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .errors import UnclassifiedCategory
from .models import ConceptualFolder, ConsolidatedProject, ProjectKind, Topic, WorkspaceStrategy

PRIMARY_PROJECT = ConsolidatedProject("java-automation-portfolio", ProjectKind.PRIMARY)
SECONDARY_PROJECT = ConsolidatedProject("playwright-automation-portfolio", ProjectKind.SECONDARY)

_PRIMARY_CATEGORIES = (
    "java",
    "selenium",
    "testng",
    "junit",
    "api",
    "rest-assured",
    "pom",
    "framework",
    "bdd",
    "cucumber",
    "reporting",
    "grid",
    "data-driven",
    "design-patterns",
    "logging",
)
_SECONDARY_CATEGORIES = ("playwright", "typescript", "javascript")
_CONCEPTUAL_FOLDERS = {
    "git": "git-practice",
    "sql": "sql-practice",
    "cicd": "ci-cd-pipelines",
    "docker": "docker-labs",
    "kubernetes": "kubernetes-labs",
    "performance": "performance-testing",
    "security": "security-testing",
    "mobile": "mobile-testing",
    "accessibility": "accessibility-testing",
    "linux": "linux-shell-practice",
    "test-strategy": "test-strategy-notes",
    "interview": "interview-prep",
}


def _build_table() -> Mapping[str, WorkspaceStrategy]:
    table: dict[str, WorkspaceStrategy] = {}
    for category in _PRIMARY_CATEGORIES:
        table[category] = PRIMARY_PROJECT
    for category in _SECONDARY_CATEGORIES:
        table[category] = SECONDARY_PROJECT
    for category, folder in _CONCEPTUAL_FOLDERS.items():
        table[category] = ConceptualFolder(folder)
    return MappingProxyType(table)


STRATEGY_TABLE = _build_table()


def classify(topic: Topic, table: Mapping[str, WorkspaceStrategy] = STRATEGY_TABLE) -> WorkspaceStrategy:
    """Return the workspace strategy for a topic's category.

    Unknown categories are an error; there is no fallback strategy.
    """
    strategy = table.get(topic.category)
    if strategy is None:
        raise UnclassifiedCategory(topic.category, topic.id)
    return strategy


def describe_strategy(strategy: WorkspaceStrategy) -> str:
    """Return a short human label for a strategy."""
    if isinstance(strategy, ConsolidatedProject):
        return f"{strategy.kind.value} '{strategy.name}'"
    return f"conceptual folder '{strategy.name}'"
