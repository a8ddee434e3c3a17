"""Load the curriculum catalog and look up lesson content."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

import yaml

from .errors import CatalogError, SessionIOError
from .models import TOPIC_ID_PATTERN, Catalog, Topic

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
CATALOG_KEYS = ("topics", "features")
_CATEGORY_PREFIX = re.compile(r"^(?P<category>[A-Za-z][A-Za-z0-9_-]*?)-\d")


def _topic_from_dict(raw: Any, source: Path | None) -> Topic:
    """Build a topic from raw catalog content."""
    if not isinstance(raw, dict):
        raise CatalogError(f"Topic entry must be an object, got {type(raw).__name__}.", source)

    topic_id = str(raw.get("id", "")).strip()
    if not topic_id:
        raise CatalogError("Topic is missing an id.", source)
    if not TOPIC_ID_PATTERN.match(topic_id):
        raise CatalogError(f"Topic id '{topic_id}' contains unsupported characters.", source)

    category = str(raw.get("category") or "").strip().lower()
    if not category:
        category = _infer_category(topic_id)
    if not category:
        raise CatalogError(f"Topic '{topic_id}' has no category and none can be inferred from its id.", source)
    if not TOPIC_ID_PATTERN.match(category):
        raise CatalogError(f"Topic '{topic_id}' category '{category}' contains unsupported characters.", source)

    return Topic(
        id=topic_id,
        category=category,
        description=str(raw.get("description") or raw.get("title") or "").strip(),
        steps=_string_list(raw, "steps", topic_id, source),
        files=tuple(_validate_file(topic_id, item, source) for item in _string_list(raw, "files", topic_id, source)),
    )


def _string_list(raw: dict[str, Any], key: str, topic_id: str, source: Path | None) -> tuple[str, ...]:
    """Return a list field as stripped, non-empty strings."""
    value = raw.get(key, [])
    if value is None:
        return ()
    if not isinstance(value, list):
        raise CatalogError(f"Topic '{topic_id}' field '{key}' must be a list.", source)
    return tuple(str(item).strip() for item in value if str(item).strip())


def _validate_file(topic_id: str, value: str, source: Path | None) -> str:
    """Reject file paths that would land outside the topic's project."""
    path = PurePosixPath(value.replace("\\", "/"))
    if path.is_absolute() or PureWindowsPath(value).drive or ".." in path.parts or not path.parts:
        raise CatalogError(f"Topic '{topic_id}' file '{value}' must be a relative path inside the project.", source)
    return path.as_posix()


def _infer_category(topic_id: str) -> str:
    """Infer category from an id shaped like ``<category>-<sprint>-ac<n>``."""
    match = _CATEGORY_PREFIX.match(topic_id)
    if match is None:
        return ""
    return match.group("category").lower()


def catalog_from_data(data: Any, source: Path | None = None) -> Catalog:
    """Build a catalog from already-parsed JSON or YAML content."""
    if isinstance(data, dict):
        for key in CATALOG_KEYS:
            if key in data:
                data = data[key]
                break
        else:
            raise CatalogError(f"Catalog object must contain one of: {', '.join(CATALOG_KEYS)}.", source)
    if data is None:
        data = []
    if not isinstance(data, list):
        raise CatalogError("Catalog root must be a list of topics.", source)

    topics: list[Topic] = []
    seen: set[str] = set()
    for item in data:
        topic = _topic_from_dict(item, source)
        if topic.id in seen:
            raise CatalogError(f"Duplicate topic id: {topic.id}", source)
        seen.add(topic.id)
        topics.append(topic)
    return Catalog(topics=tuple(topics))


def load_catalog(path: Path | str) -> Catalog:
    """Load the catalog file in full, preserving topic order."""
    catalog_path = Path(path)
    try:
        text = catalog_path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise SessionIOError("read catalog", catalog_path, exc) from exc
    except UnicodeDecodeError as exc:
        raise CatalogError(f"Catalog is not valid UTF-8 text: {exc}", catalog_path) from exc

    try:
        if catalog_path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogError(f"Could not parse catalog: {exc}", catalog_path) from exc

    catalog = catalog_from_data(data, catalog_path)
    logger.debug("Loaded %d topics from %s", len(catalog), catalog_path)
    return catalog


class LessonStore:
    """Lesson text keyed by topic id, stored as ``<root>/<id>.md``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, topic_id: str) -> Path:
        """Return where the lesson for a topic lives."""
        if not TOPIC_ID_PATTERN.match(topic_id):
            raise ValueError(f"Invalid topic id: {topic_id!r}")
        return self.root / f"{topic_id}.md"

    def has_lesson(self, topic_id: str) -> bool:
        """Return whether lesson content exists for a topic."""
        return self.path_for(topic_id).is_file()

    def read_lesson(self, topic_id: str) -> str | None:
        """Return lesson text, or None when no lesson exists."""
        path = self.path_for(topic_id)
        try:
            return path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SessionIOError("read lesson", path, exc) from exc
        except UnicodeDecodeError as exc:
            raise SessionIOError("decode lesson", path, exc) from exc
