"""Append-only, human-readable progress ledger on disk."""

from __future__ import annotations

import codecs
import logging
import os
import re
import stat
import tempfile
from pathlib import Path

from .errors import SessionIOError
from .models import TOPIC_ID_PATTERN, Ledger, LedgerEntry

logger = logging.getLogger(__name__)

LEDGER_HEADER = "# Progress Ledger\n"
NEW_LEDGER_MODE = 0o644
_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)
_ENTRY_LINE = re.compile(
    r"^\s*[-*]\s+\[[xX]\]\s+(?P<topic_id>[^\s|]+)\s+\|\s+(?P<completed_at>[^\s|]+)\s+\|\s?(?P<description>.*)$"
)
# Checklist lines from hand-maintained progress files: "- [x] <id>: <description>"
_LEGACY_LINE = re.compile(r"^\s*[-*]\s+\[[xX]\]\s+(?P<topic_id>[^\s:|]+):\s*(?P<description>.*)$")


def parse_ledger(text: str) -> Ledger:
    """Parse ledger text, ignoring anything that is not a completed entry."""
    cleaned = text.replace("\x00", "").replace("\r", "")
    entries: list[LedgerEntry] = []
    for line in cleaned.splitlines():
        match = _ENTRY_LINE.match(line)
        if match is not None:
            entries.append(
                LedgerEntry(
                    topic_id=match.group("topic_id"),
                    description=match.group("description").strip(),
                    completed_at=match.group("completed_at"),
                )
            )
            continue
        legacy = _LEGACY_LINE.match(line)
        if legacy is not None:
            entries.append(
                LedgerEntry(
                    topic_id=legacy.group("topic_id"),
                    description=legacy.group("description").strip(),
                    completed_at=None,
                )
            )
    return Ledger(entries=tuple(entries))


def format_entry(entry: LedgerEntry) -> str:
    """Render one entry as a single ledger line."""
    if not TOPIC_ID_PATTERN.match(entry.topic_id):
        raise ValueError(f"Invalid topic id for ledger entry: {entry.topic_id!r}")
    if not entry.completed_at or any(char.isspace() or char == "|" for char in entry.completed_at):
        raise ValueError(f"Invalid completion timestamp for ledger entry: {entry.completed_at!r}")
    description = " ".join(entry.description.split())
    return f"- [x] {entry.topic_id} | {entry.completed_at} | {description}"


class LedgerStore:
    """File access layer for the progress ledger.

    The file only ever grows: `append` swaps in a copy holding the previous
    bytes unchanged plus one extra line, keeping the file's permissions. A
    UTF-16 ledger (as some editors save it) is the one exception; it is
    rewritten as UTF-8 with null bytes removed before the line is added.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_bytes(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SessionIOError("read ledger", self.path, exc) from exc

    def _decode(self, raw: bytes) -> str:
        try:
            if raw.startswith(_UTF16_BOMS):
                return raw.decode("utf-16")
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SessionIOError("decode ledger", self.path, exc) from exc

    def load(self) -> Ledger:
        """Return the latest ledger snapshot from disk."""
        raw = self._read_bytes()
        if raw is None:
            return Ledger()
        return parse_ledger(self._decode(raw))

    def append(self, entry: LedgerEntry) -> Ledger:
        """Durably record one entry and return the reloaded ledger."""
        line = format_entry(entry).encode("utf-8")
        raw = self._read_bytes()
        if raw is None:
            current = (LEDGER_HEADER + "\n").encode("utf-8")
        elif raw.startswith(_UTF16_BOMS):
            logger.warning("Rewriting UTF-16 ledger %s as UTF-8", self.path)
            current = self._decode(raw).replace("\x00", "").encode("utf-8")
        else:
            # Never append to a file that could not be read back.
            self._decode(raw)
            current = raw
        if current and not current.endswith(b"\n"):
            current += b"\n"
        self._replace(current + line + b"\n")
        logger.info("Recorded completion of %s in %s", entry.topic_id, self.path)
        return self.load()

    def _replace(self, data: bytes) -> None:
        """Write data to a sibling temp file, then swap it in with one rename."""
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                mode = stat.S_IMODE(self.path.stat().st_mode)
            except FileNotFoundError:
                mode = NEW_LEDGER_MODE
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise SessionIOError("append to ledger", self.path, exc) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
