"""
Load/save entry points for an editing surface.

``load`` and ``save`` never raise for file or format problems; they return a
result whose ``error`` holds the exception and whose ``message`` is ready to
show to the user. Edits happen directly on the returned roster's records
(``set_name`` / ``set_stat``) between the two calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from xenoed.backup import persist
from xenoed.data import Roster, decode_roster, encode_roster
from xenoed.errors import EditorError, ErrorKind, UnreadableFileError

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    roster: Optional[Roster] = None
    error: Optional[EditorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str:
        if self.error is None:
            return "Save file loaded."
        if self.error.kind is ErrorKind.UNREADABLE_FILE:
            return f"Failed to read the save file:\n{self.error}"
        return f"Invalid save file:\n{self.error}"


@dataclass
class SaveResult:
    path: Optional[Path] = None
    backup_path: Optional[Path] = None
    error: Optional[EditorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str:
        if self.error is None:
            return f"Saved to {self.path}"
        if self.error.kind is ErrorKind.WRITE_FAILED:
            return f"Failed to write the save file:\n{self.error}"
        if self.error.kind is ErrorKind.BACKUP_COPY_FAILED:
            return f"Failed to write a backup file:\n{self.error}"
        return f"Failed to create a backup file:\n{self.error}"


def load(path: Path) -> LoadResult:
    path = Path(path)
    try:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise UnreadableFileError(f"Unable to read {path}: {exc}") from exc
        roster = decode_roster(data)
    except EditorError as exc:
        logger.warning("Load of %s failed (%s): %s", path, exc.kind.value, exc)
        return LoadResult(error=exc)
    logger.info("Loaded %d personnel records from %s", len(roster), path)
    return LoadResult(roster=roster)


def save(path: Path, roster: Roster, backup_enabled: bool = True) -> SaveResult:
    path = Path(path)
    data = encode_roster(roster.source, roster)
    try:
        backup_path = persist(path, data, backup_enabled)
    except EditorError as exc:
        logger.warning("Save to %s failed (%s): %s", path, exc.kind.value, exc)
        return SaveResult(path=path, error=exc)
    return SaveResult(path=path, backup_path=backup_path)


class EditorSession:
    """State an editing surface holds between opening a save and writing it back."""

    def __init__(self, backup_enabled: bool = True) -> None:
        self.path: Optional[Path] = None
        self.roster: Optional[Roster] = None
        self.backup_enabled = backup_enabled

    @property
    def is_loaded(self) -> bool:
        return self.roster is not None

    def open(self, path: Path) -> LoadResult:
        result = load(path)
        if result.ok:
            self.path = Path(path)
            self.roster = result.roster
        return result

    def save(self) -> SaveResult:
        if self.path is None or self.roster is None:
            raise RuntimeError("No save file loaded.")
        return save(self.path, self.roster, self.backup_enabled)
