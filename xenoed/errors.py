"""Error kinds shared by the roster codec, the write gateway and the session API."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    UNREADABLE_FILE = "unreadable_file"
    MALFORMED_MARKERS = "malformed_markers"
    TRUNCATED_RECORD = "truncated_record"
    BACKUP_NAME_EXHAUSTED = "backup_name_exhausted"
    BACKUP_COPY_FAILED = "backup_copy_failed"
    WRITE_FAILED = "write_failed"


class EditorError(Exception):
    kind: ErrorKind


class DecodeError(EditorError, ValueError):
    """Raised while loading; the whole load is aborted."""


class UnreadableFileError(DecodeError):
    kind = ErrorKind.UNREADABLE_FILE


class MalformedMarkersError(DecodeError):
    kind = ErrorKind.MALFORMED_MARKERS


class TruncatedRecordError(DecodeError):
    kind = ErrorKind.TRUNCATED_RECORD


class PersistError(EditorError, OSError):
    """Raised while saving; everything but WRITE_FAILED leaves the target untouched."""


class BackupNameExhaustedError(PersistError):
    kind = ErrorKind.BACKUP_NAME_EXHAUSTED


class BackupCopyFailedError(PersistError):
    kind = ErrorKind.BACKUP_COPY_FAILED


class WriteFailedError(PersistError):
    kind = ErrorKind.WRITE_FAILED
