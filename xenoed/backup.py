from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from xenoed.errors import BackupCopyFailedError, BackupNameExhaustedError, WriteFailedError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"
BACKUP_PROBE_LIMIT = 256


def backup_path_for(target: Path) -> Path:
    """Return the first free name among ``<stem>.bak``, ``<stem>.bak0`` … ``<stem>.bak255``."""
    base = target
    if base.name.endswith(".") and base.name.strip("."):
        # "campaign." has an empty extension; replace it rather than append.
        base = base.with_name(base.name[:-1])
    candidate = base.with_suffix(BACKUP_SUFFIX)
    if not candidate.exists():
        return candidate
    for idx in range(BACKUP_PROBE_LIMIT):
        candidate = base.with_suffix(f"{BACKUP_SUFFIX}{idx}")
        if not candidate.exists():
            return candidate
    raise BackupNameExhaustedError(
        f"No free backup name for {target} ({BACKUP_SUFFIX} through "
        f"{BACKUP_SUFFIX}{BACKUP_PROBE_LIMIT - 1} all exist)"
    )


def _write(target: Path, data: bytes) -> None:
    try:
        target.write_bytes(data)
    except OSError as exc:
        raise WriteFailedError(f"Unable to write {target}: {exc}") from exc
    logger.info("Wrote %d bytes to %s", len(data), target)


def persist(target: Path, data: bytes, backup_enabled: bool = True) -> Optional[Path]:
    """
    Write ``data`` to ``target``, backing up the existing file first when asked.

    The target is only overwritten after the backup copy has fully succeeded.
    Returns the backup path, or None when no backup was made.
    """
    target = Path(target)
    if not backup_enabled or not target.exists():
        _write(target, data)
        return None

    backup = backup_path_for(target)
    try:
        shutil.copy2(target, backup)
    except OSError as exc:
        raise BackupCopyFailedError(f"Unable to back up {target} to {backup}: {exc}") from exc
    logger.info("Backed up %s to %s", target, backup)

    _write(target, data)
    return backup
