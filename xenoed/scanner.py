from __future__ import annotations

import logging
from typing import List, Tuple

from xenoed.errors import MalformedMarkersError

logger = logging.getLogger(__name__)

# "MARK....Soldier" opens a personnel record, "MARK....Soldier2" follows it.
MARK = b"MARK\x07\x00\x00\x00Soldier"
MARK2 = b"MARK\x08\x00\x00\x00Soldier2"

# One reserved byte sits between the start marker and the record body.
RESERVED_AFTER_MARK = 1


def find_record_ranges(buffer: bytes) -> List[Tuple[int, int]]:
    """
    Return ``(start, end)`` byte ranges, one per personnel record, in file order.

    ``start`` is the first byte after the start marker and its reserved byte;
    ``end`` is the offset of the nearest end marker following ``start``.
    """
    ranges: List[Tuple[int, int]] = []
    search_pos = 0

    while True:
        marker_pos = buffer.find(MARK, search_pos)
        if marker_pos == -1:
            break

        start = marker_pos + len(MARK) + RESERVED_AFTER_MARK
        end = buffer.find(MARK2, start)
        if end == -1:
            raise MalformedMarkersError(
                f"Record marker at 0x{marker_pos:x} has no closing marker"
            )
        ranges.append((start, end))
        search_pos = marker_pos + len(MARK)  # non-overlapping

    logger.debug("Found %d record markers", len(ranges))
    return ranges
