from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from xenoed.errors import MalformedMarkersError, TruncatedRecordError
from xenoed.scanner import find_record_ranges

logger = logging.getLogger(__name__)

ROSTER_SIZE = 12
SEP = b"\x00\x00\x00"  # follows every length byte
STAT_STRIDE = len(SEP) + 1
RESERVED_FIELD_LEN = len(SEP) + 1  # between portrait and home country, never interpreted

NAME_TEXT_ENCODING = "utf-8"
MAX_NAME_LEN = 20
MAX_FIELD_LEN = 0xFF  # a single length byte

MIN_STAT = 35
MAX_STAT = 70
STAT_SUM = 320  # advisory balanced total, not enforced

# Storage order inside the stats block.
STAT_FIELDS: Tuple[str, ...] = (
    "health",
    "strength",
    "accuracy",
    "reflexes",
    "bravery",
    "time_units",
)


def _decode_text(raw: bytes) -> str:
    # One U+FFFD per invalid sequence; the game never validates its strings.
    return raw.decode(NAME_TEXT_ENCODING, errors="replace")


def _require(buffer: bytes, offset: int, count: int, what: str) -> None:
    if offset < 0 or offset + count > len(buffer):
        raise TruncatedRecordError(
            f"{what} at 0x{offset:x} needs {count} bytes but the file ends at 0x{len(buffer):x}"
        )


def _read_field(buffer: bytes, offset: int, what: str) -> Tuple[bytes, int]:
    """Read a length-prefixed field; return its raw content and the offset after it."""
    _require(buffer, offset, 1 + len(SEP), what)
    length = buffer[offset]
    content_start = offset + 1 + len(SEP)
    _require(buffer, content_start, length, what)
    return buffer[content_start : content_start + length], content_start + length


@dataclass(frozen=True)
class RecordOffsets:
    """Patch sites captured at decode time, valid only against ``Roster.source``."""

    name_field_offset: int
    name_field_length: int
    stats_block_offset: int
    name_raw: bytes = b""

    @property
    def name_content_offset(self) -> int:
        return self.name_field_offset + 1 + len(SEP)

    def stat_offset(self, index: int) -> int:
        return self.stats_block_offset + STAT_STRIDE * (index + 1)


@dataclass
class PersonnelRecord:
    name: str
    time_units: int
    health: int
    strength: int
    accuracy: int
    reflexes: int
    bravery: int
    nationality: str = ""
    portrait: str = ""
    home_country: str = ""

    @property
    def stat_total(self) -> int:
        return sum(getattr(self, stat) for stat in STAT_FIELDS)

    def stat_balance(self) -> str:
        total = self.stat_total
        if total > STAT_SUM:
            return "over"
        if total < STAT_SUM:
            return "under"
        return "balanced"

    def stats(self) -> List[int]:
        """Attribute values in storage order."""
        return [getattr(self, stat) for stat in STAT_FIELDS]

    def set_name(self, value: str) -> None:
        if not value.isascii():
            raise ValueError(f"Name {value!r} contains non-ASCII characters.")
        if len(value) > MAX_NAME_LEN:
            raise ValueError(f"Name {value!r} is longer than {MAX_NAME_LEN} characters.")
        self.name = value

    def set_stat(self, stat: str, value: int) -> None:
        if stat not in STAT_FIELDS:
            raise ValueError(f"Unknown attribute {stat!r}.")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{stat} must be a whole number, got {value!r}.")
        if not MIN_STAT <= value <= MAX_STAT:
            raise ValueError(f"{stat} must be between {MIN_STAT} and {MAX_STAT}, got {value}.")
        setattr(self, stat, value)


@dataclass
class Roster:
    records: List[PersonnelRecord]
    offsets: Tuple[RecordOffsets, ...]
    source: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.records) != len(self.offsets):
            raise ValueError(
                f"Roster has {len(self.records)} records but {len(self.offsets)} offset entries"
            )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PersonnelRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> PersonnelRecord:
        return self.records[index]


def decode_record(buffer: bytes, record_range: Tuple[int, int]) -> Tuple[PersonnelRecord, RecordOffsets]:
    start, end = record_range
    cursor = start + len(SEP)

    nationality_raw, cursor = _read_field(buffer, cursor, "nationality")

    name_field_offset = cursor
    name_raw, cursor = _read_field(buffer, cursor, "name")

    portrait_raw, cursor = _read_field(buffer, cursor, "portrait")

    _require(buffer, cursor, RESERVED_FIELD_LEN, "reserved field")
    cursor += RESERVED_FIELD_LEN

    country_raw, cursor = _read_field(buffer, cursor, "home country")

    stats_block_offset = cursor
    offsets = RecordOffsets(
        name_field_offset=name_field_offset,
        name_field_length=len(name_raw),
        stats_block_offset=stats_block_offset,
        name_raw=bytes(name_raw),
    )
    last_stat = offsets.stat_offset(len(STAT_FIELDS) - 1)
    _require(buffer, last_stat, 1, "stats block")
    if last_stat >= end:
        logger.warning(
            "Stats block at 0x%x runs past the record end marker at 0x%x", stats_block_offset, end
        )

    values = {stat: buffer[offsets.stat_offset(idx)] for idx, stat in enumerate(STAT_FIELDS)}
    record = PersonnelRecord(
        name=_decode_text(name_raw),
        nationality=_decode_text(nationality_raw),
        portrait=_decode_text(portrait_raw),
        home_country=_decode_text(country_raw),
        **values,
    )
    return record, offsets


def decode_roster(buffer: bytes) -> Roster:
    """Decode all personnel records; anything but exactly ROSTER_SIZE is an error."""
    source = bytes(buffer)
    ranges = find_record_ranges(source)
    if len(ranges) != ROSTER_SIZE:
        raise MalformedMarkersError(
            f"Expected {ROSTER_SIZE} personnel records, found {len(ranges)}"
        )

    records: List[PersonnelRecord] = []
    offsets: List[RecordOffsets] = []
    for index, record_range in enumerate(ranges):
        record, record_offsets = decode_record(source, record_range)
        logger.debug("Record %d: %r at 0x%x", index, record.name, record_offsets.name_field_offset)
        records.append(record)
        offsets.append(record_offsets)
    return Roster(records=records, offsets=tuple(offsets), source=source)


def _encode_name(name: str) -> bytes:
    encoded = name.encode(NAME_TEXT_ENCODING)
    if len(encoded) > MAX_FIELD_LEN:
        raise ValueError(
            f"Name {name!r} is {len(encoded)} bytes; a length byte holds at most {MAX_FIELD_LEN}"
        )
    return encoded


def encode_roster(original: bytes, roster: Roster) -> bytes:
    """
    Return ``original`` with every record's stats and name patched in.

    Records are patched last to first. A name whose length changed is spliced
    in, which moves every byte after it; earlier records sit at lower offsets
    and are unaffected, so their captured offsets stay valid.
    """
    if original != roster.source:
        raise ValueError("Roster offsets were captured from a different buffer.")

    result = bytearray(original)
    for index in range(len(roster.records) - 1, -1, -1):
        record = roster.records[index]
        offsets = roster.offsets[index]

        for stat_index, value in enumerate(record.stats()):
            if not 0 <= value <= 0xFF:
                raise ValueError(
                    f"Record {index}: {STAT_FIELDS[stat_index]}={value} does not fit in a byte"
                )
            result[offsets.stat_offset(stat_index)] = value

        if record.name == _decode_text(offsets.name_raw):
            continue

        name_bytes = _encode_name(record.name)
        content_start = offsets.name_content_offset
        content_end = content_start + offsets.name_field_length
        if len(name_bytes) != offsets.name_field_length:
            # Splice: the slice assignment below grows or shrinks the buffer.
            result[offsets.name_field_offset] = len(name_bytes)
            logger.debug(
                "Record %d: name resized %d -> %d bytes",
                index,
                offsets.name_field_length,
                len(name_bytes),
            )
        result[content_start:content_end] = name_bytes
    return bytes(result)
