"""Shared fixtures: synthetic save files laid out like the real game's."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pytest

from xenoed.data import SEP
from xenoed.scanner import MARK, MARK2

HEADER = b"XSAV\x01\x00\x00\x00campaign-header\x00\x7f\x80"
FOOTER = b"\x00\x00trailing-geoscape-state\xfe"
GAP = b"\x13\x37inter-record\x00"

NAMES = (
    "Ivan Petrov",
    "Mei Lin",
    "Alexandra Kowalski",
    "Tom Reed",
    "Hiroshi Tanaka",
    "Ana Silva",
    "Lars Berg",
    "Omar Haddad",
    "Chloe Martin",
    "Jack Dunn",
    "Priya Rao",
    "Felix Braun",
)


def text_field(raw: bytes, length: Optional[int] = None) -> bytes:
    return bytes([len(raw) if length is None else length]) + SEP + raw


def record_bytes(
    name: bytes,
    stats: Sequence[int],
    nationality: bytes = b"Russia",
    portrait: bytes = b"portrait_m_04",
    country: bytes = b"RU",
    country_length: Optional[int] = None,
) -> bytes:
    """One record; ``stats`` are in storage order (HPS STR ACC RFL BRV TUS)."""
    parts = [
        MARK,
        b"\x01",  # reserved byte after the marker
        SEP,
        text_field(nationality),
        text_field(name),
        text_field(portrait),
        b"\x02\x00\x00\x00",  # reserved field
        text_field(country, country_length),
        b"\x06\x00\x00\x00",
    ]
    parts.extend(bytes([value]) + SEP for value in stats)
    parts.append(b"\x99\x98equipment\x00")
    parts.append(MARK2)
    parts.append(b"\x05\x00\x00\x00loadout")
    return b"".join(parts)


def default_soldiers() -> List[Dict]:
    soldiers = []
    for idx, name in enumerate(NAMES):
        base = 40 + idx
        soldiers.append(
            {
                "name": name.encode("ascii"),
                "stats": (base, base + 1, base + 2, base + 3, base + 4, base + 5),
            }
        )
    return soldiers


def save_bytes(soldiers: Sequence[Dict], header: bytes = HEADER, footer: bytes = FOOTER) -> bytes:
    return header + GAP.join(record_bytes(**soldier) for soldier in soldiers) + footer


@pytest.fixture
def build_save():
    return save_bytes


@pytest.fixture
def soldiers() -> List[Dict]:
    return default_soldiers()


@pytest.fixture
def sample_save(soldiers) -> bytes:
    return save_bytes(soldiers)


@pytest.fixture
def sample_save_file(tmp_path, sample_save):
    path = tmp_path / "campaign.sav"
    path.write_bytes(sample_save)
    return path
