#!/usr/bin/env python3
"""
Dump the soldier roster stored in a Xenonauts CE save file.

Optionally applies simple edits and writes the result, which is handy for
checking by hand that the game still accepts a patched save:

    python tools/dump_roster.py SAVE.sav
    python tools/dump_roster.py SAVE.sav --rename 3 "Jane Doe" --stat 3 bravery 70
    python tools/dump_roster.py SAVE.sav --rename 0 Vasquez --output patched.sav
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from xenoed.data import STAT_FIELDS, STAT_SUM, Roster
from xenoed.session import load, save

STAT_LABELS = {
    "time_units": "TUS",
    "health": "HPS",
    "strength": "STR",
    "accuracy": "ACC",
    "reflexes": "RFL",
    "bravery": "BRV",
}
DISPLAY_ORDER = ("time_units", "health", "strength", "accuracy", "reflexes", "bravery")


def _format_roster(roster: Roster) -> str:
    header = f"  {'#':>2}  {'Name':<20} " + " ".join(f"{STAT_LABELS[s]:>4}" for s in DISPLAY_ORDER)
    lines: List[str] = [header + "   SUM", "  " + "-" * (len(header) + 4)]
    for idx, record in enumerate(roster):
        values = " ".join(f"{getattr(record, s):>4}" for s in DISPLAY_ORDER)
        flag = {"over": "+", "under": "-", "balanced": "="}[record.stat_balance()]
        lines.append(f"  {idx:>2}  {record.name:<20} {values}   {record.stat_total:>3} {flag}")
        lines.append(f"      {record.nationality} / {record.home_country} / {record.portrait}")
    return "\n".join(lines)


def _apply_edits(roster: Roster, args: argparse.Namespace) -> bool:
    changed = False
    for index, name in args.rename or []:
        roster[int(index)].set_name(name)
        changed = True
    for index, stat, value in args.stat or []:
        roster[int(index)].set_stat(stat, int(value))
        changed = True
    return changed


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump or patch the soldier roster of a save file.")
    parser.add_argument("save", type=Path, help="Path to the save file")
    parser.add_argument(
        "--rename",
        nargs=2,
        action="append",
        metavar=("INDEX", "NAME"),
        help="Rename soldier INDEX (ASCII, at most 20 characters)",
    )
    parser.add_argument(
        "--stat",
        nargs=3,
        action="append",
        metavar=("INDEX", "STAT", "VALUE"),
        help=f"Set an attribute ({', '.join(STAT_FIELDS)})",
    )
    parser.add_argument("--output", type=Path, help="Write to this path instead of the input file")
    parser.add_argument("--no-backup", action="store_true", help="Don't back up the file being replaced")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    result = load(args.save)
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1
    roster = result.roster

    try:
        changed = _apply_edits(roster, args)
    except (ValueError, IndexError) as exc:
        print(f"Rejected edit: {exc}", file=sys.stderr)
        return 2

    print(f"{args.save} (advisory stat total {STAT_SUM})")
    print(_format_roster(roster))

    if not changed:
        return 0
    saved = save(args.output or args.save, roster, backup_enabled=not args.no_backup)
    print(saved.message)
    if saved.backup_path is not None:
        print(f"Backup: {saved.backup_path}")
    return 0 if saved.ok else 1


if __name__ == "__main__":
    sys.exit(main())
