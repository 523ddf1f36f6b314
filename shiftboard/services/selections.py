"""
Conversion between stored JSON selections and rule types.
"""

from datetime import date
from typing import Iterable, Optional

from shiftboard.services.rules.types import ShiftSelection


def selection_from_json(raw: dict) -> ShiftSelection:
    return ShiftSelection(
        day_index=int(raw["day_index"]),
        shift_id=str(raw["shift_id"]),
        note=raw.get("note") or None,
    )


def selections_from_json(raw: Optional[Iterable[dict]]) -> list[ShiftSelection]:
    return [selection_from_json(item) for item in (raw or [])]


def selection_to_json(selection: ShiftSelection) -> dict:
    data = {"day_index": selection.day_index, "shift_id": selection.shift_id}
    if selection.note:
        data["note"] = selection.note
    return data


def selections_to_json(selections: Iterable[ShiftSelection]) -> list[dict]:
    return [selection_to_json(s) for s in selections]


def swap_shift_to_json(week_start: date, selection: ShiftSelection) -> dict:
    data = selection_to_json(selection)
    data["week_start"] = week_start.isoformat()
    return data
