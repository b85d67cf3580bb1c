"""Slot matching for court availability.

A booking's slot matches a court slot only on exact (startTime, endTime)
equality. There is no overlap detection.
"""

from typing import Iterable

SlotKey = tuple[str, str]


def slot_key(slot: dict) -> SlotKey:
    return (slot.get("startTime"), slot.get("endTime"))


def set_availability(
    court_slots: Iterable[dict], targets: Iterable[dict], available: bool
) -> tuple[list[dict], list[SlotKey]]:
    """
    Return a new slot list with every matching slot set to ``available``.

    The second element lists the keys whose flag actually flipped; a slot that
    already had the requested value does not count as modified.
    """
    wanted = {slot_key(t) for t in targets}
    updated: list[dict] = []
    changed: list[SlotKey] = []

    for slot in court_slots:
        slot = dict(slot)
        key = slot_key(slot)
        if key in wanted and slot.get("available") != available:
            slot["available"] = available
            changed.append(key)
        updated.append(slot)

    return updated, changed


def keys_to_slots(keys: Iterable[SlotKey]) -> list[dict]:
    return [{"startTime": start, "endTime": end} for start, end in keys]
