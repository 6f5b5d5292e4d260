"""Scaffold utilities — functional helpers over the seven-slot scaffold.

Every function that produces a scaffold returns exactly one slot per
canonical key, in canonical order, whatever shape the input had. Inputs are
never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from promptforge.core.scaffold.models import (
    SCAFFOLD_SLOTS,
    SLOT_KEYS,
    ScaffoldSlot,
    SlotKey,
    slot_definition,
)

logger = logging.getLogger(__name__)

SlotLike = ScaffoldSlot | Mapping[str, Any]


def create_empty_scaffold() -> list[ScaffoldSlot]:
    """Return a fresh scaffold with all seven slots present and empty."""
    return [
        ScaffoldSlot(key=d.key, name=d.name, description=d.description, content="")
        for d in SCAFFOLD_SLOTS
    ]


def _parse_key(raw: Any) -> SlotKey | None:
    try:
        return SlotKey(raw)
    except ValueError:
        return None


def _coerce_slot(item: SlotLike) -> ScaffoldSlot | None:
    """Turn a slot or a slot-shaped mapping into a detached ScaffoldSlot."""
    if isinstance(item, ScaffoldSlot):
        key = _parse_key(item.key)
        if key is None:
            return None
        return ScaffoldSlot(
            key=key,
            name=item.name,
            description=item.description,
            content=item.content or "",
            weight=item.weight,
        )
    if isinstance(item, Mapping):
        key = _parse_key(item.get("key"))
        if key is None:
            return None
        definition = slot_definition(key)
        return ScaffoldSlot(
            key=key,
            name=item.get("name") or definition.name,
            description=item.get("description") or definition.description,
            content=item.get("content") or "",
            weight=item.get("weight"),
        )
    return None


def normalize_scaffold(scaffold: Iterable[SlotLike] | None) -> list[ScaffoldSlot]:
    """Project arbitrary slot input onto the canonical seven slots.

    Missing keys become empty slots; unknown keys are dropped; for duplicated
    keys the first occurrence wins.
    """
    by_key: dict[SlotKey, ScaffoldSlot] = {}
    for item in scaffold or ():
        slot = _coerce_slot(item)
        if slot is None:
            logger.debug("Dropping unrecognised scaffold entry: %r", item)
            continue
        by_key.setdefault(slot.key, slot)

    result: list[ScaffoldSlot] = []
    for empty in create_empty_scaffold():
        result.append(by_key.get(empty.key, empty))
    return result


def validate_scaffold(scaffold: Iterable[SlotLike]) -> bool:
    """True if every canonical key is present in ``scaffold``."""
    present = set()
    for item in scaffold:
        slot = _coerce_slot(item)
        if slot is not None:
            present.add(slot.key)
    return all(key in present for key in SLOT_KEYS)


def get_scaffold_slot(scaffold: Iterable[ScaffoldSlot], key: SlotKey | str) -> ScaffoldSlot | None:
    """Find the slot for ``key``, or None."""
    wanted = _parse_key(key)
    for slot in scaffold:
        if slot.key == wanted:
            return slot
    return None


def update_scaffold_slot(
    scaffold: Iterable[SlotLike],
    key: SlotKey | str,
    content: str,
    weight: float | None = None,
) -> list[ScaffoldSlot]:
    """Return a new scaffold with the slot for ``key`` replaced."""
    target = SlotKey(key)
    updated: list[ScaffoldSlot] = []
    for slot in normalize_scaffold(scaffold):
        if slot.key is target:
            slot = ScaffoldSlot(
                key=slot.key,
                name=slot.name,
                description=slot.description,
                content=content or "",
                weight=weight,
            )
        updated.append(slot)
    return updated


def has_scaffold_content(scaffold: Iterable[ScaffoldSlot]) -> bool:
    return any(slot.is_filled for slot in scaffold)


def get_empty_slots(scaffold: Iterable[ScaffoldSlot]) -> list[ScaffoldSlot]:
    return [slot for slot in scaffold if not slot.is_filled]


def get_filled_slots(scaffold: Iterable[ScaffoldSlot]) -> list[ScaffoldSlot]:
    return [slot for slot in scaffold if slot.is_filled]


def scaffold_to_object(scaffold: Iterable[SlotLike] | None) -> dict[str, str]:
    """Project a scaffold into ``{"S": ..., "C": ..., ...}`` for template substitution."""
    return {slot.key.value: slot.content for slot in normalize_scaffold(scaffold)}


def scaffold_from_object(values: Mapping[str, Any] | None) -> list[ScaffoldSlot]:
    """Inverse of :func:`scaffold_to_object`; ``None`` values become empty content."""
    values = values or {}
    scaffold = create_empty_scaffold()
    for slot in scaffold:
        raw = values.get(slot.key.value)
        slot.content = "" if raw is None else str(raw)
    return scaffold
