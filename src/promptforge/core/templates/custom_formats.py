"""Custom format library — user-authored templates, validated on the way in.

Durable storage (browser storage, Drive) belongs to the caller; the library
only holds formats for the life of the process and exchanges them as JSON.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from promptforge.core.errors import InvalidCustomFormatError
from promptforge.core.scaffold.models import ScaffoldSlot
from promptforge.core.scaffold.slots import create_empty_scaffold, normalize_scaffold
from promptforge.core.templates.models import CustomFormat
from promptforge.core.templates.validator import (
    DEFAULT_MAX_TEMPLATE_LENGTH,
    validate_custom_format,
    validate_custom_format_record,
)

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_TEMPLATE = "{S}, {C}, {St}, {Co}, {L}, {A}, {Q}"


@dataclass
class ImportResult:
    success: bool
    imported: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class UsageStats:
    total_formats: int
    valid_formats: int
    invalid_formats: int


def create_default_custom_format(name: str = "") -> CustomFormat:
    """A starting point for the format editor."""
    return CustomFormat(
        id=str(uuid.uuid4()),
        name=name,
        template=DEFAULT_CUSTOM_TEMPLATE,
        validation=True,
        slots=create_empty_scaffold(),
    )


def custom_format_to_dict(fmt: CustomFormat) -> dict[str, Any]:
    return {
        "id": fmt.id,
        "name": fmt.name,
        "template": fmt.template,
        "validation": fmt.validation,
        "slots": [
            {
                "key": slot.key.value,
                "name": slot.name,
                "description": slot.description,
                "content": slot.content,
                "weight": slot.weight,
            }
            for slot in fmt.slots
        ],
    }


def _slots_from_data(data: Any) -> list[ScaffoldSlot]:
    if isinstance(data, list):
        return normalize_scaffold(item for item in data if isinstance(item, dict))
    return create_empty_scaffold()


class CustomFormatLibrary:
    """In-memory collection of validated custom formats, keyed by id."""

    def __init__(self, *, max_length: int = DEFAULT_MAX_TEMPLATE_LENGTH) -> None:
        self._formats: dict[str, CustomFormat] = {}
        self._max_length = max_length

    def save(self, fmt: CustomFormat) -> CustomFormat:
        """Insert or replace a format. Invalid formats are rejected."""
        result = validate_custom_format_record(fmt, max_length=self._max_length)
        if not result.is_valid:
            raise InvalidCustomFormatError(fmt.name, result.errors)

        stored = replace(
            fmt,
            id=fmt.id or str(uuid.uuid4()),
            validation=True,
            slots=normalize_scaffold(fmt.slots) if fmt.slots else create_empty_scaffold(),
        )
        action = "Updated" if stored.id in self._formats else "Saved"
        self._formats[stored.id] = stored
        logger.info("%s custom format %s (%s)", action, stored.id, stored.name)
        return stored

    def get(self, format_id: str) -> CustomFormat | None:
        return self._formats.get(format_id)

    def all(self) -> list[CustomFormat]:
        return list(self._formats.values())

    def delete(self, format_id: str) -> bool:
        """Remove a format; False when it was not present."""
        removed = self._formats.pop(format_id, None)
        if removed is not None:
            logger.info("Deleted custom format %s", format_id)
        return removed is not None

    def clear(self) -> None:
        self._formats.clear()

    def duplicate(self, format_id: str, new_name: str | None = None) -> CustomFormat | None:
        original = self._formats.get(format_id)
        if original is None:
            return None
        copy = replace(
            original,
            id=str(uuid.uuid4()),
            name=new_name or f"{original.name} (Copy)",
            slots=[replace(slot) for slot in original.slots],
        )
        return self.save(copy)

    def search(self, query: str) -> list[CustomFormat]:
        """Case-insensitive match on name or template text."""
        needle = query.lower()
        return [
            fmt
            for fmt in self._formats.values()
            if needle in fmt.name.lower() or needle in fmt.template.lower()
        ]

    def usage_stats(self) -> UsageStats:
        valid = sum(
            1
            for fmt in self._formats.values()
            if validate_custom_format(fmt.template, max_length=self._max_length).is_valid
        )
        total = len(self._formats)
        return UsageStats(total_formats=total, valid_formats=valid, invalid_formats=total - valid)

    def export_json(self) -> str:
        return json.dumps([custom_format_to_dict(f) for f in self._formats.values()], indent=2)

    def import_json(self, data: str) -> ImportResult:
        """Import formats from :meth:`export_json` output; bad entries are reported, not raised."""
        try:
            entries = json.loads(data)
        except ValueError:
            return ImportResult(success=False, errors=["Invalid JSON format"])

        if not isinstance(entries, list):
            return ImportResult(
                success=False, errors=["Invalid format: expected an array of custom formats"]
            )

        errors: list[str] = []
        imported = 0
        for index, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict) or not all(
                entry.get(k) for k in ("id", "name", "template")
            ):
                errors.append(f"Format {index}: Missing required fields (id, name, template)")
                continue

            fmt = CustomFormat(
                id=str(entry["id"]),
                name=str(entry["name"]),
                template=str(entry["template"]),
                slots=_slots_from_data(entry.get("slots")),
            )
            try:
                self.save(fmt)
            except InvalidCustomFormatError as exc:
                errors.append(f"Format {index} ({fmt.name}): {', '.join(exc.errors)}")
                continue
            imported += 1

        logger.info("Imported %d custom formats (%d rejected)", imported, len(errors))
        return ImportResult(success=imported > 0, imported=imported, errors=errors)

    def __len__(self) -> int:
        return len(self._formats)
