"""Content checks for individual slots and free-form prompt text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from promptforge.core.scaffold.models import ScaffoldSlot, SlotKey

SUBJECT_MIN_LENGTH = 3
STYLE_MIN_LENGTH = 5

QUALITY_KEYWORDS = ("quality", "detailed", "4k", "8k", "sharp", "professional")

FLAGGED_KEYWORDS = ("nsfw", "explicit", "nude", "naked", "sexual", "violence", "blood", "gore")

_HTML_BRACKETS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


@dataclass
class SlotCheck:
    is_valid: bool
    suggestions: list[str] = field(default_factory=list)


@dataclass
class ContentCheck:
    is_valid: bool
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def has_quality_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in QUALITY_KEYWORDS)


def validate_scaffold_slot(slot: ScaffoldSlot) -> SlotCheck:
    """Suggestions for one slot. Only an empty slot is invalid."""
    content = (slot.content or "").strip()
    if not content:
        return SlotCheck(is_valid=False, suggestions=[f"Add content to the {slot.name} slot"])

    suggestions: list[str] = []
    if slot.key == SlotKey.SUBJECT and len(content) < SUBJECT_MIN_LENGTH:
        suggestions.append("Subject should be more descriptive")
    elif slot.key == SlotKey.QUALITY and not has_quality_keyword(content):
        suggestions.append('Consider adding quality descriptors like "high quality" or "detailed"')
    elif slot.key == SlotKey.STYLE and len(content) < STYLE_MIN_LENGTH:
        suggestions.append("Style description could be more specific")

    return SlotCheck(is_valid=True, suggestions=suggestions)


def validate_prompt_safety(content: str) -> ContentCheck:
    """Flag content likely to trip engine safety filters, plus style hints."""
    warnings: list[str] = []
    suggestions: list[str] = []
    lowered = content.lower()

    if any(keyword in lowered for keyword in FLAGGED_KEYWORDS):
        warnings.append("Content may be flagged by AI safety filters")

    if len(content) < 10:
        suggestions.append("Consider adding more detail to your prompt")
    if len(content) > 500:
        suggestions.append("Very long prompts may not work well with some models")
    if "..." in content:
        suggestions.append('Replace "..." with specific details')

    return ContentCheck(is_valid=not warnings, warnings=warnings, suggestions=suggestions)


def sanitize_input(text: str) -> str:
    """Strip markup and script fragments from user-supplied text."""
    text = _HTML_BRACKETS.sub("", text)
    text = _JS_PROTOCOL.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text.strip()
