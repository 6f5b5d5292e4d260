"""Prompt builder — turns populated scaffolds into GeneratedPrompt records."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field, replace

from promptforge.core.errors import InvalidScaffoldError
from promptforge.core.scaffold.models import GeneratedPrompt, PromptMetadata, ScaffoldSlot
from promptforge.core.scaffold.slots import (
    create_empty_scaffold,
    get_empty_slots,
    normalize_scaffold,
    scaffold_to_object,
    validate_scaffold,
)
from promptforge.core.templates.formatter import format_for_templates, format_prompt_for_model
from promptforge.core.templates.registry import TemplateRegistry

logger = logging.getLogger(__name__)

# Keyword hints used to pre-fill a scaffold before the assistant refines it.
SUBJECT_KEYWORDS = ("person", "man", "woman", "child", "cat", "dog", "car", "house", "tree")
CONTEXT_KEYWORDS = ("inside", "outside", "forest", "city", "beach", "mountain", " in ", " at ", " on ")
STYLE_KEYWORDS = ("realistic", "cartoon", "anime", "painting", "sketch", "digital art", "oil painting")
LIGHTING_KEYWORDS = ("bright", "dark", "sunset", "sunrise", "golden hour", "dramatic lighting")
QUALITY_KEYWORDS = ("high quality", "4k", "8k", "detailed", "sharp", "professional")

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD_SPLIT = re.compile(r"[,\s]+")


@dataclass
class ContentReview:
    is_valid: bool
    missing_slots: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def _matches(text: str, keywords: tuple[str, ...]) -> list[str]:
    return [kw.strip() for kw in keywords if kw in text]


def _extract_context(text: str) -> str:
    sentences: list[str] = []
    for sentence in _SENTENCE_SPLIT.split(text):
        padded = f" {sentence.strip().lower()} "
        if any(kw in padded for kw in CONTEXT_KEYWORDS):
            sentences.append(sentence.strip())
    return ". ".join(sentences)


def _analyze_text(text: str) -> dict[str, str]:
    lowered = f" {text.lower()} "
    found: dict[str, str] = {}

    if subjects := _matches(lowered, SUBJECT_KEYWORDS):
        found["S"] = ", ".join(subjects)
    if _matches(lowered, CONTEXT_KEYWORDS):
        if context := _extract_context(text):
            found["C"] = context
    if styles := _matches(lowered, STYLE_KEYWORDS):
        found["St"] = ", ".join(styles)
    if lighting := _matches(lowered, LIGHTING_KEYWORDS):
        found["L"] = ", ".join(lighting)
    if quality := _matches(lowered, QUALITY_KEYWORDS):
        found["Q"] = ", ".join(quality)
    return found


def merge_slot_content(existing: str, new: str) -> str:
    """Append words from ``new`` that ``existing`` does not already contain."""
    if not existing:
        return new
    if not new:
        return existing
    existing_words = set(_WORD_SPLIT.split(existing.lower()))
    unique = [w for w in _WORD_SPLIT.split(new.lower()) if w and w not in existing_words]
    if not unique:
        return existing
    return f"{existing}, {' '.join(unique)}"


def populate_scaffold_from_text(
    text: str, existing: list[ScaffoldSlot] | None = None
) -> list[ScaffoldSlot]:
    """Keyword pre-fill of a scaffold from free text, merged into ``existing``."""
    analysis = _analyze_text(text)
    return [
        replace(slot, content=merge_slot_content(slot.content, analysis.get(slot.key.value, "")))
        for slot in normalize_scaffold(existing or create_empty_scaffold())
    ]


def create_generated_prompt(
    scaffold: list[ScaffoldSlot],
    raw_text: str,
    registry: TemplateRegistry,
    model_id: str | None = None,
) -> GeneratedPrompt:
    """Build a GeneratedPrompt with outputs for every registered template."""
    if not validate_scaffold(scaffold):
        raise InvalidScaffoldError("Invalid scaffold: missing required slots")

    slots = normalize_scaffold(scaffold)
    outputs = format_for_templates(scaffold_to_object(slots), registry.get_all_templates())
    prompt = GeneratedPrompt(
        id=str(uuid.uuid4()),
        scaffold=slots,
        raw_text=raw_text,
        formatted_outputs=outputs,
        metadata=PromptMetadata(model=model_id or registry.get_default_template().id),
    )
    logger.debug("Created prompt %s with %d outputs", prompt.id, len(outputs))
    return prompt


def update_generated_prompt(
    prompt: GeneratedPrompt,
    new_scaffold: list[ScaffoldSlot],
    registry: TemplateRegistry,
) -> GeneratedPrompt:
    """Return a new version of ``prompt`` with outputs re-rendered."""
    slots = normalize_scaffold(new_scaffold)
    outputs = format_for_templates(scaffold_to_object(slots), registry.get_all_templates())
    return replace(
        prompt,
        scaffold=slots,
        formatted_outputs=outputs,
        metadata=replace(prompt.metadata, version=prompt.metadata.version + 1),
    )


def get_formatted_prompt(
    prompt: GeneratedPrompt,
    model_id: str,
    registry: TemplateRegistry,
    negative_prompt: str | None = None,
) -> str:
    """Render ``prompt`` for one engine. Raises TemplateNotFoundError for unknown ids."""
    template = registry.require(model_id)
    return format_prompt_for_model(scaffold_to_object(prompt.scaffold), template, negative_prompt)


def validate_prompt_content(prompt: GeneratedPrompt) -> ContentReview:
    """List empty slots with a suggestion for the ones that matter most."""
    missing = [slot.name for slot in get_empty_slots(normalize_scaffold(prompt.scaffold))]
    suggestions: list[str] = []
    if "Subject" in missing:
        suggestions.append("Add a clear subject or main focus for your image")
    if "Style" in missing:
        suggestions.append("Consider specifying an art style (e.g., realistic, cartoon, painting)")
    if "Quality" in missing:
        suggestions.append('Add quality descriptors like "high quality", "detailed", or "4K"')
    return ContentReview(is_valid=not missing, missing_slots=missing, suggestions=suggestions)
