"""Data models for the seven-slot prompt scaffold."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class SlotKey(str, Enum):
    """The closed set of scaffold slot keys, in canonical order."""

    SUBJECT = "S"
    CONTEXT = "C"
    STYLE = "St"
    COMPOSITION = "Co"
    LIGHTING = "L"
    ATMOSPHERE = "A"
    QUALITY = "Q"

    def __str__(self) -> str:
        return self.value

    # Hash like the plain code so "S" and SlotKey.SUBJECT address the same dict entry.
    def __hash__(self) -> int:
        return hash(self.value)

    @property
    def token(self) -> str:
        """The ``{KEY}`` placeholder used in templates."""
        return "{" + self.value + "}"


@dataclass
class ScaffoldSlot:
    """One dimension of a prompt (subject, lighting, ...)."""

    key: SlotKey
    name: str
    description: str
    content: str = ""
    weight: float | None = None

    @property
    def is_filled(self) -> bool:
        return bool(self.content and self.content.strip())


@dataclass(frozen=True)
class SlotDefinition:
    """Catalog entry describing a slot; never mutated."""

    key: SlotKey
    name: str
    description: str


SCAFFOLD_SLOTS: tuple[SlotDefinition, ...] = (
    SlotDefinition(SlotKey.SUBJECT, "Subject", "The main subject or focus of the image"),
    SlotDefinition(SlotKey.CONTEXT, "Context", "Setting, environment, or background context"),
    SlotDefinition(SlotKey.STYLE, "Style", "Art style, medium, or visual approach"),
    SlotDefinition(
        SlotKey.COMPOSITION, "Composition", "Camera angle, framing, and visual composition"
    ),
    SlotDefinition(SlotKey.LIGHTING, "Lighting", "Lighting conditions and mood"),
    SlotDefinition(SlotKey.ATMOSPHERE, "Atmosphere", "Mood, emotion, and atmospheric qualities"),
    SlotDefinition(SlotKey.QUALITY, "Quality", "Technical quality and rendering specifications"),
)

SLOT_KEYS: tuple[SlotKey, ...] = tuple(d.key for d in SCAFFOLD_SLOTS)

REQUIRED_TOKENS: tuple[str, ...] = tuple(k.token for k in SLOT_KEYS)


def slot_definition(key: SlotKey | str) -> SlotDefinition:
    """Look up the catalog entry for a key (accepts the literal code too)."""
    slot_key = SlotKey(key)
    for definition in SCAFFOLD_SLOTS:
        if definition.key is slot_key:
            return definition
    raise KeyError(key)  # pragma: no cover - enum guarantees a match


@dataclass
class PromptMetadata:
    """Bookkeeping for a generated prompt."""

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    model: str = ""
    version: int = 1


@dataclass
class GeneratedPrompt:
    """A populated scaffold plus its rendered outputs.

    ``formatted_outputs`` maps template id to rendered text. It is derived
    data: it can always be rebuilt from ``scaffold`` and a template registry.
    """

    id: str
    scaffold: list[ScaffoldSlot]
    raw_text: str = ""
    formatted_outputs: dict[str, str] = field(default_factory=dict)
    metadata: PromptMetadata = field(default_factory=PromptMetadata)
