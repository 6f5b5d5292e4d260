"""Data models for model templates and user-authored custom formats."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

from promptforge.core.scaffold.models import ScaffoldSlot

TemplateSyntax = Literal["text", "json"]


@dataclass(frozen=True)
class ModelTemplate:
    """An engine-specific prompt pattern.

    ``format`` holds ``{KEY}`` placeholders for the seven scaffold keys and
    optionally ``{neg}`` / ``{ar}``. ``negative_format`` is appended when a
    negative prompt is given; empty means the engine takes no appended
    negative clause. With ``syntax="json"`` the format is a JSON document
    whose string values carry the placeholders.
    """

    id: str
    name: str
    format: str
    negative_format: str = ""
    parameters: Mapping[str, Any] = field(default_factory=dict)
    syntax: TemplateSyntax = "text"
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def supports_negative_prompts(self) -> bool:
        return bool(self.negative_format) or "{neg}" in self.format


@dataclass
class CustomFormat:
    """A user-authored template, validated before it is stored."""

    id: str
    name: str
    template: str
    validation: bool = False
    slots: list[ScaffoldSlot] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Outcome of validating a template string."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing_tokens: list[str] = field(default_factory=list)
    unknown_tokens: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "missing_tokens": list(self.missing_tokens),
            "unknown_tokens": list(self.unknown_tokens),
        }
