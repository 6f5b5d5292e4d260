"""Template formatter — renders scaffold values into engine prompt syntax."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from promptforge.core.scaffold.models import SLOT_KEYS
from promptforge.core.templates.models import CustomFormat, ModelTemplate

logger = logging.getLogger(__name__)

_SLOT_NAMES = "|".join(k.value for k in SLOT_KEYS)

# One pass over the template so substituted text is never re-scanned. A
# template label written directly before a placeholder ("Avoid: {neg}") is
# dropped together with an empty value.
_PLACEHOLDER = re.compile(r"(\b[A-Za-z][\w-]*:\s*)?\{(" + _SLOT_NAMES + r"|neg|ar)\}")
_SLOT_PLACEHOLDER = re.compile(r"\{(" + _SLOT_NAMES + r")\}")
_NEGATIVE_PLACEHOLDER = re.compile(r"\{(neg|ar)\}")

_WHITESPACE = re.compile(r"\s+")
_COMMA_RUN = re.compile(r"\s*,(?:\s*,)+")
_PIPE_RUN = re.compile(r"\s*\|(?:\s*\|)+")
_PERIOD_RUN = re.compile(r"\.(?:\s+\.)+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,])")
_LEADING_SEP = re.compile(r"^\s*[,|.]\s*")
_TRAILING_SEP = re.compile(r"\s*[,|]\s*$")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _slot_values(scaffold_values: Mapping[str, Any] | None) -> dict[str, str]:
    values = scaffold_values or {}
    return {key.value: _as_text(values.get(key.value)).strip() for key in SLOT_KEYS}


def normalize_prompt_text(text: str) -> str:
    """Remove punctuation artifacts left behind by empty substitutions."""
    text = _WHITESPACE.sub(" ", text)
    text = _COMMA_RUN.sub(",", text)
    text = _PIPE_RUN.sub(" |", text)
    text = _PERIOD_RUN.sub(".", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    text = _LEADING_SEP.sub("", text)
    text = _TRAILING_SEP.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def _substitute(text: str, replacements: Mapping[str, str], pattern: re.Pattern[str]) -> str:
    return pattern.sub(lambda m: replacements.get(m.group(1), ""), text)


def _labelled(match: re.Match[str], replacements: Mapping[str, str]) -> str:
    value = replacements.get(match.group(2), "")
    return f"{match.group(1) or ''}{value}" if value else ""


def _map_strings(node: Any, fn: Callable[[str], str]) -> Any:
    if isinstance(node, str):
        return fn(node)
    if isinstance(node, list):
        return [_map_strings(item, fn) for item in node]
    if isinstance(node, dict):
        return {key: _map_strings(value, fn) for key, value in node.items()}
    return node


def format_prompt_for_model(
    scaffold_values: Mapping[str, Any] | None,
    template: ModelTemplate,
    negative_prompt: str | None = None,
    *,
    aspect_ratio: str | None = None,
) -> str:
    """Render scaffold values through ``template``.

    Missing or ``None`` values render as empty text. ``{neg}`` inside the
    format takes the negative prompt (or nothing); when a negative prompt is
    given and the template has a ``negative_format``, that clause is
    appended after a space.
    """
    negative = _as_text(negative_prompt).strip()
    ar = aspect_ratio if aspect_ratio is not None else _as_text(
        template.parameters.get("aspect_ratio")
    )
    replacements = {**_slot_values(scaffold_values), "neg": negative, "ar": ar}

    def render(text: str) -> str:
        return normalize_prompt_text(_PLACEHOLDER.sub(lambda m: _labelled(m, replacements), text))

    if template.syntax == "json":
        document = json.loads(template.format)
        return json.dumps(_map_strings(document, render), ensure_ascii=False)

    formatted = render(template.format)

    if negative and template.negative_format:
        clause = _substitute(template.negative_format, replacements, _NEGATIVE_PLACEHOLDER)
        clause = _WHITESPACE.sub(" ", clause).strip()
        formatted = f"{formatted} {clause}" if formatted else clause

    return formatted


def format_for_templates(
    scaffold_values: Mapping[str, Any] | None,
    templates: Iterable[ModelTemplate],
    negative_prompt: str | None = None,
) -> dict[str, str]:
    """Render the same values through several templates, keyed by template id."""
    return {
        template.id: format_prompt_for_model(scaffold_values, template, negative_prompt)
        for template in templates
    }


def format_prompt_with_custom_format(
    scaffold_values: Mapping[str, Any] | None, custom_format: CustomFormat
) -> str:
    """Render through a user template; empty comma-separated segments are dropped."""
    replacements = _slot_values(scaffold_values)
    formatted = _substitute(custom_format.template, replacements, _SLOT_PLACEHOLDER)
    segments = [segment.strip() for segment in formatted.split(",")]
    formatted = ", ".join(segment for segment in segments if segment)
    return _WHITESPACE.sub(" ", formatted).strip()
