"""MCP tools for rendering, validating and scoring image prompts."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from promptforge.core.config.settings import Settings
    from promptforge.core.templates.registry import TemplateRegistry

from promptforge.core.errors import TemplateNotFoundError
from promptforge.core.quality.analysis import (
    analyze_prompt_for_improvement,
    calculate_improvement_potential,
)
from promptforge.core.quality.checks import sanitize_input, validate_prompt_safety
from promptforge.core.quality.feedback import (
    analyze_prompt_image_alignment,
    compare_tokens_with_description,
)
from promptforge.core.quality.scorer import calculate_prompt_quality
from promptforge.core.scaffold.builder import (
    create_generated_prompt,
    populate_scaffold_from_text,
    validate_prompt_content,
)
from promptforge.core.scaffold.models import GeneratedPrompt
from promptforge.core.scaffold.slots import scaffold_from_object, scaffold_to_object
from promptforge.core.templates.formatter import format_prompt_for_model
from promptforge.core.templates.validator import validate_custom_format

logger = logging.getLogger(__name__)


def _prompt_from_values(
    scaffold: dict[str, Any] | None, registry: TemplateRegistry, raw_text: str = ""
) -> GeneratedPrompt:
    return create_generated_prompt(scaffold_from_object(scaffold), raw_text, registry)


def _error(message: str, **extra: Any) -> str:
    return json.dumps({"status": "error", "message": message, **extra})


def register_prompt_tools(
    mcp: FastMCP,
    registry: TemplateRegistry,
    settings: Settings,
) -> None:
    """Register template, formatting and quality tools on the MCP server."""

    @mcp.tool
    async def list_templates(ctx: Context) -> str:
        """List the model templates prompts can be rendered for."""
        default_id = registry.get_default_template().id
        return json.dumps({
            "status": "ok",
            "default_template_id": default_id,
            "templates": [
                {
                    "id": t.id,
                    "name": t.name,
                    "syntax": t.syntax,
                    "supports_negative_prompts": t.supports_negative_prompts,
                    "parameters": dict(t.parameters),
                }
                for t in registry.get_all_templates()
            ],
        }, indent=2)

    @mcp.tool
    async def format_prompt(
        ctx: Context,
        scaffold: dict[str, str | None],
        template_id: str = "",
        negative_prompt: str = "",
    ) -> str:
        """Render a seven-slot scaffold for one image engine.

        Args:
            scaffold: Slot values keyed by S, C, St, Co, L, A, Q. Missing keys render empty.
            template_id: Engine template id (see list_templates). Defaults to the configured default.
            negative_prompt: Concepts to exclude, rendered the way the engine expects.
        """
        try:
            template = (
                registry.require(template_id) if template_id else registry.get_default_template()
            )
        except TemplateNotFoundError as exc:
            return _error(str(exc), available=[t["id"] for t in registry.get_template_names()])

        prompt = format_prompt_for_model(scaffold, template, negative_prompt or None)
        logger.info("Formatted prompt for %s (%d chars)", template.id, len(prompt))
        return json.dumps({"status": "ok", "template_id": template.id, "prompt": prompt})

    @mcp.tool
    async def format_all(
        ctx: Context,
        scaffold: dict[str, str | None],
        negative_prompt: str = "",
    ) -> str:
        """Render a scaffold for every registered engine at once.

        Args:
            scaffold: Slot values keyed by S, C, St, Co, L, A, Q.
            negative_prompt: Concepts to exclude.
        """
        values = scaffold_to_object(scaffold_from_object(scaffold))
        outputs = {
            t.id: format_prompt_for_model(values, t, negative_prompt or None)
            for t in registry.get_all_templates()
        }
        return json.dumps({"status": "ok", "outputs": outputs}, indent=2)

    @mcp.tool
    async def validate_format(ctx: Context, template: str, name: str = "") -> str:
        """Check a custom template string for the seven required slot tokens.

        Args:
            template: Template text using {S}, {C}, {St}, {Co}, {L}, {A}, {Q}.
            name: Optional format name; when given it must not be blank.
        """
        result = validate_custom_format(template, max_length=settings.custom_format_max_length)
        if name and not name.strip():
            result.errors.insert(0, "Format name is required")
            result.is_valid = False
        return json.dumps({"status": "ok", **result.to_dict()}, indent=2)

    @mcp.tool
    async def build_scaffold(
        ctx: Context,
        description: str,
        scaffold: dict[str, str | None] | None = None,
    ) -> str:
        """Pre-fill scaffold slots from a free-text image description.

        Keyword heuristics only; the calling assistant is expected to refine
        the result. Words already present in a slot are not repeated.

        Args:
            description: What the user wants to see, in plain language.
            scaffold: Existing slot values to merge into.
        """
        text = sanitize_input(description)
        if not text:
            return _error("description must not be empty")

        slots = populate_scaffold_from_text(text, scaffold_from_object(scaffold))
        review = validate_prompt_content(_prompt_from_values(scaffold_to_object(slots), registry, text))
        safety = validate_prompt_safety(text)
        return json.dumps({
            "status": "ok",
            "scaffold": scaffold_to_object(slots),
            "missing_slots": review.missing_slots,
            "suggestions": review.suggestions + safety.suggestions,
            "warnings": safety.warnings,
        }, indent=2)

    @mcp.tool
    async def score_prompt(ctx: Context, scaffold: dict[str, str | None]) -> str:
        """Heuristic 0-100 completeness score for a scaffold, with recommendations.

        Args:
            scaffold: Slot values keyed by S, C, St, Co, L, A, Q.
        """
        report = calculate_prompt_quality(_prompt_from_values(scaffold, registry))
        return json.dumps({"status": "ok", **report.to_dict()}, indent=2)

    @mcp.tool
    async def analyze_prompt(ctx: Context, scaffold: dict[str, str | None]) -> str:
        """Find missing or vague slots and suggest clarifying questions.

        Args:
            scaffold: Slot values keyed by S, C, St, Co, L, A, Q.
        """
        prompt = _prompt_from_values(scaffold, registry)
        analysis = analyze_prompt_for_improvement(prompt)
        potential = calculate_improvement_potential(prompt)
        return json.dumps({
            "status": "ok",
            **analysis.to_dict(),
            "improvement_potential": {
                "score": potential.score,
                "areas": potential.areas,
                "priority": potential.priority,
            },
        }, indent=2)

    @mcp.tool
    async def compare_with_image_description(
        ctx: Context,
        scaffold: dict[str, str | None],
        description: str,
    ) -> str:
        """Compare a prompt's tokens with a description of the generated image.

        Args:
            scaffold: Slot values the image was generated from.
            description: Text description of the generated image.
        """
        if not description.strip():
            return _error("description must not be empty")
        prompt = _prompt_from_values(scaffold, registry)
        comparisons = compare_tokens_with_description(prompt, description)
        report = analyze_prompt_image_alignment(prompt, comparisons)
        return json.dumps({
            "status": "ok",
            "overall_score": report.overall_score,
            "strengths": report.strengths,
            "weaknesses": report.weaknesses,
            "recommendations": report.recommendations,
            "tokens": [c.to_dict() for c in comparisons],
        }, indent=2)
