"""MCP Resources for template and scaffold discovery."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

from promptforge.core.scaffold.models import SCAFFOLD_SLOTS

if TYPE_CHECKING:
    from promptforge.core.templates.registry import TemplateRegistry


def register_template_resources(mcp: FastMCP, registry: TemplateRegistry) -> None:
    """Register template discovery resources on the MCP server."""

    @mcp.resource("templates://registry")
    def template_registry_resource() -> str:
        """Discover the image-engine templates and their placeholders."""
        templates = registry.get_all_templates()
        return json.dumps(
            {
                "template_count": len(templates),
                "default_template_id": registry.get_default_template().id,
                "templates": [
                    {
                        "id": t.id,
                        "name": t.name,
                        "description": t.description,
                        "syntax": t.syntax,
                        "format": t.format,
                        "negative_format": t.negative_format,
                        "supports_negative_prompts": t.supports_negative_prompts,
                        "parameters": dict(t.parameters),
                    }
                    for t in templates
                ],
            },
            indent=2,
        )

    @mcp.resource("templates://scaffold")
    def scaffold_slots_resource() -> str:
        """The seven scaffold slots, in the order templates expect them."""
        return json.dumps(
            {
                "slots": [
                    {
                        "key": d.key.value,
                        "token": d.key.token,
                        "name": d.name,
                        "description": d.description,
                    }
                    for d in SCAFFOLD_SLOTS
                ],
            },
            indent=2,
        )
