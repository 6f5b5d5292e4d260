"""MCP tools for managing user-authored custom formats."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from promptforge.core.templates.custom_formats import CustomFormatLibrary

from promptforge.core.errors import InvalidCustomFormatError
from promptforge.core.templates.custom_formats import custom_format_to_dict
from promptforge.core.templates.formatter import format_prompt_with_custom_format
from promptforge.core.templates.models import CustomFormat

logger = logging.getLogger(__name__)


def _summary(fmt: CustomFormat) -> dict[str, object]:
    return {"id": fmt.id, "name": fmt.name, "template": fmt.template}


def register_custom_format_tools(mcp: FastMCP, library: CustomFormatLibrary) -> None:
    """Register custom format management tools on the MCP server."""

    @mcp.tool
    async def save_custom_format(
        ctx: Context,
        name: str,
        template: str,
        format_id: str = "",
    ) -> str:
        """Save a custom prompt format after validating it.

        The template must contain all seven slot tokens
        ({S}, {C}, {St}, {Co}, {L}, {A}, {Q}). Saving with an existing
        format_id replaces that format.

        Args:
            name: Display name for the format.
            template: Template text with slot tokens.
            format_id: Id of the format to replace; omit to create a new one.
        """
        try:
            stored = library.save(CustomFormat(id=format_id, name=name, template=template))
        except InvalidCustomFormatError as exc:
            return json.dumps({"status": "invalid", "name": name, "errors": exc.errors})
        return json.dumps({"status": "saved", **_summary(stored)})

    @mcp.tool
    async def list_custom_formats(ctx: Context, query: str = "") -> str:
        """List saved custom formats, optionally filtered by name or template text.

        Args:
            query: Case-insensitive substring to search for.
        """
        formats = library.search(query) if query else library.all()
        stats = library.usage_stats()
        return json.dumps({
            "status": "ok",
            "total_formats": stats.total_formats,
            "formats": [_summary(fmt) for fmt in formats],
        }, indent=2)

    @mcp.tool
    async def delete_custom_format(ctx: Context, format_id: str) -> str:
        """Delete a saved custom format.

        Args:
            format_id: Id returned by save_custom_format.
        """
        if library.delete(format_id):
            return json.dumps({"status": "deleted", "format_id": format_id})
        return json.dumps({"status": "not_found", "format_id": format_id})

    @mcp.tool
    async def format_with_custom_format(
        ctx: Context,
        format_id: str,
        scaffold: dict[str, str | None],
    ) -> str:
        """Render scaffold values through a saved custom format.

        Empty comma-separated segments are dropped from the result.

        Args:
            format_id: Id of a saved custom format.
            scaffold: Slot values keyed by S, C, St, Co, L, A, Q.
        """
        fmt = library.get(format_id)
        if fmt is None:
            return json.dumps({"status": "not_found", "format_id": format_id})
        prompt = format_prompt_with_custom_format(scaffold, fmt)
        return json.dumps({"status": "ok", "format_id": fmt.id, "prompt": prompt})

    @mcp.tool
    async def export_custom_formats(ctx: Context) -> str:
        """Export every saved custom format as a JSON array."""
        return library.export_json()

    @mcp.tool
    async def import_custom_formats(ctx: Context, data: str) -> str:
        """Import custom formats from export_custom_formats output.

        Entries that fail validation are skipped and reported.

        Args:
            data: JSON array of custom formats.
        """
        result = library.import_json(data)
        logger.info("Custom format import: %d imported, %d errors", result.imported, len(result.errors))
        return json.dumps({
            "status": "ok" if result.success else "error",
            "imported": result.imported,
            "errors": result.errors,
        })

    @mcp.tool
    async def get_custom_format(ctx: Context, format_id: str) -> str:
        """Return one saved custom format with its slot definitions.

        Args:
            format_id: Id of a saved custom format.
        """
        fmt = library.get(format_id)
        if fmt is None:
            return json.dumps({"status": "not_found", "format_id": format_id})
        return json.dumps({"status": "ok", "format": custom_format_to_dict(fmt)}, indent=2)
