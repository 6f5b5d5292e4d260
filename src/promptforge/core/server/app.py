"""PromptForge MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery (fastmcp.json points here)
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from promptforge.core.config.settings import get_settings
from promptforge.core.templates.custom_formats import CustomFormatLibrary
from promptforge.core.templates.registry import TemplateRegistry
from promptforge.domains.imaging.catalog import build_template_registry
from promptforge.domains.imaging.prompts.imaging_prompts import register_imaging_prompts
from promptforge.domains.imaging.resources.templates import register_template_resources
from promptforge.domains.imaging.tools.custom_format_tools import register_custom_format_tools
from promptforge.domains.imaging.tools.prompt_tools import register_prompt_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "PromptForge"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    registry_override: TemplateRegistry | None = None,
    library_override: CustomFormatLibrary | None = None,
) -> FastMCP:
    """Create and configure the PromptForge MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Loads the template registry (built-in engines plus TEMPLATES_DIR)
    3. Creates the custom format library
    4. Registers all tools, resources, and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Image prompt authoring server. Organizes an image description into "
            "seven slots (subject, context, style, composition, lighting, "
            "atmosphere, quality), renders it for Stable Diffusion, Midjourney, "
            "DALL-E, Imagen and Flux, validates custom formats and scores "
            "prompt completeness."
        ),
    )

    # --- Template registry ---
    if registry_override is not None:
        registry = registry_override
    else:
        registry = build_template_registry(
            extra_dir=settings.templates_dir or None,
            default_template_id=settings.default_template_id,
        )
    logger.info("Template registry ready with %d templates", len(registry))

    # --- Custom format library ---
    if library_override is not None:
        library = library_override
    else:
        library = CustomFormatLibrary(max_length=settings.custom_format_max_length)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "templates_loaded": len(registry),
            "default_template_id": registry.get_default_template().id,
            "custom_formats": len(library),
        }

    register_prompt_tools(server, registry, settings)
    register_custom_format_tools(server, library)
    logger.info("Prompt and custom format tools registered")

    # --- Register resources ---
    register_template_resources(server, registry)

    # --- Register prompts ---
    register_imaging_prompts(server)

    return server


# Module-level instance for FastMCP discovery (fastmcp.json: "server": "...app.py:mcp").
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
