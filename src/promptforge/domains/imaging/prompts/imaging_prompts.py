"""MCP Prompts — pre-built interaction templates for image prompt authoring."""

from __future__ import annotations

from fastmcp import FastMCP


def register_imaging_prompts(mcp: FastMCP) -> None:
    """Register imaging domain MCP prompts."""

    @mcp.prompt()
    def scaffold_builder_prompt(idea: str = "") -> str:
        """Prompt template for turning an image idea into a seven-slot scaffold."""
        return f"""I want to create an image. My idea: {idea or "(not decided yet)"}

Please help me fill in each part of the prompt:

1. Subject (S): the main subject or focus
2. Context (C): setting, environment, background
3. Style (St): art style, medium, visual approach
4. Composition (Co): camera angle, framing
5. Lighting (L): lighting conditions and mood
6. Atmosphere (A): emotion and atmospheric qualities
7. Quality (Q): technical quality and rendering details

Start with build_scaffold on my idea, ask me about any slots that are still empty,
then show me the result for each engine with format_all."""

    @mcp.prompt()
    def refine_prompt_prompt(template_id: str = "stable-diffusion-3.5") -> str:
        """Prompt template for reviewing and improving an existing scaffold."""
        return f"""Let's improve my image prompt for {template_id}. I'd like to:

1. See its quality score and which slots are weak or missing
2. Answer a few clarifying questions to fill the gaps
3. Compare the revised prompt with the original
4. Get the final prompt formatted for {template_id}

Please use score_prompt and analyze_prompt before suggesting changes."""
