"""Template loader — reads model template YAML definitions from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from promptforge.core.templates.models import ModelTemplate
from promptforge.core.templates.registry import TemplateRegistry

logger = logging.getLogger(__name__)


def load_template_directory(directory: str | Path, registry: TemplateRegistry) -> int:
    """Load all YAML template definitions from a directory (recursively).

    Returns the number of templates loaded.
    Skips files starting with underscore (like _schema.yaml).
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Template directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            template = load_template_file(path)
            registry.register(template)
            count += 1
            logger.info("Loaded template: %s (%s)", template.id, template.name)
        except Exception:
            logger.exception("Failed to load template from %s", path)
    return count


def load_template_file(path: Path) -> ModelTemplate:
    """Parse a YAML file into a ModelTemplate instance."""
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    syntax = data.get("syntax", "text")
    if syntax not in ("text", "json"):
        raise ValueError(f"{path}: unsupported syntax {syntax!r}")

    return ModelTemplate(
        id=str(data["id"]),
        name=str(data["name"]),
        format=str(data["format"]),
        negative_format=str(data.get("negative_format") or ""),
        parameters=data.get("parameters") or {},
        syntax=syntax,
        description=(data.get("description") or "").strip(),
    )
