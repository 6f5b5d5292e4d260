"""Built-in image-engine template catalog."""

from __future__ import annotations

import logging
from pathlib import Path

from promptforge.core.errors import DuplicateTemplateError
from promptforge.core.templates.loader import load_template_directory
from promptforge.core.templates.registry import DEFAULT_TEMPLATE_ID, TemplateRegistry
from promptforge.core.templates.validator import validate_template_file

logger = logging.getLogger(__name__)

# Template YAML definitions live under src/promptforge/domains/imaging/templates/
BUILTIN_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def load_extra_templates(directory: str | Path, registry: TemplateRegistry) -> int:
    """Register the templates in ``directory`` that pass validation.

    Files with any validation error are logged and skipped, as are ids the
    registry already holds. Returns the number of templates registered.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Extra template directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(p for p in directory.rglob("*.yaml") if not p.name.startswith("_")):
        template, errors = validate_template_file(path)
        if errors or template is None:
            for err in errors:
                logger.error("%s", err)
            logger.warning("Skipping invalid template file %s", path)
            continue
        try:
            registry.register(template)
        except DuplicateTemplateError:
            logger.warning("Template id %r from %s is already registered", template.id, path)
            continue
        count += 1
    return count


def build_template_registry(
    *,
    extra_dir: str | Path | None = None,
    default_template_id: str = DEFAULT_TEMPLATE_ID,
) -> TemplateRegistry:
    """Load the five built-in templates (plus any valid extras) into a new registry."""
    registry = TemplateRegistry(default_template_id=default_template_id)
    count = load_template_directory(BUILTIN_TEMPLATE_DIR, registry)
    logger.info("Loaded %d built-in templates from %s", count, BUILTIN_TEMPLATE_DIR)

    if extra_dir:
        extra = load_extra_templates(extra_dir, registry)
        logger.info("Loaded %d extra templates from %s", extra, extra_dir)

    return registry
