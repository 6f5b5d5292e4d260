"""Template registry — in-memory index of model templates."""

from __future__ import annotations

import logging
from typing import Any

from promptforge.core.errors import DuplicateTemplateError, TemplateNotFoundError
from promptforge.core.templates.models import ModelTemplate

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "stable-diffusion-3.5"


class TemplateRegistry:
    """Catalog of model templates, keyed by id, in registration order.

    Built once at startup and handed to whoever needs it; templates are
    frozen so sharing the registry is safe.
    """

    def __init__(self, default_template_id: str = DEFAULT_TEMPLATE_ID) -> None:
        self._templates: dict[str, ModelTemplate] = {}
        self._default_id = default_template_id

    def register(self, template: ModelTemplate) -> None:
        """Add a template. Ids are unique."""
        if template.id in self._templates:
            raise DuplicateTemplateError(f"Duplicate template id registered: {template.id!r}")
        self._templates[template.id] = template
        logger.debug("Registered template %s (%s)", template.id, template.name)

    def get_template(self, template_id: str) -> ModelTemplate | None:
        """Look up a template by id; None when unknown."""
        return self._templates.get(template_id)

    def require(self, template_id: str) -> ModelTemplate:
        """Like :meth:`get_template` but raise when the id is unknown."""
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def get_all_templates(self) -> list[ModelTemplate]:
        return list(self._templates.values())

    def get_default_template(self) -> ModelTemplate:
        """The configured default, or the first registered template."""
        template = self._templates.get(self._default_id)
        if template is not None:
            return template
        if not self._templates:
            raise TemplateNotFoundError(self._default_id)
        logger.warning(
            "Default template %r not registered; using %r",
            self._default_id,
            next(iter(self._templates)),
        )
        return next(iter(self._templates.values()))

    def is_valid_template_id(self, template_id: str) -> bool:
        return template_id in self._templates

    def get_template_names(self) -> list[dict[str, str]]:
        """``[{"id": ..., "name": ...}, ...]`` for menus."""
        return [{"id": t.id, "name": t.name} for t in self._templates.values()]

    def get_model_parameters(self, template_id: str) -> dict[str, Any]:
        template = self._templates.get(template_id)
        return dict(template.parameters) if template else {}

    def supports_negative_prompts(self, template_id: str) -> bool:
        template = self._templates.get(template_id)
        return bool(template and template.supports_negative_prompts)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates
