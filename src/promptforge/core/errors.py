"""Exception hierarchy for PromptForge.

Expected failures (a user typo in a custom template, an empty slot) are
returned as data. These exceptions mark programming errors at API seams.
"""

from __future__ import annotations


class PromptForgeError(Exception):
    """Base class for all PromptForge errors."""


class DuplicateTemplateError(PromptForgeError, ValueError):
    """Raised when a template id is registered twice."""


class TemplateNotFoundError(PromptForgeError, LookupError):
    """Raised when an operation requires a template id that is not registered."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Unknown model template: {template_id}")
        self.template_id = template_id


class InvalidScaffoldError(PromptForgeError, ValueError):
    """Raised when a scaffold is missing one or more canonical slots."""


class InvalidCustomFormatError(PromptForgeError, ValueError):
    """Raised when saving a custom format that fails validation."""

    def __init__(self, name: str, errors: list[str]) -> None:
        joined = "; ".join(errors)
        super().__init__(f"Custom format {name!r} is invalid: {joined}")
        self.errors = list(errors)
