"""Template validators — custom format strings and template YAML files."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from promptforge.core.scaffold.models import REQUIRED_TOKENS, SLOT_KEYS
from promptforge.core.templates.loader import load_template_file
from promptforge.core.templates.models import CustomFormat, ModelTemplate, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_TEMPLATE_LENGTH = 1000

# Engine placeholders that model templates may use besides the seven slot
# keys. Custom formats are rendered with slot values only.
ENGINE_PLACEHOLDERS = frozenset({"neg", "ar"})

_TOKEN_PATTERN = re.compile(r"\{([^{}]+)\}")

REQUIRED_FIELDS = ["id", "name", "format"]


def find_tokens(template: str) -> list[str]:
    """Return the names inside ``{...}`` placeholders, in order of appearance."""
    return _TOKEN_PATTERN.findall(template)


def validate_custom_format(
    template: str, *, max_length: int = DEFAULT_MAX_TEMPLATE_LENGTH
) -> ValidationResult:
    """Check a template string for the seven required slot tokens.

    Missing tokens are errors (one per token). Unknown placeholders and
    over-long templates are warnings and never affect validity.
    """
    template = template or ""
    errors: list[str] = []
    warnings: list[str] = []

    if not template.strip():
        errors.append("Template cannot be empty")

    missing = [token for token in REQUIRED_TOKENS if token not in template]
    for token in missing:
        errors.append(f"Missing required token: {token}")

    known = {key.value for key in SLOT_KEYS}
    unknown: list[str] = []
    for name in find_tokens(template):
        token = "{" + name + "}"
        if name not in known and token not in unknown:
            unknown.append(token)
    if unknown:
        warnings.append(f"Unknown tokens found: {', '.join(unknown)}")

    if len(template) > max_length:
        warnings.append(
            f"Template is very long ({len(template)} characters, limit {max_length}) "
            "and may exceed engine prompt limits"
        )

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        missing_tokens=missing,
        unknown_tokens=unknown,
    )


def validate_custom_format_record(
    fmt: CustomFormat, *, max_length: int = DEFAULT_MAX_TEMPLATE_LENGTH
) -> ValidationResult:
    """Validate a full CustomFormat: template rules plus a non-empty name."""
    result = validate_custom_format(fmt.template, max_length=max_length)
    if not (fmt.name or "").strip():
        result.errors.insert(0, "Format name is required")
        result.is_valid = False
    return result


def validate_model_template(template: ModelTemplate) -> list[str]:
    """Errors for a model template definition (empty list when fine)."""
    errors: list[str] = []
    for field_name in REQUIRED_FIELDS:
        if not getattr(template, field_name, None):
            errors.append(f"Missing or empty required field '{field_name}'")

    if template.format:
        errors.extend(validate_custom_format(template.format).errors)

    neg_unknown = [
        name for name in find_tokens(template.negative_format) if name not in ENGINE_PLACEHOLDERS
    ]
    if neg_unknown:
        errors.append(
            "negative_format may only use {neg} and {ar}, found: "
            + ", ".join("{" + n + "}" for n in neg_unknown)
        )
    if template.negative_format and "{neg}" not in template.negative_format:
        errors.append("negative_format does not contain {neg}")

    if template.syntax == "json":
        try:
            json.loads(template.format)
        except ValueError as exc:
            errors.append(f"format is not a valid JSON document: {exc}")
        if template.negative_format:
            errors.append("json templates must carry {neg} inside format, not negative_format")
    return errors


def _display(path: Path, project_root: Path | None) -> str:
    if project_root:
        try:
            return str(path.relative_to(project_root))
        except ValueError:
            return str(path)
    return str(path)


def validate_template_file(
    path: Path, *, project_root: Path | None = None
) -> tuple[ModelTemplate | None, list[str]]:
    """Validate a single template YAML file.

    Returns: (template_or_none, errors)
    """
    display_path = _display(path, project_root)

    try:
        template = load_template_file(path)
    except Exception as exc:
        return None, [f"{display_path}: Failed to load — {exc}"]

    errors = [f"{display_path}: {err}" for err in validate_model_template(template)]

    name = path.name
    if not (name == f"{template.id}.yaml" or name.startswith(f"{template.id}.")):
        errors.append(
            f"{display_path}: Filename '{name}' should match template id '{template.id}'"
        )

    return template, errors


def validate_template_directory(
    directory: str | Path, *, project_root: Path | None = None
) -> tuple[int, list[str]]:
    """Validate all template YAML files in a directory (recursively).

    Returns: (template_count, errors)
    """
    directory = Path(directory)
    if not directory.is_dir():
        return 0, [f"Template directory not found: {directory}"]

    yaml_files = sorted(p for p in directory.rglob("*.yaml") if not p.name.startswith("_"))
    if not yaml_files:
        return 0, [f"No template YAML files found in {directory}"]

    errors: list[str] = []
    seen_ids: dict[str, Path] = {}
    loaded = 0

    for path in yaml_files:
        template, file_errors = validate_template_file(path, project_root=project_root)
        if file_errors:
            errors.extend(file_errors)
            continue

        assert template is not None  # for type checkers
        loaded += 1

        if template.id in seen_ids:
            here = _display(path, project_root)
            there = _display(seen_ids[template.id], project_root)
            errors.append(f"{here}: Duplicate ID '{template.id}' — already defined in {there}")
        else:
            seen_ids[template.id] = path

    return loaded, errors

