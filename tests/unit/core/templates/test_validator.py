"""Unit tests for custom format and template file validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptforge.core.templates.models import CustomFormat, ModelTemplate
from promptforge.core.templates.validator import (
    find_tokens,
    validate_custom_format,
    validate_custom_format_record,
    validate_model_template,
    validate_template_directory,
    validate_template_file,
)
from promptforge.domains.imaging.catalog import BUILTIN_TEMPLATE_DIR

FULL = "{S}, {C}, {St}, {Co}, {L}, {A}, {Q}"


class TestValidateCustomFormat:
    def test_full_template_is_valid(self):
        result = validate_custom_format(FULL)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_only_subject_and_context_reports_five_missing(self):
        result = validate_custom_format("{S}, {C}")
        assert not result.is_valid
        assert result.errors == [
            "Missing required token: {St}",
            "Missing required token: {Co}",
            "Missing required token: {L}",
            "Missing required token: {A}",
            "Missing required token: {Q}",
        ]
        assert result.missing_tokens == ["{St}", "{Co}", "{L}", "{A}", "{Q}"]

    def test_empty_template(self):
        result = validate_custom_format("   ")
        assert not result.is_valid
        assert result.errors[0] == "Template cannot be empty"
        assert len(result.errors) == 8

    def test_none_is_treated_as_empty(self):
        assert validate_custom_format(None).errors[0] == "Template cannot be empty"

    def test_unknown_tokens_warn_once(self):
        result = validate_custom_format(FULL + " {mood} {mood} {X}")
        assert result.is_valid
        assert result.warnings == ["Unknown tokens found: {mood}, {X}"]
        assert result.unknown_tokens == ["{mood}", "{X}"]

    def test_engine_placeholders_warn_in_custom_formats(self):
        result = validate_custom_format(FULL + " --no {neg} --ar {ar}")
        assert result.is_valid
        assert result.warnings == ["Unknown tokens found: {neg}, {ar}"]

    def test_long_template_warns_but_stays_valid(self):
        result = validate_custom_format(FULL + " " + "x" * 1000)
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "very long" in result.warnings[0]

    def test_custom_length_limit(self):
        assert validate_custom_format(FULL, max_length=10).warnings

    def test_token_order_does_not_matter(self):
        assert validate_custom_format("{Q} {A} {L} {Co} {St} {C} {S}").is_valid

    def test_validation_is_idempotent(self):
        for template in ("", "{S}, {C}", FULL, FULL + " {oops}", "x" * 2000):
            first = validate_custom_format(template)
            second = validate_custom_format(template)
            assert first.to_dict() == second.to_dict()


class TestValidateRecord:
    def test_blank_name_is_an_error(self):
        result = validate_custom_format_record(CustomFormat(id="", name=" ", template=FULL))
        assert not result.is_valid
        assert result.errors == ["Format name is required"]

    def test_named_full_format_is_valid(self):
        assert validate_custom_format_record(CustomFormat(id="", name="Mine", template=FULL)).is_valid


def test_find_tokens_in_order():
    assert find_tokens("{S} and {neg} and {S}") == ["S", "neg", "S"]


@pytest.mark.parametrize(
    "template_id",
    ["stable-diffusion-3.5", "midjourney-v6", "dalle-3", "imagen-3", "flux-v9"],
)
def test_builtin_formats_pass_custom_validation(template_by_id, template_id):
    result = validate_custom_format(template_by_id(template_id).format)
    assert result.is_valid
    assert result.errors == []


class TestValidateModelTemplate:
    def test_builtins_have_no_errors(self, registry):
        for template in registry.get_all_templates():
            assert validate_model_template(template) == [], template.id

    def test_negative_format_needs_neg(self, template_factory):
        errors = validate_model_template(template_factory(negative_format="--v 6"))
        assert "negative_format does not contain {neg}" in errors

    def test_negative_format_rejects_slot_tokens(self, template_factory):
        errors = validate_model_template(template_factory(negative_format="{neg} {S}"))
        assert any("negative_format may only use" in e for e in errors)

    def test_json_format_must_parse(self, template_factory):
        errors = validate_model_template(template_factory(syntax="json"))
        assert any("not a valid JSON document" in e for e in errors)

    def test_json_template_rejects_negative_format(self):
        template = ModelTemplate(
            id="j",
            name="J",
            format='{"text": "{S} {C} {St} {Co} {L} {A} {Q}"}',
            negative_format="{neg}",
            syntax="json",
        )
        assert validate_model_template(template) == [
            "json templates must carry {neg} inside format, not negative_format"
        ]


def _write(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


GOOD_YAML = """\
id: {id}
name: Test engine
format: "{{S}}, {{C}}, {{St}}, {{Co}}, {{L}}, {{A}}, {{Q}}"
negative_format: "--no {{neg}}"
"""


class TestTemplateFiles:
    def test_builtin_directory_is_clean(self):
        count, errors = validate_template_directory(BUILTIN_TEMPLATE_DIR)
        assert count == 5
        assert errors == []

    def test_filename_must_match_id(self, tmp_path: Path):
        path = _write(tmp_path / "other.yaml", GOOD_YAML.format(id="engine-a"))
        template, errors = validate_template_file(path)
        assert template is not None
        assert errors == [f"{path}: Filename 'other.yaml' should match template id 'engine-a'"]

    def test_missing_tokens_reported(self, tmp_path: Path):
        path = _write(
            tmp_path / "thin.yaml", 'id: thin\nname: Thin\nformat: "{S}, {C}"\n'
        )
        _, errors = validate_template_file(path, project_root=tmp_path)
        assert "thin.yaml: Missing required token: {St}" in errors

    def test_unloadable_file(self, tmp_path: Path):
        path = _write(tmp_path / "broken.yaml", "- just\n- a list\n")
        template, errors = validate_template_file(path)
        assert template is None
        assert "Failed to load" in errors[0]

    def test_duplicate_ids_across_files(self, tmp_path: Path):
        (tmp_path / "nested").mkdir()
        _write(tmp_path / "engine-a.yaml", GOOD_YAML.format(id="engine-a"))
        _write(tmp_path / "nested" / "engine-a.yaml", GOOD_YAML.format(id="engine-a"))
        count, errors = validate_template_directory(tmp_path, project_root=tmp_path)
        assert count == 2
        assert len(errors) == 1
        assert "Duplicate ID 'engine-a'" in errors[0]

    def test_missing_directory(self, tmp_path: Path):
        count, errors = validate_template_directory(tmp_path / "nope")
        assert count == 0
        assert errors[0].startswith("Template directory not found")

    def test_underscore_files_skipped(self, tmp_path: Path):
        _write(tmp_path / "_schema.yaml", "not: a template\n")
        count, errors = validate_template_directory(tmp_path)
        assert count == 0
        assert errors == [f"No template YAML files found in {tmp_path}"]
