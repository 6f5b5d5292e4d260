"""Unit tests for the template registry, YAML loader and built-in catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptforge.core.errors import DuplicateTemplateError, TemplateNotFoundError
from promptforge.core.templates.loader import load_template_directory, load_template_file
from promptforge.core.templates.registry import TemplateRegistry
from promptforge.domains.imaging.catalog import (
    BUILTIN_TEMPLATE_DIR,
    build_template_registry,
    load_extra_templates,
)


class TestRegistry:
    def test_builtins_registered_in_file_order(self, registry: TemplateRegistry):
        assert [t.id for t in registry.get_all_templates()] == [
            "dalle-3",
            "flux-v9",
            "imagen-3",
            "midjourney-v6",
            "stable-diffusion-3.5",
        ]

    def test_default_template(self, registry: TemplateRegistry):
        assert registry.get_default_template().id == "stable-diffusion-3.5"

    def test_unknown_default_falls_back_to_first(self, template_factory):
        reg = TemplateRegistry(default_template_id="missing")
        reg.register(template_factory(id="only"))
        assert reg.get_default_template().id == "only"

    def test_empty_registry_has_no_default(self):
        with pytest.raises(TemplateNotFoundError):
            TemplateRegistry().get_default_template()

    def test_get_unknown_returns_none(self, registry: TemplateRegistry):
        assert registry.get_template("nope") is None
        assert not registry.is_valid_template_id("nope")
        assert "nope" not in registry

    def test_require_unknown_raises(self, registry: TemplateRegistry):
        with pytest.raises(TemplateNotFoundError, match="Unknown model template: nope"):
            registry.require("nope")

    def test_duplicate_id_rejected(self, template_factory):
        reg = TemplateRegistry()
        reg.register(template_factory(id="dup"))
        with pytest.raises(DuplicateTemplateError):
            reg.register(template_factory(id="dup"))
        assert len(reg) == 1

    def test_template_names(self, registry: TemplateRegistry):
        names = registry.get_template_names()
        assert {"id": "midjourney-v6", "name": "Midjourney v6"} in names

    def test_model_parameters_are_a_copy(self, registry: TemplateRegistry):
        params = registry.get_model_parameters("midjourney-v6")
        assert params["aspect_ratio"] == "16:9"
        params["aspect_ratio"] = "1:1"
        assert registry.get_model_parameters("midjourney-v6")["aspect_ratio"] == "16:9"
        assert registry.get_model_parameters("nope") == {}

    def test_template_parameters_are_read_only(self, registry: TemplateRegistry):
        with pytest.raises(TypeError):
            registry.require("flux-v9").parameters["guidance_scale"] = 1.0

    @pytest.mark.parametrize(
        ("template_id", "expected"),
        [
            ("stable-diffusion-3.5", True),
            ("midjourney-v6", True),
            ("dalle-3", True),
            ("imagen-3", True),
            ("flux-v9", True),
            ("nope", False),
        ],
    )
    def test_supports_negative_prompts(self, registry, template_id, expected):
        assert registry.supports_negative_prompts(template_id) is expected

    def test_template_without_negative_support(self, template_factory):
        reg = TemplateRegistry()
        reg.register(template_factory(id="plain"))
        assert not reg.supports_negative_prompts("plain")


class TestLoader:
    def test_load_builtin_file(self):
        template = load_template_file(BUILTIN_TEMPLATE_DIR / "imagen-3.yaml")
        assert template.syntax == "json"
        assert template.negative_format == ""
        assert template.parameters["aspect_ratio"] == "1:1"

    def test_unsupported_syntax(self, tmp_path: Path):
        path = tmp_path / "x.yaml"
        path.write_text('id: x\nname: X\nformat: "{S}"\nsyntax: xml\n', encoding="utf-8")
        with pytest.raises(ValueError, match="unsupported syntax"):
            load_template_file(path)

    def test_broken_files_are_skipped(self, tmp_path: Path):
        (tmp_path / "good.yaml").write_text(
            'id: good\nname: Good\nformat: "{S}, {C}, {St}, {Co}, {L}, {A}, {Q}"\n',
            encoding="utf-8",
        )
        (tmp_path / "bad.yaml").write_text("name: no id here\n", encoding="utf-8")
        reg = TemplateRegistry()
        assert load_template_directory(tmp_path, reg) == 1
        assert "good" in reg

    def test_missing_directory_loads_nothing(self, tmp_path: Path):
        assert load_template_directory(tmp_path / "absent", TemplateRegistry()) == 0


class TestCatalog:
    def test_extra_directory_adds_templates(self, tmp_path: Path):
        (tmp_path / "house-style.yaml").write_text(
            "id: house-style\n"
            "name: House style\n"
            'format: "{S} ({C}) {St} {Co} {L} {A} {Q}"\n',
            encoding="utf-8",
        )
        reg = build_template_registry(extra_dir=tmp_path, default_template_id="house-style")
        assert len(reg) == 6
        assert reg.get_default_template().id == "house-style"

    def test_extra_directory_cannot_shadow_builtin(self, tmp_path: Path):
        (tmp_path / "dalle-3.yaml").write_text(
            'id: dalle-3\nname: Fake\nformat: "{S} {C} {St} {Co} {L} {A} {Q}"\n',
            encoding="utf-8",
        )
        reg = build_template_registry(extra_dir=tmp_path)
        assert len(reg) == 5
        assert reg.require("dalle-3").name == "DALL·E 3"

    def test_invalid_extra_templates_are_not_registered(self, tmp_path: Path):
        (tmp_path / "broken.yaml").write_text(
            'id: broken\nname: Broken\nformat: "{S} only"\n', encoding="utf-8"
        )
        (tmp_path / "bad-json.yaml").write_text(
            "id: bad-json\n"
            "name: Bad JSON\n"
            "syntax: json\n"
            "format: '{\"text\": \"{S} {C} {St} {Co} {L} {A} {Q}\"'\n",
            encoding="utf-8",
        )
        (tmp_path / "good.yaml").write_text(
            'id: good\nname: Good\nformat: "{S}, {C}, {St}, {Co}, {L}, {A}, {Q}"\n',
            encoding="utf-8",
        )
        reg = build_template_registry(extra_dir=tmp_path)
        assert not reg.is_valid_template_id("broken")
        assert not reg.is_valid_template_id("bad-json")
        assert reg.is_valid_template_id("good")
        assert len(reg) == 6

    def test_extra_directory_must_exist(self, tmp_path: Path):
        assert load_extra_templates(tmp_path / "absent", TemplateRegistry()) == 0
