"""Shared test fixtures for PromptForge tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # Run from an empty directory so a developer's .env is never read.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TEMPLATES_DIR", "")
    monkeypatch.setenv("DEFAULT_TEMPLATE_ID", "stable-diffusion-3.5")
    monkeypatch.setenv("CUSTOM_FORMAT_MAX_LENGTH", "1000")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from promptforge.core.scaffold.models import GeneratedPrompt, ScaffoldSlot  # noqa: E402
from promptforge.core.scaffold.slots import scaffold_from_object  # noqa: E402
from promptforge.core.templates.models import ModelTemplate  # noqa: E402
from promptforge.core.templates.registry import TemplateRegistry  # noqa: E402
from promptforge.domains.imaging.catalog import build_template_registry  # noqa: E402

FULL_VALUES: dict[str, str] = {
    "S": "cat",
    "C": "garden",
    "St": "watercolor",
    "Co": "close-up",
    "L": "soft",
    "A": "calm",
    "Q": "high detail",
}


def make_test_template(
    id: str = "test-engine",
    format: str = "{S}, {C}, {St}, {Co}, {L}, {A}, {Q}",
    negative_format: str = "",
    **kwargs: Any,
) -> ModelTemplate:
    """Create a test template with sensible defaults."""
    return ModelTemplate(
        id=id,
        name=kwargs.pop("name", f"Test: {id}"),
        format=format,
        negative_format=negative_format,
        **kwargs,
    )


def make_prompt(values: dict[str, Any] | None = None, prompt_id: str = "p-1") -> GeneratedPrompt:
    """Create a GeneratedPrompt without going through a registry."""
    return GeneratedPrompt(id=prompt_id, scaffold=scaffold_from_object(values))


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry loaded with the five built-in engine templates."""
    return build_template_registry()


@pytest.fixture
def template_by_id(registry: TemplateRegistry):
    return registry.require


@pytest.fixture
def sample_values() -> dict[str, str]:
    return dict(FULL_VALUES)


@pytest.fixture
def sample_scaffold() -> list[ScaffoldSlot]:
    return scaffold_from_object(FULL_VALUES)


@pytest.fixture
def sample_prompt() -> GeneratedPrompt:
    return make_prompt(FULL_VALUES)


@pytest.fixture
def template_factory():
    """Factory for ad-hoc templates: ``template_factory(format=..., negative_format=...)``."""
    return make_test_template


@pytest.fixture
def prompt_factory():
    """Factory for GeneratedPrompt records from slot values."""
    return make_prompt
