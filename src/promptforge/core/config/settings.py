"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """PromptForge server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: the tool surface has no auth layer.
    pf_host: str = "127.0.0.1"
    pf_port: int = 8011
    pf_log_level: str = "info"
    pf_allow_insecure_bind: bool = False

    # Templates
    default_template_id: str = "stable-diffusion-3.5"
    # Extra YAML template definitions loaded after the built-in catalog.
    templates_dir: str = ""

    # Custom formats
    custom_format_max_length: int = 1000


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
