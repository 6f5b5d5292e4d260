"""Serve the PromptForge tools — ``python -m promptforge.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from promptforge.core.config.settings import get_settings
from promptforge.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def run() -> None:
    """Build the template catalog and serve it over Streamable HTTP."""
    settings = get_settings()
    level = getattr(logging, settings.pf_log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)

    host, port = settings.pf_host, settings.pf_port
    if not _is_loopback_host(host) and not settings.pf_allow_insecure_bind:
        raise RuntimeError(
            f"PF_HOST={host!r} is a non-loopback address and the prompt tools have no "
            "authentication; set PF_ALLOW_INSECURE_BIND=true to expose them anyway."
        )

    mcp = create_app()
    logger.info("PromptForge prompt tools listening on http://%s:%d", host, port)
    mcp.run(transport="streamable-http", host=host, port=port)


if __name__ == "__main__":
    run()
