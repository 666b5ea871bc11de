"""Server entry point — ``python -m spitalverse.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from spitalverse.core.config.settings import get_settings
from spitalverse.core.server.app import create_app


def _is_loopback_host(host: str) -> bool:
    if host in {"localhost"}:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def run() -> None:
    """Start the Spitalverse MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.phr_log_level.upper(), logging.INFO))

    logger = logging.getLogger(__name__)
    if not settings.phr_allow_insecure_bind and not _is_loopback_host(settings.phr_host):
        raise RuntimeError(
            "Refusing to bind the health record server to a non-loopback host without "
            "an auth layer. Set PHR_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.info(
        "Starting Spitalverse Health server on %s:%d",
        settings.phr_host,
        settings.phr_port,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.phr_host,
        port=settings.phr_port,
    )


if __name__ == "__main__":
    run()
