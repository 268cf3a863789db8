"""
Shared HTTP clients
-------------------

One pooled `httpx.AsyncClient` per outbound integration. Today that is only
the external quality system, queried once per cycle start, so each pool is
small. Clients are created on first use and closed together at shutdown.
"""
import httpx
import logging
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_CLIENT = "default"

_clients: Dict[str, httpx.AsyncClient] = {}


def get_shared_http_client(timeout: float = 5.0, name: str = DEFAULT_CLIENT) -> httpx.AsyncClient:
    """
    Get or create the pooled client registered under `name`.

    The timeout only applies when the client is created; later callers share
    the existing client as-is.
    """
    client = _clients.get(name)
    if client is None or client.is_closed:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 2.0)),
            limits=httpx.Limits(
                max_keepalive_connections=2,
                max_connections=4,
                keepalive_expiry=30.0,
            ),
        )
        _clients[name] = client
        logger.info(f"Created shared HTTP client '{name}' (timeout {timeout:.1f}s)")
    return client


async def close_shared_http_client() -> None:
    """Close every shared client (application shutdown)."""
    while _clients:
        name, client = _clients.popitem()
        await client.aclose()
        logger.info(f"Closed shared HTTP client '{name}'")
