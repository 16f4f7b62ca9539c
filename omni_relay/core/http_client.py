"""
全局 HTTP 客户端管理模块
Shared httpx.AsyncClient used for the outbound calls.
"""
import logging
from typing import Optional

import httpx
from fastapi import Request

from .config import API_TIMEOUT, READ_TIMEOUT, MAX_CONNECTIONS

logger = logging.getLogger("OmniRelay.Core.HTTPClient")

# Fallback instance for when the app lifespan never ran (serverless cold paths)
_http_client: Optional[httpx.AsyncClient] = None


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(API_TIMEOUT, read=READ_TIMEOUT),
        limits=httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=20,
            keepalive_expiry=60.0,
        ),
        http2=True,
        follow_redirects=True,
        trust_env=True,
    )


def get_global_http_client() -> httpx.AsyncClient:
    global _http_client

    if _http_client is None or _http_client.is_closed:
        logger.info("Initializing global HTTP client")
        _http_client = create_http_client()

    return _http_client


async def close_global_http_client():
    global _http_client

    if _http_client is not None:
        logger.info("Closing global HTTP client")
        await _http_client.aclose()
        _http_client = None


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    FastAPI dependency. Prefers the client created in the app lifespan and
    falls back to the module-level one.
    """
    client = getattr(request.app.state, "http_client", None)
    if isinstance(client, httpx.AsyncClient) and not client.is_closed:
        return client
    return get_global_http_client()
