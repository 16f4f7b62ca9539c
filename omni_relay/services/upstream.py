"""
Outbound call step shared by the proxy routes.

``post_json`` performs a single POST and reports the outcome as one of three
variants instead of raising, so the routes can map each case explicitly:

* ``UpstreamSuccess``   - 2xx with a JSON body
* ``UpstreamHttpError`` - non-2xx; carries the raw response text
* ``UpstreamFailure``   - transport error or an undecodable success body

There is no retry loop. Timeouts are whatever the shared client carries.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
import orjson

logger = logging.getLogger("OmniRelay.Services.Upstream")


@dataclass(frozen=True)
class UpstreamSuccess:
    status_code: int
    payload: Any


@dataclass(frozen=True)
class UpstreamHttpError:
    status_code: int
    body_text: str


@dataclass(frozen=True)
class UpstreamFailure:
    error: Exception


UpstreamOutcome = Union[UpstreamSuccess, UpstreamHttpError, UpstreamFailure]


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    params: Optional[Dict[str, str]] = None,
    request_id: str = "-",
) -> UpstreamOutcome:
    log_prefix = f"RID-{request_id}"
    try:
        resp = await client.post(
            url,
            params=params,
            headers=headers,
            content=orjson.dumps(payload),
        )
    except httpx.HTTPError as e:
        logger.error(f"{log_prefix}: Request to {url} failed: {type(e).__name__} - {e}")
        return UpstreamFailure(error=e)

    if not resp.is_success:
        return UpstreamHttpError(status_code=resp.status_code, body_text=resp.text)

    try:
        data = orjson.loads(resp.content)
    except orjson.JSONDecodeError as e:
        logger.error(f"{log_prefix}: Upstream {resp.status_code} body is not JSON: {resp.text[:500]}")
        return UpstreamFailure(error=e)

    logger.debug(f"{log_prefix}: Upstream {resp.status_code} from {url}")
    return UpstreamSuccess(status_code=resp.status_code, payload=data)
