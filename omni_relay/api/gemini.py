import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..core.http_client import get_http_client
from ..models.api_models import (
    GeminiProxyRequest,
    GeminiGenerateContentPayload,
    GeminiProxyResponse,
)
from ..services.upstream import UpstreamHttpError, UpstreamSuccess, post_json
from ..utils.helpers import (
    dig,
    is_truthy,
    error_response,
    internal_error,
    mask_api_key,
    method_not_allowed,
    new_request_id,
    parse_json_body,
    PROXY_METHODS,
)

logger = logging.getLogger("OmniRelay.Handlers.Gemini")
router = APIRouter()

GENERATED_TEXT_PATH = ("candidates", 0, "content", "parts", 0, "text")


def extract_generated_text(result) -> Any:
    """Pull the first candidate's first text part out of a generateContent result."""
    text = dig(result, GENERATED_TEXT_PATH, default="")
    return text if is_truthy(text) else ""


@router.api_route(
    "/api/gemini",
    methods=PROXY_METHODS,
    summary="Proxy a prompt to Gemini generateContent",
    tags=["AI Proxy"],
)
async def gemini_proxy(
    request: Request,
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    if request.method != "POST":
        return method_not_allowed()

    request_id = new_request_id()
    log_prefix = f"RID-{request_id}"

    body = GeminiProxyRequest.model_validate(parse_json_body(await request.body()))
    if not is_truthy(body.prompt):
        return error_response(400, "Prompt is required")

    # 密钥只在服务端读取，绝不回传给前端
    if not settings.gemini_api_key:
        logger.error(f"{log_prefix}: GEMINI_API_KEY is not set")
        return error_response(500, "API key not configured on the server")

    url = settings.gemini_generate_url
    logger.info(f"{log_prefix}: Forwarding prompt to {url}, key={mask_api_key(settings.gemini_api_key)}")

    outcome = await post_json(
        http_client,
        url,
        params={"key": settings.gemini_api_key},
        headers={"Content-Type": "application/json"},
        payload=GeminiGenerateContentPayload.from_prompt(body.prompt).model_dump(),
        request_id=request_id,
    )

    if isinstance(outcome, UpstreamHttpError):
        logger.error(f"{log_prefix}: Gemini API Error {outcome.status_code}: {outcome.body_text}")
        return error_response(outcome.status_code, f"Gemini API error: {outcome.body_text}")
    if not isinstance(outcome, UpstreamSuccess):
        logger.error(f"{log_prefix}: Error in Gemini proxy: {outcome.error!r}")
        return internal_error()

    text = extract_generated_text(outcome.payload)
    if not text:
        logger.warning(f"{log_prefix}: Gemini response carried no text, returning empty string")
    return JSONResponse(status_code=200, content=GeminiProxyResponse(text=text).model_dump())
