import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..core.http_client import get_http_client
from ..models.api_models import Judge0ProxyRequest, Judge0SubmissionPayload
from ..services.upstream import UpstreamHttpError, UpstreamSuccess, post_json
from ..utils.helpers import (
    error_response,
    internal_error,
    is_truthy,
    mask_api_key,
    method_not_allowed,
    new_request_id,
    parse_json_body,
    PROXY_METHODS,
)

logger = logging.getLogger("OmniRelay.Handlers.Judge0")
router = APIRouter()

# Blocking submission with plain-text fields. Judge0 answers only once the run
# has finished, so no token polling is needed.
SUBMISSION_PARAMS = {"base64_encoded": "false", "wait": "true"}


@router.api_route(
    "/api/judge0",
    methods=PROXY_METHODS,
    summary="Proxy a code submission to Judge0",
    tags=["AI Proxy"],
)
async def judge0_proxy(
    request: Request,
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    """
    Judge0 proxy:
    - Accepts {language_id, source_code}; an empty source_code is a valid submission
    - Returns the whole submission result (stdout, stderr, compile_output, status, ...) untouched
    """
    if request.method != "POST":
        return method_not_allowed()

    request_id = new_request_id()
    log_prefix = f"RID-{request_id}"

    body = Judge0ProxyRequest.model_validate(parse_json_body(await request.body()))
    if not is_truthy(body.language_id) or not body.has_source_code:
        return error_response(400, "language_id and source_code are required")

    if not settings.judge0_api_key:
        logger.error(f"{log_prefix}: JUDGE0_API_KEY is not set")
        return error_response(500, "Judge0 API key not configured on the server")

    headers = {
        "content-type": "application/json",
        "X-RapidAPI-Key": settings.judge0_api_key,
        "X-RapidAPI-Host": settings.judge0_api_host,
    }
    payload = Judge0SubmissionPayload(language_id=body.language_id, source_code=body.source_code)

    logger.info(
        f"{log_prefix}: Submitting language_id={body.language_id} to {settings.judge0_api_url}, "
        f"key={mask_api_key(settings.judge0_api_key)}"
    )

    outcome = await post_json(
        http_client,
        settings.judge0_api_url,
        params=SUBMISSION_PARAMS,
        headers=headers,
        payload=payload.model_dump(),
        request_id=request_id,
    )

    if isinstance(outcome, UpstreamHttpError):
        logger.error(f"{log_prefix}: Judge0 API Error {outcome.status_code}: {outcome.body_text}")
        return error_response(outcome.status_code, f"Judge0 API error: {outcome.body_text}")
    if not isinstance(outcome, UpstreamSuccess):
        logger.error(f"{log_prefix}: Error in Judge0 proxy: {outcome.error!r}")
        return internal_error()

    return JSONResponse(status_code=200, content=outcome.payload)
