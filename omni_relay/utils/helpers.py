import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterable, Union

import orjson
from fastapi.responses import JSONResponse

from ..models.api_models import ErrorResponse

logger = logging.getLogger("OmniRelay.Utils")

METHOD_NOT_ALLOWED = "Method Not Allowed"
INTERNAL_ERROR_MESSAGE = "An internal server error occurred."

# Proxy routes accept every verb so the 405 body is produced by the handler itself
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

_MISSING = object()


def is_truthy(value: Any) -> bool:
    """
    Truthiness as browser clients mean it: only null, false, 0, NaN and "" are
    falsy. Empty objects and arrays count as values.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return not (value == 0 or value != value)
    return True


def dig(obj: Any, path: Iterable[Union[str, int]], default: Any = None) -> Any:
    """
    Null-safe lookup through nested mappings and sequences.

    ``dig(result, ["candidates", 0, "content"])`` behaves like
    ``result["candidates"][0]["content"]`` but returns ``default`` as soon as
    any link is missing, ``None`` or of the wrong shape. Strings and bytes are
    treated as leaves and never indexed.
    """
    current = obj
    for key in path:
        if current is None:
            return default
        if isinstance(current, Mapping):
            current = current.get(key, _MISSING)
        elif isinstance(key, int) and isinstance(current, Sequence) and not isinstance(current, (str, bytes, bytearray)):
            if -len(current) <= key < len(current):
                current = current[key]
            else:
                current = _MISSING
        else:
            return default
        if current is _MISSING:
            return default
    return default if current is None else current


def parse_json_body(raw: bytes) -> Dict[str, Any]:
    """Decode a request body; empty, malformed or non-object bodies become {}."""
    if not raw:
        return {}
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("Request body is not valid JSON, treating as empty")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Request body is a JSON {type(data).__name__}, treating as empty")
        return {}
    return data


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def method_not_allowed() -> JSONResponse:
    return error_response(405, METHOD_NOT_ALLOWED)


def internal_error() -> JSONResponse:
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def mask_api_key(api_key: str) -> str:
    """Return a masked/fingerprinted representation of an API key for safe logging."""
    if not api_key:
        return "(empty)"
    if len(api_key) <= 8:
        return f"****...**** (len={len(api_key)})"
    head = api_key[:4]
    tail = api_key[-4:]
    return f"{head}...{tail} (len={len(api_key)})"
