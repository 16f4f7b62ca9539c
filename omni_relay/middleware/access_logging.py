import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger("OmniRelay.AccessLog")

EXCLUDED_PATHS = {"/health", "/favicon.ico"}


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000

        if request.url.path not in EXCLUDED_PATHS:
            # 获取真实 IP (处理代理情况)
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                real_ip = forwarded.split(",")[0].strip()
            else:
                real_ip = request.client.host if request.client else "unknown"

            logger.info(
                f"{real_ip} {request.method} {request.url.path} -> {response.status_code} "
                f"({process_time:.1f}ms) ua={request.headers.get('user-agent', '')!r}"
            )

        return response
