import logging
import httpx
from fastapi import FastAPI, Depends, Request
from contextlib import asynccontextmanager
from typing import Optional

from .core.config import (
    APP_VERSION, API_TIMEOUT, READ_TIMEOUT, MAX_CONNECTIONS,
    LOG_LEVEL_FROM_ENV,
    Settings, get_settings,
)
from .core.http_client import create_http_client, close_global_http_client
from .models.api_models import HealthResponse
from .api import gemini as gemini_router
from .api import judge0 as judge0_router
from .middleware import AccessLogMiddleware, ErrorHandlingMiddleware

numeric_log_level = getattr(logging, LOG_LEVEL_FROM_ENV.upper(), logging.INFO)

# 配置根日志记录器
root_logger = logging.getLogger()
root_logger.setLevel(numeric_log_level)

# 控制台处理器
console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(
    '%(asctime)s %(levelname)-8s [%(name)s:%(module)s:%(lineno)d] - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
))
root_logger.addHandler(console_handler)

logger = logging.getLogger("OmniRelay.Main")

# httpx logs full request URLs at INFO, and the Gemini key travels in the query string
for lib_logger_name in ["httpx", "httpcore", "hpack", "uvicorn.access", "watchfiles"]:
    logging.getLogger(lib_logger_name).setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    logger.info("Lifespan: 应用启动，开始初始化HTTP客户端...")

    client_local: Optional[httpx.AsyncClient] = None
    try:
        client_local = create_http_client()
        app_instance.state.http_client = client_local
        logger.info(f"Lifespan: HTTP客户端初始化成功。Timeout: {API_TIMEOUT}s, Read Timeout: {READ_TIMEOUT}s, Max Connections: {MAX_CONNECTIONS}")
    except Exception as e:
        logger.error(f"Lifespan: HTTP客户端初始化过程中发生错误: {e}", exc_info=True)
        app_instance.state.http_client = None

    yield

    logger.info("Lifespan: 应用关闭，开始关闭HTTP客户端...")
    client_to_close = getattr(app_instance.state, "http_client", None)
    if isinstance(client_to_close, httpx.AsyncClient) and not client_to_close.is_closed:
        try:
            await client_to_close.aclose()
            logger.info("Lifespan: HTTP客户端成功关闭。")
        except Exception as e:
            logger.error(f"Lifespan: 关闭HTTP客户端时发生错误: {e}", exc_info=True)

    if hasattr(app_instance.state, "http_client"):
        delattr(app_instance.state, "http_client")

    await close_global_http_client()
    logger.info("Lifespan: 应用关闭流程完成。")


app = FastAPI(
    title="Omni Relay",
    description=f"Gemini / Judge0 proxy, version: {APP_VERSION}",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# 中间件的执行顺序是后添加先执行: access log -> error handling -> routes
# No CORS middleware: a preflight OPTIONS has to reach the proxy routes and get the 405 body
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(AccessLogMiddleware)
logger.info(f"FastAPI Omni Relay v{APP_VERSION} 初始化完成。")

app.include_router(gemini_router.router)
logger.info("Gemini 代理路由已加载到路径 /api/gemini")

app.include_router(judge0_router.router)
logger.info("Judge0 代理路由已加载到路径 /api/judge0")


@app.get("/", status_code=200, include_in_schema=False, tags=["Utilities"])
async def root():
    """根路由，确认服务正常运行"""
    return {
        "message": "Omni Relay API is running",
        "version": APP_VERSION,
        "status": "ok",
        "endpoints": {
            "gemini": "/api/gemini",
            "judge0": "/api/judge0",
            "health": "/health",
            "docs": "/docs",
        }
    }


@app.get("/health", response_model=HealthResponse, status_code=200, include_in_schema=False, tags=["Utilities"])
async def health_check(request: Request, settings: Settings = Depends(get_settings)):
    client_from_state = getattr(request.app.state, "http_client", None)
    client_status = "ok"
    detail_message = "HTTP client initialized and seems operational."

    if client_from_state is None:
        client_status = "error"
        detail_message = "HTTP client not initialized in app.state."
    elif not isinstance(client_from_state, httpx.AsyncClient):
        client_status = "error"
        detail_message = f"Unexpected object type in app.state.http_client: {type(client_from_state)}"
    elif client_from_state.is_closed:
        client_status = "warning"
        detail_message = "HTTP client in app.state is closed."

    return HealthResponse(
        status=client_status,
        detail=detail_message,
        app_version=APP_VERSION,
        gemini_configured=bool(settings.gemini_api_key),
        judge0_configured=bool(settings.judge0_api_key),
    )
