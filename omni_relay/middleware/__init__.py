"""
中间件模块
"""
from .access_logging import AccessLogMiddleware
from .error_handling import ErrorHandlingMiddleware

__all__ = [
    "AccessLogMiddleware",
    "ErrorHandlingMiddleware",
]
