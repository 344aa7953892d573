from .error_handler import register_error_handlers, resolve_error
from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware", "register_error_handlers", "resolve_error"]
