"""Observability: structured logging, request correlation, health probe."""

from .logging_config import configure_logging, get_logger
from .middleware import RequestIDMiddleware

__all__ = ["configure_logging", "get_logger", "RequestIDMiddleware"]
