"""Observability for extstore.

Provides structured logging with content key and backend context.
"""

from extstore.observability.logging import (
    LogContext,
    backend_var,
    configure_logging,
    content_key_var,
    request_id_var,
)

__all__ = [
    "configure_logging",
    "LogContext",
    "request_id_var",
    "content_key_var",
    "backend_var",
]
