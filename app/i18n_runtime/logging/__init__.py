"""Structured logging infrastructure for the translation runtime.

Public API:
    - configure_logging(): Initialize logging
    - get_module_logger(): Get a logger for the calling module
    - bind_scope_context(): Context manager for scope-bound logging
    - get_correlation_id(): Get current correlation ID from context
"""

from i18n_runtime.logging.context import bind_scope_context, get_correlation_id
from i18n_runtime.logging.setup import configure_logging, get_module_logger

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_scope_context",
    "get_correlation_id",
]
