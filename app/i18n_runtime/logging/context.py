"""Scope context binding for structured logging.

Binds translation-scope fields (locale, default locale, correlation ID) to
``structlog.contextvars`` so every log entry emitted while a scope is active
carries them.
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_scope_context(
    locale: Optional[str] = None,
    default_locale: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind scope context to all logs within the context manager.

    Args:
        locale: Resolved locale of the scope.
        default_locale: Source-language locale.
        correlation_id: Unit-of-work identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Example:
        with bind_scope_context(locale="pt-BR", default_locale="en"):
            logger.info("rendering_page")
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if locale is not None:
        context["locale"] = locale

    if default_locale is not None:
        context["default_locale"] = default_locale

    context.update(extra_context)

    tokens = structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")
