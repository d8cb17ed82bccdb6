"""Per-unit-of-work cache that deduplicates concurrent loads."""

import asyncio
from functools import partial
from typing import Awaitable, Callable, Dict

from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import TranslationMap

logger = get_module_logger()

Loader = Callable[[], Awaitable[TranslationMap]]


class RequestScopedCache:
    """Memoises translation loads for the lifetime of one unit of work.

    At most one load per locale is in flight at a time. Concurrent callers
    asking for the same locale await the same task and receive the same
    result object. A failed or cancelled load is forgotten so the next call
    retries it.

    Create one instance per request; instances are not shared.
    """

    def __init__(self):
        self._tasks: Dict[str, "asyncio.Future[TranslationMap]"] = {}

    async def get_or_load(self, locale: str, loader: Loader) -> TranslationMap:
        """Return the map for a locale, loading it at most once.

        Args:
            locale: Locale code.
            loader: Zero-argument coroutine function producing the map.

        Returns:
            The loaded translation map.

        Raises:
            Exception: Whatever the loader raised, for every waiting caller.
        """
        task = self._tasks.get(locale)
        if task is None:
            task = asyncio.ensure_future(loader())
            self._tasks[locale] = task
            task.add_done_callback(partial(self._forget_failed, locale))
        else:
            logger.debug("request_cache_shared_load", locale=locale)
        # A cancelled caller must not cancel the load other callers await
        return await asyncio.shield(task)

    def _forget_failed(self, locale: str, task: "asyncio.Future[TranslationMap]") -> None:
        if task.cancelled() or task.exception() is not None:
            if self._tasks.get(locale) is task:
                del self._tasks[locale]

    def __contains__(self, locale: str) -> bool:
        return locale in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def clear(self) -> None:
        self._tasks.clear()
