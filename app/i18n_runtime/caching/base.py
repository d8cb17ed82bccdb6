"""Translation cache abstract base classes."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from i18n_runtime.models import TranslationMap


class TranslationCache(ABC):
    """Abstract base class for per-locale translation map caches.

    Implementations are shared across scopes and must serialise concurrent
    mutation. A cache never raises for backend trouble: failures read as a
    miss, ``False`` or a no-op.
    """

    @abstractmethod
    async def get(self, locale: str) -> Optional[TranslationMap]:
        """Get the cached translation map for a locale.

        Args:
            locale: Locale code.

        Returns:
            Cached map or None if not found/expired.
        """
        pass

    @abstractmethod
    async def set(self, locale: str, translations: TranslationMap) -> None:
        """Cache the translation map for a locale.

        Args:
            locale: Locale code.
            translations: Map of key to translated text.
        """
        pass

    @abstractmethod
    async def has(self, locale: str) -> bool:
        pass

    @abstractmethod
    async def invalidate(self, locale: Optional[str] = None) -> None:
        """Drop one locale, or every locale when ``locale`` is None."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics (implementation-specific).
        """
        pass


class CacheBackingStore(ABC):
    """Key/value store behind ``ExternalCache``.

    Every call may fail; ``ExternalCache`` absorbs those failures.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        pass

    async def keys(self, pattern: str) -> List[str]:
        """List keys matching a glob-style pattern.

        Optional capability. Stores that cannot enumerate keys keep this
        default, and a full invalidation then becomes a no-op.

        Raises:
            NotImplementedError: If the store cannot enumerate keys.
        """
        raise NotImplementedError(f"{type(self).__name__} cannot enumerate keys")
