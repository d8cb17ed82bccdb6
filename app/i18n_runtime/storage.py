"""Storage collaborators that supply per-locale translation maps.

The runtime only reads from storage. Persistence workflows (ingestion,
machine translation, review) live outside this package.
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Union

import yaml

from i18n_runtime.exceptions import StorageError
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import SourceString, TranslationEntry, TranslationMap

logger = get_module_logger()


class StorageAdapter(ABC):
    """Abstract source of translation maps.

    Implementations may perform network or database I/O and may raise;
    failures surface to the orchestrator creating the scope.
    """

    @abstractmethod
    async def get_translations(self, locale: str) -> TranslationMap:
        """Load every translation for a locale.

        Args:
            locale: Locale code (e.g. "pt-BR").

        Returns:
            Mapping of key to translated text. Empty if nothing is stored.

        Raises:
            StorageError: If the backend cannot be read.
        """
        pass

    async def get_sources(self) -> List[SourceString]:
        """Load every registered source string.

        Storages without a source registry have no sources.

        Returns:
            Source strings in registration order.

        Raises:
            StorageError: If the backend cannot be read.
        """
        return []


class InMemoryStorage(StorageAdapter):
    """Dict-backed storage for tests and local development."""

    def __init__(
        self,
        translations: Optional[Dict[str, Dict[str, str]]] = None,
        sources: Optional[Iterable[SourceString]] = None,
    ):
        self._translations: Dict[str, Dict[str, str]] = {
            locale: dict(entries) for locale, entries in (translations or {}).items()
        }
        self._sources: Dict[str, SourceString] = {}
        for source in sources or []:
            self.save_source(source)
        self.calls = 0

    def save_source(self, source: SourceString) -> None:
        self._sources.setdefault(source.hash, source)

    def save_translation(self, entry: TranslationEntry) -> None:
        self._translations.setdefault(entry.locale, {})[entry.hash] = entry.text

    async def get_translations(self, locale: str) -> TranslationMap:
        self.calls += 1
        return MappingProxyType(dict(self._translations.get(locale, {})))

    async def get_sources(self) -> List[SourceString]:
        return list(self._sources.values())


class YAMLStorageAdapter(StorageAdapter):
    """Storage backed by YAML files of ``key: text`` pairs.

    Files are matched as ``*.<locale>.yml`` in the translations directory and
    merged in name order. A locale without files has no translations.
    Registered source strings live in ``sources.yml``, either as
    ``key: text`` or as ``key: {text: ..., context: ...}``.

    Attributes:
        translations_dir: Path to directory containing YAML files.
    """

    SOURCES_FILE = "sources.yml"

    def __init__(self, translations_dir: Union[str, Path]):
        """Initialize YAML storage.

        Args:
            translations_dir: Path to directory with YAML translation files.

        Raises:
            ValueError: If the directory does not exist.
        """
        self.translations_dir = Path(translations_dir)

        if not self.translations_dir.exists():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_storage", translations_dir=str(self.translations_dir)
        )

    async def get_translations(self, locale: str) -> TranslationMap:
        return await asyncio.to_thread(self._read_locale, locale)

    async def get_sources(self) -> List[SourceString]:
        return await asyncio.to_thread(self._read_sources)

    def _read_mapping(self, yaml_file: Path, locale: Optional[str] = None) -> dict:
        try:
            with open(yaml_file, "r", encoding="utf-8") as f:
                # keys such as "00001234" must stay text, not octal ints
                data = yaml.load(f, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
            raise StorageError(f"Failed to parse {yaml_file}: {e}", locale) from e
        except OSError as e:
            logger.error("yaml_read_error", file=str(yaml_file), error=str(e))
            raise StorageError(f"Failed to read {yaml_file}: {e}", locale) from e

        if not data:
            return {}
        if not isinstance(data, dict):
            raise StorageError(
                f"Expected a mapping of keys to text in {yaml_file}", locale
            )
        return data

    def _read_locale(self, locale: str) -> TranslationMap:
        translations: Dict[str, str] = {}
        yaml_files = sorted(self.translations_dir.glob(f"*.{locale}.yml"))

        for yaml_file in yaml_files:
            for key, text in self._read_mapping(yaml_file, locale).items():
                if not text:
                    continue
                translations[str(key)] = str(text)

        logger.debug(
            "loaded_translations",
            locale=locale,
            file_count=len(yaml_files),
            count=len(translations),
        )
        return MappingProxyType(translations)

    def _read_sources(self) -> List[SourceString]:
        sources_file = self.translations_dir / self.SOURCES_FILE
        if not sources_file.exists():
            return []

        sources = []
        for key, value in self._read_mapping(sources_file).items():
            if isinstance(value, dict):
                text, context = value.get("text"), value.get("context") or None
            else:
                text, context = value, None
            if not text:
                continue
            sources.append(SourceString(hash=str(key), text=str(text), context=context))

        logger.debug("loaded_sources", count=len(sources))
        return sources
