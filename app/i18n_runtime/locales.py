"""Catalogue of well-known locales with English and native display names."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class LocaleInfo:
    """Display information for a locale.

    Attributes:
        code: BCP 47 locale code.
        name: English display name.
        native_name: Display name in the locale's own language.
    """

    code: str
    name: str
    native_name: str


ALL_LOCALES: Tuple[LocaleInfo, ...] = (
    LocaleInfo("en", "English", "English"),
    LocaleInfo("en-GB", "English (United Kingdom)", "English (UK)"),
    LocaleInfo("zh-TW", "Traditional Chinese (Taiwan)", "繁體中文 (台灣)"),
    LocaleInfo("zh-HK", "Traditional Chinese (Hong Kong)", "繁體中文 (香港)"),
    LocaleInfo("zh-CN", "Simplified Chinese", "简体中文"),
    LocaleInfo("ja", "Japanese", "日本語"),
    LocaleInfo("ko", "Korean", "한국어"),
    LocaleInfo("es", "Spanish", "Español"),
    LocaleInfo("es-419", "Spanish (Latin America)", "Español (Latinoamérica)"),
    LocaleInfo("fr", "French", "Français"),
    LocaleInfo("fr-CA", "French (Canada)", "Français (Canada)"),
    LocaleInfo("de", "German", "Deutsch"),
    LocaleInfo("it", "Italian", "Italiano"),
    LocaleInfo("pt", "Portuguese", "Português"),
    LocaleInfo("pt-BR", "Portuguese (Brazil)", "Português (Brasil)"),
    LocaleInfo("ru", "Russian", "Русский"),
    LocaleInfo("uk", "Ukrainian", "Українська"),
    LocaleInfo("pl", "Polish", "Polski"),
    LocaleInfo("cs", "Czech", "Čeština"),
    LocaleInfo("nl", "Dutch", "Nederlands"),
    LocaleInfo("sv", "Swedish", "Svenska"),
    LocaleInfo("da", "Danish", "Dansk"),
    LocaleInfo("nb", "Norwegian Bokmål", "Norsk bokmål"),
    LocaleInfo("fi", "Finnish", "Suomi"),
    LocaleInfo("el", "Greek", "Ελληνικά"),
    LocaleInfo("tr", "Turkish", "Türkçe"),
    LocaleInfo("ar", "Arabic", "العربية"),
    LocaleInfo("he", "Hebrew", "עברית"),
    LocaleInfo("hi", "Hindi", "हिन्दी"),
    LocaleInfo("th", "Thai", "ไทย"),
    LocaleInfo("vi", "Vietnamese", "Tiếng Việt"),
    LocaleInfo("id", "Indonesian", "Bahasa Indonesia"),
    LocaleInfo("ms", "Malay", "Bahasa Melayu"),
    LocaleInfo("hu", "Hungarian", "Magyar"),
    LocaleInfo("ro", "Romanian", "Română"),
)

_BY_CODE: Dict[str, LocaleInfo] = {info.code: info for info in ALL_LOCALES}

# code -> native name, for locale pickers
locale_names: Dict[str, str] = {info.code: info.native_name for info in ALL_LOCALES}


def get_locale_info(code: str) -> Optional[LocaleInfo]:
    return _BY_CODE.get(code)


def get_locale_native_name(code: str) -> str:
    """Native display name, or the code itself for unknown locales."""
    info = _BY_CODE.get(code)
    return info.native_name if info else code


def get_locale_english_name(code: str) -> str:
    """English display name, or the code itself for unknown locales."""
    info = _BY_CODE.get(code)
    return info.name if info else code
