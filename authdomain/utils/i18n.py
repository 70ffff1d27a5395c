"""
Internationalization (i18n) utility module for user-facing domain messages.

This module provides functionality for:
- Loading the message catalogs shipped in ``authdomain/locales``
- Translating message keys based on the caller's language preference
- Formatting messages with named placeholders (``{field}``, ``{length}``)
- Fallback mechanisms for missing translations
- Logging of translation-related events

Compiled ``.mo`` catalogs are loaded through Babel when present; the ``.po``
sources are always parsed as a secondary lookup so that a skipped compilation
step never ships raw message keys to end users.
"""

import os
from typing import Any, Dict, Optional

from babel.messages.pofile import read_po
from babel.support import NullTranslations, Translations

from authdomain.core.config.settings import settings
from authdomain.core.logging import logger

LOCALES_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locales"
)

# Store translations for each language
_translations: Dict[str, NullTranslations] = {}

# Secondary lookup parsed from the *.po* sources
_fallback_catalogs: Dict[str, Dict[str, str]] = {}


def setup_i18n(locales_path: Optional[str] = None) -> None:
    """
    Initialize the catalogs for every supported language.

    Args:
        locales_path: Directory holding ``<lang>/LC_MESSAGES/messages.po``,
            defaults to the catalogs bundled with the package.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    path = locales_path or LOCALES_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Locales directory not found: {path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = Translations.load(dirname=path, locales=[lang], domain="messages")

        po_path = os.path.join(path, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            try:
                with open(po_path, "rb") as po_file:
                    for message in read_po(po_file, locale=lang):
                        if message.id and isinstance(message.id, str) and message.string:
                            catalog[message.id] = message.string
            except (OSError, ValueError) as exc:
                logger.warning("i18n_po_parse_failed", lang=lang, error=str(exc))

        _fallback_catalogs[lang] = catalog
        logger.debug("i18n_initialized", language=lang, entries=len(catalog))

    logger.debug("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def _lookup(key: str, locale: str) -> Optional[str]:
    translation = _translations.get(locale)
    if translation is not None:
        translated = translation.gettext(key)
        if translated != key:
            return translated
    return _fallback_catalogs.get(locale, {}).get(key)


def get_translated_message(key: str, locale: Optional[str] = None) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Falls back to the default language, then to the key itself.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).

    Returns:
        The translated message or the original key if no catalog has it.
    """
    if not _translations:
        setup_i18n()

    locale = locale or settings.DEFAULT_LANGUAGE
    if locale not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=locale,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        locale = settings.DEFAULT_LANGUAGE

    translated = _lookup(key, locale)
    if translated is None and locale != settings.DEFAULT_LANGUAGE:
        translated = _lookup(key, settings.DEFAULT_LANGUAGE)
    if translated is None:
        logger.warning("translation_key_not_found", key=key, locale=locale)
        return key
    return translated


def format_message(key: str, locale: Optional[str] = None, **params: Any) -> str:
    """Translate ``key`` and substitute its named placeholders with ``params``."""
    message = get_translated_message(key, locale)
    return message.format(**params) if params else message
