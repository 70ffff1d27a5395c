"""Tests for the message catalog lookup."""

import pytest
from babel.support import NullTranslations

from authdomain.utils import i18n
from authdomain.utils.i18n import format_message, get_translated_message, setup_i18n


@pytest.fixture
def isolated_catalogs():
    """Restores the module-level catalogs after a test mutates them."""
    translations = dict(i18n._translations)
    fallbacks = {lang: dict(catalog) for lang, catalog in i18n._fallback_catalogs.items()}
    yield
    i18n._translations.clear()
    i18n._translations.update(translations)
    i18n._fallback_catalogs.clear()
    i18n._fallback_catalogs.update(fallbacks)


@pytest.mark.unit
class TestSetup:
    def test_missing_locales_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            setup_i18n(str(tmp_path / "missing"))

    def test_loads_po_catalog_from_custom_path(self, tmp_path, isolated_catalogs):
        # Arrange
        catalog_dir = tmp_path / "en" / "LC_MESSAGES"
        catalog_dir.mkdir(parents=True)
        (catalog_dir / "messages.po").write_text(
            'msgid ""\nmsgstr ""\n"Content-Type: text/plain; charset=UTF-8\\n"\n\n'
            'msgid "greeting"\nmsgstr "Hello {name}"\n',
            encoding="utf-8",
        )

        # Act
        setup_i18n(str(tmp_path))

        # Assert
        assert format_message("greeting", "en", name="Ada") == "Hello Ada"
        assert i18n._fallback_catalogs["es"] == {}


@pytest.mark.unit
class TestTranslation:
    def test_english_and_spanish_messages(self):
        assert get_translated_message("password_mismatch", "en") == "Passwords do not match"
        assert get_translated_message("password_mismatch", "es") == "Las contraseñas no coinciden"

    def test_default_locale_is_used_when_none_given(self):
        assert get_translated_message("invalid_email") == "Invalid email format"

    def test_unsupported_locale_falls_back_to_default(self, mocker):
        mock_logger = mocker.patch("authdomain.utils.i18n.logger")

        result = get_translated_message("invalid_email", "fr")

        assert result == "Invalid email format"
        mock_logger.warning.assert_called_once()

    def test_unknown_key_is_returned_unchanged(self):
        assert get_translated_message("no_such_key", "en") == "no_such_key"

    def test_missing_translation_falls_back_to_default_language(self, isolated_catalogs):
        # Arrange
        get_translated_message("invalid_otp", "es")
        i18n._translations["es"] = NullTranslations()
        i18n._fallback_catalogs["es"].pop("invalid_otp", None)

        # Act
        result = get_translated_message("invalid_otp", "es")

        # Assert
        assert result == "Invalid verification code"

    def test_format_message_substitutes_placeholders(self):
        assert format_message("required_field", "en", field="email") == "email is required"
        assert format_message("required_field", "es", field="email") == "email es obligatorio"
