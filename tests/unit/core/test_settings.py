import pytest
from pydantic import ValidationError

from authdomain.core.config.settings import Settings, create_settings


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.PASSWORD_MIN_LENGTH == 8
        assert config.PASSWORD_MAX_LENGTH == 128
        assert config.DEFAULT_COUNTRY_CODE == "+1"
        assert config.OTP_ALLOWED_LENGTHS == [4, 6]
        assert config.DEFAULT_LANGUAGE == "en"

    def test_comma_separated_lists_are_split(self):
        config = Settings(
            _env_file=None,
            SUPPORTED_LANGUAGES="en, es",
            OTP_ALLOWED_LENGTHS="6,8",
            OAUTH_ENABLED_PROVIDERS="Google, GitHub",
        )

        assert config.SUPPORTED_LANGUAGES == ["en", "es"]
        assert config.OTP_ALLOWED_LENGTHS == [6, 8]
        assert config.OAUTH_ENABLED_PROVIDERS == ["google", "github"]

    def test_min_length_above_max_length_is_rejected(self):
        with pytest.raises(ValidationError, match="PASSWORD_MIN_LENGTH"):
            Settings(_env_file=None, PASSWORD_MIN_LENGTH=20, PASSWORD_MAX_LENGTH=10)

    def test_environment_overrides(self, monkeypatch):
        # Arrange
        monkeypatch.setenv("APP_ENV", "test")
        monkeypatch.setenv("MAX_ACTIVE_SESSIONS", "9")

        # Act
        config = create_settings()

        # Assert
        assert config.APP_ENV == "test"
        assert config.MAX_ACTIVE_SESSIONS == 9
