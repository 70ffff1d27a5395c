"""Authentication policy settings.
"""

import logging
from typing import List, Union

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines the default authentication policy: password rules, phone
    normalization, OTP shape, session and MFA limits and enabled OAuth providers.

    Tenants may supply their own ``PasswordPolicy``; these values only seed the
    package-wide default policy.
    """

    # Password policy defaults
    PASSWORD_MIN_LENGTH: int = Field(default=8, ge=1)
    PASSWORD_MAX_LENGTH: int = Field(default=128, ge=1)
    PASSWORD_REQUIRE_UPPERCASE: bool = True
    PASSWORD_REQUIRE_LOWERCASE: bool = True
    PASSWORD_REQUIRE_NUMBERS: bool = True
    PASSWORD_REQUIRE_SYMBOLS: bool = False
    PASSWORD_PREVENT_COMMON: bool = True
    PASSWORD_PREVENT_PERSONAL_INFO: bool = True
    PASSWORD_MAX_REPEATED_CHARS: int = Field(default=2, ge=1)
    PASSWORD_HISTORY_COUNT: int = Field(default=5, ge=0)

    # Contact normalization
    DEFAULT_COUNTRY_CODE: str = "+1"

    # One-time codes and MFA
    OTP_ALLOWED_LENGTHS: Union[str, List[int]] = Field(default=[4, 6])
    MFA_MAX_ATTEMPTS: int = Field(default=3, ge=1)

    # Sessions
    MAX_ACTIVE_SESSIONS: int = Field(default=5, ge=1)

    # OAuth
    OAUTH_ENABLED_PROVIDERS: Union[str, List[str]] = Field(
        default=["google", "github", "microsoft", "linkedin"]
    )

    @field_validator("OTP_ALLOWED_LENGTHS", mode="before")
    @classmethod
    def _split_otp_lengths(cls, v: Union[str, List[int]]) -> List[int]:
        if isinstance(v, str):
            return [int(i) for i in v.split(",") if i.strip()]
        return v

    @field_validator("OAUTH_ENABLED_PROVIDERS", mode="before")
    @classmethod
    def _split_providers(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [i.strip().lower() for i in v.split(",") if i.strip()]
        return v

    @model_validator(mode="after")
    def _validate_password_bounds(self) -> "AuthSettings":
        """Rejects a default password policy whose bounds cannot be satisfied.

        Raises:
            ValueError: If PASSWORD_MIN_LENGTH exceeds PASSWORD_MAX_LENGTH.
        """
        if self.PASSWORD_MIN_LENGTH > self.PASSWORD_MAX_LENGTH:
            error_msg = (
                f"PASSWORD_MIN_LENGTH ({self.PASSWORD_MIN_LENGTH}) must not exceed "
                f"PASSWORD_MAX_LENGTH ({self.PASSWORD_MAX_LENGTH})"
            )
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self
