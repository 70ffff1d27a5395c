from enum import Enum


class OAuthProvider(str, Enum):
    """The supported OAuth providers.

    Which of them are enabled is configured through
    ``OAUTH_ENABLED_PROVIDERS``.
    """

    GOOGLE = "google"
    GITHUB = "github"
    MICROSOFT = "microsoft"
    LINKEDIN = "linkedin"


class LoginMethod(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    GOOGLE = "google"
    GITHUB = "github"
    MICROSOFT = "microsoft"
    LINKEDIN = "linkedin"
    SSO = "sso"
