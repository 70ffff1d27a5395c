"""Primitive format validators for the authentication domain.

Every ``is_valid_*`` check is total: it returns ``False`` for any input it does
not accept, non-strings included, and never raises. The ``validate_*`` and
``normalize_*`` siblings return the normalized value or raise the matching
``ValidationError`` subclass from ``authdomain.core.exceptions``.
"""

import ipaddress
import re
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Tuple
from urllib.parse import urlsplit

import structlog
from babel import Locale
from babel.numbers import list_currencies

from authdomain.core.config.settings import settings
from authdomain.core.exceptions import (
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidPhoneNumberError,
)

logger = structlog.get_logger(__name__)


class IdentifierType(str, Enum):
    """What a unified login identifier turned out to be."""

    EMAIL = "email"
    PHONE = "phone"
    INVALID = "invalid"


EMAIL_MAX_LENGTH = 254
EMAIL_LOCAL_MAX_LENGTH = 64

_EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)
_E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
_LOOSE_PHONE_PATTERN = re.compile(r"^\+?\d{7,15}$")
_PHONE_SEPARATORS = re.compile(r"[\s\-.()]")
_FORBIDDEN_IDENTIFIER_CHARS = frozenset("<>{}|\\^~[]`")

_BACKUP_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")
_UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_TENANT_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
_LANGUAGE_PATTERN = re.compile(r"^[a-z]{2}(?:-[A-Z]{2})?$")
_TIMEZONE_PATTERN = re.compile(r"^[A-Z][A-Za-z_\-]+(?:/[A-Za-z0-9_\-+]+){1,2}$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

TENANT_SLUG_MIN_LENGTH = 3
TENANT_SLUG_MAX_LENGTH = 50
USER_AGENT_MAX_LENGTH = 512

RESERVED_TENANT_SLUGS: FrozenSet[str] = frozenset(
    {
        "api", "admin", "www", "app", "auth", "login", "logout", "register",
        "signup", "signin", "dashboard", "settings", "support", "help", "mail",
        "email", "static", "assets", "cdn", "status", "billing", "docs", "blog",
        "root", "system", "internal", "test", "demo", "null", "undefined",
        "account", "accounts", "oauth", "sso", "security", "public", "private",
    }
)

# Babel's territory table also carries macro-regions and private-use codes.
_PSEUDO_TERRITORIES = frozenset({"EU", "EZ", "UN", "QO", "XA", "XB", "ZZ"})
COUNTRY_CODES: FrozenSet[str] = frozenset(
    code
    for code in Locale("en").territories
    if len(code) == 2 and code.isalpha() and code not in _PSEUDO_TERRITORIES
)
CURRENCY_CODES: FrozenSet[str] = frozenset(list_currencies())

_LOOPBACK_HOSTS = frozenset({"localhost", "0.0.0.0"})


def is_valid_email(email: Any) -> bool:
    """Checks an address against the RFC-5321 subset accepted for accounts."""
    if not isinstance(email, str):
        return False
    candidate = email.strip()
    if not candidate or len(candidate) > EMAIL_MAX_LENGTH:
        return False
    if not _EMAIL_PATTERN.match(candidate):
        return False
    local, _, domain = candidate.rpartition("@")
    if len(local) > EMAIL_LOCAL_MAX_LENGTH:
        return False
    for part in (local, domain):
        if part.startswith(".") or part.endswith(".") or ".." in part:
            return False
    return True


def validate_email(email: Any) -> str:
    """Returns the trimmed, lower-cased address.

    Raises:
        InvalidEmailError: If the address is not acceptable.
    """
    if not is_valid_email(email):
        raise InvalidEmailError()
    return email.strip().lower()


def is_valid_phone_e164(phone: Any) -> bool:
    return isinstance(phone, str) and bool(_E164_PATTERN.match(phone))


def validate_phone(phone: Any, field: str = "phone") -> str:
    """Returns ``phone`` unchanged if it already is an E.164 number.

    Raises:
        InvalidPhoneNumberError: Otherwise.
    """
    if not is_valid_phone_e164(phone):
        raise InvalidPhoneNumberError(field)
    return phone


def normalize_phone_to_e164(
    raw: Any, default_country_code: Optional[str] = None, field: str = "phone"
) -> str:
    """Normalizes a user-entered phone number to E.164.

    Everything except digits and a leading ``+`` is dropped. Numbers without a
    ``+`` lose one leading trunk ``0`` and get ``default_country_code``
    prepended. Applying the function to its own output returns it unchanged.

    Raises:
        InvalidPhoneNumberError: If the result is not a valid E.164 number.
    """
    if not isinstance(raw, str):
        raise InvalidPhoneNumberError(field)

    stripped = raw.strip()
    digits = re.sub(r"\D", "", stripped)
    if stripped.startswith("+"):
        normalized = f"+{digits}"
    else:
        country = re.sub(r"\D", "", default_country_code or settings.DEFAULT_COUNTRY_CODE)
        local = digits[1:] if digits.startswith("0") else digits
        normalized = f"+{country}{local}"

    if not is_valid_phone_e164(normalized):
        raise InvalidPhoneNumberError(field)
    return normalized


def identify_email_or_phone(value: Any) -> IdentifierType:
    """Classifies a unified login identifier as an email, a phone or neither."""
    if not isinstance(value, str):
        return IdentifierType.INVALID
    candidate = value.strip()
    if not candidate or len(candidate) > EMAIL_MAX_LENGTH:
        return IdentifierType.INVALID
    if any(char in _FORBIDDEN_IDENTIFIER_CHARS for char in candidate):
        return IdentifierType.INVALID

    if "@" in candidate:
        return IdentifierType.EMAIL if is_valid_email(candidate) else IdentifierType.INVALID

    compact = _PHONE_SEPARATORS.sub("", candidate)
    if not _LOOSE_PHONE_PATTERN.match(compact):
        return IdentifierType.INVALID
    # An explicit "+" means the number is already international.
    if compact.startswith("+") and not is_valid_phone_e164(compact):
        return IdentifierType.INVALID
    return IdentifierType.PHONE


def normalize_identifier(
    value: Any, default_country_code: Optional[str] = None, field: str = "identifier"
) -> Tuple[IdentifierType, str]:
    """Classifies and normalizes a login identifier.

    Returns:
        ``(IdentifierType.EMAIL, lower-cased address)`` or
        ``(IdentifierType.PHONE, E.164 number)``.

    Raises:
        InvalidIdentifierError: If the value is neither, or the phone number
            cannot be brought into E.164 form.
    """
    kind = identify_email_or_phone(value)
    if kind is IdentifierType.EMAIL:
        return kind, value.strip().lower()
    if kind is IdentifierType.PHONE:
        try:
            return kind, normalize_phone_to_e164(value, default_country_code, field)
        except InvalidPhoneNumberError as exc:
            raise InvalidIdentifierError(field) from exc
    raise InvalidIdentifierError(field)


def is_valid_otp(
    code: Any,
    allowed_lengths: Optional[Iterable[int]] = None,
    allow_alphanumeric: bool = False,
) -> bool:
    """Checks a one-time code's length and character class."""
    if not isinstance(code, str):
        return False
    lengths = tuple(allowed_lengths) if allowed_lengths is not None else tuple(
        settings.OTP_ALLOWED_LENGTHS
    )
    if len(code) not in lengths:
        return False
    if allow_alphanumeric:
        return code.isascii() and code.isalnum()
    return code.isascii() and code.isdigit()


def is_valid_backup_code(code: Any) -> bool:
    """8-12 alphanumerics, optionally grouped with single dashes (``ABCD-1234``)."""
    if not isinstance(code, str) or not _BACKUP_CODE_PATTERN.match(code):
        return False
    return 8 <= len(code.replace("-", "")) <= 12


def _is_loopback_host(hostname: str) -> bool:
    if hostname in _LOOPBACK_HOSTS or hostname.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return address.is_loopback or address.is_unspecified


def is_valid_url(url: Any) -> bool:
    """Accepts absolute http(s) URLs pointing at a public-looking host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not hostname:
        return False
    if ".." in hostname:
        return False
    return not _is_loopback_host(hostname.lower())


def url_hostname(url: str) -> Optional[str]:
    """Returns the lower-cased hostname of an already validated URL."""
    hostname = urlsplit(url.strip()).hostname
    return hostname.lower() if hostname else None


def is_valid_tenant_slug(slug: Any) -> bool:
    if not isinstance(slug, str):
        return False
    if not TENANT_SLUG_MIN_LENGTH <= len(slug) <= TENANT_SLUG_MAX_LENGTH:
        return False
    if not _TENANT_SLUG_PATTERN.match(slug) or "--" in slug:
        return False
    return slug not in RESERVED_TENANT_SLUGS


def is_valid_uuid_v4(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_V4_PATTERN.match(value))


def is_valid_timestamp(value: Any) -> bool:
    """Accepts ``datetime`` instances and ISO-8601 strings (``Z`` included)."""
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    candidate = value.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return False
    return True


def is_valid_ip_address(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ipaddress.ip_address(value.strip())
    except ValueError:
        return False
    return True


def is_valid_user_agent(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    if not candidate or len(candidate) > USER_AGENT_MAX_LENGTH:
        return False
    return not _CONTROL_CHARS.search(candidate)


def is_valid_country_code(value: Any) -> bool:
    return isinstance(value, str) and value in COUNTRY_CODES


def is_valid_currency_code(value: Any) -> bool:
    return isinstance(value, str) and value in CURRENCY_CODES


def is_valid_language_code(value: Any) -> bool:
    return isinstance(value, str) and bool(_LANGUAGE_PATTERN.match(value))


def is_valid_timezone(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return value == "UTC" or bool(_TIMEZONE_PATTERN.match(value))
