"""Password policy engine: configurable policy, strength scoring and reuse checks.

``assess_password_strength`` is advisory and never raises. ``validate_password``
turns the same checks into hard constraints, collecting every unmet requirement
into a single ``WeakPasswordError`` before it looks at the password history.
"""

import hmac
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from authdomain.core.config.settings import Settings, settings
from authdomain.core.exceptions import PasswordReuseError, WeakPasswordError
from authdomain.utils.i18n import format_message

logger = structlog.get_logger(__name__)

STRONG_LENGTH = 12
VERY_STRONG_LENGTH = 16
SEQUENCE_LENGTH = 3
VARIETY_THRESHOLD = 8
HIGH_VARIETY_THRESHOLD = 12
COMMON_PASSWORD_MAX_SCORE = 1

_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SYMBOL = re.compile(r"[^A-Za-z0-9\s]")

COMMON_PASSWORDS: FrozenSet[str] = frozenset(
    {
        "123456", "123456789", "12345678", "1234567890", "12345", "1234567",
        "password", "password1", "password123", "passw0rd", "p@ssw0rd",
        "qwerty", "qwerty123", "qwertyuiop", "abc123", "111111", "000000",
        "123123", "654321", "iloveyou", "admin", "admin123", "welcome",
        "welcome1", "welcome123", "letmein", "monkey", "dragon", "football",
        "baseball", "master", "sunshine", "princess", "shadow", "superman",
        "trustno1", "login", "starwars", "whatever", "freedom", "hello123",
        "changeme", "secret", "default", "1q2w3e4r", "zaq12wsx", "asdfghjkl",
        "password1!", "Password1", "Password123", "Welcome1", "Qwerty123",
    }
)
_COMMON_PASSWORDS_LOWER = frozenset(p.lower() for p in COMMON_PASSWORDS)


class PasswordPolicy(BaseModel):
    """An immutable password policy, possibly tenant-specific.

    The bare defaults mirror the package defaults; ``from_settings`` builds the
    policy configured through ``PASSWORD_*`` settings.

    Raises:
        pydantic.ValidationError: If ``min_length`` exceeds ``max_length``.
    """

    model_config = ConfigDict(frozen=True)

    min_length: int = Field(default=8, ge=1)
    max_length: int = Field(default=128, ge=1)
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_symbols: bool = False
    prevent_common_passwords: bool = True
    prevent_personal_info: bool = True
    max_repeated_chars: int = Field(default=2, ge=1)
    history_count: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def _check_length_bounds(self) -> "PasswordPolicy":
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) must not exceed max_length ({self.max_length})"
            )
        return self

    @classmethod
    def from_settings(cls, config: Settings) -> "PasswordPolicy":
        return cls(
            min_length=config.PASSWORD_MIN_LENGTH,
            max_length=config.PASSWORD_MAX_LENGTH,
            require_uppercase=config.PASSWORD_REQUIRE_UPPERCASE,
            require_lowercase=config.PASSWORD_REQUIRE_LOWERCASE,
            require_numbers=config.PASSWORD_REQUIRE_NUMBERS,
            require_symbols=config.PASSWORD_REQUIRE_SYMBOLS,
            prevent_common_passwords=config.PASSWORD_PREVENT_COMMON,
            prevent_personal_info=config.PASSWORD_PREVENT_PERSONAL_INFO,
            max_repeated_chars=config.PASSWORD_MAX_REPEATED_CHARS,
            history_count=config.PASSWORD_HISTORY_COUNT,
        )


DEFAULT_PASSWORD_POLICY = PasswordPolicy.from_settings(settings)


class PasswordStrengthLevel(str, Enum):
    """Strength levels, ordered from weakest to strongest.

    Comparisons follow the strength order, not the alphabetical order of the
    string values.
    """

    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, PasswordStrengthLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, PasswordStrengthLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, PasswordStrengthLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, PasswordStrengthLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER: Tuple[PasswordStrengthLevel, ...] = tuple(PasswordStrengthLevel)

# Minimum score for each level, highest first.
LEVEL_THRESHOLDS: Tuple[Tuple[int, PasswordStrengthLevel], ...] = (
    (10, PasswordStrengthLevel.EXCELLENT),
    (8, PasswordStrengthLevel.STRONG),
    (6, PasswordStrengthLevel.GOOD),
    (4, PasswordStrengthLevel.FAIR),
    (0, PasswordStrengthLevel.WEAK),
)


def level_for_score(score: int) -> PasswordStrengthLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return PasswordStrengthLevel.WEAK


@dataclass(frozen=True)
class PasswordStrength:
    """Result of a strength assessment.

    Attributes:
        score: Additive score, 0 to 11.
        level: Level derived from ``score``.
        feedback: Policy requirements the password does not meet.
        suggestions: Optional improvements beyond the policy.
    """

    score: int
    level: PasswordStrengthLevel
    feedback: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()

    @property
    def meets_policy(self) -> bool:
        return not self.feedback


@dataclass(frozen=True)
class PasswordValidationContext:
    """Caller-supplied facts used by the personal-info and history checks.

    ``previous_passwords`` is ordered most recent first. Entries may be hashes
    when ``password_matcher`` knows how to verify a candidate against them.
    """

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    previous_passwords: Sequence[str] = ()
    password_matcher: Optional[Callable[[str, str], bool]] = None


def _longest_run(password: str) -> int:
    longest = current = 0
    previous = None
    for char in password:
        current = current + 1 if char == previous else 1
        longest = max(longest, current)
        previous = char
    return longest


def _has_sequence(password: str, length: int = SEQUENCE_LENGTH) -> bool:
    """Detects ascending or descending runs such as ``123``, ``cba``."""
    lowered = password.lower()
    for start in range(len(lowered) - length + 1):
        window = lowered[start : start + length]
        if not (window.isdigit() or (window.isascii() and window.isalpha())):
            continue
        steps = {ord(b) - ord(a) for a, b in zip(window, window[1:])}
        if steps == {1} or steps == {-1}:
            return True
    return False


def _personal_tokens(context: Optional[PasswordValidationContext]) -> List[str]:
    if context is None:
        return []
    tokens = []
    if context.email and "@" in context.email:
        tokens.append(context.email.split("@", 1)[0])
    tokens.extend(name for name in (context.first_name, context.last_name) if name)
    return [token.strip().lower() for token in tokens if len(token.strip()) >= 3]


def _is_common(password: str) -> bool:
    return password.lower() in _COMMON_PASSWORDS_LOWER


def _unmet_requirements(
    password: str,
    policy: PasswordPolicy,
    context: Optional[PasswordValidationContext],
    locale: Optional[str],
) -> List[str]:
    if not password:
        return [format_message("password_required", locale)]

    unmet = []
    if len(password) < policy.min_length:
        unmet.append(format_message("password_too_short", locale, length=policy.min_length))
    if len(password) > policy.max_length:
        unmet.append(format_message("password_too_long", locale, length=policy.max_length))
    if policy.require_uppercase and not _UPPERCASE.search(password):
        unmet.append(format_message("password_no_uppercase", locale))
    if policy.require_lowercase and not _LOWERCASE.search(password):
        unmet.append(format_message("password_no_lowercase", locale))
    if policy.require_numbers and not _DIGIT.search(password):
        unmet.append(format_message("password_no_number", locale))
    if policy.require_symbols and not _SYMBOL.search(password):
        unmet.append(format_message("password_no_symbol", locale))
    if _longest_run(password) > policy.max_repeated_chars:
        unmet.append(
            format_message("password_repeated_chars", locale, count=policy.max_repeated_chars)
        )
    if _has_sequence(password):
        unmet.append(format_message("password_sequential", locale))
    if policy.prevent_personal_info:
        lowered = password.lower()
        if any(token in lowered for token in _personal_tokens(context)):
            unmet.append(format_message("password_personal_info", locale))
    if policy.prevent_common_passwords and _is_common(password):
        unmet.append(format_message("password_common", locale))
    return unmet


def assess_password_strength(
    password: str,
    policy: Optional[PasswordPolicy] = None,
    locale: Optional[str] = None,
) -> PasswordStrength:
    """Scores a password without raising.

    One point each for reaching ``min_length``, 12 and 16 characters, for each
    character class present, for having no run longer than
    ``max_repeated_chars``, for having no three-character sequence, and for
    reaching 8 and 12 distinct characters. Common passwords are capped at 1.
    """
    policy = policy or DEFAULT_PASSWORD_POLICY
    password = password or ""

    score = 0
    score += sum(
        len(password) >= threshold
        for threshold in (policy.min_length, STRONG_LENGTH, VERY_STRONG_LENGTH)
    )
    score += sum(
        bool(pattern.search(password)) for pattern in (_UPPERCASE, _LOWERCASE, _DIGIT, _SYMBOL)
    )
    if password and _longest_run(password) <= policy.max_repeated_chars:
        score += 1
    if password and not _has_sequence(password):
        score += 1
    unique = len(set(password))
    score += (unique >= VARIETY_THRESHOLD) + (unique >= HIGH_VARIETY_THRESHOLD)

    if _is_common(password):
        score = min(score, COMMON_PASSWORD_MAX_SCORE)

    suggestions = []
    if len(password) < STRONG_LENGTH:
        suggestions.append(format_message("password_suggest_longer", locale))
    if not policy.require_symbols and not _SYMBOL.search(password):
        suggestions.append(format_message("password_suggest_symbols", locale))
    if unique < VARIETY_THRESHOLD:
        suggestions.append(format_message("password_suggest_variety", locale))

    return PasswordStrength(
        score=score,
        level=level_for_score(score),
        feedback=tuple(_unmet_requirements(password, policy, None, locale)),
        suggestions=tuple(suggestions),
    )


def _matches(candidate: str, stored: str, matcher: Optional[Callable[[str, str], bool]]) -> bool:
    if matcher is not None:
        return bool(matcher(candidate, stored))
    return hmac.compare_digest(candidate.encode("utf-8"), stored.encode("utf-8"))


def validate_password(
    password: str,
    policy: Optional[PasswordPolicy] = None,
    context: Optional[PasswordValidationContext] = None,
    field: str = "password",
    locale: Optional[str] = None,
) -> PasswordStrength:
    """Enforces the policy and the password history.

    Returns:
        The strength assessment of the accepted password.

    Raises:
        WeakPasswordError: Listing every requirement the password misses.
        PasswordReuseError: If the password matches one of the last
            ``history_count`` entries of ``context.previous_passwords``.
    """
    policy = policy or DEFAULT_PASSWORD_POLICY
    password = password or ""

    unmet = _unmet_requirements(password, policy, context, locale)
    if unmet:
        logger.debug("password_rejected", field=field, unmet_count=len(unmet))
        raise WeakPasswordError(unmet, field=field, locale=locale)

    if context is not None and context.previous_passwords and policy.history_count > 0:
        recent = list(context.previous_passwords)[: policy.history_count]
        if any(_matches(password, stored, context.password_matcher) for stored in recent):
            logger.warning("password_reuse_rejected", history_count=policy.history_count)
            raise PasswordReuseError(policy.history_count, locale=locale)

    return assess_password_strength(password, policy, locale)
