"""Session and MFA challenge entities.

Neither entity stores derived state such as "expired": expiry is always
computed against the caller's clock.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from authdomain.core.exceptions import OtpTooManyAttemptsError
from authdomain.domain.entities.user import MfaMethod, UserId
from authdomain.utils.clock import as_utc

SessionId = str
ChallengeId = str


class DeviceType(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"
    TABLET = "tablet"


@dataclass(frozen=True)
class DeviceInfo:
    type: DeviceType
    name: str
    os: str
    browser: str
    fingerprint: Optional[str] = None


@dataclass(frozen=True)
class SessionLocation:
    country: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """An authenticated session of a user, optionally scoped to a tenant.

    Raises:
        ValueError: If ``expires_at`` is not strictly after ``created_at``.
    """

    id: SessionId
    user_id: UserId
    expires_at: datetime
    device: DeviceInfo
    ip_address: str
    user_agent: str
    created_at: datetime
    last_activity: datetime
    tenant_id: Optional[str] = None
    location: Optional[SessionLocation] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if as_utc(self.expires_at) <= as_utc(self.created_at):
            raise ValueError("Session expires_at must be after created_at.")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) >= as_utc(self.expires_at)

    def remaining(self, now: datetime) -> timedelta:
        """Time left before expiry, never negative."""
        return max(as_utc(self.expires_at) - as_utc(now), timedelta(0))

    def touch(self, now: datetime) -> "Session":
        """Returns a copy with ``last_activity`` moved to ``now``."""
        return replace(self, last_activity=now)


@dataclass(frozen=True)
class MfaChallenge:
    """A short-lived, attempt-limited request for a second factor.

    Once ``attempts`` reaches ``max_attempts`` the challenge is terminal: it is
    never reset, the caller issues a new one.

    Raises:
        ValueError: If ``attempts`` is outside ``0..max_attempts``.
    """

    id: ChallengeId
    user_id: UserId
    method: MfaMethod
    expires_at: datetime
    created_at: datetime
    max_attempts: int
    attempts: int = 0
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("MFA challenge max_attempts must be at least 1.")
        if not 0 <= self.attempts <= self.max_attempts:
            raise ValueError(
                f"MFA challenge attempts must be between 0 and {self.max_attempts}."
            )
        if as_utc(self.expires_at) <= as_utc(self.created_at):
            raise ValueError("MFA challenge expires_at must be after created_at.")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def is_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    @property
    def attempts_remaining(self) -> int:
        return self.max_attempts - self.attempts

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) >= as_utc(self.expires_at)

    def record_attempt(self) -> "MfaChallenge":
        """Returns a new challenge with one more attempt consumed.

        Raises:
            OtpTooManyAttemptsError: If the challenge is already exhausted.
        """
        if self.is_exhausted:
            raise OtpTooManyAttemptsError(self.max_attempts)
        return replace(self, attempts=self.attempts + 1)
