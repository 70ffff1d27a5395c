"""User aggregate and its public profile projection."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from authdomain.utils.clock import as_utc

UserId = str


class UserRole(str, Enum):
    """Represents the role of a user within a tenant (RBAC).

    Attributes:
        SUPER_ADMIN: Operator-level access across tenants.
        ADMIN: Full administrative access to one tenant.
        MANAGER: Manages teams and hiring pipelines.
        INTERVIEWER: Conducts and scores interviews.
        VIEWER: Read-only access.
        CANDIDATE: External participant.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    INTERVIEWER = "interviewer"
    VIEWER = "viewer"
    CANDIDATE = "candidate"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"


class MfaMethod(str, Enum):
    TOTP = "totp"
    SMS = "sms"
    EMAIL = "email"
    BACKUP_CODES = "backup_codes"


@dataclass(frozen=True)
class User:
    """Represents a User entity and acts as an Aggregate Root.

    The record carries the secrets the domain needs to reason about
    (``password_hash``, ``mfa_backup_codes``, lockout counters). Anything
    leaving the trust boundary should be a `UserProfile` instead.
    """

    id: UserId
    first_name: str
    last_name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    phone: Optional[str] = None
    email_verified: bool = False
    email_verified_at: Optional[datetime] = None
    phone_verified: bool = False
    phone_verified_at: Optional[datetime] = None
    status: UserStatus = UserStatus.PENDING
    roles: Tuple[UserRole, ...] = ()
    permissions: Tuple[str, ...] = ()
    mfa_enabled: bool = False
    mfa_method: Optional[MfaMethod] = None
    mfa_backup_codes: Tuple[str, ...] = ()
    failed_login_attempts: int = 0
    locked_until: Optional[datetime] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    github_url: Optional[str] = None
    last_login_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.failed_login_attempts < 0:
            raise ValueError("failed_login_attempts cannot be negative.")
        object.__setattr__(self, "roles", tuple(self.roles))
        object.__setattr__(self, "permissions", tuple(self.permissions))
        object.__setattr__(self, "mfa_backup_codes", tuple(self.mfa_backup_codes))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def has_role(self, role: UserRole) -> bool:
        return role in self.roles

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and as_utc(now) < as_utc(self.locked_until)


@dataclass(frozen=True)
class UserProfile:
    """The user as shown to clients: no credentials, no lockout state."""

    id: UserId
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime
    display_name: str
    initials: str
    phone: Optional[str] = None
    email_verified: bool = False
    email_verified_at: Optional[datetime] = None
    phone_verified: bool = False
    phone_verified_at: Optional[datetime] = None
    status: UserStatus = UserStatus.PENDING
    roles: Tuple[UserRole, ...] = ()
    permissions: Tuple[str, ...] = ()
    mfa_enabled: bool = False
    mfa_method: Optional[MfaMethod] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    github_url: Optional[str] = None
    last_login_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


SENSITIVE_USER_FIELDS = frozenset(
    {"password_hash", "mfa_backup_codes", "failed_login_attempts", "locked_until"}
)


def generate_display_name(first_name: str, last_name: str) -> str:
    return f"{(first_name or '').strip()} {(last_name or '').strip()}".strip()


def generate_initials(first_name: str, last_name: str) -> str:
    first = (first_name or "").strip()[:1]
    last = (last_name or "").strip()[:1]
    return f"{first}{last}".upper()


def to_user_profile(user: User) -> UserProfile:
    """Projects a `User` onto its public `UserProfile`."""
    profile_fields = {f.name for f in fields(UserProfile)}
    values = {
        f.name: getattr(user, f.name)
        for f in fields(User)
        if f.name not in SENSITIVE_USER_FIELDS and f.name in profile_fields
    }
    return UserProfile(
        display_name=generate_display_name(user.first_name, user.last_name),
        initials=generate_initials(user.first_name, user.last_name),
        **values,
    )
