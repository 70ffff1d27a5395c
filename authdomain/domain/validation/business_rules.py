"""Business-rule validators over caller-owned state.

Counters, limits and clocks are always arguments: the engine never counts or
stores anything. Each validator returns ``ValidationResult.valid()`` when the
operation is allowed and raises the specific business or security error
otherwise. Thresholds are inclusive: reaching a limit is already a violation.
"""

from datetime import datetime
from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple

import structlog

from authdomain.core.config.settings import settings
from authdomain.core.exceptions import (
    AccountLockedError,
    FeatureNotAvailableError,
    GeographicRestrictionError,
    InvalidTenantStatusTransitionError,
    IpAddressBlockedError,
    MfaChallengeExpiredError,
    OtpTooManyAttemptsError,
    RateLimitExceededError,
    SessionExpiredError,
    SubscriptionLimitExceededError,
    TenantInactiveError,
    TenantSuspendedError,
    TooManyActiveSessionsError,
)
from authdomain.domain.entities.session import MfaChallenge, Session
from authdomain.domain.entities.tenant import Tenant, TenantStatus
from authdomain.domain.validation.result import ValidationResult
from authdomain.utils.clock import as_utc, utc_now

logger = structlog.get_logger(__name__)

ALLOWED_TENANT_STATUS_TRANSITIONS: Dict[TenantStatus, FrozenSet[TenantStatus]] = {
    TenantStatus.TRIAL: frozenset(
        {TenantStatus.ACTIVE, TenantStatus.INACTIVE, TenantStatus.SUSPENDED}
    ),
    TenantStatus.ACTIVE: frozenset({TenantStatus.SUSPENDED, TenantStatus.INACTIVE}),
    TenantStatus.SUSPENDED: frozenset({TenantStatus.ACTIVE}),
    TenantStatus.INACTIVE: frozenset({TenantStatus.ACTIVE}),
}


def _plan_name(plan) -> Optional[str]:
    return getattr(plan, "value", plan)


def validate_feature_access(
    feature: str, enabled_features: Iterable[str], plan=None
) -> ValidationResult:
    """Raises ``FeatureNotAvailableError`` unless ``feature`` is enabled."""
    if feature not in set(enabled_features):
        logger.info("feature_access_denied", feature=feature, plan=_plan_name(plan))
        raise FeatureNotAvailableError(feature, _plan_name(plan))
    return ValidationResult.valid()


def validate_usage_limit(
    resource: str, current_usage: int, max_allowed: Optional[int], plan=None
) -> ValidationResult:
    """Raises ``SubscriptionLimitExceededError`` once usage reaches the quota.

    ``max_allowed=None`` means the resource is unlimited.
    """
    if max_allowed is not None and current_usage >= max_allowed:
        logger.info(
            "usage_limit_reached",
            resource=resource,
            current_usage=current_usage,
            limit=max_allowed,
        )
        raise SubscriptionLimitExceededError(
            resource, current_usage, max_allowed, _plan_name(plan)
        )
    return ValidationResult.valid()


def validate_session_limits(
    active_sessions: int, max_sessions: Optional[int] = None
) -> ValidationResult:
    limit = settings.MAX_ACTIVE_SESSIONS if max_sessions is None else max_sessions
    if active_sessions >= limit:
        logger.info("session_limit_reached", active_sessions=active_sessions, limit=limit)
        raise TooManyActiveSessionsError(limit, active_sessions)
    return ValidationResult.valid()


def validate_rate_limit(
    operation: str,
    current_count: int,
    limit: int,
    reset_time: datetime,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Raises ``RateLimitExceededError`` when the current window is used up.

    Once ``now`` reaches ``reset_time`` the window has rolled over and the
    caller's count no longer applies.
    """
    now = as_utc(now or utc_now())
    if now < as_utc(reset_time) and current_count >= limit:
        raise RateLimitExceededError(operation, limit, reset_time)
    return ValidationResult.valid()


def validate_geographic_access(
    country: str,
    allowed_countries: Optional[Iterable[str]] = None,
    blocked_countries: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """Blocklist first, then the allowlist when one is configured."""
    code = (country or "").upper()
    blocked: Set[str] = {c.upper() for c in blocked_countries or ()}
    allowed: Optional[Set[str]] = (
        {c.upper() for c in allowed_countries} if allowed_countries is not None else None
    )
    if code in blocked or (allowed is not None and code not in allowed):
        raise GeographicRestrictionError(code, allowed)
    return ValidationResult.valid()


def validate_ip_address_allowed(
    ip_address: str, blocked_addresses: Iterable[str]
) -> ValidationResult:
    if ip_address.strip() in {address.strip() for address in blocked_addresses}:
        raise IpAddressBlockedError(ip_address)
    return ValidationResult.valid()


def validate_account_not_locked(
    locked_until: Optional[datetime], now: datetime, failed_attempts: Optional[int] = None
) -> ValidationResult:
    if locked_until is not None and as_utc(now) < as_utc(locked_until):
        logger.info("locked_account_rejected", locked_until=locked_until.isoformat())
        raise AccountLockedError(locked_until, failed_attempts)
    return ValidationResult.valid()


def validate_tenant_access(tenant: Tenant) -> ValidationResult:
    """Only active and trial tenants can be used."""
    if tenant.status is TenantStatus.SUSPENDED:
        logger.info("suspended_tenant_rejected", tenant_id=tenant.id)
        raise TenantSuspendedError(tenant.id)
    if tenant.status is TenantStatus.INACTIVE:
        logger.info("inactive_tenant_rejected", tenant_id=tenant.id)
        raise TenantInactiveError(tenant.id)
    return ValidationResult.valid()


def allowed_tenant_transitions(current: TenantStatus) -> Tuple[TenantStatus, ...]:
    return tuple(sorted(ALLOWED_TENANT_STATUS_TRANSITIONS[TenantStatus(current)]))


def validate_tenant_status_transition(current, target) -> ValidationResult:
    """Accepts ``TenantStatus`` members or their string values."""
    current_status, target_status = TenantStatus(current), TenantStatus(target)
    if target_status not in ALLOWED_TENANT_STATUS_TRANSITIONS[current_status]:
        raise InvalidTenantStatusTransitionError(current_status.value, target_status.value)
    return ValidationResult.valid()


def validate_session_active(session: Session, now: datetime) -> ValidationResult:
    if session.is_expired(now):
        raise SessionExpiredError(session.id)
    return ValidationResult.valid()


def validate_mfa_challenge(challenge: MfaChallenge, now: datetime) -> ValidationResult:
    """Expiry is checked before exhaustion."""
    if challenge.is_expired(now):
        raise MfaChallengeExpiredError(challenge.id)
    if challenge.is_exhausted:
        raise OtpTooManyAttemptsError(challenge.max_attempts)
    return ValidationResult.valid()
