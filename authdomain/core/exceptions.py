"""Centralized, structured exception hierarchy for the authentication domain.

Every error raised or collected by the engine derives from `AuthDomainError`
and carries a machine-readable `code`, an optional `field`, a `metadata`
mapping and a human-readable, translatable `message`.

The hierarchy has three kinds:
- `ValidationError`: user input is syntactically or semantically wrong. Always
  field-scoped and safe to show verbatim to the end user.
- `BusinessRuleError`: input is well-formed but violates a stateful rule
  (e.g. the email is already registered, the tenant is suspended).
- `SecurityViolationError`: the operation trips a security control. Every
  instance is logged when it is created so it reaches the audit trail even if
  the caller forgets to forward it.

Concrete subclasses fix the message, code and field for one condition so that
callers branch on the type instead of matching message strings.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Final, Iterable, Mapping, Optional

import structlog

from authdomain.utils.i18n import format_message

logger = structlog.get_logger(__name__)

__all__: Final = [
    "ErrorKind",
    "AuthDomainError",
    "ValidationError",
    "BusinessRuleError",
    "SecurityViolationError",
    # validation
    "InvalidEmailError",
    "InvalidPhoneNumberError",
    "InvalidIdentifierError",
    "WeakPasswordError",
    "PasswordMismatchError",
    "TermsNotAcceptedError",
    "PrivacyPolicyNotAcceptedError",
    "InvalidNameFormatError",
    "RequiredFieldError",
    "InvalidOtpError",
    "InvalidBackupCodeError",
    "InvalidUrlError",
    "InvalidTenantSlugError",
    "InvalidTenantIdError",
    "SameTenantSwitchError",
    "InvalidProfileFieldError",
    "InvalidOAuthProviderError",
    "InvalidRedirectUrlError",
    "InvalidMfaMethodError",
    "InvalidInvitationTokenError",
    "InvalidRoleSelectionError",
    "InvalidTenantFieldError",
    "SamePasswordError",
    "EmptyProfileUpdateError",
    # business rules
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "InvalidCredentialsError",
    "AccountLockedError",
    "EmailNotVerifiedError",
    "PhoneNotVerifiedError",
    "InvalidVerificationTokenError",
    "VerificationTokenExpiredError",
    "ResetTokenInvalidError",
    "ResetTokenExpiredError",
    "ResetTokenAlreadyUsedError",
    "OtpExpiredError",
    "OtpTooManyAttemptsError",
    "MfaChallengeExpiredError",
    "SessionExpiredError",
    "SessionNotFoundError",
    "TooManyActiveSessionsError",
    "TenantNotFoundError",
    "TenantAccessDeniedError",
    "TenantSuspendedError",
    "TenantInactiveError",
    "TenantSlugTakenError",
    "InvalidTenantStatusTransitionError",
    "InsufficientPermissionsError",
    "InvalidRoleError",
    "FeatureNotAvailableError",
    "SubscriptionLimitExceededError",
    "PasswordReuseError",
    "ExternalServiceError",
    "ConfigurationError",
    # security
    "RateLimitExceededError",
    "SuspiciousActivityError",
    "GeographicRestrictionError",
    "IpAddressBlockedError",
]


class ErrorKind(str, Enum):
    """The three families every domain error belongs to."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    SECURITY_VIOLATION = "security_violation"


def _iso(value: Any) -> str:
    return value.isoformat() if isinstance(value, datetime) else str(value)


class AuthDomainError(Exception):
    """Base exception class for all errors of the authentication domain.

    Attributes:
        message (str): A human-readable, translated error message.
        code (str): A stable, machine-readable error code.
        field (Optional[str]): The form field the error belongs to, if any.
        metadata (Dict[str, Any]): Extra context for logging and clients.
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        code: str,
        field: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.field = field
        self.metadata: Dict[str, Any] = dict(metadata or {})
        Exception.__init__(self, self.message)

    # A concise, structured representation used by loggers & API boundaries.
    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for an API response or an audit record."""
        return {
            "kind": self.kind.value if self.kind else None,
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "metadata": dict(self.metadata),
        }


class ValidationError(AuthDomainError):
    """Raised or collected when user input is wrong.

    Always carries the offending ``field`` and the ``VALIDATION_ERROR`` code.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str, metadata: Optional[Mapping[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", field, metadata)


class BusinessRuleError(AuthDomainError):
    """Raised when well-formed input violates a stateful business rule."""

    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, message: str, code: str, metadata: Optional[Mapping[str, Any]] = None):
        super().__init__(message, code, None, metadata)


class SecurityViolationError(AuthDomainError):
    """Raised when an operation trips a security control.

    These are not meant to be retried silently. The instance logs itself at
    construction so the violation is audited independently of the caller.
    """

    kind = ErrorKind.SECURITY_VIOLATION

    def __init__(self, message: str, code: str, metadata: Optional[Mapping[str, Any]] = None):
        super().__init__(message, code, None, metadata)
        logger.warning(
            "security_violation_raised",
            error_code=self.code,
            error_type=type(self).__name__,
            metadata=self.metadata,
        )


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class InvalidEmailError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("invalid_email", locale), "email")


class InvalidPhoneNumberError(ValidationError):
    def __init__(self, field: str = "phone", locale: Optional[str] = None):
        super().__init__(format_message("invalid_phone_number", locale), field)


class InvalidIdentifierError(ValidationError):
    """The login identifier is neither a valid email nor a valid phone number."""

    def __init__(self, field: str = "identifier", locale: Optional[str] = None):
        super().__init__(format_message("invalid_identifier", locale), field)


class WeakPasswordError(ValidationError):
    """Collects every password requirement that was not met.

    The unmet requirements are kept in ``requirements`` and in
    ``metadata["requirements"]`` so clients can render them as a checklist.
    """

    def __init__(
        self,
        requirements: Iterable[str],
        field: str = "password",
        locale: Optional[str] = None,
    ):
        self.requirements = tuple(requirements)
        super().__init__(
            format_message("weak_password", locale, requirements=", ".join(self.requirements)),
            field,
            {"requirements": list(self.requirements)},
        )


class PasswordMismatchError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("password_mismatch", locale), "confirm_password")


class TermsNotAcceptedError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("terms_not_accepted", locale), "accept_terms")


class PrivacyPolicyNotAcceptedError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("privacy_not_accepted", locale), "accept_privacy")


class InvalidNameFormatError(ValidationError):
    def __init__(self, field: str, locale: Optional[str] = None):
        super().__init__(format_message("invalid_name_format", locale, field=field), field)


class RequiredFieldError(ValidationError):
    def __init__(self, field: str, locale: Optional[str] = None):
        super().__init__(format_message("required_field", locale, field=field), field)


class InvalidOtpError(ValidationError):
    def __init__(self, field: str = "code", locale: Optional[str] = None):
        super().__init__(format_message("invalid_otp", locale), field)


class InvalidBackupCodeError(ValidationError):
    def __init__(self, field: str = "code", locale: Optional[str] = None):
        super().__init__(format_message("invalid_backup_code", locale), field)


class InvalidUrlError(ValidationError):
    def __init__(self, field: str, locale: Optional[str] = None):
        super().__init__(format_message("invalid_url", locale, field=field), field)


class InvalidTenantSlugError(ValidationError):
    def __init__(self, field: str = "tenant_slug", locale: Optional[str] = None):
        super().__init__(format_message("invalid_tenant_slug", locale), field)


class InvalidTenantIdError(ValidationError):
    def __init__(self, field: str = "to_tenant_id", locale: Optional[str] = None):
        super().__init__(format_message("invalid_tenant_id", locale), field)


class SameTenantSwitchError(ValidationError):
    """A tenant switch whose source and target are the same tenant."""

    def __init__(self, tenant_id: str, locale: Optional[str] = None):
        super().__init__(
            format_message("same_tenant_switch", locale),
            "to_tenant_id",
            {"tenant_id": tenant_id},
        )


class InvalidProfileFieldError(ValidationError):
    def __init__(self, field: str, locale: Optional[str] = None):
        super().__init__(format_message("invalid_profile_field", locale, field=field), field)


class InvalidOAuthProviderError(ValidationError):
    def __init__(self, provider: str, locale: Optional[str] = None):
        super().__init__(
            format_message("invalid_oauth_provider", locale, provider=provider),
            "provider",
            {"provider": provider},
        )


class InvalidRedirectUrlError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("invalid_redirect_url", locale), "redirect_to")


class InvalidMfaMethodError(ValidationError):
    def __init__(self, method: str, locale: Optional[str] = None):
        super().__init__(
            format_message("invalid_mfa_method", locale, method=method),
            "method",
            {"method": method},
        )


class InvalidInvitationTokenError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("invalid_invitation_token", locale), "invitation_token")


class InvalidRoleSelectionError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("invalid_role_selection", locale), "selected_role")


class InvalidTenantFieldError(ValidationError):
    def __init__(self, field: str, locale: Optional[str] = None):
        super().__init__(format_message("invalid_tenant_field", locale, field=field), field)


class SamePasswordError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("same_password", locale), "new_password")


class EmptyProfileUpdateError(ValidationError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("empty_profile_update", locale), "profile")


# ---------------------------------------------------------------------------
# Business-rule errors
# ---------------------------------------------------------------------------


class UserNotFoundError(BusinessRuleError):
    def __init__(self, identifier: str, locale: Optional[str] = None):
        super().__init__(
            format_message("user_not_found", locale, identifier=identifier),
            "USER_NOT_FOUND",
        )


class UserAlreadyExistsError(BusinessRuleError):
    def __init__(
        self, identifier: str, identifier_type: str = "email", locale: Optional[str] = None
    ):
        super().__init__(
            format_message(
                "user_already_exists",
                locale,
                identifier=identifier,
                identifier_type=identifier_type,
            ),
            "USER_ALREADY_EXISTS",
            {"identifier_type": identifier_type},
        )


class InvalidCredentialsError(BusinessRuleError):
    """Generic on purpose: never reveals which half of the credentials was wrong."""

    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("invalid_credentials", locale), "INVALID_CREDENTIALS")


class AccountLockedError(BusinessRuleError):
    def __init__(
        self,
        until: Any,
        attempts: Optional[int] = None,
        locale: Optional[str] = None,
    ):
        until_iso = _iso(until)
        metadata: Dict[str, Any] = {"locked_until": until_iso}
        if attempts is not None:
            metadata["failed_attempts"] = attempts
        super().__init__(
            format_message("account_locked", locale, until=until_iso),
            "ACCOUNT_LOCKED",
            metadata,
        )


class EmailNotVerifiedError(BusinessRuleError):
    def __init__(self, email: str, locale: Optional[str] = None):
        super().__init__(
            format_message("email_not_verified", locale, email=email), "EMAIL_NOT_VERIFIED"
        )


class PhoneNotVerifiedError(BusinessRuleError):
    def __init__(self, phone: str, locale: Optional[str] = None):
        super().__init__(
            format_message("phone_not_verified", locale, phone=phone), "PHONE_NOT_VERIFIED"
        )


class InvalidVerificationTokenError(BusinessRuleError):
    def __init__(self, token_type: str = "email", locale: Optional[str] = None):
        super().__init__(
            format_message("invalid_verification_token", locale, token_type=token_type),
            "INVALID_VERIFICATION_TOKEN",
        )


class VerificationTokenExpiredError(BusinessRuleError):
    def __init__(self, token_type: str = "email", locale: Optional[str] = None):
        super().__init__(
            format_message("verification_token_expired", locale, token_type=token_type),
            "VERIFICATION_TOKEN_EXPIRED",
        )


class ResetTokenInvalidError(BusinessRuleError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("reset_token_invalid", locale), "INVALID_RESET_TOKEN")


class ResetTokenExpiredError(BusinessRuleError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("reset_token_expired", locale), "RESET_TOKEN_EXPIRED")


class ResetTokenAlreadyUsedError(BusinessRuleError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(
            format_message("reset_token_already_used", locale), "RESET_TOKEN_ALREADY_USED"
        )


class OtpExpiredError(BusinessRuleError):
    def __init__(self, locale: Optional[str] = None):
        super().__init__(format_message("otp_expired", locale), "OTP_EXPIRED")


class OtpTooManyAttemptsError(BusinessRuleError):
    def __init__(self, max_attempts: int, locale: Optional[str] = None):
        super().__init__(
            format_message("otp_too_many_attempts", locale, max_attempts=max_attempts),
            "OTP_TOO_MANY_ATTEMPTS",
            {"max_attempts": max_attempts},
        )


class MfaChallengeExpiredError(BusinessRuleError):
    def __init__(self, challenge_id: Optional[str] = None, locale: Optional[str] = None):
        super().__init__(
            format_message("mfa_challenge_expired", locale),
            "MFA_CHALLENGE_EXPIRED",
            {"challenge_id": challenge_id} if challenge_id else None,
        )


class SessionExpiredError(BusinessRuleError):
    def __init__(self, session_id: Optional[str] = None, locale: Optional[str] = None):
        super().__init__(
            format_message("session_expired", locale),
            "SESSION_EXPIRED",
            {"session_id": session_id} if session_id else None,
        )


class SessionNotFoundError(BusinessRuleError):
    def __init__(self, session_id: str, locale: Optional[str] = None):
        super().__init__(
            format_message("session_not_found", locale, session_id=session_id),
            "SESSION_NOT_FOUND",
        )


class TooManyActiveSessionsError(BusinessRuleError):
    def __init__(self, max_sessions: int, current_sessions: int, locale: Optional[str] = None):
        super().__init__(
            format_message(
                "too_many_active_sessions", locale, current=current_sessions, maximum=max_sessions
            ),
            "TOO_MANY_ACTIVE_SESSIONS",
            {"max_sessions": max_sessions, "current_sessions": current_sessions},
        )


class TenantNotFoundError(BusinessRuleError):
    def __init__(self, identifier: str, locale: Optional[str] = None):
        super().__init__(
            format_message("tenant_not_found", locale, identifier=identifier),
            "TENANT_NOT_FOUND",
        )


class TenantAccessDeniedError(BusinessRuleError):
    def __init__(self, tenant_id: str, user_id: Optional[str] = None, locale: Optional[str] = None):
        super().__init__(
            format_message("tenant_access_denied", locale, tenant_id=tenant_id),
            "TENANT_ACCESS_DENIED",
            {"tenant_id": tenant_id, "user_id": user_id},
        )


class TenantSuspendedError(BusinessRuleError):
    def __init__(self, tenant_id: str, locale: Optional[str] = None):
        super().__init__(
            format_message("tenant_suspended", locale, tenant_id=tenant_id),
            "TENANT_SUSPENDED",
            {"tenant_id": tenant_id},
        )


class TenantInactiveError(BusinessRuleError):
    def __init__(self, tenant_id: str, locale: Optional[str] = None):
        super().__init__(
            format_message("tenant_inactive", locale, tenant_id=tenant_id),
            "TENANT_INACTIVE",
            {"tenant_id": tenant_id},
        )


class TenantSlugTakenError(BusinessRuleError):
    def __init__(self, slug: str, locale: Optional[str] = None):
        super().__init__(
            format_message("tenant_slug_taken", locale, slug=slug),
            "TENANT_SLUG_TAKEN",
            {"slug": slug},
        )


class InvalidTenantStatusTransitionError(BusinessRuleError):
    def __init__(self, current: str, target: str, locale: Optional[str] = None):
        super().__init__(
            format_message(
                "invalid_tenant_status_transition", locale, current=current, target=target
            ),
            "INVALID_TENANT_STATUS_TRANSITION",
            {"current": current, "target": target},
        )


class InsufficientPermissionsError(BusinessRuleError):
    def __init__(
        self,
        action: str,
        required_permissions: Optional[Iterable[str]] = None,
        locale: Optional[str] = None,
    ):
        super().__init__(
            format_message("insufficient_permissions", locale, action=action),
            "INSUFFICIENT_PERMISSIONS",
            {"required_permissions": list(required_permissions or [])},
        )


class InvalidRoleError(BusinessRuleError):
    def __init__(
        self,
        role: str,
        available_roles: Optional[Iterable[str]] = None,
        locale: Optional[str] = None,
    ):
        super().__init__(
            format_message("invalid_role", locale, role=role),
            "INVALID_ROLE",
            {"available_roles": list(available_roles or [])},
        )


class FeatureNotAvailableError(BusinessRuleError):
    def __init__(self, feature: str, plan: Optional[str] = None, locale: Optional[str] = None):
        super().__init__(
            format_message("feature_not_available", locale, feature=feature),
            "FEATURE_NOT_AVAILABLE",
            {"feature": feature, "plan": plan},
        )


class SubscriptionLimitExceededError(BusinessRuleError):
    def __init__(
        self,
        resource: str,
        current_usage: int,
        limit: int,
        plan: Optional[str] = None,
        locale: Optional[str] = None,
    ):
        super().__init__(
            format_message(
                "subscription_limit_exceeded",
                locale,
                resource=resource,
                current_usage=current_usage,
                limit=limit,
            ),
            "SUBSCRIPTION_LIMIT_EXCEEDED",
            {"resource": resource, "current_usage": current_usage, "limit": limit, "plan": plan},
        )


class PasswordReuseError(BusinessRuleError):
    """The new password matches one of the user's most recent passwords."""

    def __init__(self, history_count: int, locale: Optional[str] = None):
        super().__init__(
            format_message("password_reuse", locale, history_count=history_count),
            "PASSWORD_REUSE",
            {"history_count": history_count},
        )


class ExternalServiceError(BusinessRuleError):
    def __init__(self, service: str, operation: str, error: str, locale: Optional[str] = None):
        super().__init__(
            format_message(
                "external_service_error", locale, service=service, operation=operation, error=error
            ),
            "EXTERNAL_SERVICE_ERROR",
            {"service": service, "operation": operation},
        )


class ConfigurationError(BusinessRuleError):
    def __init__(self, config_key: str, issue: str, locale: Optional[str] = None):
        super().__init__(
            format_message("configuration_error", locale, config_key=config_key, issue=issue),
            "CONFIGURATION_ERROR",
            {"config_key": config_key},
        )


# ---------------------------------------------------------------------------
# Security violations
# ---------------------------------------------------------------------------


class RateLimitExceededError(SecurityViolationError):
    def __init__(self, operation: str, limit: int, reset_time: Any, locale: Optional[str] = None):
        reset_iso = _iso(reset_time)
        super().__init__(
            format_message(
                "rate_limit_exceeded",
                locale,
                operation=operation,
                limit=limit,
                reset_time=reset_iso,
            ),
            "RATE_LIMIT_EXCEEDED",
            {"operation": operation, "limit": limit, "reset_time": reset_iso},
        )


class SuspiciousActivityError(SecurityViolationError):
    def __init__(
        self,
        activity_type: str,
        details: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ):
        super().__init__(
            format_message("suspicious_activity", locale, activity_type=activity_type),
            "SUSPICIOUS_ACTIVITY",
            details,
        )


class GeographicRestrictionError(SecurityViolationError):
    def __init__(
        self,
        country: str,
        allowed_countries: Optional[Iterable[str]] = None,
        locale: Optional[str] = None,
    ):
        super().__init__(
            format_message("geographic_restriction", locale, country=country),
            "GEOGRAPHIC_RESTRICTION",
            {"country": country, "allowed_countries": sorted(allowed_countries or [])},
        )


class IpAddressBlockedError(SecurityViolationError):
    def __init__(self, ip_address: str, locale: Optional[str] = None):
        super().__init__(
            format_message("ip_address_blocked", locale),
            "IP_ADDRESS_BLOCKED",
            {"ip_address": ip_address},
        )
