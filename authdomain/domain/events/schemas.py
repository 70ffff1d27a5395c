"""The closed set of authentication event types and their payload schemas.

Every ``AuthEventType`` has exactly one ``EventSchema``. The schema names the
payload fields an event must carry, the fields it may carry, and the closed
set of values allowed for enumerated fields. ``timestamp`` and ``metadata``
are not part of any schema: the event factory always injects them.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional

from authdomain.domain.entities.oauth import LoginMethod
from authdomain.domain.entities.session import DeviceType
from authdomain.domain.entities.user import MfaMethod


class AuthEventType(str, Enum):
    # registration
    USER_REGISTRATION_STARTED = "UserRegistrationStarted"
    USER_REGISTERED = "UserRegistered"
    USER_REGISTRATION_FAILED = "UserRegistrationFailed"
    # verification
    EMAIL_VERIFICATION_REQUESTED = "EmailVerificationRequested"
    EMAIL_VERIFIED = "EmailVerified"
    EMAIL_VERIFICATION_FAILED = "EmailVerificationFailed"
    PHONE_VERIFICATION_REQUESTED = "PhoneVerificationRequested"
    PHONE_VERIFIED = "PhoneVerified"
    PHONE_VERIFICATION_FAILED = "PhoneVerificationFailed"
    VERIFICATION_OTP_SENT = "VerificationOtpSent"
    # login
    LOGIN_ATTEMPTED = "LoginAttempted"
    USER_LOGGED_IN = "UserLoggedIn"
    LOGIN_FAILED = "LoginFailed"
    USER_LOGGED_OUT = "UserLoggedOut"
    # session
    SESSION_CREATED = "SessionCreated"
    SESSION_REFRESHED = "SessionRefreshed"
    SESSION_EXPIRED = "SessionExpired"
    SESSION_REVOKED = "SessionRevoked"
    # password
    PASSWORD_RESET_REQUESTED = "PasswordResetRequested"
    PASSWORD_RESET_COMPLETED = "PasswordResetCompleted"
    PASSWORD_RESET_FAILED = "PasswordResetFailed"
    PASSWORD_CHANGED = "PasswordChanged"
    # mfa
    MFA_SETUP_STARTED = "MfaSetupStarted"
    MFA_ENABLED = "MfaEnabled"
    MFA_DISABLED = "MfaDisabled"
    MFA_CHALLENGE_CREATED = "MfaChallengeCreated"
    MFA_CHALLENGE_VERIFIED = "MfaChallengeVerified"
    MFA_CHALLENGE_FAILED = "MfaChallengeFailed"
    MFA_BACKUP_CODE_USED = "MfaBackupCodeUsed"
    # tenant
    TENANT_CREATED = "TenantCreated"
    TENANT_CONTEXT_SWITCHED = "TenantContextSwitched"
    TENANT_ACCESS_DENIED = "TenantAccessDenied"
    TENANT_SUSPENDED = "TenantSuspended"
    TENANT_ACTIVATED = "TenantActivated"
    # user account
    USER_PROFILE_UPDATED = "UserProfileUpdated"
    USER_ACCOUNT_SUSPENDED = "UserAccountSuspended"
    USER_ACCOUNT_ACTIVATED = "UserAccountActivated"
    USER_ACCOUNT_LOCKED = "UserAccountLocked"
    USER_ACCOUNT_UNLOCKED = "UserAccountUnlocked"
    # oauth
    OAUTH_LOGIN_STARTED = "OAuthLoginStarted"
    OAUTH_LOGIN_COMPLETED = "OAuthLoginCompleted"
    OAUTH_LOGIN_FAILED = "OAuthLoginFailed"
    OAUTH_ACCOUNT_LINKED = "OAuthAccountLinked"
    OAUTH_ACCOUNT_UNLINKED = "OAuthAccountUnlinked"
    # invitation
    INVITATION_SENT = "InvitationSent"
    INVITATION_ACCEPTED = "InvitationAccepted"
    INVITATION_DECLINED = "InvitationDeclined"
    INVITATION_EXPIRED = "InvitationExpired"
    # security
    SUSPICIOUS_ACTIVITY_DETECTED = "SuspiciousActivityDetected"
    GEOGRAPHIC_RESTRICTION_VIOLATED = "GeographicRestrictionViolated"
    RATE_LIMIT_EXCEEDED = "RateLimitExceeded"
    DEVICE_NOT_RECOGNIZED = "DeviceNotRecognized"
    IP_ADDRESS_BLOCKED = "IpAddressBlocked"
    SECURITY_VIOLATION = "SecurityViolation"
    # analytics
    FEATURE_ACCESSED = "FeatureAccessed"
    SUBSCRIPTION_LIMIT_EXCEEDED = "SubscriptionLimitExceeded"
    USER_ACTIVITY_TRACKED = "UserActivityTracked"


class EventSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EventCategory(str, Enum):
    REGISTRATION = "registration"
    VERIFICATION = "verification"
    LOGIN = "login"
    SESSION = "session"
    PASSWORD = "password"
    MFA = "mfa"
    TENANT = "tenant"
    USER_ACCOUNT = "user_account"
    OAUTH = "oauth"
    INVITATION = "invitation"
    SECURITY = "security"
    ANALYTICS = "analytics"


RESERVED_PAYLOAD_FIELDS: FrozenSet[str] = frozenset({"timestamp", "metadata"})


@dataclass(frozen=True)
class EventSchema:
    category: EventCategory
    required: FrozenSet[str]
    optional: FrozenSet[str] = frozenset()
    choices: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    @property
    def fields(self) -> FrozenSet[str]:
        return self.required | self.optional


def _values(enum_cls) -> FrozenSet[str]:
    return frozenset(member.value for member in enum_cls)


def _schema(
    category: EventCategory,
    required: Iterable[str],
    optional: Iterable[str] = (),
    choices: Optional[Mapping[str, Iterable[str]]] = None,
) -> EventSchema:
    return EventSchema(
        category=category,
        required=frozenset(required),
        optional=frozenset(optional),
        choices=MappingProxyType({k: frozenset(v) for k, v in (choices or {}).items()}),
    )


LOGIN_METHODS = _values(LoginMethod)
MFA_METHODS = _values(MfaMethod)
DEVICE_TYPES = _values(DeviceType)
SEVERITIES = _values(EventSeverity)
PASSWORD_STRENGTHS = frozenset({"weak", "fair", "good", "strong", "excellent"})

_C = EventCategory
_T = AuthEventType

_SCHEMAS = {
    _T.USER_REGISTRATION_STARTED: _schema(
        _C.REGISTRATION, (), ("email", "tenant_id", "invitation_id")
    ),
    _T.USER_REGISTERED: _schema(
        _C.REGISTRATION,
        ("user_id", "email", "registration_method", "requires_email_verification",
         "requires_phone_verification"),
        ("phone_number", "tenant_id", "invitation_id"),
        {"registration_method": ("email", "invitation", "oauth")},
    ),
    _T.USER_REGISTRATION_FAILED: _schema(
        _C.REGISTRATION, ("failure_reason", "error_code"), ("email", "tenant_id")
    ),
    _T.EMAIL_VERIFICATION_REQUESTED: _schema(
        _C.VERIFICATION,
        ("user_id", "email", "request_source", "expires_at"),
        ("tenant_id",),
        {"request_source": ("registration", "profile_update", "manual_request")},
    ),
    _T.EMAIL_VERIFIED: _schema(
        _C.VERIFICATION,
        ("user_id", "email", "verification_method"),
        ("tenant_id",),
        {"verification_method": ("token", "otp")},
    ),
    _T.EMAIL_VERIFICATION_FAILED: _schema(
        _C.VERIFICATION,
        ("email", "failure_reason"),
        ("user_id", "tenant_id", "attempts_remaining"),
        {"failure_reason": ("invalid_token", "expired_token", "too_many_attempts",
                            "user_not_found")},
    ),
    _T.PHONE_VERIFICATION_REQUESTED: _schema(
        _C.VERIFICATION,
        ("user_id", "phone_number", "request_source", "delivery_method", "expires_at"),
        ("tenant_id",),
        {
            "request_source": ("registration", "profile_update", "mfa_setup", "manual_request"),
            "delivery_method": ("sms", "voice"),
        },
    ),
    _T.PHONE_VERIFIED: _schema(
        _C.VERIFICATION,
        ("user_id", "phone_number", "verification_method"),
        ("tenant_id",),
        {"verification_method": ("sms", "voice")},
    ),
    _T.PHONE_VERIFICATION_FAILED: _schema(
        _C.VERIFICATION,
        ("phone_number", "failure_reason"),
        ("user_id", "tenant_id", "attempts_remaining"),
        {"failure_reason": ("invalid_code", "expired_code", "too_many_attempts",
                            "delivery_failed")},
    ),
    _T.VERIFICATION_OTP_SENT: _schema(
        _C.VERIFICATION,
        ("identifier", "channel", "purpose", "expires_at", "delivery_status"),
        ("user_id",),
        {
            "channel": ("email", "sms", "voice"),
            "purpose": ("email_verification", "phone_verification", "password_reset",
                        "mfa_challenge"),
            "delivery_status": ("sent", "failed", "pending"),
        },
    ),
    _T.LOGIN_ATTEMPTED: _schema(
        _C.LOGIN, ("identifier", "method"), ("tenant_id",), {"method": LOGIN_METHODS}
    ),
    _T.USER_LOGGED_IN: _schema(
        _C.LOGIN,
        ("user_id", "session_id", "method", "mfa_required", "remember_me",
         "consecutive_failed_attempts"),
        ("tenant_id", "last_login_at"),
        {"method": LOGIN_METHODS},
    ),
    _T.LOGIN_FAILED: _schema(
        _C.LOGIN,
        ("identifier", "method", "failure_reason", "consecutive_failed_attempts",
         "account_locked"),
        ("user_id", "tenant_id", "lock_until"),
        {
            "method": LOGIN_METHODS,
            "failure_reason": ("invalid_credentials", "account_locked", "account_suspended",
                               "email_not_verified", "mfa_required", "tenant_suspended"),
        },
    ),
    _T.USER_LOGGED_OUT: _schema(
        _C.LOGIN,
        ("user_id", "session_id", "logout_reason", "session_duration"),
        ("tenant_id",),
        {"logout_reason": ("user_initiated", "session_expired", "admin_forced",
                           "security_violation", "device_removed")},
    ),
    _T.SESSION_CREATED: _schema(
        _C.SESSION,
        ("user_id", "session_id", "expires_at", "max_idle_time", "device_trusted"),
        ("tenant_id",),
    ),
    _T.SESSION_REFRESHED: _schema(
        _C.SESSION,
        ("user_id", "session_id", "previous_expires_at", "new_expires_at", "refresh_reason"),
        ("tenant_id",),
        {"refresh_reason": ("user_activity", "api_call", "page_navigation",
                            "background_activity", "scheduled_refresh")},
    ),
    _T.SESSION_EXPIRED: _schema(
        _C.SESSION,
        ("user_id", "session_id", "expiration_reason", "session_duration", "last_activity_at"),
        ("tenant_id",),
        {"expiration_reason": ("max_lifetime_reached", "idle_timeout", "security_policy",
                               "scheduled_expiration", "system_maintenance")},
    ),
    _T.SESSION_REVOKED: _schema(
        _C.SESSION,
        ("user_id", "session_id", "revoked_by", "revocation_reason", "session_duration"),
        ("tenant_id", "threat_level"),
        {
            "revocation_reason": ("security_threat", "admin_action", "account_compromised",
                                  "policy_violation", "device_lost", "suspicious_activity"),
            "threat_level": SEVERITIES,
        },
    ),
    _T.PASSWORD_RESET_REQUESTED: _schema(
        _C.PASSWORD,
        ("identifier", "request_source", "expires_at", "delivery_method"),
        ("user_id", "tenant_id"),
        {
            "request_source": ("forgot_password", "admin_action", "security_policy"),
            "delivery_method": ("email", "sms"),
        },
    ),
    _T.PASSWORD_RESET_COMPLETED: _schema(
        _C.PASSWORD,
        ("user_id", "reset_method", "password_strength"),
        ("tenant_id",),
        {"reset_method": ("token", "admin_action"), "password_strength": PASSWORD_STRENGTHS},
    ),
    _T.PASSWORD_RESET_FAILED: _schema(
        _C.PASSWORD,
        ("identifier", "failure_reason"),
        ("user_id", "tenant_id"),
        {"failure_reason": ("invalid_token", "expired_token", "user_not_found",
                            "weak_password", "password_reuse")},
    ),
    _T.PASSWORD_CHANGED: _schema(
        _C.PASSWORD,
        ("user_id", "change_reason", "password_strength"),
        ("tenant_id",),
        {
            "change_reason": ("user_initiated", "security_policy", "admin_action",
                              "password_expired"),
            "password_strength": PASSWORD_STRENGTHS,
        },
    ),
    _T.MFA_SETUP_STARTED: _schema(
        _C.MFA,
        ("user_id", "method", "setup_reason"),
        ("tenant_id",),
        {"method": MFA_METHODS,
         "setup_reason": ("user_initiated", "security_policy", "admin_required")},
    ),
    _T.MFA_ENABLED: _schema(
        _C.MFA, ("user_id", "method", "backup_codes_generated"), ("tenant_id",),
        {"method": MFA_METHODS},
    ),
    _T.MFA_DISABLED: _schema(
        _C.MFA,
        ("user_id", "method", "disabled_reason"),
        ("tenant_id", "disabled_by"),
        {"method": MFA_METHODS,
         "disabled_reason": ("user_request", "admin_action", "security_violation")},
    ),
    _T.MFA_CHALLENGE_CREATED: _schema(
        _C.MFA,
        ("user_id", "challenge_id", "method", "expires_at", "max_attempts"),
        ("tenant_id",),
        {"method": MFA_METHODS},
    ),
    _T.MFA_CHALLENGE_VERIFIED: _schema(
        _C.MFA,
        ("user_id", "challenge_id", "method", "is_backup_code", "attempt_number"),
        ("tenant_id",),
        {"method": MFA_METHODS},
    ),
    _T.MFA_CHALLENGE_FAILED: _schema(
        _C.MFA,
        ("user_id", "challenge_id", "method", "failure_reason", "attempt_number",
         "attempts_remaining"),
        ("tenant_id",),
        {"method": MFA_METHODS,
         "failure_reason": ("invalid_code", "expired_challenge", "max_attempts_exceeded")},
    ),
    _T.MFA_BACKUP_CODE_USED: _schema(_C.MFA, ("user_id", "codes_remaining"), ("tenant_id",)),
    _T.TENANT_CREATED: _schema(
        _C.TENANT, ("tenant_id", "name", "slug", "plan", "created_by")
    ),
    _T.TENANT_CONTEXT_SWITCHED: _schema(
        _C.TENANT, ("user_id", "session_id", "to_tenant_id"), ("from_tenant_id",)
    ),
    _T.TENANT_ACCESS_DENIED: _schema(
        _C.TENANT,
        ("user_id", "tenant_id", "denial_reason"),
        (),
        {"denial_reason": ("insufficient_permissions", "tenant_suspended", "user_not_member",
                           "subscription_expired")},
    ),
    _T.TENANT_SUSPENDED: _schema(
        _C.TENANT,
        ("tenant_id", "suspension_reason"),
        ("suspended_by", "suspended_until"),
        {"suspension_reason": ("payment_failed", "policy_violation", "admin_action",
                               "security_violation")},
    ),
    _T.TENANT_ACTIVATED: _schema(
        _C.TENANT,
        ("tenant_id", "activation_reason"),
        ("activated_by",),
        {"activation_reason": ("payment_resolved", "suspension_lifted", "admin_action")},
    ),
    _T.USER_PROFILE_UPDATED: _schema(
        _C.USER_ACCOUNT, ("user_id", "updated_fields", "updated_by"), ("tenant_id",)
    ),
    _T.USER_ACCOUNT_SUSPENDED: _schema(
        _C.USER_ACCOUNT,
        ("user_id", "suspension_reason", "suspended_by"),
        ("tenant_id", "suspended_until"),
        {"suspension_reason": ("policy_violation", "security_violation", "admin_action",
                               "suspicious_activity")},
    ),
    _T.USER_ACCOUNT_ACTIVATED: _schema(
        _C.USER_ACCOUNT,
        ("user_id", "activation_reason"),
        ("tenant_id", "activated_by"),
        {"activation_reason": ("suspension_lifted", "verification_completed", "admin_action")},
    ),
    _T.USER_ACCOUNT_LOCKED: _schema(
        _C.USER_ACCOUNT,
        ("user_id", "lock_reason", "locked_until"),
        ("tenant_id", "failed_attempts"),
        {"lock_reason": ("failed_login_attempts", "suspicious_activity", "security_policy",
                         "admin_action")},
    ),
    _T.USER_ACCOUNT_UNLOCKED: _schema(
        _C.USER_ACCOUNT,
        ("user_id", "unlock_reason"),
        ("tenant_id", "unlocked_by"),
        {"unlock_reason": ("timeout_expired", "admin_action", "successful_verification")},
    ),
    _T.OAUTH_LOGIN_STARTED: _schema(_C.OAUTH, ("provider",), ("tenant_id", "redirect_url")),
    _T.OAUTH_LOGIN_COMPLETED: _schema(
        _C.OAUTH, ("user_id", "provider", "is_new_user", "account_linked"), ("tenant_id",)
    ),
    _T.OAUTH_LOGIN_FAILED: _schema(
        _C.OAUTH,
        ("provider", "failure_reason"),
        ("tenant_id", "error_code"),
        {"failure_reason": ("provider_error", "user_denied", "invalid_state",
                            "account_conflict", "provider_disabled")},
    ),
    _T.OAUTH_ACCOUNT_LINKED: _schema(
        _C.OAUTH, ("user_id", "provider", "provider_user_id"), ("tenant_id",)
    ),
    _T.OAUTH_ACCOUNT_UNLINKED: _schema(
        _C.OAUTH,
        ("user_id", "provider", "unlink_reason"),
        ("tenant_id", "unlinked_by"),
        {"unlink_reason": ("user_request", "admin_action", "security_violation")},
    ),
    _T.INVITATION_SENT: _schema(
        _C.INVITATION,
        ("invitation_id", "tenant_id", "invited_email", "invited_by", "role", "expires_at"),
    ),
    _T.INVITATION_ACCEPTED: _schema(
        _C.INVITATION,
        ("invitation_id", "tenant_id", "user_id", "accepted_email", "assigned_role",
         "is_new_user"),
    ),
    _T.INVITATION_DECLINED: _schema(
        _C.INVITATION, ("invitation_id", "tenant_id", "declined_email")
    ),
    _T.INVITATION_EXPIRED: _schema(
        _C.INVITATION, ("invitation_id", "tenant_id", "expired_email", "invited_by")
    ),
    _T.SUSPICIOUS_ACTIVITY_DETECTED: _schema(
        _C.SECURITY,
        ("activity_type", "severity", "risk_score", "details"),
        ("user_id", "tenant_id"),
        {
            "activity_type": ("unusual_login_pattern", "multiple_failed_attempts",
                              "impossible_travel", "new_device", "rate_limit_exceeded"),
            "severity": SEVERITIES,
        },
    ),
    _T.GEOGRAPHIC_RESTRICTION_VIOLATED: _schema(
        _C.SECURITY,
        ("attempted_country", "allowed_countries", "action"),
        ("user_id", "tenant_id"),
        {"action": ("login", "registration", "api_access")},
    ),
    _T.RATE_LIMIT_EXCEEDED: _schema(
        _C.SECURITY,
        ("operation", "limit", "current_count", "reset_time"),
        ("user_id", "tenant_id"),
    ),
    _T.DEVICE_NOT_RECOGNIZED: _schema(
        _C.SECURITY,
        ("user_id", "device_fingerprint", "requires_verification"),
        ("tenant_id",),
    ),
    _T.IP_ADDRESS_BLOCKED: _schema(
        _C.SECURITY,
        ("ip_address", "block_reason"),
        ("blocked_until",),
        {"block_reason": ("security_violation", "rate_limit_exceeded", "geo_restriction",
                          "manual_block")},
    ),
    _T.SECURITY_VIOLATION: _schema(
        _C.SECURITY,
        ("violation_type", "severity", "risk_score", "action_taken", "details"),
        ("user_id", "tenant_id"),
        {
            "violation_type": ("credential_stuffing", "account_takeover",
                               "privilege_escalation", "data_exfiltration",
                               "malicious_payload"),
            "severity": SEVERITIES,
        },
    ),
    _T.FEATURE_ACCESSED: _schema(
        _C.ANALYTICS, ("user_id", "feature", "access_granted"), ("tenant_id", "denial_reason")
    ),
    _T.SUBSCRIPTION_LIMIT_EXCEEDED: _schema(
        _C.ANALYTICS, ("tenant_id", "limit_type", "current_usage", "limit", "plan")
    ),
    _T.USER_ACTIVITY_TRACKED: _schema(
        _C.ANALYTICS,
        ("user_id", "activity_type", "activity_details"),
        ("tenant_id", "session_id"),
        {"activity_type": ("page_view", "button_click", "form_submit", "api_call",
                           "feature_usage")},
    ),
}

EVENT_SCHEMAS: Mapping[AuthEventType, EventSchema] = MappingProxyType(_SCHEMAS)

SECURITY_EVENT_TYPES: FrozenSet[AuthEventType] = frozenset(
    {
        _T.LOGIN_FAILED,
        _T.SUSPICIOUS_ACTIVITY_DETECTED,
        _T.GEOGRAPHIC_RESTRICTION_VIOLATED,
        _T.RATE_LIMIT_EXCEEDED,
        _T.DEVICE_NOT_RECOGNIZED,
        _T.IP_ADDRESS_BLOCKED,
        _T.SECURITY_VIOLATION,
        _T.USER_ACCOUNT_LOCKED,
        _T.MFA_CHALLENGE_FAILED,
    }
)
