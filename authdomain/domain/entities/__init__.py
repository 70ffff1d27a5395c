"""Export authentication-related domain entities for use across the package.

This module provides a clean interface for importing the tenant, user, session
and MFA challenge entities together with the forms and commands consumed by the
validation layer.
"""

from .forms import (
    ChangePasswordForm,
    CreateTenantForm,
    ForgotPasswordForm,
    LoginCredentials,
    LoginForm,
    OAuthLoginForm,
    ProfileUpdateForm,
    RegisterForm,
    RegisterUserCommand,
    ResetPasswordForm,
    RoleSelectionCommand,
    SetupMfaForm,
    TenantSwitchCommand,
    VerifyEmailForm,
    VerifyMfaForm,
)
from .oauth import LoginMethod, OAuthProvider
from .session import DeviceInfo, DeviceType, MfaChallenge, Session, SessionLocation
from .tenant import SubscriptionPlan, Tenant, TenantMembership, TenantStatus
from .user import (
    MfaMethod,
    User,
    UserProfile,
    UserRole,
    UserStatus,
    generate_display_name,
    generate_initials,
    to_user_profile,
)

__all__ = [
    "ChangePasswordForm",
    "CreateTenantForm",
    "DeviceInfo",
    "DeviceType",
    "ForgotPasswordForm",
    "LoginCredentials",
    "LoginForm",
    "LoginMethod",
    "MfaChallenge",
    "MfaMethod",
    "OAuthLoginForm",
    "OAuthProvider",
    "ProfileUpdateForm",
    "RegisterForm",
    "RegisterUserCommand",
    "ResetPasswordForm",
    "RoleSelectionCommand",
    "Session",
    "SessionLocation",
    "SetupMfaForm",
    "SubscriptionPlan",
    "Tenant",
    "TenantMembership",
    "TenantStatus",
    "TenantSwitchCommand",
    "User",
    "UserProfile",
    "UserRole",
    "UserStatus",
    "VerifyEmailForm",
    "VerifyMfaForm",
    "generate_display_name",
    "generate_initials",
    "to_user_profile",
]
