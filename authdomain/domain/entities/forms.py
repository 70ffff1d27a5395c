"""Forms and commands exchanged with the validation layer.

Forms hold raw user input exactly as submitted. Commands are the normalized
values produced once a form has been validated.
"""

from dataclasses import dataclass
from typing import Optional

from authdomain.domain.validation.primitives import IdentifierType

InvitationId = str


@dataclass(frozen=True)
class RegisterForm:
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str
    accept_terms: bool
    accept_privacy: bool
    phone: Optional[str] = None
    marketing_emails: Optional[bool] = None
    tenant_slug: Optional[str] = None
    invitation_token: Optional[str] = None


@dataclass(frozen=True)
class RegisterUserCommand:
    """A validated registration with normalized contact data.

    ``email`` is lower-cased, ``phone`` is E.164, ``tenant_slug`` is
    lower-cased and the password confirmation is gone.
    """

    first_name: str
    last_name: str
    email: str
    password: str
    accept_terms: bool
    accept_privacy: bool
    phone: Optional[str] = None
    marketing_emails: Optional[bool] = None
    tenant_slug: Optional[str] = None
    invitation_token: Optional[str] = None


@dataclass(frozen=True)
class LoginForm:
    """Login input. ``identifier`` is an email address or a phone number."""

    identifier: str
    password: str
    remember_me: Optional[bool] = None
    tenant_slug: Optional[str] = None


@dataclass(frozen=True)
class LoginCredentials:
    identifier: str
    identifier_type: IdentifierType
    password: str
    remember_me: bool = False
    tenant_slug: Optional[str] = None


@dataclass(frozen=True)
class ForgotPasswordForm:
    identifier: str
    tenant_slug: Optional[str] = None


@dataclass(frozen=True)
class ResetPasswordForm:
    token: str
    password: str
    confirm_password: str


@dataclass(frozen=True)
class ChangePasswordForm:
    current_password: str
    new_password: str
    confirm_password: str


@dataclass(frozen=True)
class VerifyEmailForm:
    token: str
    email: Optional[str] = None


@dataclass(frozen=True)
class VerifyMfaForm:
    challenge_id: str
    code: str
    is_backup_code: bool = False


@dataclass(frozen=True)
class SetupMfaForm:
    method: str
    current_password: str
    phone_number: Optional[str] = None


@dataclass(frozen=True)
class OAuthLoginForm:
    provider: str
    redirect_to: Optional[str] = None
    tenant_slug: Optional[str] = None


@dataclass(frozen=True)
class CreateTenantForm:
    name: str
    slug: str
    plan: str
    country: str
    timezone: str
    language: str
    currency: str
    website: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None


@dataclass(frozen=True)
class TenantSwitchCommand:
    user_id: str
    to_tenant_id: str
    from_tenant_id: Optional[str] = None


@dataclass(frozen=True)
class ProfileUpdateForm:
    """A partial profile update; ``None`` means "leave unchanged"."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    github_url: Optional[str] = None


@dataclass(frozen=True)
class RoleSelectionCommand:
    user_id: str
    selected_role: Optional[str] = None
