"""Whole-form validators for the authentication flows.

Every validator makes a single pass over its form in a fixed field order
(names, contact, password, confirmation, consent, tenant, invitation) and
collects every ``ValidationError`` into a ``ValidationResult``. Business-rule
and security errors are decisive facts rather than field problems: they are
raised, never collected, with one exception documented on
``validate_tenant_switch``.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import structlog

from authdomain.core.config.settings import settings
from authdomain.core.exceptions import (
    AuthDomainError,
    EmptyProfileUpdateError,
    InvalidBackupCodeError,
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidInvitationTokenError,
    InvalidMfaMethodError,
    InvalidNameFormatError,
    InvalidOAuthProviderError,
    InvalidOtpError,
    InvalidPhoneNumberError,
    InvalidProfileFieldError,
    InvalidRedirectUrlError,
    InvalidRoleSelectionError,
    InvalidTenantFieldError,
    InvalidTenantIdError,
    InvalidTenantSlugError,
    InvalidUrlError,
    PasswordMismatchError,
    PrivacyPolicyNotAcceptedError,
    RequiredFieldError,
    SamePasswordError,
    SameTenantSwitchError,
    TenantAccessDeniedError,
    TenantSlugTakenError,
    TermsNotAcceptedError,
    WeakPasswordError,
)
from authdomain.domain.entities.forms import (
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
from authdomain.domain.entities.oauth import OAuthProvider
from authdomain.domain.entities.tenant import SubscriptionPlan, TenantMembership
from authdomain.domain.entities.user import MfaMethod, UserRole
from authdomain.domain.services.auth.password_policy import (
    PasswordPolicy,
    PasswordValidationContext,
    validate_password,
)
from authdomain.domain.validation.primitives import (
    is_valid_backup_code,
    is_valid_country_code,
    is_valid_currency_code,
    is_valid_email,
    is_valid_language_code,
    is_valid_otp,
    is_valid_phone_e164,
    is_valid_tenant_slug,
    is_valid_timezone,
    is_valid_url,
    is_valid_uuid_v4,
    normalize_identifier,
    normalize_phone_to_e164,
    url_hostname,
)
from authdomain.domain.validation.profile import (
    is_valid_bio,
    is_valid_department,
    is_valid_job_title,
    is_valid_location,
    is_valid_name,
)
from authdomain.domain.validation.result import ValidationResult

logger = structlog.get_logger(__name__)

_INVITATION_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,256}$")

TENANT_NAME_MIN_LENGTH = 2
TENANT_NAME_MAX_LENGTH = 100
TENANT_DESCRIPTION_MAX_LENGTH = 500

SOCIAL_PROFILE_HOSTS = {
    "linkedin_url": ("linkedin.com",),
    "twitter_url": ("twitter.com", "x.com"),
    "github_url": ("github.com",),
}


@dataclass(frozen=True)
class RegistrationOptions:
    """Per-tenant switches for the registration form."""

    default_country_code: Optional[str] = None
    require_phone: bool = False
    require_tenant: bool = False


@dataclass(frozen=True)
class MfaVerificationOptions:
    allowed_lengths: Optional[Sequence[int]] = None
    allow_alphanumeric: bool = False


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _normalized_slug(slug: str) -> str:
    return slug.strip().lower()


def _check_tenant_slug(errors: List[AuthDomainError], slug: Optional[str], required: bool = False):
    if _is_blank(slug):
        if required:
            errors.append(RequiredFieldError("tenant_slug"))
        return
    if not is_valid_tenant_slug(_normalized_slug(slug)):
        errors.append(InvalidTenantSlugError("tenant_slug"))


def _check_identifier(
    errors: List[AuthDomainError], identifier: str, default_country_code: Optional[str] = None
) -> None:
    if _is_blank(identifier):
        errors.append(RequiredFieldError("identifier"))
        return
    # Same normalization the credential converter applies.
    try:
        normalize_identifier(identifier, default_country_code)
    except InvalidIdentifierError as exc:
        errors.append(exc)


def _check_password(
    errors: List[AuthDomainError],
    password: str,
    policy: Optional[PasswordPolicy],
    context: Optional[PasswordValidationContext],
    field: str = "password",
) -> None:
    try:
        validate_password(password, policy, context, field=field)
    except WeakPasswordError as exc:
        errors.append(exc)


def _finish(form_name: str, errors: Iterable[AuthDomainError]) -> ValidationResult:
    result = ValidationResult.from_errors(errors)
    logger.debug(
        "form_validated",
        form=form_name,
        is_valid=result.is_valid,
        invalid_fields=[error.field for error in result.errors],
    )
    return result


def validate_registration_form(
    form: RegisterForm,
    policy: Optional[PasswordPolicy] = None,
    options: Optional[RegistrationOptions] = None,
) -> ValidationResult:
    """Validates a registration form.

    Raises:
        PasswordReuseError: Never for a fresh registration, but propagated
            unchanged if a custom policy context triggers it.
    """
    options = options or RegistrationOptions()
    errors: List[AuthDomainError] = []

    if not is_valid_name(form.first_name):
        errors.append(InvalidNameFormatError("first_name"))
    if not is_valid_name(form.last_name):
        errors.append(InvalidNameFormatError("last_name"))

    if not is_valid_email(form.email):
        errors.append(InvalidEmailError())
    if _is_blank(form.phone):
        if options.require_phone:
            errors.append(RequiredFieldError("phone"))
    else:
        try:
            normalize_phone_to_e164(form.phone, options.default_country_code)
        except InvalidPhoneNumberError as exc:
            errors.append(exc)

    context = PasswordValidationContext(
        email=form.email, first_name=form.first_name, last_name=form.last_name
    )
    _check_password(errors, form.password, policy, context)
    if form.password != form.confirm_password:
        errors.append(PasswordMismatchError())

    if not form.accept_terms:
        errors.append(TermsNotAcceptedError())
    if not form.accept_privacy:
        errors.append(PrivacyPolicyNotAcceptedError())

    _check_tenant_slug(errors, form.tenant_slug, required=options.require_tenant)

    if form.invitation_token is not None and not _INVITATION_TOKEN_PATTERN.match(
        form.invitation_token
    ):
        errors.append(InvalidInvitationTokenError())

    return _finish("register", errors)


def validate_login_form(
    form: LoginForm, default_country_code: Optional[str] = None
) -> ValidationResult:
    errors: List[AuthDomainError] = []
    _check_identifier(errors, form.identifier, default_country_code)
    if not form.password:
        errors.append(RequiredFieldError("password"))
    _check_tenant_slug(errors, form.tenant_slug)
    return _finish("login", errors)


def validate_forgot_password_form(
    form: ForgotPasswordForm, default_country_code: Optional[str] = None
) -> ValidationResult:
    errors: List[AuthDomainError] = []
    _check_identifier(errors, form.identifier, default_country_code)
    _check_tenant_slug(errors, form.tenant_slug)
    return _finish("forgot_password", errors)


def validate_reset_password_form(
    form: ResetPasswordForm,
    policy: Optional[PasswordPolicy] = None,
    context: Optional[PasswordValidationContext] = None,
) -> ValidationResult:
    """Validates a password reset.

    Raises:
        PasswordReuseError: If ``context`` carries a history the new password
            appears in.
    """
    errors: List[AuthDomainError] = []
    if _is_blank(form.token):
        errors.append(RequiredFieldError("token"))
    _check_password(errors, form.password, policy, context)
    if form.password != form.confirm_password:
        errors.append(PasswordMismatchError())
    return _finish("reset_password", errors)


def validate_change_password_form(
    form: ChangePasswordForm,
    policy: Optional[PasswordPolicy] = None,
    context: Optional[PasswordValidationContext] = None,
) -> ValidationResult:
    """Validates a password change by an authenticated user.

    Raises:
        PasswordReuseError: If the new password is in the supplied history.
    """
    errors: List[AuthDomainError] = []
    if not form.current_password:
        errors.append(RequiredFieldError("current_password"))
    _check_password(errors, form.new_password, policy, context, field="new_password")
    if form.new_password != form.confirm_password:
        errors.append(PasswordMismatchError())
    if form.current_password and form.new_password == form.current_password:
        errors.append(SamePasswordError())
    return _finish("change_password", errors)


def validate_verify_email_form(form: VerifyEmailForm) -> ValidationResult:
    errors: List[AuthDomainError] = []
    if _is_blank(form.token):
        errors.append(RequiredFieldError("token"))
    if form.email is not None and not is_valid_email(form.email):
        errors.append(InvalidEmailError())
    return _finish("verify_email", errors)


def validate_mfa_verification(
    form: VerifyMfaForm, options: Optional[MfaVerificationOptions] = None
) -> ValidationResult:
    options = options or MfaVerificationOptions()
    errors: List[AuthDomainError] = []
    if _is_blank(form.challenge_id):
        errors.append(RequiredFieldError("challenge_id"))
    if form.is_backup_code:
        if not is_valid_backup_code(form.code):
            errors.append(InvalidBackupCodeError())
    elif not is_valid_otp(form.code, options.allowed_lengths, options.allow_alphanumeric):
        errors.append(InvalidOtpError())
    return _finish("verify_mfa", errors)


def validate_mfa_setup(form: SetupMfaForm) -> ValidationResult:
    errors: List[AuthDomainError] = []
    method_values = {method.value for method in MfaMethod}
    if form.method not in method_values:
        errors.append(InvalidMfaMethodError(str(form.method)))
    elif form.method == MfaMethod.SMS.value:
        if _is_blank(form.phone_number):
            errors.append(RequiredFieldError("phone_number"))
        elif not is_valid_phone_e164(form.phone_number):
            errors.append(InvalidPhoneNumberError("phone_number"))
    if not form.current_password:
        errors.append(RequiredFieldError("current_password"))
    return _finish("setup_mfa", errors)


def _is_safe_redirect(redirect_to: str, allowed_hosts: Optional[Iterable[str]]) -> bool:
    if redirect_to.startswith("/"):
        return not redirect_to.startswith("//") and "\\" not in redirect_to
    if not is_valid_url(redirect_to):
        return False
    if allowed_hosts is None:
        return True
    return url_hostname(redirect_to) in {host.lower() for host in allowed_hosts}


def validate_oauth_initiation(
    form: OAuthLoginForm,
    allowed_providers: Optional[Iterable[str]] = None,
    allowed_redirect_hosts: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """Validates the start of an OAuth login.

    Relative redirects must be same-site paths (``/dashboard``, never
    ``//evil.example``). Absolute redirects must be valid URLs and, when
    ``allowed_redirect_hosts`` is given, point at one of those hosts.
    """
    errors: List[AuthDomainError] = []
    enabled = set(
        allowed_providers if allowed_providers is not None else settings.OAUTH_ENABLED_PROVIDERS
    )
    known = {provider.value for provider in OAuthProvider}
    if form.provider not in known or form.provider not in enabled:
        errors.append(InvalidOAuthProviderError(str(form.provider)))

    if form.redirect_to is not None and not _is_safe_redirect(
        form.redirect_to, allowed_redirect_hosts
    ):
        errors.append(InvalidRedirectUrlError())

    _check_tenant_slug(errors, form.tenant_slug)
    return _finish("oauth_login", errors)


def validate_tenant_creation(
    form: CreateTenantForm, existing_slugs: Optional[Iterable[str]] = None
) -> ValidationResult:
    """Validates a new tenant.

    The slug is taken verbatim: creation fixes the canonical lower-case form,
    so ``"Acme"`` is rejected here even though slug lookups elsewhere ignore
    case.

    Raises:
        TenantSlugTakenError: If every field is valid but the slug is already
            in ``existing_slugs``.
    """
    errors: List[AuthDomainError] = []

    name = (form.name or "").strip()
    if not TENANT_NAME_MIN_LENGTH <= len(name) <= TENANT_NAME_MAX_LENGTH:
        errors.append(InvalidTenantFieldError("name"))
    if not is_valid_tenant_slug(form.slug):
        errors.append(InvalidTenantSlugError("slug"))
    if form.plan not in {plan.value for plan in SubscriptionPlan}:
        errors.append(InvalidTenantFieldError("plan"))
    if not is_valid_country_code(form.country):
        errors.append(InvalidTenantFieldError("country"))
    if not is_valid_timezone(form.timezone):
        errors.append(InvalidTenantFieldError("timezone"))
    if not is_valid_language_code(form.language):
        errors.append(InvalidTenantFieldError("language"))
    if not is_valid_currency_code(form.currency):
        errors.append(InvalidTenantFieldError("currency"))
    if form.website is not None and not is_valid_url(form.website):
        errors.append(InvalidUrlError("website"))
    if form.description is not None and len(form.description) > TENANT_DESCRIPTION_MAX_LENGTH:
        errors.append(InvalidTenantFieldError("description"))

    if not errors and existing_slugs is not None:
        slug = form.slug
        if slug in {_normalized_slug(existing) for existing in existing_slugs}:
            logger.info("tenant_slug_taken", slug=slug)
            raise TenantSlugTakenError(slug)

    return _finish("create_tenant", errors)


def validate_tenant_switch(
    command: TenantSwitchCommand, memberships: Iterable[TenantMembership]
) -> ValidationResult:
    """Validates a switch of the active tenant.

    A target that is not UUID-v4 shaped ends validation immediately. The
    membership check reports ``TenantAccessDeniedError`` inside the result,
    next to a possible ``SameTenantSwitchError``, so callers see the whole
    picture of a rejected switch in one pass.
    """
    if not is_valid_uuid_v4(command.to_tenant_id):
        return _finish("tenant_switch", [InvalidTenantIdError("to_tenant_id")])

    errors: List[AuthDomainError] = []
    has_access = any(
        membership.tenant_id == command.to_tenant_id and membership.is_active
        for membership in memberships
    )
    if not has_access:
        logger.warning(
            "tenant_switch_access_denied",
            user_id=command.user_id,
            tenant_id=command.to_tenant_id,
        )
        errors.append(TenantAccessDeniedError(command.to_tenant_id, command.user_id))
    if command.from_tenant_id == command.to_tenant_id:
        errors.append(SameTenantSwitchError(command.to_tenant_id))
    return _finish("tenant_switch", errors)


def _is_on_host(url: str, hosts: Sequence[str]) -> bool:
    hostname = url_hostname(url) or ""
    return any(hostname == host or hostname.endswith("." + host) for host in hosts)


def validate_profile_update(form: ProfileUpdateForm) -> ValidationResult:
    """Validates every field of a partial profile update that is not ``None``."""
    provided = {name: value for name, value in vars(form).items() if value is not None}
    if not provided:
        return _finish("profile_update", [EmptyProfileUpdateError()])

    errors: List[AuthDomainError] = []
    for name in ("first_name", "last_name"):
        if name in provided and not is_valid_name(provided[name]):
            errors.append(InvalidNameFormatError(name))

    if "phone" in provided:
        try:
            normalize_phone_to_e164(provided["phone"])
        except InvalidPhoneNumberError as exc:
            errors.append(exc)

    text_checks = (
        ("bio", is_valid_bio),
        ("job_title", is_valid_job_title),
        ("department", is_valid_department),
        ("location", is_valid_location),
    )
    for name, check in text_checks:
        if name in provided and not check(provided[name]):
            errors.append(InvalidProfileFieldError(name))

    for name in ("website", "avatar_url"):
        if name in provided and not is_valid_url(provided[name]):
            errors.append(InvalidUrlError(name))

    for name, hosts in SOCIAL_PROFILE_HOSTS.items():
        if name not in provided:
            continue
        url = provided[name]
        if not is_valid_url(url) or not _is_on_host(url, hosts):
            errors.append(InvalidUrlError(name))

    return _finish("profile_update", errors)


def validate_role_selection(command: RoleSelectionCommand) -> ValidationResult:
    errors: List[AuthDomainError] = []
    if _is_blank(command.selected_role):
        errors.append(RequiredFieldError("selected_role"))
    elif command.selected_role not in {role.value for role in UserRole}:
        errors.append(InvalidRoleSelectionError())
    return _finish("role_selection", errors)


def to_register_user_command(
    form: RegisterForm,
    policy: Optional[PasswordPolicy] = None,
    options: Optional[RegistrationOptions] = None,
) -> RegisterUserCommand:
    """Validates ``form`` and returns its normalized command.

    Raises:
        AuthDomainError: The first collected error when the form is invalid.
    """
    options = options or RegistrationOptions()
    validate_registration_form(form, policy, options).raise_first()

    phone = None
    if not _is_blank(form.phone):
        phone = normalize_phone_to_e164(form.phone, options.default_country_code)
    return RegisterUserCommand(
        first_name=form.first_name.strip(),
        last_name=form.last_name.strip(),
        email=form.email.strip().lower(),
        password=form.password,
        accept_terms=form.accept_terms,
        accept_privacy=form.accept_privacy,
        phone=phone,
        marketing_emails=form.marketing_emails,
        tenant_slug=None if _is_blank(form.tenant_slug) else _normalized_slug(form.tenant_slug),
        invitation_token=form.invitation_token,
    )


def to_login_credentials(
    form: LoginForm, default_country_code: Optional[str] = None
) -> LoginCredentials:
    """Validates ``form`` and returns normalized credentials.

    Raises:
        AuthDomainError: The first collected error when the form is invalid.
    """
    validate_login_form(form, default_country_code).raise_first()
    identifier_type, identifier = normalize_identifier(form.identifier, default_country_code)
    return LoginCredentials(
        identifier=identifier,
        identifier_type=identifier_type,
        password=form.password,
        remember_me=bool(form.remember_me),
        tenant_slug=None if _is_blank(form.tenant_slug) else _normalized_slug(form.tenant_slug),
    )
