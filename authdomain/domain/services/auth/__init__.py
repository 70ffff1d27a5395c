from .password_policy import (
    COMMON_PASSWORDS,
    DEFAULT_PASSWORD_POLICY,
    PasswordPolicy,
    PasswordStrength,
    PasswordStrengthLevel,
    PasswordValidationContext,
    assess_password_strength,
    validate_password,
)

__all__ = [
    "COMMON_PASSWORDS",
    "DEFAULT_PASSWORD_POLICY",
    "PasswordPolicy",
    "PasswordStrength",
    "PasswordStrengthLevel",
    "PasswordValidationContext",
    "assess_password_strength",
    "validate_password",
]
