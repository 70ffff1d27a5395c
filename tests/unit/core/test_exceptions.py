"""Tests for the authentication domain exception hierarchy."""

from datetime import datetime, timezone

import pytest

from authdomain.core import exceptions
from authdomain.core.exceptions import (
    AccountLockedError,
    AuthDomainError,
    BusinessRuleError,
    ErrorKind,
    GeographicRestrictionError,
    InvalidEmailError,
    PasswordMismatchError,
    RateLimitExceededError,
    RequiredFieldError,
    SecurityViolationError,
    SubscriptionLimitExceededError,
    TenantSuspendedError,
    UserAlreadyExistsError,
    ValidationError,
    WeakPasswordError,
)


@pytest.mark.unit
class TestErrorKinds:
    """Every concrete error belongs to exactly one of the three families."""

    def test_validation_errors_are_field_scoped(self):
        # Act
        error = RequiredFieldError("first_name")

        # Assert
        assert isinstance(error, ValidationError)
        assert error.kind is ErrorKind.VALIDATION
        assert error.code == "VALIDATION_ERROR"
        assert error.field == "first_name"
        assert str(error) == "first_name is required"

    def test_business_rule_error_has_code_and_no_field(self):
        error = TenantSuspendedError("tenant-1")

        assert isinstance(error, BusinessRuleError)
        assert error.kind is ErrorKind.BUSINESS_RULE
        assert error.code == "TENANT_SUSPENDED"
        assert error.field is None
        assert error.metadata == {"tenant_id": "tenant-1"}

    def test_every_exported_error_derives_from_base(self):
        for name in exceptions.__all__:
            candidate = getattr(exceptions, name)
            if isinstance(candidate, type) and issubclass(candidate, Exception):
                assert issubclass(candidate, AuthDomainError), name


@pytest.mark.unit
class TestErrorPayloads:
    def test_to_dict_is_serializable_shape(self):
        # Arrange
        error = UserAlreadyExistsError("ada@example.com")

        # Act
        payload = error.to_dict()

        # Assert
        assert payload["kind"] == "business_rule"
        assert payload["code"] == "USER_ALREADY_EXISTS"
        assert payload["field"] is None
        assert isinstance(payload["metadata"], dict)
        assert "ada@example.com" in payload["message"]

    def test_weak_password_keeps_requirements(self):
        error = WeakPasswordError(["first", "second"], field="new_password")

        assert error.requirements == ("first", "second")
        assert error.metadata["requirements"] == ["first", "second"]
        assert error.field == "new_password"
        assert str(error) == "Password does not meet requirements: first, second"

    def test_account_locked_reports_iso_timestamp(self):
        until = datetime(2024, 5, 17, 13, 0, tzinfo=timezone.utc)

        error = AccountLockedError(until, attempts=5)

        assert error.code == "ACCOUNT_LOCKED"
        assert error.metadata == {"locked_until": until.isoformat(), "failed_attempts": 5}

    def test_subscription_limit_message(self):
        error = SubscriptionLimitExceededError("users", 100, 100, plan="starter")

        assert str(error) == "Subscription limit reached for users. Usage: 100, limit: 100"
        assert error.metadata["plan"] == "starter"

    def test_geographic_restriction_sorts_allowed_countries(self):
        error = GeographicRestrictionError("CN", {"US", "CA", "DE"})

        assert error.metadata["allowed_countries"] == ["CA", "DE", "US"]

    def test_messages_follow_requested_locale(self):
        assert str(InvalidEmailError()) == "Invalid email format"
        assert str(InvalidEmailError(locale="es")) == "Formato de correo electrónico inválido"
        assert str(PasswordMismatchError(locale="es")) == "Las contraseñas no coinciden"


@pytest.mark.unit
class TestSecurityViolations:
    def test_security_violation_is_logged_on_creation(self, mocker):
        # Arrange
        mock_logger = mocker.patch("authdomain.core.exceptions.logger")
        reset = datetime(2024, 5, 17, 13, 0, tzinfo=timezone.utc)

        # Act
        error = RateLimitExceededError("login", 5, reset)

        # Assert
        assert isinstance(error, SecurityViolationError)
        assert error.kind is ErrorKind.SECURITY_VIOLATION
        mock_logger.warning.assert_called_once_with(
            "security_violation_raised",
            error_code="RATE_LIMIT_EXCEEDED",
            error_type="RateLimitExceededError",
            metadata={"operation": "login", "limit": 5, "reset_time": reset.isoformat()},
        )

    def test_business_errors_are_not_logged(self, mocker):
        mock_logger = mocker.patch("authdomain.core.exceptions.logger")

        TenantSuspendedError("tenant-1")

        mock_logger.warning.assert_not_called()
