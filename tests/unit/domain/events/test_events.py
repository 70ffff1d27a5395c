"""Tests for authentication event schemas and the event factory."""

from datetime import datetime, timedelta, timezone

import pytest

from authdomain.domain.entities.oauth import LoginMethod
from authdomain.domain.entities.session import DeviceInfo, DeviceType, SessionLocation
from authdomain.domain.events import (
    EVENT_SCHEMAS,
    SECURITY_EVENT_TYPES,
    AuthEventType,
    EventCategory,
    build_event_metadata,
    create_auth_event,
    event_category,
    is_security_event,
    is_tenant_event,
    is_user_event,
)

pytestmark = pytest.mark.unit

TENANT_ID = "3f2b8c1e-5d4a-4b7e-9c2f-1a6d8e0b4c7a"


@pytest.fixture
def registered_payload():
    return {
        "user_id": "user-42",
        "email": "ada@example.com",
        "registration_method": "email",
        "requires_email_verification": True,
        "requires_phone_verification": False,
        "tenant_id": TENANT_ID,
    }


@pytest.fixture
def login_failed_payload():
    return {
        "identifier": "ada@example.com",
        "method": LoginMethod.EMAIL,
        "failure_reason": "invalid_credentials",
        "consecutive_failed_attempts": 3,
        "account_locked": False,
    }


class TestSchemas:
    def test_every_event_type_has_a_schema(self):
        assert len(AuthEventType) == 57
        assert set(EVENT_SCHEMAS) == set(AuthEventType)
        for event_type, schema in EVENT_SCHEMAS.items():
            assert isinstance(schema.category, EventCategory), event_type
            assert not schema.required & schema.optional, event_type
            assert set(schema.choices) <= schema.fields, event_type
            assert not {"timestamp", "metadata"} & schema.fields, event_type

    def test_security_events_are_known_types(self):
        assert SECURITY_EVENT_TYPES <= set(AuthEventType)
        assert AuthEventType.LOGIN_FAILED in SECURITY_EVENT_TYPES

    def test_event_category(self):
        assert event_category("UserRegistered") is EventCategory.REGISTRATION
        assert event_category(AuthEventType.MFA_ENABLED) is EventCategory.MFA


class TestCreateAuthEvent:
    """Test suite for the event factory."""

    def test_injects_timestamp_and_metadata(self, registered_payload):
        # Arrange
        occurred_at = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)

        # Act
        event = create_auth_event(
            AuthEventType.USER_REGISTERED, registered_payload, occurred_at=occurred_at
        )

        # Assert
        assert event.type is AuthEventType.USER_REGISTERED
        assert event.timestamp == "2024-05-17T12:30:00.000Z"
        assert event.metadata == {}
        assert event.occurred_at == occurred_at
        assert event.category is EventCategory.REGISTRATION
        assert event.payload["email"] == "ada@example.com"

    def test_default_timestamp_is_now(self, registered_payload):
        before = datetime.now(timezone.utc).replace(microsecond=0)

        event = create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

        assert event.timestamp.endswith("Z")
        assert before <= event.occurred_at + timedelta(milliseconds=1)

    def test_timestamps_are_normalized_to_utc(self, registered_payload):
        naive = create_auth_event(
            "UserRegistered", registered_payload, occurred_at=datetime(2024, 5, 17, 12, 30)
        )
        offset = create_auth_event(
            "UserRegistered",
            registered_payload,
            occurred_at=datetime(2024, 5, 17, 14, 30, tzinfo=timezone(timedelta(hours=2))),
        )

        assert naive.timestamp == offset.timestamp == "2024-05-17T12:30:00.000Z"

    def test_payload_is_read_only(self, registered_payload):
        event = create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

        with pytest.raises(TypeError):
            event.payload["email"] = "mallory@example.com"

    def test_caller_payload_is_not_shared(self, registered_payload):
        event = create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

        registered_payload["email"] = "changed@example.com"

        assert event.payload["email"] == "ada@example.com"

    def test_enum_values_are_stored_as_strings(self, login_failed_payload):
        event = create_auth_event("LoginFailed", login_failed_payload)

        assert event.payload["method"] == "email"
        assert is_security_event(event) is True

    def test_to_dict(self, login_failed_payload):
        metadata = {"ip_address": "203.0.113.7", "context": {"attempt": [1, 2]}}
        occurred_at = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)

        event = create_auth_event(
            "LoginFailed", login_failed_payload, metadata=metadata, occurred_at=occurred_at
        )

        assert event.to_dict() == {
            "type": "LoginFailed",
            "payload": {
                "identifier": "ada@example.com",
                "method": "email",
                "failure_reason": "invalid_credentials",
                "consecutive_failed_attempts": 3,
                "account_locked": False,
                "timestamp": "2024-05-17T12:30:00.000Z",
                "metadata": {"ip_address": "203.0.113.7", "context": {"attempt": [1, 2]}},
            },
        }

    def test_creation_is_logged(self, mocker, registered_payload):
        mock_logger = mocker.patch("authdomain.domain.events.authentication_events.logger")

        create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

        mock_logger.debug.assert_called_once_with(
            "auth_event_created",
            event_type="UserRegistered",
            category="registration",
            security_event=False,
        )


class TestCreateAuthEventRejections:
    def test_unknown_event_type(self):
        with pytest.raises(ValueError, match="Unknown authentication event type"):
            create_auth_event("UserTeleported", {})

    def test_missing_required_field(self, registered_payload):
        del registered_payload["email"]

        with pytest.raises(ValueError, match="missing required fields"):
            create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

    def test_unknown_field(self, registered_payload):
        registered_payload["favourite_color"] = "blue"

        with pytest.raises(ValueError, match="unknown fields"):
            create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

    @pytest.mark.parametrize("reserved", ["timestamp", "metadata"])
    def test_reserved_fields(self, registered_payload, reserved):
        registered_payload[reserved] = "caller-supplied"

        with pytest.raises(ValueError, match="injected"):
            create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

    @pytest.mark.parametrize("method", ["carrier_pigeon", ["email"], None])
    def test_value_outside_choices(self, registered_payload, method):
        registered_payload["registration_method"] = method

        with pytest.raises(ValueError, match="is not one of"):
            create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

    def test_unknown_metadata_field(self, registered_payload):
        with pytest.raises(ValueError, match="metadata"):
            create_auth_event(
                AuthEventType.USER_REGISTERED, registered_payload, metadata={"referrer": "x"}
            )


class TestEventMetadata:
    def test_builds_only_supplied_fields(self):
        # Arrange
        device = DeviceInfo(
            type=DeviceType.MOBILE, name="Pixel 8", os="Android", browser="Chrome",
            fingerprint="fp-123",
        )

        # Act
        metadata = build_event_metadata(
            ip_address=" 203.0.113.7 ",
            device=device,
            location=SessionLocation(country="US", city="Boston"),
        )

        # Assert
        assert metadata == {
            "ip_address": "203.0.113.7",
            "device": {"type": "mobile", "name": "Pixel 8", "os": "Android", "browser": "Chrome"},
            "location": {"country": "US", "city": "Boston"},
        }

    def test_accepts_mappings(self):
        metadata = build_event_metadata(
            user_agent="Mozilla/5.0", context={"flow": "signup"}, location={"country": "DE"}
        )

        assert metadata == {
            "user_agent": "Mozilla/5.0",
            "context": {"flow": "signup"},
            "location": {"country": "DE"},
        }

    def test_rejects_malformed_values(self):
        with pytest.raises(ValueError):
            build_event_metadata(ip_address="not-an-ip")
        with pytest.raises(ValueError):
            build_event_metadata(user_agent="bad\x00agent")

    def test_metadata_round_trips_into_event(self, registered_payload):
        metadata = build_event_metadata(ip_address="2001:db8::1")

        event = create_auth_event(AuthEventType.USER_REGISTERED, registered_payload, metadata)

        assert event.metadata["ip_address"] == "2001:db8::1"


class TestEventPredicates:
    def test_tenant_and_user_events(self, registered_payload):
        event = create_auth_event(AuthEventType.USER_REGISTERED, registered_payload)

        assert is_tenant_event(event) is True
        assert is_user_event(event) is True
        assert is_security_event(event) is False

    def test_context_switch_is_not_a_tenant_event(self):
        event = create_auth_event(
            AuthEventType.TENANT_CONTEXT_SWITCHED,
            {"user_id": "user-42", "session_id": "s-1", "to_tenant_id": TENANT_ID},
        )

        assert is_tenant_event(event) is False
        assert is_user_event(event) is True

    def test_event_without_user(self, login_failed_payload):
        event = create_auth_event(AuthEventType.LOGIN_FAILED, login_failed_payload)

        assert is_user_event(event) is False
