"""Shared fixtures for the authdomain test suite.

The engine is pure: no database, no network. Fixtures only provide fixed
clocks and ready-made entities so tests never depend on wall-clock time.
"""

from datetime import datetime, timedelta, timezone

import pytest

from authdomain.domain.entities.forms import RegisterForm
from authdomain.domain.entities.session import DeviceInfo, DeviceType, MfaChallenge, Session
from authdomain.domain.entities.tenant import SubscriptionPlan, Tenant, TenantStatus
from authdomain.domain.entities.user import MfaMethod

TENANT_ID = "3f2b8c1e-5d4a-4b7e-9c2f-1a6d8e0b4c7a"
OTHER_TENANT_ID = "9a1c4e7b-2f5d-4c8a-b3e6-0d9f7a2c5e18"
USER_ID = "user-42"
STRONG_PASSWORD = "Tr0ub4dor&3x"


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def register_form() -> RegisterForm:
    """A registration form that passes every check."""
    return RegisterForm(
        first_name="Ada",
        last_name="Lovelace",
        email="Ada.Lovelace@Example.com",
        password=STRONG_PASSWORD,
        confirm_password=STRONG_PASSWORD,
        accept_terms=True,
        accept_privacy=True,
    )


@pytest.fixture
def tenant_factory(now):
    def _make(**overrides) -> Tenant:
        values = dict(
            id=TENANT_ID,
            name="Acme Corporation",
            slug="acme-corp",
            status=TenantStatus.ACTIVE,
            plan=SubscriptionPlan.PROFESSIONAL,
            country="US",
            timezone="America/New_York",
            language="en",
            currency="USD",
            created_at=now - timedelta(days=30),
            updated_at=now - timedelta(days=1),
            features=("sso", "audit_log"),
            limits={"users": 100},
        )
        values.update(overrides)
        return Tenant(**values)

    return _make


@pytest.fixture
def session_factory(now):
    def _make(**overrides) -> Session:
        values = dict(
            id="session-1",
            user_id=USER_ID,
            expires_at=now + timedelta(hours=1),
            device=DeviceInfo(
                type=DeviceType.DESKTOP, name="MacBook Pro", os="macOS", browser="Firefox"
            ),
            ip_address="203.0.113.7",
            user_agent="Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) Firefox/125.0",
            created_at=now - timedelta(hours=1),
            last_activity=now - timedelta(minutes=5),
        )
        values.update(overrides)
        return Session(**values)

    return _make


@pytest.fixture
def challenge_factory(now):
    def _make(**overrides) -> MfaChallenge:
        values = dict(
            id="challenge-1",
            user_id=USER_ID,
            method=MfaMethod.TOTP,
            expires_at=now + timedelta(minutes=5),
            created_at=now - timedelta(minutes=1),
            max_attempts=3,
        )
        values.update(overrides)
        return MfaChallenge(**values)

    return _make
