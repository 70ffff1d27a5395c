"""Tests for the primitive format validators."""

from datetime import datetime

import pytest

from authdomain.core.exceptions import InvalidIdentifierError, InvalidPhoneNumberError
from authdomain.domain.validation.primitives import (
    IdentifierType,
    identify_email_or_phone,
    is_valid_backup_code,
    is_valid_country_code,
    is_valid_currency_code,
    is_valid_email,
    is_valid_ip_address,
    is_valid_language_code,
    is_valid_otp,
    is_valid_tenant_slug,
    is_valid_timestamp,
    is_valid_timezone,
    is_valid_url,
    is_valid_user_agent,
    is_valid_uuid_v4,
    normalize_identifier,
    normalize_phone_to_e164,
    validate_email,
)

pytestmark = pytest.mark.unit


class TestEmail:
    @pytest.mark.parametrize(
        "email",
        ["user@example.com", "first.last+tag@sub.example.co.uk", "  padded@example.org  "],
    )
    def test_valid(self, email):
        assert is_valid_email(email) is True

    @pytest.mark.parametrize(
        "email",
        [
            "plainaddress",
            "user@",
            "@example.com",
            "user..name@example.com",
            ".user@example.com",
            "user@example",
            "a" * 65 + "@example.com",
            "",
            None,
            123,
        ],
    )
    def test_invalid(self, email):
        assert is_valid_email(email) is False

    def test_validate_email_normalizes(self):
        assert validate_email(" Ada@Example.COM ") == "ada@example.com"


class TestPhoneNormalization:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("+1 (555) 123-4567", "+15551234567"),
            ("555.123.4567", "+15551234567"),
            ("+44 20 7946 0958", "+442079460958"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_phone_to_e164(raw) == expected

    def test_trunk_zero_is_dropped(self):
        assert normalize_phone_to_e164("020 7946 0958", "+44") == "+442079460958"

    @pytest.mark.parametrize("raw", ["+15551234567", "(555) 123-4567", "0044 20 7946 0958"])
    def test_idempotent(self, raw):
        # Arrange
        once = normalize_phone_to_e164(raw)

        # Act
        twice = normalize_phone_to_e164(once)

        # Assert
        assert twice == once

    @pytest.mark.parametrize("raw", ["", "abc", "+0555123", "+1234567890123456", None])
    def test_invalid(self, raw):
        with pytest.raises(InvalidPhoneNumberError):
            normalize_phone_to_e164(raw)

    def test_custom_field_name_is_reported(self):
        with pytest.raises(InvalidPhoneNumberError) as exc_info:
            normalize_phone_to_e164("abc", field="phone_number")

        assert exc_info.value.field == "phone_number"


class TestIdentifier:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("user@example.com", IdentifierType.EMAIL),
            ("+15551234567", IdentifierType.PHONE),
            ("(555) 123-4567", IdentifierType.PHONE),
            ("+0123456789", IdentifierType.INVALID),
            ("user@invalid", IdentifierType.INVALID),
            ("john_doe", IdentifierType.INVALID),
            ("<script>@x.com", IdentifierType.INVALID),
            ("", IdentifierType.INVALID),
            (None, IdentifierType.INVALID),
        ],
    )
    def test_identify(self, value, expected):
        assert identify_email_or_phone(value) is expected

    def test_normalize_email_identifier(self):
        assert normalize_identifier("Ada@Example.com") == (IdentifierType.EMAIL, "ada@example.com")

    def test_normalize_phone_identifier(self):
        assert normalize_identifier("555 123 4567") == (IdentifierType.PHONE, "+15551234567")

    def test_normalize_invalid_identifier(self):
        with pytest.raises(InvalidIdentifierError):
            normalize_identifier("not an identifier")


class TestCodes:
    @pytest.mark.parametrize("code", ["1234", "123456"])
    def test_numeric_otp(self, code):
        assert is_valid_otp(code) is True

    @pytest.mark.parametrize("code", ["12345", "12a456", "", "１２３４５６", None])
    def test_invalid_otp(self, code):
        assert is_valid_otp(code) is False

    def test_alphanumeric_otp_with_custom_lengths(self):
        assert is_valid_otp("AB12CD34", allowed_lengths=[8], allow_alphanumeric=True) is True
        assert is_valid_otp("AB12CD34", allowed_lengths=[8]) is False

    @pytest.mark.parametrize("code", ["ABCD1234", "ABCD-1234", "abcd-efgh-1234"])
    def test_valid_backup_codes(self, code):
        assert is_valid_backup_code(code) is True

    @pytest.mark.parametrize("code", ["ABC123", "ABCD--1234", "-ABCD1234", "ABCD 1234", "A" * 13])
    def test_invalid_backup_codes(self, code):
        assert is_valid_backup_code(code) is False


class TestUrl:
    @pytest.mark.parametrize(
        "url", ["https://example.com", "http://sub.example.com/path?q=1", "https://8.8.8.8/"]
    )
    def test_valid(self, url):
        assert is_valid_url(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://example.com",
            "javascript:alert(1)",
            "https://localhost:8000",
            "http://127.0.0.1/admin",
            "https://",
            "example.com",
            "",
        ],
    )
    def test_invalid(self, url):
        assert is_valid_url(url) is False


class TestTenantSlug:
    @pytest.mark.parametrize("slug", ["acme-corp", "abc", "team42", "a" * 50])
    def test_valid(self, slug):
        assert is_valid_tenant_slug(slug) is True

    @pytest.mark.parametrize(
        "slug",
        ["ab", "-acme", "acme-", "acme--corp", "Acme", "acme_corp", "admin", "api", "a" * 51],
    )
    def test_invalid(self, slug):
        assert is_valid_tenant_slug(slug) is False


class TestMiscellaneous:
    def test_uuid_v4(self):
        assert is_valid_uuid_v4("3f2b8c1e-5d4a-4b7e-9c2f-1a6d8e0b4c7a") is True
        assert is_valid_uuid_v4("3f2b8c1e-5d4a-1b7e-9c2f-1a6d8e0b4c7a") is False
        assert is_valid_uuid_v4("not-a-uuid") is False

    @pytest.mark.parametrize(
        "value", ["2024-05-17T12:30:00Z", "2024-05-17T12:30:00+02:00", datetime(2024, 5, 17)]
    )
    def test_valid_timestamps(self, value):
        assert is_valid_timestamp(value) is True

    @pytest.mark.parametrize("value", ["yesterday", "", "2024-13-01", 1715949000])
    def test_invalid_timestamps(self, value):
        assert is_valid_timestamp(value) is False

    def test_ip_addresses(self):
        assert is_valid_ip_address("203.0.113.7") is True
        assert is_valid_ip_address("2001:db8::1") is True
        assert is_valid_ip_address("999.1.1.1") is False

    def test_user_agent(self):
        assert is_valid_user_agent("Mozilla/5.0 (X11; Linux x86_64)") is True
        assert is_valid_user_agent("bad\nagent") is False
        assert is_valid_user_agent("x" * 513) is False

    def test_country_and_currency_codes(self):
        assert is_valid_country_code("US") is True
        assert is_valid_country_code("DE") is True
        assert is_valid_country_code("us") is False
        assert is_valid_country_code("ZZ") is False
        assert is_valid_currency_code("EUR") is True
        assert is_valid_currency_code("XYZ") is False

    def test_language_codes(self):
        assert is_valid_language_code("en") is True
        assert is_valid_language_code("pt-BR") is True
        assert is_valid_language_code("english") is False

    @pytest.mark.parametrize(
        "zone", ["UTC", "Europe/Berlin", "America/Argentina/Buenos_Aires", "Etc/GMT+5"]
    )
    def test_valid_timezones(self, zone):
        assert is_valid_timezone(zone) is True

    @pytest.mark.parametrize("zone", ["berlin", "Europe", "", "Europe/Berlin/Mitte/West"])
    def test_invalid_timezones(self, zone):
        assert is_valid_timezone(zone) is False
