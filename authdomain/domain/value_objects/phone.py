"""A Value Object representing a phone number in E.164 form."""

from dataclasses import dataclass
from typing import Optional

from structlog import get_logger

from authdomain.domain.validation.primitives import normalize_phone_to_e164, validate_phone

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """An immutable E.164 phone number (``+[country][subscriber]``).

    The constructor only accepts numbers already in E.164 form; use
    ``PhoneNumber.parse`` for user input.

    Raises:
        InvalidPhoneNumberError: If the number is not valid E.164.
    """

    value: str

    def __post_init__(self):
        validate_phone(self.value)

    @classmethod
    def parse(cls, raw: str, default_country_code: Optional[str] = None) -> "PhoneNumber":
        """Normalizes user input (separators, trunk zero, missing country code)."""
        phone = cls(normalize_phone_to_e164(raw, default_country_code))
        logger.debug("phone_number_parsed", phone=phone.mask_for_logging())
        return phone

    def mask_for_logging(self) -> str:
        """Keeps the ``+``, the first two digits and the last two digits.

        Example: '+15551234567' -> '+15*******67'
        """
        digits = self.value[1:]
        if len(digits) <= 4:
            return "+" + "*" * len(digits)
        return f"+{digits[:2]}{'*' * (len(digits) - 4)}{digits[-2:]}"

    def __str__(self) -> str:
        return self.value
