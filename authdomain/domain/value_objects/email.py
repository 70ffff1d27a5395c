"""A Value Object representing an account email address.

As a Value Object it is immutable, and equality is based on its normalized
value rather than its identity.
"""

from dataclasses import dataclass

from structlog import get_logger

from authdomain.core.exceptions import InvalidEmailError
from authdomain.domain.validation.primitives import validate_email

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    The address is stripped and lower-cased on construction, so two `Email`
    objects built from ``"User@Example.com "`` and ``"user@example.com"`` are
    equal.

    Attributes:
        value: The normalized string representation of the address.

    Raises:
        InvalidEmailError: If the address is not acceptable.
    """

    value: str

    def __post_init__(self):
        """Performs validation and normalization after initialization."""
        if not isinstance(self.value, str):
            raise InvalidEmailError()
        object.__setattr__(self, "value", validate_email(self.value))
        logger.debug("email_validated", email=self.mask_for_logging())

    @property
    def domain(self) -> str:
        """Returns the domain part of the email address."""
        return self.value.rsplit("@", 1)[1]

    @property
    def local_part(self) -> str:
        """Returns the local part of the email address (before the '@')."""
        return self.value.rsplit("@", 1)[0]

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'us**@e*****.com'
        """
        local, domain_part = self.value.rsplit("@", 1)
        name, _, tld = domain_part.rpartition(".")
        masked_local = f"{local[:2]}{'*' * max(len(local) - 2, 0)}"
        masked_domain = f"{name[:1]}{'*' * max(len(name) - 1, 0)}.{tld}"
        return f"{masked_local}@{masked_domain}"

    def __str__(self) -> str:
        return self.value
