"""The outcome of a whole-form validation pass."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from authdomain.core.exceptions import AuthDomainError


@dataclass(frozen=True)
class ValidationResult:
    """Either valid with no errors, or invalid with at least one typed error.

    Build instances through ``valid()`` and ``invalid(errors)``; the
    constructor rejects any other combination. Truthiness follows ``is_valid``.
    """

    is_valid: bool
    errors: Tuple[AuthDomainError, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "errors", tuple(self.errors))
        if self.is_valid and self.errors:
            raise ValueError("A valid result cannot carry errors.")
        if not self.is_valid and not self.errors:
            raise ValueError("An invalid result requires at least one error.")
        for error in self.errors:
            if not isinstance(error, AuthDomainError):
                raise ValueError(f"Unsupported error type: {type(error).__name__}")

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, errors: Iterable[AuthDomainError]) -> "ValidationResult":
        return cls(is_valid=False, errors=tuple(errors))

    @classmethod
    def from_errors(cls, errors: Iterable[AuthDomainError]) -> "ValidationResult":
        """Valid when ``errors`` is empty, invalid otherwise."""
        collected = tuple(errors)
        return cls.invalid(collected) if collected else cls.valid()

    def __bool__(self) -> bool:
        return self.is_valid

    @property
    def first_error(self) -> Optional[AuthDomainError]:
        return self.errors[0] if self.errors else None

    @property
    def error_codes(self) -> Tuple[str, ...]:
        return tuple(error.code for error in self.errors)

    def errors_for(self, field_name: str) -> Tuple[AuthDomainError, ...]:
        return tuple(error for error in self.errors if error.field == field_name)

    def raise_first(self) -> None:
        """Raises the first collected error, if any."""
        if self.errors:
            raise self.errors[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [error.to_dict() for error in self.errors],
        }
