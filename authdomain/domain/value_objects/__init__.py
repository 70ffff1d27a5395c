"""Domain Value Objects for the authentication domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity. They are essential building blocks in Domain-Driven Design.
"""

from .email import Email
from .phone import PhoneNumber

__all__ = [
    "Email",
    "PhoneNumber",
]
