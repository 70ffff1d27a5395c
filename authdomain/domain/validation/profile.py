"""Validators for free-text profile fields.

The profanity filter is a case-insensitive substring match against a short,
fixed word list. It is a best-effort content filter for display fields and
not a security control.
"""

import re
from typing import Any, FrozenSet

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
TEXT_FIELD_MIN_LENGTH = 2
TEXT_FIELD_MAX_LENGTH = 100
BIO_MAX_LENGTH = 500
BIO_MIN_WORDS = 3

# Letters (any script) separated by single inner spaces, hyphens or apostrophes.
_NAME_PATTERN = re.compile(r"^[^\W\d_]+(?:[ '\-][^\W\d_]+)*$")
_TEXT_FIELD_PATTERN = re.compile(r"^[\w][\w .,&()'/\-]*$")

PROFANITY_WORDS: FrozenSet[str] = frozenset(
    {"fuck", "shit", "bitch", "bastard", "asshole", "dickhead", "cunt", "whore", "slut"}
)


def contains_profanity(text: Any) -> bool:
    if not isinstance(text, str):
        return False
    lowered = text.lower()
    return any(word in lowered for word in PROFANITY_WORDS)


def is_valid_name(name: Any) -> bool:
    """First or last name: 2-50 characters, letters with inner separators."""
    if not isinstance(name, str):
        return False
    candidate = name.strip()
    if not NAME_MIN_LENGTH <= len(candidate) <= NAME_MAX_LENGTH:
        return False
    return bool(_NAME_PATTERN.match(candidate)) and not contains_profanity(candidate)


def _is_valid_text_field(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    if not TEXT_FIELD_MIN_LENGTH <= len(candidate) <= TEXT_FIELD_MAX_LENGTH:
        return False
    return bool(_TEXT_FIELD_PATTERN.match(candidate)) and not contains_profanity(candidate)


def is_valid_job_title(title: Any) -> bool:
    return _is_valid_text_field(title)


def is_valid_department(department: Any) -> bool:
    return _is_valid_text_field(department)


def is_valid_location(location: Any) -> bool:
    return _is_valid_text_field(location)


def is_valid_bio(bio: Any) -> bool:
    """At most 500 characters and at least three words."""
    if not isinstance(bio, str):
        return False
    candidate = bio.strip()
    if len(candidate) > BIO_MAX_LENGTH or len(candidate.split()) < BIO_MIN_WORDS:
        return False
    return not contains_profanity(candidate)
