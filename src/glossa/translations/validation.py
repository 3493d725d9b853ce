"""Input rules for language codes, key names and translation values."""

from __future__ import annotations

import re
from typing import Any

from glossa.core.errors import ValidationError

KEY_NAME_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100
LANGUAGE_CODE_MAX_LENGTH = 10
LANGUAGE_NAME_MAX_LENGTH = 100

_KEY_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*$")
_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})?$")


def validate_key_name(key_name: Any) -> str:
    if not isinstance(key_name, str) or not key_name:
        raise ValidationError("Translation key name is required")
    if len(key_name) > KEY_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Translation key name exceeds {KEY_NAME_MAX_LENGTH} characters",
            key_name=key_name,
        )
    if not _KEY_NAME_RE.match(key_name):
        raise ValidationError(
            f"Malformed translation key name {key_name!r}: use dot-separated "
            "segments of letters, digits, '_' or '-'",
            key_name=key_name,
        )
    return key_name


def validate_description(description: Any) -> str | None:
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string")
    return description


def validate_category(category: Any) -> str | None:
    if category is None:
        return None
    if not isinstance(category, str):
        raise ValidationError("Category must be a string")
    if len(category) > CATEGORY_MAX_LENGTH:
        raise ValidationError(f"Category exceeds {CATEGORY_MAX_LENGTH} characters")
    return category


def validate_language_code(code: Any) -> str:
    if not isinstance(code, str) or not code:
        raise ValidationError("Language code is required")
    if len(code) > LANGUAGE_CODE_MAX_LENGTH or not _LANGUAGE_CODE_RE.match(code):
        raise ValidationError(f"Malformed language code {code!r}", code=code)
    return code


def validate_language_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Language name is required")
    if len(name) > LANGUAGE_NAME_MAX_LENGTH:
        raise ValidationError(f"Language name exceeds {LANGUAGE_NAME_MAX_LENGTH} characters")
    return name.strip()


def validate_value(value: Any) -> str:
    """A value may be empty but must be present and a string."""
    if value is None:
        raise ValidationError("Translation value is required")
    if not isinstance(value, str):
        raise ValidationError("Translation value must be a string")
    return value


def validate_document(document: Any) -> dict[str, str]:
    """Check a static bundle document is a flat key -> text map."""
    if not isinstance(document, dict):
        raise ValidationError("Static document must be an object of key -> text")
    for key, value in document.items():
        validate_key_name(key)
        if not isinstance(value, str):
            raise ValidationError(
                f"Static document value for {key!r} must be a string", key_name=key
            )
    return dict(document)
