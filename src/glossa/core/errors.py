"""Error taxonomy for the localization core.

Every failure a caller can act on is a :class:`LocalizationError` carrying
an :class:`~glossa.core.types.ErrorKind`. The web layer maps kinds to HTTP
status codes; scripts and tests match on the concrete classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from glossa.core.types import ErrorKind

if TYPE_CHECKING:
    from glossa.translations.models import ImportResult


class LocalizationError(Exception):
    """Base class for all taxonomy errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFoundError(LocalizationError):
    """A key, language or bundle file does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(LocalizationError):
    """A language code or key name is already taken."""

    kind = ErrorKind.CONFLICT


class ValidationError(LocalizationError):
    """Malformed key name, language code, document, or missing value."""

    kind = ErrorKind.VALIDATION


class UpstreamProviderError(LocalizationError):
    """The text-generation provider produced no usable candidate."""

    kind = ErrorKind.UPSTREAM_PROVIDER


class PartialBatchFailure(LocalizationError):
    """A batch finished with some entries failing.

    Batch operations return their result instead of raising; this is only
    raised on request via :meth:`ImportResult.raise_for_errors`.
    """

    kind = ErrorKind.PARTIAL_BATCH

    def __init__(self, message: str, result: ImportResult) -> None:
        super().__init__(message)
        self.result = result


class AuthenticationRequired(LocalizationError):
    """No identity was supplied for an admin operation."""

    kind = ErrorKind.AUTHENTICATION


class PermissionDenied(LocalizationError):
    """The identity lacks the admin role."""

    kind = ErrorKind.PERMISSION
