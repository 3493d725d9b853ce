"""Role-gated, audited administration of translation content."""

from glossa.admin.service import LocalizationAdmin, authorize

__all__ = ["LocalizationAdmin", "authorize"]
