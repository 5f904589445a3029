"""Domain errors raised by the lifecycle services.

Every error carries a stable ``code``, a human readable message, a
``detail`` payload the HTTP layer passes through unchanged, and the HTTP
status it maps to.
"""

from typing import Any


class CableIndexError(Exception):
    """Base class for domain errors."""

    code = "error"
    status_code = 400

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "detail": self.detail}


class NotFound(CableIndexError):
    """Target row is absent or belongs to another site."""

    code = "not_found"
    status_code = 404


class SiteNotFound(NotFound):
    """The site does not exist."""

    code = "site_not_found"

    def __init__(self, site_id: int):
        super().__init__(f"Site {site_id} not found", {"site_id": site_id})
        self.site_id = site_id


class InvalidReference(CableIndexError):
    """A foreign id does not exist or crosses a site boundary."""

    code = "invalid_reference"
    status_code = 400

    def __init__(self, field: str, value: int):
        super().__init__(f"{field} {value} does not exist in this site", {"field": field, "value": value})
        self.field = field
        self.value = value


class InUse(CableIndexError):
    """Deletion blocked by live references."""

    code = "in_use"
    status_code = 409

    def __init__(self, usage: Any, message: str = "Row is referenced by existing records"):
        counts = dict(usage.counts) if hasattr(usage, "counts") else dict(usage)
        super().__init__(message, {"usage": counts, "total_in_use": sum(counts.values())})
        self.usage = usage


class InvalidReplacement(CableIndexError):
    """Reassignment target is missing, in another site, or the row itself."""

    code = "invalid_replacement"
    status_code = 400


class DuplicateKey(CableIndexError):
    """A unique constraint was violated."""

    code = "duplicate_key"
    status_code = 409


class ValidationFailed(CableIndexError):
    """Record fields failed validation for the requested kind."""

    code = "validation_failed"
    status_code = 422

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message, {"errors": errors or []})
        self.errors = errors or []
