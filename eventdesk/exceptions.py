"""Exception hierarchy for EventDesk.

Each error carries the HTTP status it maps to and a client-safe ``detail``.
The application installs a single handler that renders them as
``{"detail": ...}``.
"""


class EventDeskError(Exception):
    """Base exception for all EventDesk errors."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class MalformedInputError(EventDeskError):
    """Raised when an identifier is missing or not a positive integer."""

    status_code = 400
    default_detail = "Malformed identifier"


class TenantContextMissingError(EventDeskError):
    """Raised when no event can be resolved for a request."""

    status_code = 400
    default_detail = "Event context required"


class TenantNotFoundError(EventDeskError):
    """Raised when a resolved event id has no live event record."""

    status_code = 404
    default_detail = "Event not found"


class NoEventsFoundError(TenantNotFoundError):
    """Raised when the principal has no visible events to fall back to."""

    default_detail = "No events found"


class AccessDeniedError(EventDeskError):
    """Raised when the principal may not act on the resolved event.

    Rendered as 404 "Event not found" unless ``conceal_denied_events`` is off.
    """

    status_code = 403
    default_detail = "You do not have permission to access this event"


class ResourceNotInTenantError(EventDeskError):
    """Raised when a scoped resource is absent or lives under another event."""

    status_code = 404
    default_detail = "Resource not found"

    def __init__(self, label: str = "Resource") -> None:
        self.label = label
        super().__init__(f"{label} not found")


class SessionPersistenceError(EventDeskError):
    """Raised when the session store did not acknowledge a write."""

    status_code = 500
    default_detail = "Failed to persist session"


class SessionExpiredError(EventDeskError):
    """Raised when a session vanished (logout, expiry) before a write could land."""

    status_code = 401
    default_detail = "Not authenticated"


class ConflictError(EventDeskError):
    """Raised when a write collides with an existing record."""

    status_code = 409
    default_detail = "Conflict"


class StorageError(EventDeskError):
    """Raised when storage operations fail."""

    default_detail = "Storage operation failed"
