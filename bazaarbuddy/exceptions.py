"""Domain errors; each one knows the HTTP status it renders as."""


class ApiError(Exception):
    """Base for errors that map onto an HTTP response."""

    kind = "internal"
    status = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class Unauthenticated(ApiError):
    kind = "unauthenticated"
    status = 401


class Forbidden(ApiError):
    kind = "forbidden"
    status = 403


class InvalidInput(ApiError):
    kind = "invalid_input"
    status = 400


class NotFound(ApiError):
    kind = "not_found"
    status = 404


class InsufficientStock(InvalidInput):
    kind = "insufficient_stock"

    def __init__(self, item_name, available, requested):
        super().__init__(
            f"Insufficient stock for {item_name}. Available: {available}, Requested: {requested}",
            details={"itemName": item_name, "available": available, "requested": requested},
        )
        self.item_name = item_name
        self.available = available
        self.requested = requested


class InvalidTransition(ApiError):
    kind = "invalid_transition"
    status = 409

    def __init__(self, current, requested):
        super().__init__(
            f"Cannot move order from {current} to {requested}",
            details={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class Conflict(ApiError):
    kind = "conflict"
    status = 409


