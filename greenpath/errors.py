"""
Domain errors raised by the booking core.

Every error carries a `kind` (the name clients see in the response body)
and the HTTP status it is rendered with. Routers never build HTTPException
for these themselves; the handler in `greenpath.main` does it.
"""


class BookingError(Exception):
    kind = "Error"
    statusCode = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def toDict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class NotFoundError(BookingError):
    kind = "NotFound"
    statusCode = 404


class InactiveTourError(BookingError):
    kind = "Inactive"


class CapacityExceededError(BookingError):
    kind = "CapacityExceeded"

    def __init__(self, message: str, availableSpots: int = 0):
        self.availableSpots = availableSpots
        super().__init__(message)


class PaymentIncompleteError(BookingError):
    kind = "PaymentIncomplete"


class ForbiddenError(BookingError):
    kind = "Forbidden"
    statusCode = 403


class HasBookingsError(BookingError):
    kind = "HasBookings"


class InvalidRequestError(BookingError):
    kind = "ValidationError"


class UnauthorizedError(BookingError):
    kind = "Unauthorized"
    statusCode = 401
