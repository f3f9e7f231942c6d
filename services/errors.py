class ServiceError(Exception):
    """
    Base class for errors a caller can act on.
    Mapped to a 4xx JSON response by the app error handler.
    """
    status_code = 400
    reason = "bad_request"
    message = "Bad request"

    def __init__(self, message=None, reason=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if reason:
            self.reason = reason

    def to_dict(self):
        return {"error": self.message, "reason": self.reason}


class ValidationError(ServiceError):
    status_code = 400
    reason = "invalid_input"
    message = "Invalid input data"


class ConflictError(ServiceError):
    status_code = 409
    reason = "slot_unavailable"
    message = "Time slot is not available"


class ForbiddenError(ServiceError):
    status_code = 403
    reason = "forbidden"
    message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    reason = "not_found"
    message = "Not found"


class AlreadyProcessedError(ServiceError):
    status_code = 400
    reason = "already_processed"
    message = "Already processed"


class CapacityExceededError(ServiceError):
    status_code = 400
    reason = "capacity_exceeded"
    message = "Not enough spots available"
