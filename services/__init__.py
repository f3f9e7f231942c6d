from .errors import (
    ServiceError,
    ValidationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    AlreadyProcessedError,
    CapacityExceededError,
)
