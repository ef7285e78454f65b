"""Domain errors raised by use cases and mapped to HTTP responses."""


class DomainError(Exception):
    """Base class for failures the API reports back to the caller."""
    status_code = 400


class InvalidInputError(DomainError):
    status_code = 400


class UnauthorizedError(DomainError):
    status_code = 401


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    status_code = 409
