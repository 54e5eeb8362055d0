"""Errors raised by the directory services and mapped to HTTP statuses by the routers."""


class RecordNotFoundError(LookupError):
    """The requested record ID does not resolve."""


class AccessDeniedError(PermissionError):
    """The record exists but the requester may not perform the operation."""


class RecordValidationError(ValueError):
    """A structural or range constraint was violated; nothing was written."""


class RetrievalError(RuntimeError):
    """The record store failed while serving a listing."""


class AuthenticationRequiredError(PermissionError):
    """The operation needs an identified requester."""
