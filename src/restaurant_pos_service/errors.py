"""Typed failures raised by the POS components.

Components raise these; the API boundary maps each family to a status code and
returns the message to the caller verbatim.
"""


class PosServiceError(Exception):
    """Base class for all service failures."""

    status_code = 500


class ValidationError(PosServiceError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(PosServiceError):
    """Entity missing for the given identifier."""

    status_code = 404


class DuplicateKeyError(PosServiceError):
    """A uniqueness condition was violated on write."""

    status_code = 409


class UnauthorizedError(PosServiceError):
    """Login failure. Subclasses give the reason."""

    status_code = 401


class UserNotFoundError(UnauthorizedError):
    """No user matches the username."""


class AccountDisabledError(UnauthorizedError):
    """The user exists but is deactivated."""


class InvalidCredentialsError(UnauthorizedError):
    """Password digest mismatch."""


class RoleMismatchError(UnauthorizedError):
    """The user is not allowed to log in with the requested role."""


class StoreError(PosServiceError):
    """Unexpected failure talking to DynamoDB."""

    status_code = 500
