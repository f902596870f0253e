"""
Error taxonomy

Services raise these; the API layer turns them into a status code and a
`{"message": ...}` body (see main.py).
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed or missing input."""
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """A record with the same id already exists."""
    status_code = 409


class AuthError(ServiceError):
    """Bad credentials, or a missing/unknown session token."""
    status_code = 401


class StorageError(ServiceError):
    """A collection file is missing, unreadable or corrupt."""
    status_code = 500
