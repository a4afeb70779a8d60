from fastapi import status


class ServiceError(Exception):
    """Base class for failures raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "Bad Request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(ServiceError):
    """Input is well-formed but violates a domain rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Validation Failed"


class Conflict(ServiceError):
    """Duplicate name/username/email, or a delete blocked by children."""

    status_code = status.HTTP_409_CONFLICT
    title = "Conflict"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"


class AccessDenied(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Access Denied"

    def __init__(self, message: str = "You don't have permission to access this resource"):
        super().__init__(message)


class AuthenticationFailure(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)
