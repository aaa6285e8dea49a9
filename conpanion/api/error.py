from typing import TypeVar

from fastapi import status

from libs.result import Error, Result

T = TypeVar("T")


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


STATUS_BY_CODE = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_EMAIL": status.HTTP_400_BAD_REQUEST,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    "AUTH_REQUIRED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "WRONG_USER": status.HTTP_403_FORBIDDEN,
    "WRONG_EMAIL": status.HTTP_403_FORBIDDEN,
    "NOT_ORGANIZATION_MEMBER": status.HTTP_403_FORBIDDEN,
    "EMAIL_NOT_CONFIRMED": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ORGANIZATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PROJECT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_INVITATION": status.HTTP_404_NOT_FOUND,
    "ALREADY_MEMBER": status.HTTP_409_CONFLICT,
    "PENDING_INVITATION": status.HTTP_409_CONFLICT,
    "MEMBERSHIP_CONFLICT": status.HTTP_409_CONFLICT,
    "INVITATION_NOT_PENDING": status.HTTP_409_CONFLICT,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "ALREADY_ASSIGNED": status.HTTP_409_CONFLICT,
    "INVITATION_EXPIRED": status.HTTP_410_GONE,
    "RATE_LIMIT_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
}


def unwrap(result: Result[T]) -> T:
    """
    Return the success value or raise the matching HTTP error.

    Known business codes become ClientError with their mapped status,
    anything else (PROCESSING_ERROR included) becomes ServerError.
    """
    if result.is_ok():
        return result.value

    error = result.error
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
