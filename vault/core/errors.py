"""Domain errors raised by the services and mapped to HTTP responses in vault.main."""

from fastapi import status


class VaultError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(VaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidCode(VaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid OTP"


class NotEnabled(VaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Authenticator is not enabled"


class AlreadyEnabled(VaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Authenticator is already enabled"


class Unauthorized(VaultError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class NotFound(VaultError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Internal(VaultError):
    pass
