"""
Error taxonomy for the Authenticator.

Every failure carries a kind, the name of the operation it came from and the
underlying cause (as ``__cause__``). Only invalid credentials and duplicate
registrations are meant for clients; everything else is reported as an opaque
internal failure via ``public_message``.
"""

from enum import Enum
from typing import Optional

INTERNAL_ERROR_MESSAGE = "internal error"


class AuthErrorKind(str, Enum):
    """Enumerated failure kinds."""
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_ALREADY_EXISTS = "user_already_exists"
    STORAGE_FAILURE = "storage_failure"
    APPLICATION_RESOLUTION_FAILURE = "application_resolution_failure"
    HASHING_FAILURE = "hashing_failure"
    TOKEN_ISSUANCE_FAILURE = "token_issuance_failure"
    CANCELLED = "cancelled"


class AuthError(Exception):
    """Base class for Authenticator failures."""

    kind: AuthErrorKind
    default_message: str = INTERNAL_ERROR_MESSAGE
    client_facing: bool = False

    def __init__(self, op: str, message: Optional[str] = None) -> None:
        self.op = op
        self.message = message or self.default_message
        super().__init__(f"{op}: {self.message}")

    @property
    def public_message(self) -> str:
        """Message safe to show to an end user."""
        if self.client_facing:
            return self.message
        return INTERNAL_ERROR_MESSAGE


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password. The two cases are deliberately merged."""

    kind = AuthErrorKind.INVALID_CREDENTIALS
    default_message = "invalid credentials"
    client_facing = True


class UserAlreadyExistsError(AuthError):
    kind = AuthErrorKind.USER_ALREADY_EXISTS
    default_message = "user already exists"
    client_facing = True


class StorageFailureError(AuthError):
    kind = AuthErrorKind.STORAGE_FAILURE
    default_message = "storage failure"


class ApplicationResolutionError(AuthError):
    kind = AuthErrorKind.APPLICATION_RESOLUTION_FAILURE
    default_message = "failed to resolve application"


class HashingError(AuthError):
    kind = AuthErrorKind.HASHING_FAILURE
    default_message = "failed to hash password"


class TokenIssuanceError(AuthError):
    kind = AuthErrorKind.TOKEN_ISSUANCE_FAILURE
    default_message = "failed to issue token"


class OperationCancelledError(AuthError):
    """The call's deadline expired before it finished."""

    kind = AuthErrorKind.CANCELLED
    default_message = "operation cancelled"


class TokenVerificationError(Exception):
    """Raised by downstream verifiers when a token is expired or forged."""
