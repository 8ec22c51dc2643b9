"""
Identity Core - password hashing, token issuance and authentication.
"""

from sso.kernel.identity.password import PasswordHasher, verify_password, hash_password
from sso.kernel.identity.jwt import (
    AccessTokenClaims,
    JWTIssuer,
    TokenIssuer,
    decode_access_token,
)
from sso.kernel.identity.errors import (
    ApplicationResolutionError,
    AuthError,
    AuthErrorKind,
    HashingError,
    InvalidCredentialsError,
    OperationCancelledError,
    StorageFailureError,
    TokenIssuanceError,
    TokenVerificationError,
    UserAlreadyExistsError,
)
from sso.kernel.identity.authenticator import Authenticator

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "AccessTokenClaims",
    "JWTIssuer",
    "TokenIssuer",
    "decode_access_token",
    "AuthError",
    "AuthErrorKind",
    "ApplicationResolutionError",
    "HashingError",
    "InvalidCredentialsError",
    "OperationCancelledError",
    "StorageFailureError",
    "TokenIssuanceError",
    "TokenVerificationError",
    "UserAlreadyExistsError",
    "Authenticator",
]
