"""
JWT access token issuance and verification.
"""

from datetime import datetime, timezone
from typing import Protocol

from jose import JOSEError, jwt
from pydantic import BaseModel

from sso.kernel.identity.errors import TokenIssuanceError, TokenVerificationError
from sso.kernel.models import Application, User


class AccessTokenClaims(BaseModel):
    """Decoded access token."""

    uid: int
    email: str
    app_id: int
    iat: datetime
    exp: datetime


class TokenIssuer(Protocol):
    """Turns a user, an application and a validity window into a signed token."""

    def issue(
        self,
        user: User,
        app: Application,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        ...


class JWTIssuer:
    """
    Signs access tokens with the requesting application's secret.

    Claims: uid, email, app_id, iat, exp.
    """

    def __init__(self, algorithm: str = "HS256"):
        self.algorithm = algorithm

    def issue(
        self,
        user: User,
        app: Application,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user: The authenticated user
            app: The application the token is scoped to
            issued_at: Issue time (timezone-aware)
            expires_at: Expiry time (timezone-aware)

        Returns:
            Encoded JWT

        Raises:
            TokenIssuanceError: If the token cannot be signed
        """
        if not app.secret:
            raise TokenIssuanceError("JWTIssuer.issue", "application has no signing secret")

        claims = {
            "uid": user.id,
            "email": user.email,
            "app_id": app.id,
            "iat": issued_at,
            "exp": expires_at,
        }

        try:
            return jwt.encode(claims, app.secret, algorithm=self.algorithm)
        except (JOSEError, NotImplementedError, ValueError, TypeError) as e:
            raise TokenIssuanceError("JWTIssuer.issue") from e


def decode_access_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
) -> AccessTokenClaims:
    """
    Verify and decode an access token.

    A token is rejected from the instant ``now >= exp``, with no leeway.
    python-jose truncates ``now`` to whole seconds and still accepts
    ``exp == now``, so the expiry is checked again here against the
    sub-second clock.

    Raises:
        TokenVerificationError: If the signature, expiry or claim set is invalid
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JOSEError as e:
        raise TokenVerificationError(str(e)) from e

    try:
        claims = AccessTokenClaims(
            uid=payload["uid"],
            email=payload["email"],
            app_id=payload["app_id"],
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TokenVerificationError("malformed token claims") from e

    if claims.exp <= datetime.now(timezone.utc):
        raise TokenVerificationError("Signature has expired.")
    return claims
