"""
Authenticator: user registration and login.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from sso.kernel.identity.errors import (
    ApplicationResolutionError,
    AuthError,
    HashingError,
    InvalidCredentialsError,
    OperationCancelledError,
    StorageFailureError,
    TokenIssuanceError,
    UserAlreadyExistsError,
)
from sso.kernel.identity.jwt import JWTIssuer, TokenIssuer
from sso.kernel.identity.password import PasswordHasher
from sso.kernel.storage import (
    ApplicationRegistry,
    UserDirectory,
    UserExistsError,
    UserNotFoundError,
)


_DUMMY_PASSWORD = "unknown-user-placeholder"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_credentials(email: str, password: str) -> None:
    if not email:
        raise ValueError("email must not be empty")
    if not password:
        raise ValueError("password must not be empty")


class Authenticator:
    """
    Registers users and exchanges credentials for access tokens.

    Holds only its collaborators, the token TTL and a cached placeholder
    hash, so one instance can serve any number of concurrent requests. Email
    uniqueness is left to the User Directory; its conflict report is
    authoritative.

    Every failure is raised as an AuthError subclass tagged with the
    operation name. Nothing is retried.

    Usage:
        auth = Authenticator(users=storage, apps=storage,
                             token_ttl=timedelta(hours=1), logger=logger)
        user_id = await auth.register("a@x.com", "pw123456")
        token = await auth.login("a@x.com", "pw123456", app_id=1)
    """

    def __init__(
        self,
        users: UserDirectory,
        apps: ApplicationRegistry,
        token_ttl: timedelta,
        logger: logging.Logger,
        token_issuer: Optional[TokenIssuer] = None,
        hasher: Optional[PasswordHasher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if token_ttl <= timedelta(0):
            raise ValueError("token_ttl must be positive")

        self.users = users
        self.apps = apps
        self.token_ttl = token_ttl
        self.logger = logger
        self.token_issuer = token_issuer or JWTIssuer()
        self.hasher = hasher or PasswordHasher()
        self.clock = clock or _utcnow
        self._dummy_password_hash: Optional[bytes] = None

    async def register(
        self,
        email: str,
        password: str,
        *,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Register a new user.

        Args:
            email: User's email address
            password: Plain text password (never logged)
            timeout: Deadline for the whole call, in seconds

        Returns:
            The new user's id

        Raises:
            ValueError: If email or password is empty
            HashingError: If the password cannot be hashed
            UserAlreadyExistsError: If the email is already registered
            StorageFailureError: On any other directory failure
            OperationCancelledError: If the deadline expires
        """
        op = "Authenticator.register"
        _require_credentials(email, password)

        extra = {"op": op, "email": email}
        self.logger.info("registering user", extra=extra)

        try:
            async with asyncio.timeout(timeout):
                user_id = await self._register(op, extra, email, password)
        except TimeoutError as e:
            self._log_failure(OperationCancelledError(op), extra)
            raise OperationCancelledError(op) from e

        self.logger.info("user registered", extra={**extra, "user_id": user_id})
        return user_id

    async def _register(self, op: str, extra: Dict[str, Any], email: str, password: str) -> int:
        password_hash = await self._hash(op, extra, password)

        try:
            return await self.users.save_user(email, password_hash)
        except UserExistsError as e:
            raise self._fail(UserAlreadyExistsError(op), extra) from e
        except Exception as e:
            raise self._fail(StorageFailureError(op), extra, reason=repr(e)) from e

    async def login(
        self,
        email: str,
        password: str,
        app_id: int,
        *,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Check credentials and issue an access token for an application.

        Unknown email and wrong password raise the same error.

        Args:
            email: User's email
            password: Plain text password (never logged)
            app_id: Application the token is scoped to
            timeout: Deadline for the whole call, in seconds

        Returns:
            Signed access token

        Raises:
            ValueError: If email or password is empty
            InvalidCredentialsError: Unknown email or wrong password
            HashingError: If password verification fails unexpectedly
            StorageFailureError: If the user lookup fails
            ApplicationResolutionError: If the application cannot be resolved
            TokenIssuanceError: If signing fails
            OperationCancelledError: If the deadline expires
        """
        op = "Authenticator.login"
        _require_credentials(email, password)

        extra = {"op": op, "email": email, "app_id": app_id}
        self.logger.info("attempting to login user", extra=extra)

        try:
            async with asyncio.timeout(timeout):
                token = await self._login(op, extra, email, password, app_id)
        except TimeoutError as e:
            self._log_failure(OperationCancelledError(op), extra)
            raise OperationCancelledError(op) from e

        return token

    async def _login(
        self,
        op: str,
        extra: Dict[str, Any],
        email: str,
        password: str,
        app_id: int,
    ) -> str:
        try:
            user = await self.users.get_user(email)
        except UserNotFoundError:
            user = None
        except Exception as e:
            raise self._fail(StorageFailureError(op), extra, reason=repr(e)) from e

        if user is None:
            # Same bcrypt cost as a wrong password, so timing does not reveal unknown emails
            await self._verify(op, extra, password, await self._dummy_hash(op, extra))
            raise self._fail(InvalidCredentialsError(op), extra, reason="user not found") from None

        if not await self._verify(op, extra, password, user.password_hash):
            raise self._fail(InvalidCredentialsError(op), extra, reason="password mismatch") from None

        try:
            app = await self.apps.get_application(app_id)
        except Exception as e:
            raise self._fail(ApplicationResolutionError(op), extra, reason=repr(e)) from e

        issued_at = self.clock().replace(microsecond=0)
        expires_at = issued_at + self.token_ttl

        try:
            token = self.token_issuer.issue(user, app, issued_at, expires_at)
        except Exception as e:
            raise self._fail(TokenIssuanceError(op), extra, reason=repr(e)) from e

        self.logger.info("user logged in successfully", extra={**extra, "user_id": user.id})
        return token

    async def _hash(self, op: str, extra: Dict[str, Any], password: str) -> bytes:
        try:
            return await asyncio.to_thread(self.hasher.hash, password)
        except HashingError as e:
            cause = e.__cause__
            raise self._fail(HashingError(op), extra, reason=repr(cause or e)) from cause
        except Exception as e:
            raise self._fail(HashingError(op), extra, reason=repr(e)) from e

    async def _verify(self, op: str, extra: Dict[str, Any], password: str, password_hash: bytes) -> bool:
        try:
            return await asyncio.to_thread(self.hasher.verify, password, password_hash)
        except Exception as e:
            raise self._fail(HashingError(op), extra, reason=repr(e)) from e

    async def _dummy_hash(self, op: str, extra: Dict[str, Any]) -> bytes:
        """Hash at the configured cost, compared against when the email is unknown."""
        if self._dummy_password_hash is None:
            self._dummy_password_hash = await self._hash(op, extra, _DUMMY_PASSWORD)
        return self._dummy_password_hash

    def _fail(self, error: AuthError, extra: Dict[str, Any], reason: Optional[str] = None) -> AuthError:
        self._log_failure(error, extra, reason)
        return error

    def _log_failure(self, error: AuthError, extra: Dict[str, Any], reason: Optional[str] = None) -> None:
        fields = {**extra, "error_kind": error.kind.value}
        if reason:
            fields["reason"] = reason
        # Bad credentials and duplicates are routine; everything else is an ERROR
        level = logging.INFO if error.client_facing else logging.ERROR
        self.logger.log(level, error.message, extra=fields)
