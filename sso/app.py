"""
Composition root: wires settings, database, storage and the Authenticator.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from sso.config import Settings, get_settings
from sso.database import close_db, create_engine_and_sessionmaker, init_db
from sso.kernel.identity import Authenticator, JWTIssuer, PasswordHasher
from sso.kernel.storage.sqlalchemy_storage import SQLAlchemyStorage
from sso.logging_config import configure_logging, get_logger


@dataclass
class SSOApp:
    """Everything a transport layer needs to serve register/login."""

    settings: Settings
    engine: AsyncEngine
    storage: SQLAlchemyStorage
    authenticator: Authenticator

    async def aclose(self) -> None:
        await close_db(self.engine)


async def build_app(
    settings: Optional[Settings] = None,
    *,
    create_tables: bool = True,
    setup_logging: bool = True,
) -> SSOApp:
    """
    Build the service from settings.

    Args:
        settings: Settings to use (defaults to environment-loaded settings)
        create_tables: Create missing tables on startup
        setup_logging: Configure the root logger from settings

    Returns:
        The assembled application; call ``aclose()`` on shutdown
    """
    settings = settings or get_settings()

    if setup_logging:
        configure_logging(
            log_level=settings.log_level,
            environment=settings.environment,
            debug=settings.debug,
        )
    logger = get_logger("sso.auth")

    engine, session_maker = create_engine_and_sessionmaker(settings.database_url, settings.debug)
    if create_tables:
        await init_db(engine)

    storage = SQLAlchemyStorage(session_maker)
    authenticator = Authenticator(
        users=storage,
        apps=storage,
        token_ttl=settings.token_ttl,
        logger=logger,
        token_issuer=JWTIssuer(algorithm=settings.jwt_algorithm),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
    )

    logger.info(
        "sso service ready",
        extra={"environment": settings.environment, "token_ttl_minutes": settings.token_ttl_minutes},
    )
    return SSOApp(settings=settings, engine=engine, storage=storage, authenticator=authenticator)
