"""Register a client application and print its id.

Usage:
    python scripts/create_app.py <name> <secret>
"""
import asyncio
import sys

sys.path.insert(0, ".")

from sso.config import get_settings
from sso.database import close_db, create_engine_and_sessionmaker, init_db
from sso.kernel.storage import StorageError
from sso.kernel.storage.sqlalchemy_storage import SQLAlchemyStorage


async def main(name: str, secret: str) -> int:
    settings = get_settings()
    engine, session_maker = create_engine_and_sessionmaker(settings.database_url)
    try:
        await init_db(engine)
        storage = SQLAlchemyStorage(session_maker)
        try:
            app_id = await storage.save_application(name, secret)
        except StorageError as e:
            print(f"Failed: {e}")
            return 1
    finally:
        await close_db(engine)

    print(f"Created app {name!r} with id {app_id}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2])))
