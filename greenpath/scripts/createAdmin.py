"""
Promote an already registered user to ADMIN.

    python -m greenpath.scripts.createAdmin someone@example.com
"""
import argparse

from greenpath.config import configureLogging, getSettings
from greenpath.db.database import createDbEngine, createSessionFactory
from greenpath.db.userUtils import promoteToAdmin
from greenpath.errors import NotFoundError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant the ADMIN role to a registered user")
    parser.add_argument("email")
    args = parser.parse_args(argv)

    settings = getSettings()
    configureLogging(settings.LOG_LEVEL)

    engine = createDbEngine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    db = createSessionFactory(engine)()
    try:
        user = promoteToAdmin(db, args.email)
    except NotFoundError as e:
        print(e.message)
        return 1
    finally:
        db.close()
        engine.dispose()

    print("Promoted", user.email, "to ADMIN")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
