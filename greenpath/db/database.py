from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def createDbEngine(databaseUrl: str, echo: bool = False):
    """
    Build the engine for one application instance.

    SQLite in-memory databases get a single shared connection so every
    session (and the TestClient worker thread) sees the same data.
    """
    if databaseUrl.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if databaseUrl in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(databaseUrl, echo=echo, **kwargs)

    return create_engine(databaseUrl, echo=echo, pool_pre_ping=True)


def importModels():
    """Register every mapped class on Base so relationships resolve."""
    from greenpath.models import booking, tour, user  # noqa: F401


def createSessionFactory(engine):
    importModels()
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def createTables(engine):
    importModels()
    Base.metadata.create_all(bind=engine)
