# /gradebook/db/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from ..core import config


def build_engine(database_url: str):
    """
    Creates the SQLAlchemy engine for the given URL.

    SQLite needs `check_same_thread=False` for FastAPI's threadpool and has
    foreign keys switched off by default, so both are handled here. Other
    backends (MySQL in production) get a sized connection pool.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
        enable_sqlite_foreign_keys(engine)
        return engine
    return create_engine(database_url, pool_size=config.DB_POOL_SIZE, pool_pre_ping=True)


def enable_sqlite_foreign_keys(engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(config.DATABASE_URL)

# Each instance of SessionLocal is a database session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# All ORM models inherit from this Base.
Base = declarative_base()


# Dependency to get a DB session. Used by the DatabaseService provider.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
