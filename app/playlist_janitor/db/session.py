import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from playlist_janitor.db.models import Base


DEFAULT_DATABASE_URL = "sqlite:///./playlist_janitor.db"


def get_db_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def make_engine(db_url: str, **kwargs):
    if db_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(db_url, **kwargs)

        # SQLite only honours ON DELETE CASCADE with foreign keys switched on
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(db_url, pool_pre_ping=True, **kwargs)


engine = make_engine(get_db_url())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
