"""SQLAlchemy engine, session factory and the per-request session dependency."""
from datetime import timezone

from sqlalchemy import DateTime, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator
from fastapi import Request

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timestamp column that always comes back timezone-aware in UTC.

    SQLite drops the offset on the way in, so naive values read back are
    treated as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def make_engine(url: str) -> Engine:
    """Create an engine for the given URL.

    SQLite needs foreign keys switched on per connection so that
    ON DELETE CASCADE is honoured.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Yield one session per request from the factory owned by the app."""
    session: Session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
