from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from filebox.config import settings

# SQLite connections are shared with the threadpool FastAPI runs sync
# dependencies in, so the same-thread check has to be disabled there.
connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
# autocommit=False: callers commit explicitly and roll back on failure
# autoflush=False: pending changes are only sent to the database on flush/commit
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        # Return the connection to the pool whether the request failed or not
        db.close()
