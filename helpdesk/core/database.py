# helpdesk/core/database.py
import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from helpdesk.core.config import get_settings

log = logging.getLogger(__name__)

settings = get_settings()


def _connect_args(url: str) -> dict:
    # sqlite connections are shared across the threadpool FastAPI runs sync routes on
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # sqlite ships with foreign key enforcement off, per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Create the products, tickets, users and ticket_replies tables if missing."""
    # models register themselves on Base.metadata when imported
    from helpdesk.product import models as _product_models  # noqa: F401
    from helpdesk.ticket import models as _ticket_models  # noqa: F401
    from helpdesk.user import models as _user_models  # noqa: F401

    bind = bind or engine
    log.info("Creating tables on %s", bind.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=bind)


# Request scoped session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
