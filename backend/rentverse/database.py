from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from rentverse.config import settings


class Base(DeclarativeBase):
    pass


def utcnow() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str | None = None):
    url = database_url or settings.database_url
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _set_sqlite_pragmas)
        return engine
    return create_engine(url, pool_pre_ping=True)


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DEFAULT_SETTINGS = {
    "maintenance_mode": "false",
}


def init_db(bind=None):
    # Importing the package registers every table on Base.metadata
    import rentverse.models  # noqa: F401
    from rentverse.models.setting import PlatformSetting

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    Session = sessionmaker(bind=bind, autoflush=False, autocommit=False)
    with Session() as db:
        now = utcnow()
        for key, value in DEFAULT_SETTINGS.items():
            if db.get(PlatformSetting, key) is None:
                db.add(PlatformSetting(key=key, value=value, updated_at=now))
        db.commit()
