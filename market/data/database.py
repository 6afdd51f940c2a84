# market/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from market.utils.settings import DATABASE_URL


class Base(DeclarativeBase):
    pass


# entitlement grants rely on INSERT ... ON CONFLICT DO NOTHING
SUPPORTED_BACKENDS = ("postgresql", "sqlite")


def make_engine(url: str = DATABASE_URL) -> Engine:
    backend = make_url(url).get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unsupported database backend {backend!r}, expected one of {SUPPORTED_BACKENDS}")

    if backend != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)

    in_memory = "poolclass" in kwargs

    # pysqlite defers BEGIN until the first DML statement, which breaks
    # SAVEPOINT; take over transaction control and enable foreign keys.

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            # readers must not block the writer
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine) -> None:
    # all tables must be registered on Base.metadata before create_all
    import market.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
