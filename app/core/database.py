"""
Database engine and session management.

Provides the shared engine, table creation, the per-request session
dependency and the serializable transaction scope used by every write.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, event
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings
from app.core.exceptions import ConflictError, SerializationConflictError
from app.core.logging import get_logger

logger = get_logger(__name__)

# PostgreSQL serialization_failure / SQLite writer contention
SERIALIZATION_FAILURE_CODES = {"40001"}
SERIALIZATION_FAILURE_MESSAGES = ("could not serialize access", "database is locked")


def enable_sqlite_write_locking(engine: Engine) -> Engine:
    """
    Make every SQLite transaction take the database write lock on BEGIN.

    pysqlite defers BEGIN until the first INSERT/UPDATE/DELETE, so reads
    that guard a write (e.g. the phone number check) would run outside the
    transaction. Driver transaction control is switched off and SQLAlchemy
    emits BEGIN IMMEDIATE itself; a second writer waits for the lock and
    then sees the first writer's committed rows.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    connect_args=connect_args,
    pool_pre_ping=True,
)
if engine.dialect.name == "sqlite":
    enable_sqlite_write_locking(engine)


def create_db_and_tables() -> None:
    """Create all tables registered on SQLModel metadata."""
    # Models must be imported so their tables are registered
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """Yield a database session for a single request."""
    with Session(engine) as session:
        yield session


def is_serialization_failure(error: OperationalError) -> bool:
    """Check whether the database aborted the transaction to keep it serializable."""
    pgcode = getattr(error.orig, "pgcode", None)
    if pgcode in SERIALIZATION_FAILURE_CODES:
        return True
    message = str(error.orig).lower()
    return any(marker in message for marker in SERIALIZATION_FAILURE_MESSAGES)


@contextmanager
def serializable_transaction(session: Session) -> Iterator[Session]:
    """
    Run a block inside its own SERIALIZABLE transaction.

    A transaction the session opened implicitly for earlier reads is
    committed first, so the block always starts on a fresh connection at
    SERIALIZABLE isolation. The block is committed when it exits cleanly;
    any error rolls it back.

    Raises:
        ConflictError: a unique constraint was violated on flush/commit
        SerializationConflictError: the database aborted the transaction
    """
    if session.in_transaction():
        session.commit()
    if session.get_bind().dialect.name == "sqlite":
        # Serialized by BEGIN IMMEDIATE; setting an isolation level would
        # hand transaction control back to the driver
        session.connection()
    else:
        session.connection(execution_options={"isolation_level": "SERIALIZABLE"})

    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Unique constraint violated: {e.orig}")
        raise ConflictError("Employee already exists") from e
    except OperationalError as e:
        session.rollback()
        if is_serialization_failure(e):
            logger.warning(f"Serializable transaction aborted: {e.orig}")
            raise SerializationConflictError(
                "Concurrent update detected, please retry"
            ) from e
        raise
    except Exception:
        session.rollback()
        raise
