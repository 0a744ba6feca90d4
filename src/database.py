from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from src.config import settings
from src.exceptions import DomainError, ConflictError, InternalError
from src.logger_config import logger

# postgres: lock_not_available, serialization_failure, deadlock_detected
LOCK_CONTENTION_PGCODES = {"55P03", "40001", "40P01"}


def build_engine(url: str, lock_timeout_ms: int = settings.LOCK_TIMEOUT_MS):
    """Create an engine whose lock waits are bounded by ``lock_timeout_ms``.

    SQLite transactions are opened with BEGIN IMMEDIATE so that writers are
    serialized by the database itself; PostgreSQL relies on row locks and the
    server-side ``lock_timeout``.
    """
    if url.startswith("sqlite"):
        kwargs = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": lock_timeout_ms / 1000,
            }
        }
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # take over transaction control from pysqlite
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"options": f"-c lock_timeout={lock_timeout_ms}"},
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def is_lock_contention(exc: OperationalError) -> bool:
    if getattr(exc.orig, "pgcode", None) in LOCK_CONTENTION_PGCODES:
        return True
    return "database is locked" in str(exc.orig)


@contextmanager
def atomic(db: Session):
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except OperationalError as e:
        db.rollback()
        if is_lock_contention(e):
            logger.warning(f"Lock contention, transaction rolled back: {e.orig}")
            raise ConflictError("The resource is busy, please retry the request") from e
        logger.exception("Database operational error")
        raise InternalError() from e
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity race, transaction rolled back: {e.orig}")
        raise ConflictError("Concurrent modification detected, please retry the request") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database error")
        raise InternalError() from e
    except Exception:
        db.rollback()
        raise
