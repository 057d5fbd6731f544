"""
Engine / session plumbing for the report ledger (SQLAlchemy + psycopg)
"""
import psycopg
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from app.config import get_settings

# Tables the ledger cannot work without; /ready fails while any is missing
LEDGER_TABLES = ("persons", "activity_entries", "monthly_reports", "school_hours")


class Base(DeclarativeBase):
    pass


_engine = None
_SessionLocal = None


def get_engine():
    """Shared engine built from DATABASE_URL"""
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().get_sqlalchemy_url(), pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    FastAPI dependency: one session per request, closed afterwards.

    Use cases commit or roll back themselves; the session is only closed here.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def is_postgresql(db: Session) -> bool:
    """True when the session is bound to PostgreSQL (tests run on SQLite)."""
    return db.get_bind().dialect.name == "postgresql"


def check_db_connection() -> None:
    """
    Readiness probe: the database answers and the ledger tables exist.

    Raises:
        psycopg.OperationalError: database unreachable
        RuntimeError: migrations not applied
    """
    settings = get_settings()
    with psycopg.connect(settings.DATABASE_URL, connect_timeout=3) as conn:
        with conn.cursor() as cur:
            missing = []
            for table in LEDGER_TABLES:
                cur.execute("SELECT to_regclass(%s);", (f"public.{table}",))
                if cur.fetchone()[0] is None:
                    missing.append(table)
    if missing:
        raise RuntimeError(f"Missing tables: {', '.join(missing)} (run alembic upgrade head)")
