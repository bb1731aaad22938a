"""
Database schema and connection management.

Defines the companies/jobs tables with SQLAlchemy and exposes Database,
the query primitive the repositories run their SQL through.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Union

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import get_database_url
from .logger import get_logger

Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")


class Company(Base):
    """Company owning job postings."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False)
    logo_url = Column(Text)


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric(asdecimal=False), CheckConstraint("equity <= 1.0"))
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


class QueryResult(NamedTuple):
    rows: List[Dict[str, Any]]


def _database_url(target: Union[str, Path, None]) -> str:
    """Accept a SQLAlchemy URL or a path to a SQLite file."""
    if target is None:
        return get_database_url()
    if isinstance(target, str) and "://" in target:
        return target
    return f"sqlite:///{Path(target)}"


def create_db_engine(target: Union[str, Path, None] = None) -> Engine:
    """
    Create an engine for a URL or SQLite path.

    SQLite connections enforce foreign keys and make LIKE case-sensitive,
    matching PostgreSQL.
    """
    url = _database_url(target)
    if url.startswith("sqlite:///") and not url.startswith("sqlite:///:memory:"):
        Path(url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.execute("PRAGMA case_sensitive_like = ON")
            cursor.close()

    return engine


def init_database(target: Union[str, Path, None] = None) -> None:
    """
    Initialize database and create tables.

    Args:
        target: SQLAlchemy URL or path to SQLite database file
    """
    engine = create_db_engine(target)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(target: Union[str, Path, None] = None):
    """
    Get database session.

    Args:
        target: SQLAlchemy URL or path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_db_engine(target)
    Session = sessionmaker(bind=engine)
    return Session()


def to_bind_params(sql: str, params: Sequence[Any]):
    """
    Rewrite $1..$n placeholders as named binds.

    Returns the rewritten SQL and a dict of bind values, e.g.
    ("... WHERE id = :p1", {"p1": 7}).
    """
    referenced = {int(n) for n in _PLACEHOLDER.findall(sql)}
    if referenced and (min(referenced) < 1 or max(referenced) > len(params)):
        raise ValueError(
            f"SQL references ${max(referenced)} but {len(params)} parameter(s) were given"
        )
    statement = _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql)
    binds = {f"p{idx}": value for idx, value in enumerate(params, start=1)}
    return statement, binds


class Database:
    """
    Query primitive over a SQLAlchemy engine.

    Each call to query() runs in its own short transaction and returns the
    result rows as plain dicts.
    """

    def __init__(self, target: Union[str, Path, None] = None, engine: Optional[Engine] = None):
        self.engine = engine if engine is not None else create_db_engine(target)

    def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        logger = get_logger()
        statement, binds = to_bind_params(sql, params)

        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(statement), binds)
                rows = [dict(row._mapping) for row in result] if result.returns_rows else []
        except SQLAlchemyError as e:
            logger.record_query_failure()
            logger.error("Query failed", error=str(e), sql=" ".join(sql.split()))
            raise

        logger.record_query(len(rows))
        logger.debug("Query executed", sql=" ".join(sql.split()), params=len(binds), rows=len(rows))
        return QueryResult(rows)

    def close(self) -> None:
        self.engine.dispose()
