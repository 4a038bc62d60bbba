"""
Database engine management (SQLAlchemy)
"""
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


def create_db_engine(url: str, schema: str | None = None) -> Engine:
    """
    Create an engine; tables without an explicit schema are routed to `schema`

    Schema routing only applies to PostgreSQL, other dialects (SQLite in
    tests) keep the default namespace.
    """
    engine = create_engine(url, pool_pre_ping=True)
    if schema and engine.dialect.name == "postgresql":
        engine = engine.execution_options(schema_translate_map={None: schema})
    return engine
