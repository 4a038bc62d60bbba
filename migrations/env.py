"""Alembic environment for my-subs migrations."""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool, text

from mysubs.config import get_settings
from mysubs.infrastructure.db.models import SubscriptionModel  # noqa: F401  (registers the table)
from mysubs.infrastructure.db.session import Base

target_metadata = Base.metadata

settings = get_settings()

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode - emit SQL to stdout."""
    context.configure(
        url=settings.get_sqlalchemy_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table_schema=settings.DB_SCHEMA,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against DATABASE_URL, inside DB_SCHEMA."""
    connectable = create_engine(settings.get_sqlalchemy_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.DB_SCHEMA}"'))
        connection.execute(text(f'SET search_path TO "{settings.DB_SCHEMA}"'))
        connection.commit()

        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table_schema=settings.DB_SCHEMA,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
