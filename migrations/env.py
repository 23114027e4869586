"""
Alembic environment.

Migrations run synchronously: the async driver in the application URL is
swapped for its sync counterpart so upgrades can run before the event loop
starts.
"""
from alembic import context
from sqlalchemy import create_engine, pool

from database.models import Base
from database.session import get_database_url

config = context.config
target_metadata = Base.metadata


def get_sync_url() -> str:
    return get_database_url().replace("+aiosqlite", "")


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a database connection."""
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(get_sync_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
