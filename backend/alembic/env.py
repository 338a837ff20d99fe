"""Alembic environment configuration.

Reads the database URL from reservations.config and registers all models
so autogenerate can detect schema changes.
"""
import logging
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from reservations.config import settings
from reservations.database import Base

# Import all models so they register with Base.metadata
from reservations.models.user import User                     # noqa: F401
from reservations.models.venue import Venue                   # noqa: F401
from reservations.models.booking import Booking               # noqa: F401
from reservations.models.audit_log import AuditLog            # noqa: F401
from reservations.models.change_request import ChangeRequest  # noqa: F401

config = context.config
# configparser interpolation treats "%" specially
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
logger = logging.getLogger("alembic.env")


def run_migrations_offline() -> None:
    """Emit SQL for the configured URL without connecting (``alembic upgrade --sql``)."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection.

    SQLite (dev mode) cannot ALTER most constraints in place, so batch mode
    is switched on for it.
    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
        logger.info("Migrations applied to %s", connection.engine.url.render_as_string(hide_password=True))


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
