from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from greenpath.config import getSettings
from greenpath.db.database import Base, importModels

config = context.config
config.set_main_option("sqlalchemy.url", getSettings().DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

importModels()
target_metadata = Base.metadata


def runMigrationsOffline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def runMigrationsOnline() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    runMigrationsOffline()
else:
    runMigrationsOnline()
