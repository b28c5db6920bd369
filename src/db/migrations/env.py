import sys
import logging
from pathlib import Path
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# --- project root on path so `src.*` imports resolve ---
here = Path(__file__).resolve().parent
repo_root = here.parents[2]  # src/db/migrations -> repo root
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

try:
    from src.app.config import settings
    from src.db.base import Base
    import src.models  # noqa: F401  (registers User and MediaFile on Base.metadata)
except Exception:
    logging.exception("Failed to import settings or models. Run alembic from the repository root.")
    raise

# Alembic config
config = context.config

# DB URL always comes from settings
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
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


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
