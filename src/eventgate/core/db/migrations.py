"""Migration runner shared by deployment scripts and the integration suite."""

from alembic import command
from alembic.config import Config


def run_migrations_sync(revision: str = "head") -> None:
    """Upgrade the database to ``revision`` using the root alembic.ini.

    Alembic's env.py drives its own event loop, so async callers run this
    in a worker thread.
    """
    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, revision)
