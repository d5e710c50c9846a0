"""Programmatic Alembic commands.

Alembic runs synchronously and starts its own event loop in ``env.py``, so
every command is pushed to a worker thread.

Example:
    from social_graph.infra.database.migrations import upgrade

    await upgrade("head")
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path

from alembic.config import Config

from alembic import command
from social_graph.core.settings import get_db_settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config(
    output_buffer: io.StringIO | None = None,
    *,
    url: str | None = None,
) -> Config:
    """Build an Alembic config pointing at the project's migration scripts.

    Args:
        output_buffer: Optional buffer capturing command output
        url: Database URL; defaults to the ``DB_*`` settings

    Raises:
        FileNotFoundError: If ``alembic.ini`` is missing
    """
    ini_path = PROJECT_ROOT / "alembic.ini"
    if not ini_path.exists():
        raise FileNotFoundError(f"alembic.ini not found at {ini_path}")

    config = Config(str(ini_path), stdout=output_buffer or io.StringIO())
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.attributes["url"] = url or get_db_settings().get_sqlalchemy_url()
    config.attributes["skip_logging_config"] = True
    return config


async def upgrade(revision: str = "head", *, url: str | None = None) -> str:
    """Upgrade the database to ``revision`` and return Alembic's output."""
    logger.info("Upgrading database", extra={"revision": revision})
    output = io.StringIO()
    config = get_alembic_config(output, url=url)
    await asyncio.to_thread(command.upgrade, config, revision)
    logger.info("Upgrade completed", extra={"revision": revision})
    return output.getvalue()


async def downgrade(revision: str = "-1", *, url: str | None = None) -> str:
    """Downgrade the database to ``revision`` and return Alembic's output."""
    logger.info("Downgrading database", extra={"revision": revision})
    output = io.StringIO()
    config = get_alembic_config(output, url=url)
    await asyncio.to_thread(command.downgrade, config, revision)
    return output.getvalue()


async def current(*, url: str | None = None) -> str:
    """Return the revision currently applied to the database."""
    output = io.StringIO()
    config = get_alembic_config(output, url=url)
    await asyncio.to_thread(command.current, config)
    return output.getvalue().strip()
