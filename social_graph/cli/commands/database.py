"""Database management commands."""

import sys

import click
from sqlalchemy.exc import SQLAlchemyError

from social_graph.cli.utils import coro, error, info, success


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@click.option(
    "--seed/--no-seed",
    default=True,
    help="Insert the BASIC/BUSINESS member types if missing",
)
@coro
async def init(seed: bool) -> None:
    """Create all tables and seed reference data (idempotent)."""
    from social_graph.infra.database import close_database, init_database

    info("Initializing database...")
    try:
        await init_database(create_tables=True, seed=seed)
    except (SQLAlchemyError, OSError) as e:
        error(f"Database initialization failed: {e}")
        sys.exit(1)
    finally:
        await close_database()
    success("Database ready")


@db.command()
@coro
async def seed() -> None:
    """Insert missing member types into an existing schema."""
    from social_graph.features.members.seed import seed_member_types
    from social_graph.infra.database import close_database, get_async_session

    try:
        async with get_async_session() as session:
            created = await seed_member_types(session)
            await session.commit()
    except SQLAlchemyError as e:
        error(f"Seeding failed: {e}")
        sys.exit(1)
    finally:
        await close_database()

    if created:
        success(f"Seeded member types: {', '.join(m.id for m in created)}")
    else:
        info("Member types already present")


@db.command()
@click.argument("revision", default="head")
@coro
async def upgrade(revision: str) -> None:
    """Apply migrations up to REVISION (default: head)."""
    from social_graph.infra.database.migrations import upgrade as run_upgrade

    info(f"Upgrading database to {revision}...")
    try:
        output = await run_upgrade(revision)
    except (SQLAlchemyError, FileNotFoundError) as e:
        error(f"Upgrade failed: {e}")
        sys.exit(1)
    if output:
        click.echo(output)
    success(f"Database upgraded to {revision}")


@db.command()
@click.argument("revision", default="-1")
@coro
async def downgrade(revision: str) -> None:
    """Revert migrations down to REVISION (default: one step back)."""
    from social_graph.infra.database.migrations import downgrade as run_downgrade

    if not click.confirm(f"Downgrade database to {revision}?"):
        info("Cancelled")
        return
    try:
        await run_downgrade(revision)
    except (SQLAlchemyError, FileNotFoundError) as e:
        error(f"Downgrade failed: {e}")
        sys.exit(1)
    success(f"Database downgraded to {revision}")


@db.command()
@coro
async def current() -> None:
    """Show the revision applied to the database."""
    from social_graph.infra.database.migrations import current as run_current

    try:
        revision = await run_current()
    except (SQLAlchemyError, FileNotFoundError) as e:
        error(f"Could not read current revision: {e}")
        sys.exit(1)
    click.echo(revision or "No revision applied")
