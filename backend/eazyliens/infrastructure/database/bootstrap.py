"""Startup tasks for the database: create it, create the tables, seed and load defaults."""

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from eazyliens.domain.coloring import SEED_COLOR_RULES, ColorRule, ColorRuleTable
from eazyliens.domain.entities import Role, User
from eazyliens.infrastructure.database.base import Base
from eazyliens.infrastructure.database.repositories import (
    SQLAlchemyColorRuleRepository,
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)


async def ensure_database_exists(database_url: str) -> None:
    """Issue ``CREATE DATABASE`` on PostgreSQL when the target database is missing.

    Other backends create their database on first connect, so this is a no-op
    for them. Failures are logged; table creation will surface a real problem.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "postgresql" or not url.database:
        return

    import asyncpg

    db_name = url.database
    maintenance = url.set(drivername="postgresql", database="postgres")
    try:
        conn = await asyncpg.connect(maintenance.render_as_string(hide_password=False))
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach PostgreSQL to check database '%s': %s", db_name, exc)
        return

    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", db_name):
            logger.debug("Database '%s' already exists", db_name)
            return
        # Not allowed inside a transaction block
        await conn.execute(f'CREATE DATABASE "{db_name}"')
        logger.info("Created database '%s'", db_name)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", db_name, exc)
    finally:
        await conn.close()


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_superadmin(
    session_factory: async_sessionmaker[AsyncSession],
    username: str,
) -> User | None:
    """Make sure ``username`` exists as an active Superadmin.

    Safe to run on every start. An existing user is left untouched, even if
    someone has since changed its role.
    """
    username = username.strip()
    if not username:
        return None

    async with session_factory() as session:
        users = SQLAlchemyUserRepository(session)
        existing = await users.get_by_username(username)
        if existing is not None:
            logger.debug("Bootstrap Superadmin '%s' already exists", username)
            return existing
        user = await users.create(User(username=username, role=Role.SUPERADMIN))
        await session.commit()
    logger.info("Seeded bootstrap Superadmin '%s'", username)
    return user


async def seed_color_rules(
    session_factory: async_sessionmaker[AsyncSession],
    rules: tuple[ColorRule, ...] = SEED_COLOR_RULES,
) -> int:
    """Write ``rules`` into an empty rule table. Returns how many were written.

    A table that already holds rules is left as it is, so assignments made
    directly in the database survive restarts.
    """
    async with session_factory() as session:
        repository = SQLAlchemyColorRuleRepository(session)
        if await repository.count():
            return 0
        for rule in rules:
            await repository.create(rule)
        await session.commit()
    logger.info("Seeded %d color rule(s)", len(rules))
    return len(rules)


async def load_color_rules(session_factory: async_sessionmaker[AsyncSession]) -> ColorRuleTable:
    async with session_factory() as session:
        rules = await SQLAlchemyColorRuleRepository(session).list_all()
    table = ColorRuleTable(rules)
    logger.info("Loaded %d color rule(s) for %s", len(table), ", ".join(table.columns) or "no columns")
    return table
