"""
Seed the database with static fixtures.

Every section is idempotent: rows are matched on their natural key and
updated, or inserted when missing. Registered API endpoints and hedra goals
that already exist are left untouched so edits made in the UI survive.

Usage:
    python -m scripts.seed
    python -m scripts.seed --only data_sources
"""
import asyncio
import sys
from typing import Awaitable, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from database.models import ApiEndpoint, Documentation, Feature, HedraGoal
from repositories import (
    SettingRepository,
    FeatureRepository,
    SubsystemRepository,
    DataSourceRepository,
    VersionHistoryRepository,
    DocumentationRepository,
    ApiEndpointRepository,
)
from .fixtures import (
    FEATURES,
    SUBSYSTEMS,
    DATA_SOURCES,
    VERSIONS,
    DOCUMENTS,
    HEDRA_GOALS,
    API_ENDPOINTS,
)

DOCS_DIR = settings.BASE_DIR / "docs"


# ============================================
# SECTIONS
# ============================================

async def seed_settings(session: AsyncSession) -> int:
    return await SettingRepository(session).ensure_defaults()


async def seed_features(session: AsyncSession) -> int:
    repo = FeatureRepository(session)
    for values in FEATURES:
        existing = await repo.get_by_name(values["name"])
        if existing:
            await repo.update(existing, values)
        else:
            await repo.add(Feature(**values))
    return len(FEATURES)


async def seed_subsystems(session: AsyncSession) -> int:
    repo = SubsystemRepository(session)
    for index, values in enumerate(SUBSYSTEMS):
        await repo.upsert({**values, "order_index": index})
    return len(SUBSYSTEMS)


async def seed_data_sources(session: AsyncSession) -> int:
    """Upsert the known sources and drop any that are no longer listed."""
    repo = DataSourceRepository(session)
    await repo.delete_except([source["name"] for source in DATA_SOURCES])
    for values in DATA_SOURCES:
        await repo.upsert_by_name(dict(values))
    return len(DATA_SOURCES)


async def seed_versions(session: AsyncSession) -> int:
    repo = VersionHistoryRepository(session)
    for values in VERSIONS:
        await repo.upsert(dict(values))
    return len(VERSIONS)


def _read_document(file_name: str, title: str) -> str:
    path = DOCS_DIR / file_name
    if not path.exists():
        logger.warning(f"Could not read {file_name}, using placeholder content")
        return f"## {title}\n\nDocumentation content not found."
    return path.read_text(encoding="utf-8")


async def seed_documentation(session: AsyncSession) -> int:
    repo = DocumentationRepository(session)
    for doc in DOCUMENTS:
        content = _read_document(doc["file"], doc["title"])
        existing = await repo.get_by_key(doc["key"])
        if existing:
            await repo.update(existing, {"title": doc["title"], "content": content})
        else:
            await repo.add(Documentation(doc_key=doc["key"], title=doc["title"], content=content))
    return len(DOCUMENTS)


async def seed_hedra_goals(session: AsyncSession) -> int:
    added = 0
    for section_key, content in HEDRA_GOALS.items():
        stmt = select(HedraGoal).where(HedraGoal.section_key == section_key)
        if (await session.execute(stmt)).scalar_one_or_none() is None:
            session.add(HedraGoal(section_key=section_key, content=content))
            added += 1
    await session.flush()
    return added


async def seed_api_endpoints(session: AsyncSession) -> int:
    repo = ApiEndpointRepository(session)
    added = 0
    for values in API_ENDPOINTS:
        if await repo.get_by_route(values["method"], values["path"]) is None:
            await repo.add(ApiEndpoint(**values))
            added += 1
    return added


SECTIONS: Dict[str, Callable[[AsyncSession], Awaitable[int]]] = {
    "settings": seed_settings,
    "features": seed_features,
    "subsystems": seed_subsystems,
    "data_sources": seed_data_sources,
    "versions": seed_versions,
    "documentation": seed_documentation,
    "hedra_goals": seed_hedra_goals,
    "api_endpoints": seed_api_endpoints,
}


async def run_seed(session: AsyncSession, only: Optional[List[str]] = None) -> Dict[str, int]:
    """
    Run the seed sections in order.
    
    Args:
        session: Open session; the caller commits
        only: Section names to run (None for all)
    
    Returns:
        Rows written per section
    """
    unknown = [name for name in (only or []) if name not in SECTIONS]
    if unknown:
        raise ValueError(f"Unknown seed section: {', '.join(unknown)}")
    
    counts = {}
    for name, seed in SECTIONS.items():
        if only and name not in only:
            continue
        counts[name] = await seed(session)
        logger.info(f"Seeded {name}: {counts[name]} rows")
    return counts


# ============================================
# CLI
# ============================================

async def _seed_database(only: Optional[List[str]]) -> Dict[str, int]:
    from database import get_session, close_engine
    
    try:
        async with get_session() as session:
            return await run_seed(session, only)
    finally:
        await close_engine()


def main():
    """Main entry point with CLI arguments."""
    import argparse
    from database.init import run_migrations
    from utils import init_logging
    
    parser = argparse.ArgumentParser(description="Seed the SoulyCore database")
    parser.add_argument(
        "--only",
        action="append",
        choices=list(SECTIONS),
        help="Seed only this section (repeatable)",
    )
    parser.add_argument("--skip-migrations", action="store_true", help="Do not upgrade the schema first")
    
    args = parser.parse_args()
    
    init_logging(app_name="seed")
    if not args.skip_migrations:
        run_migrations()
    
    try:
        counts = asyncio.run(_seed_database(args.only))
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
    
    logger.info(f"Seeding finished: {counts}")


if __name__ == "__main__":
    main()
