"""
System Routes

Endpoints organized by:
- Health Check
- Settings
- Logs
- Dashboard (stats, charts, quick links)
- Search
- Admin (seed)
"""
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from constants import (
    LogLevel,
    PipelineType,
    PipelineStatus,
    FeatureStatus,
    FEATURE_STATUS_COLORS,
    DEFAULT_CHART_COLOR,
)
from database import get_session_dependency
from repositories import (
    SettingRepository,
    LogRepository,
    ConversationRepository,
    MessageRepository,
    PipelineRunRepository,
    EntityRepository,
    ContactRepository,
    BrainRepository,
    FeatureRepository,
    PromptRepository,
    ApiEndpointRepository,
)
from scripts.seed import run_seed
from ..schemas import LogBody, QuickLinksBody

router = APIRouter(tags=["system"])

LOG_LEVELS = {level.value for level in LogLevel}
PIPELINE_LABELS = {
    PipelineType.CONTEXT_ASSEMBLY.value: "Context Assembly",
    PipelineType.MEMORY_EXTRACTION.value: "Memory Extraction",
}
SEARCH_SOURCE = "Postgres (Core)"
# Settings key holding the dashboard quick links
QUICK_LINKS_KEY = "dashboardQuickLinks"


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "database": str(settings.DATABASE_PATH)
    }


# ============================================================
# Settings
# ============================================================
@router.get("/settings")
async def get_settings(session: AsyncSession = Depends(get_session_dependency)):
    return await SettingRepository(session).get_all_as_dict()


@router.put("/settings")
async def update_settings(
    values: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Upsert every key in the body and return the full settings dict."""
    return await SettingRepository(session).upsert_many(values)


# ============================================================
# Logs
# ============================================================
@router.get("/logs/all")
async def list_logs(
    limit: Optional[int] = Query(None, ge=1),
    session: AsyncSession = Depends(get_session_dependency),
):
    logs = await LogRepository(session).list_recent(limit)
    return [log.to_dict() for log in logs]


@router.delete("/logs/all")
async def clear_logs(session: AsyncSession = Depends(get_session_dependency)):
    removed = await LogRepository(session).clear()
    logger.info(f"Cleared {removed} log entries")
    return {"message": "All logs cleared successfully"}


@router.post("/logs/create", status_code=201)
async def create_log(body: LogBody, session: AsyncSession = Depends(get_session_dependency)):
    if not body.message or not body.level:
        raise HTTPException(status_code=400, detail="Message and level are required")
    if body.level not in LOG_LEVELS:
        raise HTTPException(status_code=400, detail=f"Invalid log level: {body.level}")
    
    log = await LogRepository(session).write(body.message, body.level, body.payload)
    return log.to_dict()


# ============================================================
# Dashboard
# ============================================================
def _pipeline_summary(stats: list, pipeline_type: str) -> Dict[str, Any]:
    def find(status: str) -> Optional[dict]:
        return next(
            (s for s in stats if s["pipeline_type"] == pipeline_type and s["status"] == status),
            None,
        )
    
    completed = find(PipelineStatus.COMPLETED.value)
    failed = find(PipelineStatus.FAILED.value)
    return {
        "completed": completed["count"] if completed else 0,
        "failed": failed["count"] if failed else 0,
        "avgDuration": completed["avg_duration"] if completed else 0,
    }


@router.get("/dashboard/stats")
async def get_dashboard_stats(session: AsyncSession = Depends(get_session_dependency)):
    """Headline counters for the dev dashboard."""
    conversations = ConversationRepository(session)
    pipeline_stats = await PipelineRunRepository(session).get_stats()
    feature_counts = await FeatureRepository(session).count_by_status()
    
    return {
        "conversations": {
            "total": await conversations.count(),
            "avgMessages": f"{await conversations.average_message_count():.1f}",
        },
        "messages": {
            "total": await MessageRepository(session).count(),
        },
        "pipelines": {
            "contextAssembly": _pipeline_summary(pipeline_stats, PipelineType.CONTEXT_ASSEMBLY.value),
            "memoryExtraction": _pipeline_summary(pipeline_stats, PipelineType.MEMORY_EXTRACTION.value),
        },
        "memory": {
            "structuredEntities": await EntityRepository(session).count(),
            "contacts": await ContactRepository(session).count(),
            "brains": await BrainRepository(session).count(),
        },
        "project": {
            "featuresTracked": sum(feature_counts.values()),
            "featuresCompleted": feature_counts.get(FeatureStatus.COMPLETED.value, 0),
            "prompts": await PromptRepository(session).count(),
        },
        "system": {
            "logs": await LogRepository(session).count(),
            "apiTestsRun": await ApiEndpointRepository(session).count_test_runs(),
        },
    }


def _status_label(status: str) -> Optional[str]:
    """'✅ Completed' -> 'Completed'; unknown statuses have no label."""
    for known in FeatureStatus:
        if status == known.value:
            return known.value.split(" ", 1)[1]
    return None


@router.get("/dashboard/charts")
async def get_dashboard_charts(session: AsyncSession = Depends(get_session_dependency)):
    """Feature status pie and pipeline performance bars."""
    feature_counts = await FeatureRepository(session).count_by_status()
    feature_status = []
    for status, count in feature_counts.items():
        label = _status_label(status)
        feature_status.append({
            "name": label or "Other",
            "value": count,
            "fill": FEATURE_STATUS_COLORS.get(label, DEFAULT_CHART_COLOR),
        })
    
    performance = {
        pipeline_type: {"name": name, "Completed": 0, "Failed": 0, "Avg Duration (ms)": 0}
        for pipeline_type, name in PIPELINE_LABELS.items()
    }
    for row in await PipelineRunRepository(session).get_stats():
        entry = performance.get(row["pipeline_type"])
        if entry is None:
            continue
        if row["status"] == PipelineStatus.COMPLETED.value:
            entry["Completed"] = row["count"]
            entry["Avg Duration (ms)"] = round(row["avg_duration"])
        elif row["status"] == PipelineStatus.FAILED.value:
            entry["Failed"] = row["count"]
    
    return {
        "featureStatus": feature_status,
        "pipelinePerformance": list(performance.values()),
    }


@router.get("/dashboard/quick-links")
async def get_quick_links(session: AsyncSession = Depends(get_session_dependency)):
    links = await SettingRepository(session).get_value(QUICK_LINKS_KEY, [])
    return {"links": links}


@router.post("/dashboard/quick-links")
async def save_quick_links(body: QuickLinksBody, session: AsyncSession = Depends(get_session_dependency)):
    """Replace the dashboard quick links."""
    if not isinstance(body.links, list):
        raise HTTPException(status_code=400, detail="Links must be an array")
    await SettingRepository(session).upsert_many({QUICK_LINKS_KEY: body.links})
    return {"success": True, "message": "Links saved successfully."}


# ============================================================
# Search
# ============================================================
@router.get("/search")
async def search(
    q: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Search conversation titles and contacts."""
    term = (q or "").strip()
    if len(term) < 2:
        return {"results": []}
    
    results = []
    for conversation in await ConversationRepository(session).search_titles(term):
        results.append({
            "id": conversation.id,
            "type": "conversation",
            "title": conversation.title,
            "content": None,
            "source": SEARCH_SOURCE,
        })
    for contact in await ContactRepository(session).search(term):
        results.append({
            "id": contact.id,
            "type": "contact",
            "title": contact.name,
            "content": contact.email,
            "source": SEARCH_SOURCE,
        })
    return {"results": results}


# ============================================================
# Admin
# ============================================================
@router.post("/admin/seed")
async def seed_database(
    only: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Load the static fixtures. Safe to run repeatedly."""
    counts = await run_seed(session, only=[only] if only else None)
    return {"message": "Database seeded successfully.", "counts": counts}
