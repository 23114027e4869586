"""
Data Source Routes

Endpoints organized by:
- Data sources (CRUD, connection string kept in sync with the fields)
- Connection string sync for the settings modals
- Simulated connection tests
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from constants import ConnectionKind, DATA_SOURCE_STATUSES, DataSourceStatus
from database import get_session_dependency
from datasources import (
    ConnectionTester,
    detect_kind,
    sync_config,
    sync_stored_config,
    SOURCE_FIELDS,
    SOURCE_CONNECTION_STRING,
)
from repositories import DataSourceRepository
from ..dependencies import get_connection_tester
from ..schemas import DataSourceBody, ConnectionStringBody, ConnectionTestBody

router = APIRouter(tags=["data-sources"])

DUPLICATE_DATA_SOURCE = "A data source with this name already exists."


def _synced_config(
    name: str,
    provider: str,
    config: Optional[Dict[str, Any]],
    sent: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """Config with connectionString and fields reconciled, for providers that have one."""
    if config is None:
        return None
    kind = detect_kind(name, provider)
    if kind is None:
        return config
    return sync_stored_config(kind, config, sent)


# ============================================================
# Data sources
# ============================================================
@router.get("/data-sources")
async def list_data_sources(session: AsyncSession = Depends(get_session_dependency)):
    sources = await DataSourceRepository(session).list_all()
    return [s.to_dict() for s in sources]


@router.post("/data-sources", status_code=201)
async def create_data_source(body: DataSourceBody, session: AsyncSession = Depends(get_session_dependency)):
    values = body.changes()
    if "config_json" in values:
        values["config_json"] = _synced_config(body.name or "", body.provider or "", values["config_json"])
    
    try:
        data_source = await DataSourceRepository(session).save(values)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_DATA_SOURCE)
    return data_source.to_dict()


# ============================================================
# Connection helpers
# ============================================================
@router.post("/data-sources/connection-string")
async def sync_connection_string(body: ConnectionStringBody):
    """
    Reconcile a config's connection string and discrete fields.
    
    source="fields" rebuilds the string, source="connectionString" parses it.
    """
    try:
        kind = ConnectionKind(body.kind)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown connection kind: {body.kind}")
    if body.source not in (SOURCE_FIELDS, SOURCE_CONNECTION_STRING):
        raise HTTPException(status_code=400, detail=f"Unknown sync source: {body.source}")
    
    return {"config": sync_config(kind, body.config or {}, body.source)}


@router.post("/data-sources/test-connection")
async def test_connection(
    body: ConnectionTestBody,
    session: AsyncSession = Depends(get_session_dependency),
    tester: ConnectionTester = Depends(get_connection_tester),
):
    """Simulated connection test; the stored data source with this name records the outcome."""
    if body.config is None or not body.service_name:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "message": "Missing configuration or service name."},
        )
    
    result = await tester.test(body.service_name, body.config, body.action or "test")
    
    repo = DataSourceRepository(session)
    data_source = await repo.get_by_name(body.service_name)
    if data_source:
        status = result.status if result.status in DATA_SOURCE_STATUSES else DataSourceStatus.ERROR.value
        await repo.record_test_result(data_source, status, None if result.success else result.message)
        logger.info(f"Connection test for {body.service_name}: {result.status}")
    
    return result.to_dict()


# ============================================================
# Single data source
# ============================================================
@router.get("/data-sources/{data_source_id}")
async def get_data_source(data_source_id: str, session: AsyncSession = Depends(get_session_dependency)):
    data_source = await DataSourceRepository(session).get(data_source_id)
    if not data_source:
        raise HTTPException(status_code=404, detail="Data source not found")
    return data_source.to_dict()


@router.put("/data-sources/{data_source_id}")
async def update_data_source(
    data_source_id: str,
    body: DataSourceBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Merge the sent values over the stored data source."""
    repo = DataSourceRepository(session)
    data_source = await repo.get(data_source_id)
    if not data_source:
        raise HTTPException(status_code=404, detail="Data source not found")
    
    values = body.changes()
    if "config_json" in values:
        sent = values["config_json"] or {}
        merged = {**(data_source.config_json or {}), **sent}
        values["config_json"] = _synced_config(
            values.get("name") or data_source.name,
            values.get("provider") or data_source.provider,
            merged,
            sent,
        )
    
    try:
        await repo.save(values, data_source_id)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_DATA_SOURCE)
    return data_source.to_dict()


@router.delete("/data-sources/{data_source_id}")
async def delete_data_source(data_source_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await DataSourceRepository(session).delete(data_source_id):
        raise HTTPException(status_code=404, detail="Data source not found")
    return {"message": "Data source deleted successfully"}
