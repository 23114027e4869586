"""
Data Source Repository

Stores external data source configurations and their connection status.
"""
from typing import Optional, Sequence, Dict, Any, List

from sqlalchemy import select, delete
from loguru import logger

from constants import DATA_SOURCE_TYPES, DATA_SOURCE_STATUSES, DataSourceStatus
from database.models import DataSource
from .base import BaseRepository


class DataSourceValidationError(ValueError):
    """Data source values rejected before reaching the database."""


REQUIRED_FIELDS = ("name", "provider", "type")
NOT_NULL_FIELDS = REQUIRED_FIELDS + ("status", "stats_json", "is_enabled")


class DataSourceRepository(BaseRepository[DataSource]):
    """Repository for data sources."""
    
    model = DataSource
    
    async def list_all(self) -> Sequence[DataSource]:
        return await self.get_all(order_by="name")
    
    async def get_by_name(self, name: str) -> Optional[DataSource]:
        stmt = select(DataSource).where(DataSource.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def save(self, values: Dict[str, Any], data_source_id: Optional[str] = None) -> DataSource:
        """
        Create a data source, or merge values over an existing one.
        
        Args:
            values: Column values; config_json is merged key by key
            data_source_id: Existing row to update, None to create
        
        Raises:
            DataSourceValidationError: Missing required fields on create,
                an unknown type/status, or a null required field on update
            LookupError: data_source_id does not exist
        """
        self._validate_enums(values)
        
        if data_source_id is None:
            missing = [f for f in REQUIRED_FIELDS if not values.get(f)]
            if missing:
                raise DataSourceValidationError(
                    f"Missing required fields: {', '.join(missing)}"
                )
            data_source = DataSource(
                name=values["name"],
                provider=values["provider"],
                type=values["type"],
                status=values.get("status") or DataSourceStatus.NEEDS_CONFIG.value,
                config_json=values.get("config_json") or {},
                stats_json=values.get("stats_json") or [],
                is_enabled=True if values.get("is_enabled") is None else values["is_enabled"],
                last_successful_connection=values.get("last_successful_connection"),
                last_error=values.get("last_error"),
            )
            return await self.add(data_source)
        
        data_source = await self.get(data_source_id)
        if data_source is None:
            raise LookupError(f"Data source not found: {data_source_id}")
        
        nulls = [f for f in NOT_NULL_FIELDS if f in values and values[f] is None]
        if nulls:
            raise DataSourceValidationError(f"Fields cannot be null: {', '.join(nulls)}")
        
        changes = dict(values)
        if "config_json" in changes:
            changes["config_json"] = {**(data_source.config_json or {}), **(changes["config_json"] or {})}
        return await self.update(data_source, changes)
    
    async def upsert_by_name(self, values: Dict[str, Any]) -> DataSource:
        """Seed helper: update the row with this name or create it."""
        existing = await self.get_by_name(values["name"])
        if existing:
            return await self.save(values, existing.id)
        return await self.save(values)
    
    async def delete_except(self, names: List[str]) -> int:
        """Remove every data source whose name is not listed."""
        stmt = delete(DataSource).where(DataSource.name.not_in(names))
        result = await self.session.execute(stmt)
        if result.rowcount:
            logger.info(f"Removed {result.rowcount} stale data sources")
        return result.rowcount
    
    async def record_test_result(self, data_source: DataSource, status: str, error: Optional[str]) -> DataSource:
        """Store the outcome of a connection test on the card."""
        data_source.status = status
        if status == DataSourceStatus.CONNECTED.value:
            data_source.last_successful_connection = self.now()
            data_source.last_error = None
        elif error:
            data_source.last_error = error
        await self.session.flush()
        return data_source
    
    @staticmethod
    def _validate_enums(values: Dict[str, Any]) -> None:
        source_type = values.get("type")
        if source_type is not None and source_type not in DATA_SOURCE_TYPES:
            raise DataSourceValidationError(f"Invalid data source type: {source_type}")
        status = values.get("status")
        if status is not None and status not in DATA_SOURCE_STATUSES:
            raise DataSourceValidationError(f"Invalid data source status: {status}")
