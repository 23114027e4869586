"""
API Endpoint Registry Repository
"""
from typing import Optional, Sequence, Any

from sqlalchemy import select, func

from database.models import ApiEndpoint, EndpointTestLog
from .base import BaseRepository


RECENT_LOG_LIMIT = 20


class ApiEndpointRepository(BaseRepository[ApiEndpoint]):
    """Repository for registered endpoints and their smoke test log."""
    
    model = ApiEndpoint
    
    async def list_all(self) -> Sequence[ApiEndpoint]:
        stmt = select(ApiEndpoint).order_by(ApiEndpoint.group_name, ApiEndpoint.path, ApiEndpoint.method)
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_by_route(self, method: str, path: str) -> Optional[ApiEndpoint]:
        stmt = select(ApiEndpoint).where(ApiEndpoint.method == method, ApiEndpoint.path == path)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def record_test(
        self,
        endpoint: ApiEndpoint,
        status: str,
        status_code: int,
        duration_ms: int,
        response_body: Any = None,
    ) -> EndpointTestLog:
        """Append a test log row and stamp the endpoint with the outcome."""
        log = EndpointTestLog(
            endpoint_id=endpoint.id,
            status=status,
            status_code=status_code,
            response_body=response_body,
            response_headers={},
            duration_ms=duration_ms,
        )
        self.session.add(log)
        endpoint.last_test_status = status
        endpoint.last_test_at = self.now()
        await self.session.flush()
        return log
    
    async def get_recent_logs(self, endpoint_id: str, limit: int = RECENT_LOG_LIMIT) -> Sequence[EndpointTestLog]:
        stmt = (
            select(EndpointTestLog)
            .where(EndpointTestLog.endpoint_id == endpoint_id)
            .order_by(EndpointTestLog.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def count_test_runs(self) -> int:
        stmt = select(func.count()).select_from(EndpointTestLog)
        result = await self.session.execute(stmt)
        return result.scalar_one()
