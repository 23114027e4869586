"""
Library Routes

Endpoints organized by:
- Prompts
- Tools
- API endpoint registry (CRUD, smoke tests, test logs)
"""
import json
import time

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from constants import FeatureTestStatus, PromptType
from database import get_session_dependency
from database.models import Prompt, Tool, ApiEndpoint
from repositories import PromptRepository, ToolRepository, ApiEndpointRepository
from ..schemas import PromptBody, ToolBody, ApiEndpointBody

router = APIRouter(tags=["library"])

PROMPT_TYPES = {t.value for t in PromptType}
TEST_ALL_PATH = "/api/api-endpoints/test-all"


# ============================================================
# Prompts
# ============================================================
def _prompt_values(body: PromptBody) -> dict:
    if not body.name or not body.content:
        raise HTTPException(status_code=400, detail="Name and content are required")
    if body.type is not None and body.type not in PROMPT_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid prompt type: {body.type}")
    values = body.changes()
    if values.get("type") is None:
        values.pop("type", None)
    return values


@router.get("/prompts")
async def list_prompts(session: AsyncSession = Depends(get_session_dependency)):
    prompts = await PromptRepository(session).list_all()
    return [p.to_dict() for p in prompts]


@router.post("/prompts", status_code=201)
async def create_prompt(body: PromptBody, session: AsyncSession = Depends(get_session_dependency)):
    prompt = await PromptRepository(session).add(Prompt(**_prompt_values(body)))
    return prompt.to_dict()


@router.get("/prompts/{prompt_id}")
async def get_prompt(prompt_id: str, session: AsyncSession = Depends(get_session_dependency)):
    prompt = await PromptRepository(session).get(prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found")
    return prompt.to_dict()


@router.put("/prompts/{prompt_id}")
async def update_prompt(prompt_id: str, body: PromptBody, session: AsyncSession = Depends(get_session_dependency)):
    values = _prompt_values(body)
    repo = PromptRepository(session)
    prompt = await repo.get(prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found")
    
    await repo.update(prompt, values)
    return prompt.to_dict()


@router.delete("/prompts/{prompt_id}")
async def delete_prompt(prompt_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await PromptRepository(session).delete(prompt_id):
        raise HTTPException(status_code=404, detail="Prompt not found")
    return {"message": "Prompt deleted successfully"}


# ============================================================
# Tools
# ============================================================
DUPLICATE_TOOL = "A tool with this name already exists."


def _tool_values(body: ToolBody) -> dict:
    """Tool columns; a schema sent as text must be valid JSON."""
    if not body.name or not body.description or body.tool_schema is None or body.tool_schema == "":
        raise HTTPException(status_code=400, detail="Name, description, and schema_json are required")
    
    schema = body.tool_schema
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="schema_json must be valid JSON.")
    return {"name": body.name, "description": body.description, "schema_json": schema}


@router.get("/tools")
async def list_tools(session: AsyncSession = Depends(get_session_dependency)):
    tools = await ToolRepository(session).list_all()
    return [t.to_dict() for t in tools]


@router.post("/tools", status_code=201)
async def create_tool(body: ToolBody, session: AsyncSession = Depends(get_session_dependency)):
    values = _tool_values(body)
    try:
        tool = await ToolRepository(session).add(Tool(**values))
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_TOOL)
    return tool.to_dict()


@router.put("/tools/{tool_id}")
async def update_tool(tool_id: str, body: ToolBody, session: AsyncSession = Depends(get_session_dependency)):
    values = _tool_values(body)
    repo = ToolRepository(session)
    tool = await repo.get(tool_id)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    
    try:
        await repo.update(tool, values)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_TOOL)
    return tool.to_dict()


@router.delete("/tools/{tool_id}")
async def delete_tool(tool_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await ToolRepository(session).delete(tool_id):
        raise HTTPException(status_code=404, detail="Tool not found")
    return {"message": "Tool deleted successfully"}


# ============================================================
# API endpoint registry
# ============================================================
@router.get("/api-endpoints")
async def list_api_endpoints(session: AsyncSession = Depends(get_session_dependency)):
    endpoints = await ApiEndpointRepository(session).list_all()
    return [e.to_dict() for e in endpoints]


@router.post("/api-endpoints", status_code=201)
async def create_api_endpoint(body: ApiEndpointBody, session: AsyncSession = Depends(get_session_dependency)):
    if not body.method or not body.path or not body.group_name:
        raise HTTPException(status_code=400, detail="Method, path, and groupName are required")
    
    values = body.changes()
    values["method"] = body.method.upper()
    if not values.get("expected_status_code"):
        values["expected_status_code"] = 200
    try:
        endpoint = await ApiEndpointRepository(session).add(ApiEndpoint(**values))
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An endpoint with this path already exists.")
    return endpoint.to_dict()


@router.post("/api-endpoints/test-all")
async def test_all_endpoints(request: Request, session: AsyncSession = Depends(get_session_dependency)):
    """
    Call every registered endpoint against this app and record the outcome.
    
    Calls run one after another in-process. Path parameters are not filled
    in, so endpoints that need one are expected to fail.
    """
    repo = ApiEndpointRepository(session)
    endpoints = [e for e in await repo.list_all() if e.path != TEST_ALL_PATH]
    
    results = []
    transport = httpx.ASGITransport(app=request.app)
    async with httpx.AsyncClient(transport=transport, base_url=str(request.base_url)) as client:
        for endpoint in endpoints:
            body = endpoint.default_body_json if endpoint.method != "GET" else None
            start = time.monotonic()
            try:
                response = await client.request(
                    endpoint.method,
                    endpoint.path,
                    params=endpoint.default_params_json or None,
                    json=body,
                )
                status_code = response.status_code
            except httpx.HTTPError as e:
                logger.warning(f"Endpoint test {endpoint.method} {endpoint.path} errored: {e}")
                status_code = 500
            duration_ms = int((time.monotonic() - start) * 1000)
            results.append((endpoint, status_code, duration_ms))
    
    passed = failed = 0
    for endpoint, status_code, duration_ms in results:
        if status_code == endpoint.expected_status_code:
            status = FeatureTestStatus.PASSED.value
            passed += 1
        else:
            status = FeatureTestStatus.FAILED.value
            failed += 1
        await repo.record_test(endpoint, status, status_code, duration_ms, {"message": "Batch test run."})
    
    logger.info(f"Endpoint batch test: {passed} passed, {failed} failed")
    return {
        "message": f"Batch test completed. Passed: {passed}, Failed: {failed}.",
        "total": len(endpoints),
        "passed": passed,
        "failed": failed,
    }


@router.get("/api-endpoints/test-logs/{endpoint_id}")
async def get_endpoint_test_logs(endpoint_id: str, session: AsyncSession = Depends(get_session_dependency)):
    """Latest 20 test results for one endpoint."""
    logs = await ApiEndpointRepository(session).get_recent_logs(endpoint_id)
    return [log.to_dict() for log in logs]


@router.put("/api-endpoints/{endpoint_id}")
async def update_api_endpoint(
    endpoint_id: str,
    body: ApiEndpointBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    if not body.method or not body.path or not body.group_name:
        raise HTTPException(status_code=400, detail="Method, path, and groupName are required for an update")
    
    repo = ApiEndpointRepository(session)
    endpoint = await repo.get(endpoint_id)
    if not endpoint:
        raise HTTPException(status_code=404, detail="Endpoint not found")
    
    values = body.changes()
    values["method"] = body.method.upper()
    if values.get("expected_status_code") is None:
        values.pop("expected_status_code", None)
    try:
        await repo.update(endpoint, values)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An endpoint with this path already exists.")
    return endpoint.to_dict()


@router.delete("/api-endpoints/{endpoint_id}")
async def delete_api_endpoint(endpoint_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await ApiEndpointRepository(session).delete(endpoint_id):
        raise HTTPException(status_code=404, detail="Endpoint not found")
    return {"message": "Endpoint deleted successfully"}
