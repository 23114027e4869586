"""
Project Tracking Routes

Endpoints organized by:
- Features
- Feature tests
- Tasks
- Projects and their tasks
- Subsystems
- Version history
- Documentation
- Hedra goals
"""
import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from constants import FEATURE_STATUSES, FeatureTestStatus, TaskStatus
from database import get_session_dependency
from database.models import Feature, FeatureTest, Task, Project, ProjectTask
from processor import TextAssistant
from repositories import (
    FeatureRepository,
    FeatureTestRepository,
    TaskRepository,
    ProjectRepository,
    ProjectTaskRepository,
    SubsystemRepository,
    VersionHistoryRepository,
    DocumentationRepository,
    HedraGoalRepository,
)
from ..dependencies import get_assistant, run_assistant
from ..schemas import (
    FeatureBody,
    FeatureTestBody,
    TaskBody,
    DocumentationBody,
    ProjectBody,
    ProjectTaskBody,
)

router = APIRouter(tags=["project"])

JSON_FIELDS = ("ui_ux_breakdown_json", "key_files_json")
TEST_STATUSES = {s.value for s in FeatureTestStatus}
TASK_STATUSES = {s.value for s in TaskStatus}


# ============================================================
# Features
# ============================================================
def _feature_values(body: FeatureBody) -> Dict[str, Any]:
    """Validated feature columns; JSON fields sent as text are parsed."""
    if not body.name or not body.status:
        raise HTTPException(status_code=400, detail="Name and status are required")
    if body.status not in FEATURE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid feature status: {body.status}")
    
    values = body.changes()
    for field in JSON_FIELDS:
        raw = values.get(field)
        if isinstance(raw, str):
            try:
                values[field] = json.loads(raw) if raw.strip() else None
            except json.JSONDecodeError:
                raise HTTPException(status_code=400, detail="Invalid JSON format for UI Breakdown or Key Files.")
    if not values.get("category"):
        values.pop("category", None)
    return values


@router.get("/features")
async def list_features(session: AsyncSession = Depends(get_session_dependency)):
    """All features grouped by category."""
    features = await FeatureRepository(session).list_all()
    return [f.to_dict() for f in features]


@router.post("/features", status_code=201)
async def create_feature(body: FeatureBody, session: AsyncSession = Depends(get_session_dependency)):
    values = _feature_values(body)
    try:
        feature = await FeatureRepository(session).add(Feature(**values))
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A feature with this name already exists.")
    return feature.to_dict()


@router.get("/features/{feature_id}")
async def get_feature(feature_id: str, session: AsyncSession = Depends(get_session_dependency)):
    feature = await FeatureRepository(session).get(feature_id)
    if not feature:
        raise HTTPException(status_code=404, detail="Feature not found")
    return feature.to_dict()


@router.put("/features/{feature_id}")
async def update_feature(
    feature_id: str,
    body: FeatureBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    values = _feature_values(body)
    repo = FeatureRepository(session)
    feature = await repo.get(feature_id)
    if not feature:
        raise HTTPException(status_code=404, detail="Feature not found")
    
    try:
        await repo.update(feature, values)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A feature with this name already exists.")
    return feature.to_dict()


@router.delete("/features/{feature_id}")
async def delete_feature(feature_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await FeatureRepository(session).delete(feature_id):
        raise HTTPException(status_code=404, detail="Feature not found")
    return {"message": "Feature deleted successfully"}


# ============================================================
# Feature tests
# ============================================================
@router.get("/tests")
async def list_feature_tests(
    feature_id: Optional[str] = Query(default=None, alias="featureId"),
    session: AsyncSession = Depends(get_session_dependency),
):
    tests = await FeatureTestRepository(session).list_all(feature_id)
    return [t.to_dict() for t in tests]


@router.post("/tests", status_code=201)
async def create_feature_test(body: FeatureTestBody, session: AsyncSession = Depends(get_session_dependency)):
    if not body.feature_id or not body.description or not body.expected_result:
        raise HTTPException(status_code=400, detail="featureId, description, and expected_result are required")
    if not await FeatureRepository(session).exists(body.feature_id):
        raise HTTPException(status_code=404, detail="Feature not found")
    
    test = await FeatureTestRepository(session).add(FeatureTest(
        feature_id=body.feature_id,
        description=body.description,
        manual_steps=body.manual_steps,
        expected_result=body.expected_result,
    ))
    return test.to_dict()


@router.get("/tests/{test_id}")
async def get_feature_test(test_id: str, session: AsyncSession = Depends(get_session_dependency)):
    test = await FeatureTestRepository(session).get(test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test case not found")
    return test.to_dict()


@router.put("/tests/{test_id}")
async def update_feature_test(
    test_id: str,
    body: FeatureTestBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Edit a test case; a new last_run_status stamps last_run_at."""
    changes = body.changes()
    changes.pop("feature_id", None)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    
    repo = FeatureTestRepository(session)
    test = await repo.get(test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test case not found")
    
    status = changes.pop("last_run_status", None)
    if status is not None:
        if status not in TEST_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid test status: {status}")
        await repo.record_run(test, status)
    await repo.update(test, changes)
    return test.to_dict()


@router.delete("/tests/{test_id}")
async def delete_feature_test(test_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await FeatureTestRepository(session).delete(test_id):
        raise HTTPException(status_code=404, detail="Test case not found")
    return {"message": "Test case deleted successfully"}


# ============================================================
# Tasks
# ============================================================
@router.get("/tasks")
async def list_tasks(session: AsyncSession = Depends(get_session_dependency)):
    tasks = await TaskRepository(session).list_all()
    return [t.to_dict() for t in tasks]


@router.post("/tasks", status_code=201)
async def create_task(body: TaskBody, session: AsyncSession = Depends(get_session_dependency)):
    if not body.title:
        raise HTTPException(status_code=400, detail="Title is required")
    
    task = await TaskRepository(session).add(Task(
        title=body.title,
        description=body.description,
        due_date=body.due_date,
    ))
    return task.to_dict()


@router.put("/tasks/{task_id}")
async def update_task(task_id: str, body: TaskBody, session: AsyncSession = Depends(get_session_dependency)):
    """Partial update; moving a task to done stamps completed_at."""
    changes = body.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "status" in changes and changes["status"] not in TASK_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid task status: {changes['status']}")
    
    repo = TaskRepository(session)
    task = await repo.get(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    
    await repo.update_task(task, changes)
    return task.to_dict()


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await TaskRepository(session).delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task deleted successfully"}


# ============================================================
# Projects
# ============================================================
@router.get("/projects")
async def list_projects(session: AsyncSession = Depends(get_session_dependency)):
    projects = await ProjectRepository(session).list_all()
    return [p.to_dict() for p in projects]


@router.post("/projects", status_code=201)
async def create_project(body: ProjectBody, session: AsyncSession = Depends(get_session_dependency)):
    if not body.name:
        raise HTTPException(status_code=400, detail="Name is required")
    
    project = await ProjectRepository(session).add(Project(
        name=body.name,
        description=body.description or None,
        due_date=body.due_date,
    ))
    return project.to_dict()


@router.put("/projects/{project_id}")
async def update_project(project_id: str, body: ProjectBody, session: AsyncSession = Depends(get_session_dependency)):
    changes = body.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    
    repo = ProjectRepository(session)
    project = await repo.get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    
    await repo.update(project, changes)
    return project.to_dict()


@router.delete("/projects/{project_id}")
async def delete_project(project_id: str, session: AsyncSession = Depends(get_session_dependency)):
    """Delete a project together with its tasks."""
    if not await ProjectRepository(session).delete(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"message": "Project deleted successfully"}


@router.post("/projects/{project_id}/summarize")
async def summarize_project(
    project_id: str,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """One-paragraph status summary written from the project and its checklist."""
    project = await ProjectRepository(session).get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    tasks = await ProjectTaskRepository(session).list_for_project(project_id)
    
    summary = await run_assistant(
        session, assistant, "project_summary", assistant.summarize_project,
        project.to_dict(), [t.to_dict() for t in tasks],
    )
    if not summary:
        raise HTTPException(status_code=500, detail="Failed to generate summary from the AI model")
    return {"summary": summary}


# ============================================================
# Project tasks
# ============================================================
@router.get("/projects/{project_id}/tasks")
async def list_project_tasks(project_id: str, session: AsyncSession = Depends(get_session_dependency)):
    tasks = await ProjectTaskRepository(session).list_for_project(project_id)
    return [t.to_dict() for t in tasks]


@router.post("/projects/{project_id}/tasks", status_code=201)
async def create_project_task(
    project_id: str,
    body: ProjectTaskBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    if not body.title:
        raise HTTPException(status_code=400, detail="Title is required")
    if not await ProjectRepository(session).get(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    
    task = await ProjectTaskRepository(session).add(ProjectTask(
        project_id=project_id,
        title=body.title,
        description=body.description or None,
    ))
    return task.to_dict()


@router.put("/projects/{project_id}/tasks/{task_id}")
async def update_project_task(
    project_id: str,
    task_id: str,
    body: ProjectTaskBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Partial update of title, description, status and orderIndex."""
    changes = body.changes()
    if "status" in changes and changes["status"] not in TASK_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid task status: {changes['status']}")
    
    repo = ProjectTaskRepository(session)
    task = await repo.get_in_project(project_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    
    await repo.update(task, changes)
    return task.to_dict()


@router.delete("/projects/{project_id}/tasks/{task_id}")
async def delete_project_task(project_id: str, task_id: str, session: AsyncSession = Depends(get_session_dependency)):
    repo = ProjectTaskRepository(session)
    task = await repo.get_in_project(project_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    await repo.delete(task.id)
    return {"message": "Task deleted successfully"}


# ============================================================
# Subsystems & versions
# ============================================================
@router.get("/subsystems")
async def list_subsystems(session: AsyncSession = Depends(get_session_dependency)):
    subsystems = await SubsystemRepository(session).list_ordered()
    return [s.to_dict() for s in subsystems]


@router.get("/version/current")
async def get_current_version(session: AsyncSession = Depends(get_session_dependency)):
    version = await VersionHistoryRepository(session).get_current()
    if not version:
        raise HTTPException(status_code=404, detail="No version history found")
    return version.to_dict()


@router.get("/version/history")
async def get_version_history(session: AsyncSession = Depends(get_session_dependency)):
    versions = await VersionHistoryRepository(session).list_newest_first()
    return [v.to_dict() for v in versions]


# ============================================================
# Documentation
# ============================================================
@router.get("/documentation")
async def list_documentation(session: AsyncSession = Depends(get_session_dependency)):
    """Document index without content."""
    docs = await DocumentationRepository(session).list_titles()
    return [
        {"id": d.id, "doc_key": d.doc_key, "title": d.title, "last_updated_at": d.last_updated_at}
        for d in docs
    ]


@router.get("/documentation/{doc_key}")
async def get_documentation(doc_key: str, session: AsyncSession = Depends(get_session_dependency)):
    doc = await DocumentationRepository(session).get_by_key(doc_key)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc.to_dict()


@router.put("/documentation/{doc_key}")
async def update_documentation(
    doc_key: str,
    body: DocumentationBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    if body.content is None:
        raise HTTPException(status_code=400, detail="Content is required")
    
    repo = DocumentationRepository(session)
    doc = await repo.get_by_key(doc_key)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    
    await repo.update(doc, body.changes())
    return doc.to_dict()


# ============================================================
# Hedra goals
# ============================================================
@router.get("/hedra-goals")
async def get_hedra_goals(session: AsyncSession = Depends(get_session_dependency)):
    """Goal sections keyed by section_key."""
    return await HedraGoalRepository(session).get_all_by_section()


@router.put("/hedra-goals")
async def update_hedra_goals(
    goals: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session_dependency),
):
    """
    Overwrite goal sections in one transaction.
    
    Body: {"<section_key>": {"content": "..."}} (a bare string is accepted too)
    """
    contents = {
        key: value.get("content", "") if isinstance(value, dict) else str(value)
        for key, value in goals.items()
    }
    await HedraGoalRepository(session).update_sections(contents)
    return {"success": True, "message": "Goals updated successfully."}
