"""
Project Tracking Repositories

Features and their test cases, tasks, projects and their tasks,
subsystems, release history, documentation and goals.
"""
from typing import Optional, Sequence, Dict, Any

from sqlalchemy import select, func

from constants import TaskStatus
from database.models import (
    Feature,
    FeatureTest,
    Task,
    Project,
    ProjectTask,
    Subsystem,
    VersionHistory,
    Documentation,
    HedraGoal,
)
from .base import BaseRepository


class FeatureRepository(BaseRepository[Feature]):
    """Repository for tracked features."""
    
    model = Feature
    
    async def list_all(self) -> Sequence[Feature]:
        stmt = select(Feature).order_by(Feature.category.asc(), Feature.name.asc())
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_by_name(self, name: str) -> Optional[Feature]:
        stmt = select(Feature).where(Feature.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def count_by_status(self) -> Dict[str, int]:
        stmt = select(Feature.status, func.count()).group_by(Feature.status)
        return dict((await self.session.execute(stmt)).all())


class FeatureTestRepository(BaseRepository[FeatureTest]):
    """Repository for manual feature test cases."""
    
    model = FeatureTest
    
    async def list_all(self, feature_id: Optional[str] = None) -> Sequence[FeatureTest]:
        stmt = select(FeatureTest).order_by(FeatureTest.created_at.asc())
        if feature_id:
            stmt = stmt.where(FeatureTest.feature_id == feature_id)
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def record_run(self, test: FeatureTest, status: str) -> FeatureTest:
        """Store a run outcome and stamp the run time."""
        test.last_run_status = status
        test.last_run_at = self.now()
        await self.session.flush()
        return test


class TaskRepository(BaseRepository[Task]):
    """Repository for the task board."""
    
    model = Task
    
    async def list_all(self) -> Sequence[Task]:
        """Grouped by status, earliest due first, tasks without a due date last."""
        stmt = select(Task).order_by(
            Task.status.asc(),
            Task.due_date.is_(None),
            Task.due_date.asc(),
            Task.created_at.desc(),
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def update_task(self, task: Task, values: Dict[str, Any]) -> Task:
        """Apply edits; moving a task to done stamps completed_at, leaving done clears it."""
        status = values.get("status")
        if status == TaskStatus.DONE.value and task.status != TaskStatus.DONE.value:
            values = {**values, "completed_at": self.now()}
        elif status is not None and status != TaskStatus.DONE.value:
            values = {**values, "completed_at": None}
        return await self.update(task, values)


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects."""
    
    model = Project
    
    async def list_all(self) -> Sequence[Project]:
        return await self.get_all(order_by="created_at", descending=True)


class ProjectTaskRepository(BaseRepository[ProjectTask]):
    """Repository for the task lists of projects."""
    
    model = ProjectTask
    
    async def list_for_project(self, project_id: str) -> Sequence[ProjectTask]:
        """Grouped by status, then manual order, oldest first."""
        stmt = (
            select(ProjectTask)
            .where(ProjectTask.project_id == project_id)
            .order_by(ProjectTask.status.asc(), ProjectTask.order_index.asc(), ProjectTask.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_in_project(self, project_id: str, task_id: str) -> Optional[ProjectTask]:
        task = await self.get(task_id)
        if task is None or task.project_id != project_id:
            return None
        return task


class SubsystemRepository(BaseRepository[Subsystem]):
    """Repository for roadmap subsystems."""
    
    model = Subsystem
    
    async def list_ordered(self) -> Sequence[Subsystem]:
        return await self.get_all(order_by="order_index")
    
    async def upsert(self, values: Dict[str, Any]) -> Subsystem:
        existing = await self.get(values["id"])
        if existing:
            return await self.update(existing, values)
        return await self.add(Subsystem(**values))


class VersionHistoryRepository(BaseRepository[VersionHistory]):
    """Repository for release history."""
    
    model = VersionHistory
    
    async def list_newest_first(self) -> Sequence[VersionHistory]:
        return await self.get_all(order_by="release_date", descending=True)
    
    async def get_current(self) -> Optional[VersionHistory]:
        versions = await self.get_all(limit=1, order_by="release_date", descending=True)
        return versions[0] if versions else None
    
    async def get_by_version(self, version: str) -> Optional[VersionHistory]:
        stmt = select(VersionHistory).where(VersionHistory.version == version)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def upsert(self, values: Dict[str, Any]) -> VersionHistory:
        existing = await self.get_by_version(values["version"])
        if existing:
            return await self.update(existing, values)
        return await self.add(VersionHistory(**values))


class DocumentationRepository(BaseRepository[Documentation]):
    """Repository for editable documents."""
    
    model = Documentation
    
    async def list_titles(self) -> Sequence[Documentation]:
        return await self.get_all(order_by="title")
    
    async def get_by_key(self, doc_key: str) -> Optional[Documentation]:
        stmt = select(Documentation).where(Documentation.doc_key == doc_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class HedraGoalRepository(BaseRepository[HedraGoal]):
    """Repository for the goals document sections."""
    
    model = HedraGoal
    
    async def get_all_by_section(self) -> Dict[str, Dict[str, Any]]:
        goals = await self.get_all(order_by="section_key")
        return {goal.section_key: goal.to_dict() for goal in goals}
    
    async def update_sections(self, contents: Dict[str, str]) -> int:
        """Overwrite the content of every listed section that exists."""
        updated = 0
        for section_key, content in contents.items():
            stmt = select(HedraGoal).where(HedraGoal.section_key == section_key)
            goal = (await self.session.execute(stmt)).scalar_one_or_none()
            if goal is None:
                continue
            goal.content = content
            updated += 1
        await self.session.flush()
        return updated
