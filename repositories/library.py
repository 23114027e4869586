"""
Prompt and Tool Repositories
"""
from typing import Sequence

from database.models import Prompt, Tool
from .base import BaseRepository


class PromptRepository(BaseRepository[Prompt]):
    """Repository for saved prompts."""
    
    model = Prompt
    
    async def list_all(self) -> Sequence[Prompt]:
        return await self.get_all(order_by="name")


class ToolRepository(BaseRepository[Tool]):
    """Repository for agent tool declarations."""
    
    model = Tool
    
    async def list_all(self) -> Sequence[Tool]:
        return await self.get_all(order_by="name")
