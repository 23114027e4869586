"""
Settings Repository

Global key/value settings. Values are arbitrary JSON.
"""
from typing import Any, Dict

from sqlalchemy import select

from database.models import Setting
from .base import BaseRepository


DEFAULT_SETTINGS: Dict[str, Any] = {
    "defaultModelConfig": {
        "model": "gemini-2.5-flash",
        "temperature": 0.7,
        "topP": 0.95,
    },
    "defaultAgentConfig": {
        "systemPrompt": "You are a helpful AI assistant.",
        "useSemanticMemory": True,
        "useStructuredMemory": True,
    },
    "enableDebugLog": {"enabled": False},
    "featureFlags": {
        "enableMemoryExtraction": True,
        "enableProactiveSuggestions": True,
        "enableAutoSummarization": True,
    },
    "global_ui_settings": {"fontSize": "base", "messageFontSize": "sm"},
}


class SettingRepository(BaseRepository[Setting]):
    """Repository for global settings."""
    
    model = Setting
    
    async def get_all_as_dict(self) -> Dict[str, Any]:
        result = await self.session.execute(select(Setting))
        return {row.key: row.value for row in result.scalars().all()}
    
    async def get_value(self, key: str, default: Any = None) -> Any:
        setting = await self.get(key)
        return setting.value if setting else default
    
    async def upsert_many(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Write every key, returning the full settings dict afterwards."""
        for key, value in values.items():
            setting = await self.get(key)
            if setting:
                setting.value = value
                setting.last_updated_at = self.now()
            else:
                self.session.add(Setting(key=key, value=value))
        await self.session.flush()
        return await self.get_all_as_dict()
    
    async def ensure_defaults(self) -> int:
        """Insert default settings that are missing. Returns how many were added."""
        added = 0
        for key, value in DEFAULT_SETTINGS.items():
            if await self.get(key) is None:
                self.session.add(Setting(key=key, value=value))
                added += 1
        await self.session.flush()
        return added
