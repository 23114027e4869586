"""
Prompt Loader - Load and format prompts from markdown files.

Prompts live next to this module as .md files with {variable_name}
placeholders, and are cached after the first read.
"""
import re
from pathlib import Path
from typing import Optional, Dict, Any

from loguru import logger


_VARIABLE_PATTERN = re.compile(r'\{([a-zA-Z_][a-zA-Z0-9_]*)\}')


class PromptLoader:
    """
    Load and format prompts from markdown files.
    
    Example:
        loader = PromptLoader()
        system = loader.get("conversation_summary")
        request = loader.format("rewrite_request", history="...", prompt="...")
    """
    
    # Singleton instance
    _instance: Optional["PromptLoader"] = None
    
    def __new__(cls) -> "PromptLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self._prompts_dir = Path(__file__).parent
        self._cache: Dict[str, str] = {}
        self._initialized = True
        
        logger.debug(f"PromptLoader initialized with prompts dir: {self._prompts_dir}")
    
    def get(self, prompt_name: str) -> str:
        """
        Get a prompt template by name (without .md extension).
        
        Raises:
            FileNotFoundError: If prompt file doesn't exist
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]
        
        prompt_path = self._prompts_dir / f"{prompt_name}.md"
        if not prompt_path.exists():
            raise FileNotFoundError(
                f"Prompt file not found: {prompt_path}\n"
                f"Available prompts: {self.list_prompts()}"
            )
        
        content = prompt_path.read_text(encoding="utf-8").strip()
        self._cache[prompt_name] = content
        
        logger.debug(f"Loaded prompt: {prompt_name} ({len(content)} chars)")
        return content
    
    def format(self, prompt_name: str, **kwargs: Any) -> str:
        """
        Get a prompt and substitute its variables.
        
        Raises:
            ValueError: A variable used by the template was not provided
        """
        template = self.get(prompt_name)
        
        try:
            return template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing variable in prompt '{prompt_name}': {e}")
            raise ValueError(
                f"Missing required variable {e} for prompt '{prompt_name}'"
            ) from e
    
    def list_prompts(self) -> list[str]:
        """Names of all available prompts."""
        return sorted(
            f.stem for f in self._prompts_dir.glob("*.md")
            if f.stem != "README"
        )
    
    def reload(self, prompt_name: str = None) -> None:
        """Clear cache so prompts are read from disk again."""
        if prompt_name:
            self._cache.pop(prompt_name, None)
        else:
            self._cache.clear()
    
    def get_variables(self, prompt_name: str) -> list[str]:
        """Variable names used by a template, in order of first use."""
        matches = _VARIABLE_PATTERN.findall(self.get(prompt_name))
        return list(dict.fromkeys(matches))


# ============================================
# CONVENIENCE FUNCTIONS
# ============================================

def get_prompt(prompt_name: str, **kwargs: Any) -> str:
    """
    Get a prompt, formatted when variables are given.
    
    Example:
        from prompts import get_prompt
        system = get_prompt("conversation_title")
    """
    loader = PromptLoader()
    if kwargs:
        return loader.format(prompt_name, **kwargs)
    return loader.get(prompt_name)


def list_prompts() -> list[str]:
    """List all available prompt names."""
    return PromptLoader().list_prompts()
