"""
Prompts Module - system instructions and templates for the assistant helpers.

Usage:
    from prompts import PromptLoader, get_prompt
    
    loader = PromptLoader()
    system = loader.get("conversation_title")
    request = get_prompt("rewrite_request", history="...", prompt="...")

Prompt Files:
- conversation_title.md: Title of 5 words or less for a conversation
- conversation_summary.md: One-paragraph conversation summary
- text_summary.md: Concise summary of arbitrary text
- context_summary.md: Dense summary used as future context
- prompt_rewriter.md / rewrite_request.md: Rewrite the user's last prompt
"""

from ._loader import PromptLoader, get_prompt, list_prompts

__all__ = [
    "PromptLoader",
    "get_prompt",
    "list_prompts",
]
