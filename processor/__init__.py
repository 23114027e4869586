"""
Processor Module - LLM-backed text helpers.

Usage:
    from processor import TextAssistant
    
    assistant = TextAssistant(client)
    title = assistant.generate_title(messages)
"""
from .assistant import TextAssistant, AssistantError

__all__ = [
    "TextAssistant",
    "AssistantError",
]
