"""
Utilities module for the SoulyCore backend.
"""
from .logger import logger, init_logging, setup_logging
from .text import trigram_similarity, estimate_tokens, strip_quotes

__all__ = [
    "logger",
    "init_logging",
    "setup_logging",
    "trigram_similarity",
    "estimate_tokens",
    "strip_quotes",
]
