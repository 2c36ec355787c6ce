"""
Generation components — turn ranked chunks into an answer.

    from docqa.generation import get_composer
"""

from .compose import (
    NO_RELEVANT_INFORMATION,
    LLMComposer,
    TemplateComposer,
    get_composer,
)

__all__ = [
    "NO_RELEVANT_INFORMATION",
    "TemplateComposer",
    "LLMComposer",
    "get_composer",
]
