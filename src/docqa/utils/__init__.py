"""Utility functions shared across docqa."""

from .helpers import get_llm, replace_t_with_space, truncate_excerpt
from .logging import configure_logging, route_to_stdlib

__all__ = [
    "get_llm",
    "replace_t_with_space",
    "truncate_excerpt",
    "configure_logging",
    "route_to_stdlib",
]
