"""
Service layer — what a web framework's route handlers call.

    from docqa.services import DocumentService, ChatService
"""

from .chat import ChatService
from .documents import DocumentService

__all__ = [
    "DocumentService",
    "ChatService",
]
