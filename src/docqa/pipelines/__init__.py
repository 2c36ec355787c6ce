"""
The two pipelines: ingestion (file → chunks) and query (question → answer).

    from docqa.pipelines import IngestionPipeline, QueryPipeline
"""

from .ingestion import IngestionPipeline
from .query import QueryPipeline

__all__ = [
    "IngestionPipeline",
    "QueryPipeline",
]
