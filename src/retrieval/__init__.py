"""Batch retrieval of stored emails as EML documents.

Public API:
    - BatchRetriever: Fetch and encode records in request order
    - RetrievalResult: Per-item document or error
"""

from .models import RetrievalResult
from .retriever import BatchRetriever

__all__ = [
    "BatchRetriever",
    "RetrievalResult",
]
