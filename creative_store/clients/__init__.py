"""API clients for external services."""

from .llm import LLMClient
from .image import ImageClient
from .records import RecordsClient
from .storage import StorageClient, UploadResult

__all__ = ["LLMClient", "ImageClient", "RecordsClient", "StorageClient", "UploadResult"]
