# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.
"""
from .base import Repository, AsyncRepository, ConnectionProtocol
from .media_repository import MediaRepository, AsyncMediaRepository

__all__ = [
    "Repository",
    "AsyncRepository",
    "ConnectionProtocol",
    "MediaRepository",
    "AsyncMediaRepository",
]
