"""Repository layer for database operations."""

from blogcms.repositories.category import CategoryRepository
from blogcms.repositories.post import PostRepository

__all__ = ["CategoryRepository", "PostRepository"]
