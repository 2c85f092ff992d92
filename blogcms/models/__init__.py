"""Database models for the application."""

from blogcms.models.category import CategoryDB
from blogcms.models.post import PostDB

__all__ = ["CategoryDB", "PostDB"]
