"""Pydantic schemas for request/response validation.

Every schema derives from ``CamelModel``: camelCase on the wire,
snake_case in Python and in the database.
"""

from app.schemas.base import CamelModel, Page

__all__ = ["CamelModel", "Page"]
