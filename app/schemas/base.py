"""
Shared schema base.

The API speaks camelCase while the database columns and Python attributes are
snake_case. ``CamelModel`` is the single mapping point: fields are declared in
snake_case, serialized by alias, and accepted in either form on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Page(CamelModel):
    """Pagination envelope shared by list endpoints."""

    total: int
    page: int
    page_size: int
