"""Shared pydantic base classes.

The frontend speaks camelCase JSON (isActive, expiresAt, ...) while the
Python side stays snake_case. CamelModel maps between the two: responses
serialize by alias, requests accept either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def reject_null(value):
    """For partial updates: a field may be left out, but not set to null."""
    if value is None:
        raise ValueError("may not be null")
    return value
