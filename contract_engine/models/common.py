"""
Common response models and utilities.

The camelCase base model shared by every API schema (stored items use
camelCase attribute names) and small shared responses.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountResponse(CamelModel):
    count: int
