"""
Shared schema base.

The frontend speaks camelCase JSON (``avatarUrl``, ``fontColors``...); Python
code uses snake_case attributes. CamelModel maps one to the other and
accepts either spelling on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases for the wire format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

