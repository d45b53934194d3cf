"""Base Pydantic schema for the project.

Provides a common base class for all Pydantic models in snl-timeline
with shared configuration and validation behavior.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = ["BaseSchema"]


class BaseSchema(BaseModel):
    """Base model for all Pydantic schemas.

    Provides common configuration for all models in the project:
    - alias_generator: camelCase names on the wire (stored payloads)
    - populate_by_name: snake_case names still accepted in Python code
    - str_strip_whitespace: Automatically strip whitespace from strings
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
