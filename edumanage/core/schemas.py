from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API payloads: snake_case attributes, camelCase JSON field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    """Success envelope returned by mutating endpoints."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope. errors is set only for rejected batches."""

    success: bool = False
    error: str
    errors: Optional[List[str]] = None
