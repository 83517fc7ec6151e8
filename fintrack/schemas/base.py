"""
Shared pydantic base classes.

Every API body uses camelCase on the wire and snake_case in Python.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response / nested model: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(BaseModel):
    """Top-level request body: camelCase aliases, unknown keys rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class MessageResponse(BaseModel):
    message: str
