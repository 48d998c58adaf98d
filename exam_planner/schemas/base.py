"""Shared pydantic configuration for API payloads."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Payload exchanged with the web client in camelCase, accepted in either case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
