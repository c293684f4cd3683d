from pydantic import BaseModel, Field
from typing import Any


class InboundEvent(BaseModel):
    """A client frame: `{"event": "create-or-join", "args": ["alpha"]}`."""
    event: str = Field(min_length=1)
    args: list[Any] = Field(default_factory=list)


class OutboundEvent(BaseModel):
    event: str
    args: list[Any] = Field(default_factory=list)
