"""Raw CRM record representation before normalization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    Untyped record as returned by the CRM API.
    Connectors wrap each item of a paginated listing in one of these.
    """

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] = Field(default_factory=dict)
