"""Request parameters and response models shared by every domain."""
from __future__ import annotations

from typing import Annotated

from fastapi import Path, Query
from pydantic import BaseModel

# Identity strings issued by the identity provider
UserIdPath = Annotated[
    str,
    Path(min_length=10, max_length=100, description="Identity-provider user id"),
]

LimitQuery = Annotated[
    int | None,
    Query(ge=1, description="Page size; clamped to the endpoint maximum"),
]


class SuccessResponse(BaseModel):
    success: bool = True
