from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PublicUser(BaseModel):
    """Public projection of a user embedded in list items, feeds and share links."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str | None
    avatar_url: str | None
