"""
Social graph domain — enums.
"""
from __future__ import annotations

import enum


class Relationship(str, enum.Enum):
    """Block relationship between the requester and a target, seen from the requester."""

    BLOCKED = "blocked"          # requester blocked target
    BLOCKED_BY = "blocked_by"    # target blocked requester
    NONE = "none"


class InteractionCode(str, enum.Enum):
    ALLOWED = "ALLOWED"
    USER_BLOCKED = "USER_BLOCKED"
    BLOCKED_BY_USER = "BLOCKED_BY_USER"
