"""
Activity domain — enums and limits.
"""
from __future__ import annotations

import enum

MAX_DETAILS_LENGTH: int = 255
MAX_ANIME_TITLE_LENGTH: int = 255


class ActivityType(str, enum.Enum):
    FOLLOW = "follow"
    BLOCK = "block"
    UNBLOCK = "unblock"
    # Recorded by the favorites / watch-later / comment collaborators via POST /activity
    FAVORITE = "favorite"
    WATCH_LATER = "watch_later"
    COMMENT = "comment"
