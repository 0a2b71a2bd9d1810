"""
Sharing domain — token format and limits.
"""
from __future__ import annotations

import enum
import string

TOKEN_LENGTH: int = 32
TOKEN_ALPHABET: str = string.ascii_letters + string.digits
# Fresh draws attempted before giving up on a collision streak
MAX_TOKEN_ATTEMPTS: int = 5


class LinkLookupCode(str, enum.Enum):
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_FOUND = "NOT_FOUND"
    EXPIRED = "EXPIRED"
