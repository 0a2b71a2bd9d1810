"""
Global slowapi rate limiter.

Imported by the social_graph and sharing routers for per-endpoint limits.
Mounted onto app.state in main.py so slowapi middleware can find it.

Storage: Redis when RATE_LIMIT_STORAGE_URI / REDIS_URL is set, otherwise
in-memory (useful in local dev and tests without Redis).
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI") or os.getenv("REDIS_URL") or "memory://",
    enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() in ("1", "true", "yes"),
)
