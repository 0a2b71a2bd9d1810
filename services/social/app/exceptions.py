"""
Social service — domain-specific HTTP exceptions.

All exceptions use preset status codes, machine-readable codes and messages so
that callers never need to specify these at the call site.  The shared
http_exception_handler renders them into the standard error envelope:

    {"error": {"code": "ALREADY_FOLLOWING", "message": "..."}, "request_id": "..."}
"""
from fastapi import HTTPException, status


class SocialError(HTTPException):
    """HTTPException with a stable ``code`` alongside the human-readable detail."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code


# ── Validation ────────────────────────────────────────────────────────────────

# Request fields → code reported when FastAPI/Pydantic rejects them.
VALIDATION_FIELD_CODES: dict[str, str] = {
    "user_id": "INVALID_USER_ID",
    "anime_id": "INVALID_ANIME_ID",
    "anime_title": "INVALID_CONTENT",
    "details": "INVALID_CONTENT",
    "expires_in_days": "INVALID_EXPIRY",
    "action_type": "INVALID_ACTION_TYPE",
    "cursor": "INVALID_CURSOR",
    "limit": "INVALID_LIMIT",
}


class InvalidCursor(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_CURSOR",
            "Pagination cursor is malformed.",
        )


# ── Users ─────────────────────────────────────────────────────────────────────

class UserNotFound(SocialError):
    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "User not found.")


# ── Follow ────────────────────────────────────────────────────────────────────

class CannotFollowSelf(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_403_FORBIDDEN, "CANNOT_FOLLOW_SELF", "Cannot follow yourself."
        )


class AlreadyFollowing(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_409_CONFLICT, "ALREADY_FOLLOWING", "Already following this user."
        )


class NotFollowing(SocialError):
    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOLLOWING", "Not following this user.")


class BlockedByUser(SocialError):
    """Target has blocked the requester; following them is not allowed."""

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "BLOCKED_BY_USER",
            "Cannot follow: you are blocked by this user.",
        )


class TargetBlocked(SocialError):
    """Requester has blocked the target; unblock before following."""

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "USER_BLOCKED",
            "Cannot follow: you have blocked this user.",
        )


# ── Block ─────────────────────────────────────────────────────────────────────

class CannotBlockSelf(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_403_FORBIDDEN, "CANNOT_BLOCK_SELF", "Cannot block yourself."
        )


class CannotUnblockSelf(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_OPERATION", "Cannot unblock yourself."
        )


class AlreadyBlocked(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_409_CONFLICT, "BLOCK_ALREADY_EXISTS", "Already blocking this user."
        )


class BlockNotFound(SocialError):
    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "BLOCK_NOT_FOUND", "Not blocking this user.")


# ── Share links ───────────────────────────────────────────────────────────────

class ShareLinkNotFound(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_404_NOT_FOUND, "SHARE_LINK_NOT_FOUND", "Share link not found."
        )


class NotLinkOwner(SocialError):
    def __init__(self) -> None:
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "UNAUTHORIZED",
            "You can only delete your own share links.",
        )


class TokenGenerationFailed(SocialError):
    """Every token draw collided with an existing link; the call is not retried further."""

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "TOKEN_GENERATION_FAILED",
            "Failed to generate a unique share token. Please try again.",
        )
