"""
Social service — auth-specific FastAPI dependencies (the identity gate).

These wrap the shared auth dependencies and add service context (role guards).
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status

from shared.auth.dependencies import get_current_user_required
from shared.constants import Role
from shared.models.user import CurrentUser

# Alias the shared dependency so routes import from here, not from shared
# directly.  If we ever need to augment them (e.g. DB lookup), only this
# file changes.
get_current_user = get_current_user_required


def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the caller holds ADMIN, SUPER_ADMIN or the SERVICE role."""
    allowed = {Role.ADMIN, Role.SUPER_ADMIN, Role.SERVICE}
    if not any(r in allowed for r in current_user.roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user
