from __future__ import annotations

from fastapi import Request

from ..errors import Forbidden, Unauthorized


def get_current_user(request: Request) -> dict | None:
    """Return the caller identity ``{id, username, role}`` from the session, or ``None``."""
    return request.session.get("user")


def require_user(request: Request) -> dict:
    """Raise 401 if no one is logged in; any role passes."""
    user = get_current_user(request)
    if not user:
        raise Unauthorized("Not authenticated")
    return user


def require_vendor(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not a vendor."""
    user = require_user(request)
    if user.get("role") != "vendor":
        raise Forbidden("Vendor access required")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise Forbidden("Admin access required")
    return user
