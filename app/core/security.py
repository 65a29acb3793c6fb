"""Voyage CMS - Access Control.

Bearer-token verification and role gates, expressed as FastAPI dependencies.

A request moves Unauthenticated -> Authenticated -> Authorized, or is
rejected with an ``AuthError`` at any step:

* ``require_auth`` rejects a missing token (401), an expired token (401),
  a malformed or badly signed token (401) and any other verification
  fault (500). On success the decoded identity lands on ``request.state.user``.
* ``optional_auth`` never rejects; it attaches an identity when a valid
  token is present.
* ``require_roles`` gates stack on ``require_auth``. A wrong role is a 403.

Roles are read from the token only. The database is never consulted.
"""

from enum import Enum
from typing import Optional

import jwt
from fastapi import Depends, Request
from pydantic import BaseModel

from app.config import settings
from app.core.errors import AuthError
from app.core.logging import get_logger

logger = get_logger("security")


class Role(str, Enum):
    """Privilege levels carried in the token."""

    ADMIN = "admin"
    MAIN_ADMIN = "main_admin"


class Identity(BaseModel):
    """Verified caller, decoded from the token claims."""

    user_id: str
    role: Optional[str] = None


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[len("Bearer "):].strip() or None


def decode_token(token: str) -> Identity:
    """Verify signature and expiry, then map claims to an ``Identity``."""
    try:
        claims = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid token") from e
    except Exception as e:
        logger.error(f"Token verification failed: {e}", exc_info=True)
        raise AuthError("Token verification failed", status_code=500) from e

    user_id = claims.get("userId")
    if user_id is None:
        raise AuthError("Invalid token")
    return Identity(user_id=str(user_id), role=claims.get("role"))


def require_auth(request: Request) -> Identity:
    """Dependency: rejects the request unless a valid token is presented."""
    token = _bearer_token(request)
    if not token:
        raise AuthError("No token provided")
    identity = decode_token(token)
    request.state.user = identity
    return identity


def optional_auth(request: Request) -> Optional[Identity]:
    """Dependency: attaches an identity if one can be verified."""
    token = _bearer_token(request)
    if not token:
        return None
    try:
        identity = decode_token(token)
    except AuthError as e:
        logger.debug(f"Ignoring unusable token on optional route: {e.message}")
        return None
    request.state.user = identity
    return identity


def has_role(identity: Optional[Identity], *roles: Role) -> bool:
    return identity is not None and identity.role in {r.value for r in roles}


def require_roles(*roles: Role):
    """Build a dependency that admits only the given roles."""

    def _check(identity: Identity = Depends(require_auth)) -> Identity:
        if identity is None:
            raise AuthError("Authentication required")
        if not has_role(identity, *roles):
            logger.warning(
                f"Role {identity.role!r} rejected, needs one of "
                f"{[r.value for r in roles]}",
                extra={"user_id": identity.user_id, "status_code": 403},
            )
            raise AuthError("Insufficient role", status_code=403)
        return identity

    return _check


ADMIN_ROLES = (Role.ADMIN, Role.MAIN_ADMIN)

require_admin = require_roles(*ADMIN_ROLES)
require_main_admin = require_roles(Role.MAIN_ADMIN)
