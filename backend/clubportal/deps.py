import logging

import jwt
from fastapi import Depends, Header

from .auth_utils import decode_access_token
from .db import get_session
from .errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


class UserContext:
    """Identity asserted by a verified session token."""

    def __init__(self, id: str, role: str, username: str, name: str):
        self.id = id
        self.role = role
        self.username = username
        self.name = name


def get_db():
    with get_session() as session:
        yield session


def get_user(authorization: str | None = Header(default=None)) -> UserContext:
    if not authorization:
        raise Unauthorized("Access token required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Authorization header must use Bearer token format")
    try:
        claims = decode_access_token(token.strip())
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        logger.warning("Rejected invalid access token")
        raise Unauthorized("Invalid token")
    return UserContext(
        id=str(claims["id"]),
        role=claims["role"],
        username=claims.get("username", ""),
        name=claims.get("name", ""),
    )


def ensure_role(user: UserContext, role: str) -> None:
    if user.role != role:
        raise Forbidden()


# Role gates are dependencies so they run before the request body is validated.


def ensure_student(user: UserContext = Depends(get_user)) -> UserContext:
    ensure_role(user, "student")
    return user


def ensure_club_head(user: UserContext = Depends(get_user)) -> UserContext:
    ensure_role(user, "clubhead")
    return user


def ensure_faculty(user: UserContext = Depends(get_user)) -> UserContext:
    ensure_role(user, "faculty")
    return user


def ensure_admin(user: UserContext = Depends(get_user)) -> UserContext:
    """Allow only admins; anyone else gets 403 before the body is looked at."""
    ensure_role(user, "admin")
    return user
