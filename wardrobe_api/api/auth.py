"""Authentication helpers and route dependencies."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.db import models
from wardrobe_api.db.session import get_session
from wardrobe_api.services.errors import UnauthenticatedError
from wardrobe_api.services.users import UserService


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthenticatedError("Authorization header must use the Bearer scheme")
    return token.strip()


async def get_current_user(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> models.User:
    """
    Resolve the bearer token to the owning user.

    Tokens are issued by ``scripts/create_user.py``; only their digest is stored.
    """

    token = _bearer_token(authorization)
    return await UserService().authenticate(session, token=token)


CurrentUserDependency = Depends(get_current_user)
