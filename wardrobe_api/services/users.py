"""Bearer-token user accounts."""

from __future__ import annotations

import hashlib
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.db import models
from wardrobe_api.services.errors import UnauthenticatedError


def hash_token(token: str) -> str:
    """Return the digest stored in place of the raw token."""

    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class UserService:
    """Creates users and resolves bearer tokens to their owner."""

    async def create_user(
        self,
        session: AsyncSession,
        *,
        email: str,
        token: str | None = None,
    ) -> tuple[models.User, str]:
        """Create a user and return it with the plain token (shown only once)."""

        raw_token = token or secrets.token_urlsafe(32)
        user = models.User(email=email.strip().lower(), token_hash=hash_token(raw_token))
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user, raw_token

    async def authenticate(self, session: AsyncSession, *, token: str | None) -> models.User:
        """Return the owner of ``token`` or raise ``UnauthenticatedError``."""

        if not token:
            raise UnauthenticatedError("No authorization header")

        stmt = select(models.User).where(models.User.token_hash == hash_token(token))
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()
        if user is None:
            raise UnauthenticatedError("Invalid user token")
        return user
