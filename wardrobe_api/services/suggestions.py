"""Storage of generated outfit suggestions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.db import models
from wardrobe_api.services.errors import PersistenceFailed


def combine_reasoning(reasoning: str, styling_tips: str) -> str:
    """Merge the model's reasoning and tips into the single stored text field."""

    return f"{reasoning}\n\nStyling Tips: {styling_tips}"


class SuggestionService:
    """Writes outfit suggestions; rows are never updated afterwards."""

    async def save(
        self,
        session: AsyncSession,
        *,
        owner_id: int,
        occasion: str,
        items: Sequence[Mapping[str, Any]],
        reasoning: str,
        styling_tips: str,
    ) -> str:
        """Insert a suggestion and return its generated id.

        Database errors roll the session back and surface as ``PersistenceFailed``.
        """

        suggestion = models.OutfitSuggestion(
            owner_id=owner_id,
            occasion=occasion,
            suggested_items=[dict(item) for item in items],
            ai_reasoning=combine_reasoning(reasoning, styling_tips),
        )
        try:
            session.add(suggestion)
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            raise PersistenceFailed(f"Failed to save outfit suggestion: {exc}") from exc
        return suggestion.id

    async def list_for_owner(
        self,
        session: AsyncSession,
        *,
        owner_id: int,
    ) -> list[models.OutfitSuggestion]:
        """Read back stored suggestions for an owner, oldest first.

        Not served over HTTP; used by operators and tests to inspect what a
        recommendation wrote.
        """

        stmt = (
            select(models.OutfitSuggestion)
            .where(models.OutfitSuggestion.owner_id == owner_id)
            .order_by(models.OutfitSuggestion.created_at.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
