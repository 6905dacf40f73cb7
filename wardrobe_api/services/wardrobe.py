"""Business logic for managing user wardrobe."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.db import models
from wardrobe_api.services.categories import ClothingCategory
from wardrobe_api.services.errors import ClothingItemNotFound

_LIST_FIELDS = frozenset({"tags", "weather_suitability", "occasion_type"})
_TEXT_FIELDS = frozenset({"color", "subcategory", "image_url"})


def _clean_list(values: Iterable[str] | None) -> list[str]:
    return [value.strip() for value in values or [] if value and value.strip()]


class WardrobeService:
    """Facade over clothing item database operations."""

    async def list_user_items(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        newest_first: bool = False,
    ) -> list[models.ClothingItem]:
        """Return clothing items owned by the given user.

        Items come back in insertion order unless ``newest_first`` is set; the
        outfit matcher relies on the stable default ordering for tie-breaks.
        """

        order = models.ClothingItem.id.desc() if newest_first else models.ClothingItem.id.asc()
        stmt = (
            select(models.ClothingItem)
            .where(models.ClothingItem.owner_id == user.id)
            .order_by(order)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def add_item(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        name: str,
        category: ClothingCategory | str,
        color: str | None = None,
        tags: Iterable[str] | None = None,
        subcategory: str | None = None,
        weather_suitability: Iterable[str] | None = None,
        occasion_type: Iterable[str] | None = None,
        image_url: str | None = None,
    ) -> models.ClothingItem:
        """Persist a new clothing item for the user."""

        item = models.ClothingItem(
            owner_id=user.id,
            name=name.strip(),
            category=ClothingCategory(category).value,
            color=color,
            tags=_clean_list(tags),
            subcategory=subcategory,
            weather_suitability=_clean_list(weather_suitability),
            occasion_type=_clean_list(occasion_type),
            image_url=image_url,
        )
        session.add(item)
        await session.commit()
        await session.refresh(item)
        return item

    async def get_item(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        item_id: int,
    ) -> models.ClothingItem:
        """Return an item owned by the user or raise ``ClothingItemNotFound``."""

        stmt = select(models.ClothingItem).where(
            models.ClothingItem.id == item_id,
            models.ClothingItem.owner_id == user.id,
        )
        result = await session.execute(stmt)
        item = result.scalar_one_or_none()
        if item is None:
            raise ClothingItemNotFound(f"Clothing item {item_id} not found.")
        return item

    async def update_item(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        item_id: int,
        changes: Mapping[str, Any],
    ) -> models.ClothingItem:
        """Apply the given field changes to an owned item.

        Fields missing from ``changes`` are left alone. ``None`` clears the
        optional text fields and empties the list fields; name and category
        cannot be cleared.
        """

        item = await self.get_item(session, user=user, item_id=item_id)
        for field_name, value in changes.items():
            if field_name in _LIST_FIELDS:
                value = _clean_list(value)
            elif field_name == "name":
                if value is None:
                    continue
                value = value.strip()
            elif field_name == "category":
                if value is None:
                    continue
                value = ClothingCategory(value).value
            elif field_name not in _TEXT_FIELDS:
                raise ValueError(f"Unknown clothing item field: {field_name}")
            setattr(item, field_name, value)
        await session.commit()
        await session.refresh(item)
        return item

    async def remove_item(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        item_id: int,
    ) -> None:
        """Delete an owned item."""

        item = await self.get_item(session, user=user, item_id=item_id)
        await session.delete(item)
        await session.commit()
