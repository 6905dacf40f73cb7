"""SQLAlchemy models describing the core domain tables."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_suggestion_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for ORM models."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )


class User(Base):
    """Account that owns a wardrobe; authenticated by a bearer token."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    clothing_items: Mapped[list["ClothingItem"]] = relationship(back_populates="owner")
    suggestions: Mapped[list["OutfitSuggestion"]] = relationship(back_populates="owner")


class ClothingItem(Base):
    """Single garment or accessory in a user's wardrobe."""

    __tablename__ = "clothing_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    subcategory: Mapped[str | None] = mapped_column(String(64))
    color: Mapped[str | None] = mapped_column(String(32))
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    weather_suitability: Mapped[list[str]] = mapped_column(JSON, default=list)
    occasion_type: Mapped[list[str]] = mapped_column(JSON, default=list)
    image_url: Mapped[str | None] = mapped_column(String(512))

    owner: Mapped[User] = relationship(back_populates="clothing_items")

    def as_dict(self) -> dict[str, Any]:
        """Plain representation used in API responses and suggestion snapshots."""

        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "subcategory": self.subcategory,
            "color": self.color,
            "tags": list(self.tags or []),
            "weather_suitability": list(self.weather_suitability or []),
            "occasion_type": list(self.occasion_type or []),
            "image_url": self.image_url,
        }


class OutfitSuggestion(Base):
    """Outfit proposed by the model and resolved against the owner's wardrobe."""

    __tablename__ = "outfit_suggestions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_suggestion_id)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    occasion: Mapped[str] = mapped_column(String(255), nullable=False)
    suggested_items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    ai_reasoning: Mapped[str | None] = mapped_column(Text)

    owner: Mapped[User] = relationship(back_populates="suggestions")
