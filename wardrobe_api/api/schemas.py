"""Request and response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from wardrobe_api.services.categories import ClothingCategory


class ClothingItemCreate(BaseModel):
    """Metadata for a new wardrobe item."""

    name: str = Field(..., min_length=1, max_length=128)
    category: ClothingCategory
    color: str | None = Field(None, max_length=32)
    tags: list[str] = Field(default_factory=list)
    subcategory: str | None = Field(None, max_length=64)
    weather_suitability: list[str] = Field(default_factory=list)
    occasion_type: list[str] = Field(default_factory=list)
    image_url: str | None = Field(None, max_length=512)


class ClothingItemUpdate(BaseModel):
    """Partial update of an item's details; omitted fields are unchanged."""

    name: str | None = Field(None, min_length=1, max_length=128)
    category: ClothingCategory | None = None
    color: str | None = Field(None, max_length=32)
    tags: list[str] | None = None
    subcategory: str | None = Field(None, max_length=64)
    weather_suitability: list[str] | None = None
    occasion_type: list[str] | None = None
    image_url: str | None = Field(None, max_length=512)


class ClothingItemOut(BaseModel):
    """Wardrobe item as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    color: str | None = None
    tags: list[str] = Field(default_factory=list)
    subcategory: str | None = None
    weather_suitability: list[str] = Field(default_factory=list)
    occasion_type: list[str] = Field(default_factory=list)
    image_url: str | None = None


class OutfitRequest(BaseModel):
    """Body of ``POST /outfit-recommendations``."""

    occasion: str = Field(..., description="What the user is dressing for")
    weather: str | None = Field(None, description="Free-text weather, defaults to mild")


class OutfitResponse(BaseModel):
    """Resolved outfit plus the model's explanation."""

    outfit: list[ClothingItemOut]
    reasoning: str
    styling_tips: str
    suggestion_id: str | None = None
    warnings: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Envelope used for every failed request."""

    error: str
