"""Outfit matcher: asks the chat model for an outfit and grounds it in the wardrobe."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.db import models
from wardrobe_api.metrics.prometheus_exporter import (
    outfit_recommendations_total,
    suggestion_persistence_failures_total,
    unmatched_garment_names_total,
)
from wardrobe_api.nlp.chatgpt_client import CompletionClient
from wardrobe_api.nlp.prompt_builder import OutfitPromptContext, PromptBuilder
from wardrobe_api.services.categories import ACCESSORIES_SLOT
from wardrobe_api.services.errors import (
    EmptyInventoryError,
    InvalidOutfitRequest,
    InventoryUnavailableError,
    MalformedReplyError,
    PersistenceFailed,
    RecommendationError,
)
from wardrobe_api.services.suggestions import SuggestionService
from wardrobe_api.services.wardrobe import WardrobeService

logger = logging.getLogger(__name__)

DEFAULT_WEATHER = "mild"

SlotValue = Union[str, list[Union[str, None]], None]


class ModelReply(BaseModel):
    """Structured reply expected from the chat model."""

    outfit: dict[str, SlotValue]
    reasoning: str = ""
    styling_tips: str = ""

    @field_validator("reasoning", "styling_tips", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


@dataclass(slots=True)
class OutfitRecommendation:
    """Resolved outfit returned to the caller.

    ``items`` holds plain snapshots (``ClothingItem.as_dict()``) so the result
    stays readable after the session has been rolled back.
    """

    items: list[dict[str, Any]]
    reasoning: str
    styling_tips: str
    suggestion_id: str | None = None
    warnings: list[str] = field(default_factory=list)


def parse_reply(content: str) -> ModelReply:
    """Decode and validate the raw reply text."""

    if not content or not content.strip():
        raise MalformedReplyError("Invalid AI response format: empty reply")
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse AI response: %.500s", content)
        raise MalformedReplyError("Invalid AI response format") from exc
    try:
        return ModelReply.model_validate(payload)
    except ValidationError as exc:
        logger.warning("AI response does not match the outfit schema: %.500s", content)
        raise MalformedReplyError(
            f"Invalid AI response format: {exc.error_count()} schema error(s)",
        ) from exc


def _slot_names(value: SlotValue) -> list[str]:
    """Return the candidate names for one slot, skipping empty and null markers."""

    if value is None:
        return []
    raw = [value] if isinstance(value, str) else list(value)
    names = [name.strip() for name in raw if isinstance(name, str)]
    return [name for name in names if name and name.lower() != "null"]


def resolve_outfit(
    reply: ModelReply,
    items: Sequence[models.ClothingItem],
) -> list[models.ClothingItem]:
    """Map the model's slot names back to wardrobe items.

    A name matches the first item (in ``items`` order) of the slot's category
    whose name contains it, case-insensitively. Unmatched names are dropped.
    """

    by_category: dict[str, list[models.ClothingItem]] = defaultdict(list)
    for item in items:
        by_category[item.category].append(item)

    resolved: list[models.ClothingItem] = []
    seen: set[int] = set()
    for slot, value in reply.outfit.items():
        if isinstance(value, list) and slot != ACCESSORIES_SLOT:
            logger.debug("Slot %s returned a list; resolving each name", slot)
        for name in _slot_names(value):
            needle = name.lower()
            match = next(
                (item for item in by_category.get(slot, ()) if needle in item.name.lower()),
                None,
            )
            if match is None:
                logger.info("No %s in wardrobe matches %r; dropping it", slot, name)
                unmatched_garment_names_total.labels(slot=slot).inc()
                continue
            if match.id in seen:
                continue
            seen.add(match.id)
            resolved.append(match)
    return resolved


class OutfitMatcher:
    """Coordinates the wardrobe, the chat model and suggestion storage."""

    def __init__(
        self,
        chat_client: CompletionClient,
        *,
        wardrobe_service: WardrobeService | None = None,
        suggestion_service: SuggestionService | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self._chat_client = chat_client
        self._wardrobe_service = wardrobe_service or WardrobeService()
        self._suggestion_service = suggestion_service or SuggestionService()
        self._prompt_builder = prompt_builder or PromptBuilder()

    async def recommend(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        occasion: str,
        weather: str | None = DEFAULT_WEATHER,
    ) -> OutfitRecommendation:
        """
        Produce an outfit for ``occasion`` from the user's own wardrobe.

        Raises a ``RecommendationError`` subclass when no outfit can be produced.
        A failure to store the suggestion is reported in ``warnings`` instead.
        """

        try:
            result = await self._recommend(session, user=user, occasion=occasion, weather=weather)
        except RecommendationError as exc:
            outfit_recommendations_total.labels(outcome=type(exc).__name__).inc()
            raise
        outfit_recommendations_total.labels(outcome="ok").inc()
        return result

    async def _recommend(
        self,
        session: AsyncSession,
        *,
        user: models.User,
        occasion: str,
        weather: str | None,
    ) -> OutfitRecommendation:
        occasion = (occasion or "").strip()
        if not occasion:
            raise InvalidOutfitRequest("Please specify an occasion")
        weather = (weather or "").strip() or DEFAULT_WEATHER
        owner_id = user.id

        try:
            items = await self._wardrobe_service.list_user_items(session, user=user)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching clothing items for user %s", owner_id)
            raise InventoryUnavailableError("Failed to fetch clothing items") from exc
        logger.info("Found %d clothing items for user %s", len(items), owner_id)
        if not items:
            raise EmptyInventoryError(
                "No clothing items found. Please upload some items to your wardrobe first.",
            )

        messages = self._prompt_builder.build(
            items,
            OutfitPromptContext(occasion=occasion, weather=weather),
        )
        logger.info("Requesting outfit for occasion %r (weather %r)", occasion, weather)
        content = await self._chat_client.complete(messages)

        reply = parse_reply(content)
        snapshots = [item.as_dict() for item in resolve_outfit(reply, items)]

        recommendation = OutfitRecommendation(
            items=snapshots,
            reasoning=reply.reasoning,
            styling_tips=reply.styling_tips,
        )
        try:
            recommendation.suggestion_id = await self._suggestion_service.save(
                session,
                owner_id=owner_id,
                occasion=occasion,
                items=snapshots,
                reasoning=reply.reasoning,
                styling_tips=reply.styling_tips,
            )
        except PersistenceFailed as exc:
            logger.exception("Error saving suggestion for user %s", owner_id)
            suggestion_persistence_failures_total.inc()
            recommendation.warnings.append(exc.message)

        logger.info("Outfit suggestion generated with %d items", len(snapshots))
        return recommendation
