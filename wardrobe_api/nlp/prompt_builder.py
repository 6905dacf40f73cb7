"""Prompt construction for the outfit selection call."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass

from wardrobe_api.db import models

SYSTEM_PROMPT = "You are a professional fashion stylist. Always respond with valid JSON."

REPLY_TEMPLATE = """{
  "outfit": {
    "top": "item name or null",
    "bottom": "item name or null",
    "dress": "item name or null",
    "shoes": "item name or null",
    "accessories": ["accessory names"]
  },
  "reasoning": "Brief explanation of why this combination works",
  "styling_tips": "Additional styling advice"
}"""


@dataclass(slots=True)
class OutfitPromptContext:
    """What the user is dressing for."""

    occasion: str
    weather: str


class PromptBuilder:
    """Builds chat messages asking the model to pick an outfit from the wardrobe."""

    def describe_items(self, items: Sequence[models.ClothingItem]) -> list[dict[str, object]]:
        """Return the textual metadata the model sees for each item."""

        return [
            {
                "name": item.name,
                "category": item.category,
                "color": item.color,
                "tags": list(item.tags or []),
            }
            for item in items
        ]

    def build(
        self,
        items: Sequence[models.ClothingItem],
        context: OutfitPromptContext,
    ) -> list[dict[str, str]]:
        """Return the system and user messages for the chat completion call."""

        wardrobe_json = json.dumps(self.describe_items(items), indent=2, ensure_ascii=False)
        user_prompt = (
            "You are a professional fashion stylist. Based on the following wardrobe items and "
            "occasion, suggest a complete outfit combination.\n\n"
            f"Occasion: {context.occasion}\n"
            f"Weather: {context.weather}\n\n"
            f"Available clothing items:\n{wardrobe_json}\n\n"
            "Please provide:\n"
            "1. A complete outfit combination (specify exact items from the wardrobe)\n"
            "2. Brief reasoning for why this combination works\n"
            "3. Any styling tips\n\n"
            f"Format your response as JSON:\n{REPLY_TEMPLATE}"
        )
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ]
