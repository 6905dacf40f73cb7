"""HTTP tests for the wardrobe and outfit recommendation endpoints."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tests.helpers import ScriptedChatClient, make_engine
from wardrobe_api.api.main import create_app, get_chat_client
from wardrobe_api.db.session import get_session, init_db
from wardrobe_api.services.errors import GenerationUnavailableError
from wardrobe_api.services.suggestions import SuggestionService
from wardrobe_api.services.users import UserService
from wardrobe_api.services.wardrobe import WardrobeService

TOKEN = "api-owner-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@dataclass
class ApiHarness:
    client: TestClient
    chat: ScriptedChatClient
    session_factory: async_sessionmaker[AsyncSession]
    owner_id: int

    def add_item(self, name: str, category: str, **extra) -> dict:
        response = self.client.post(
            "/clothing-items",
            json={"name": name, "category": category, **extra},
            headers=AUTH,
        )
        assert response.status_code == 201, response.text
        return response.json()

    def stored_suggestions(self) -> list:
        async def _load() -> list:
            async with self.session_factory() as session:
                return await SuggestionService().list_for_owner(session, owner_id=self.owner_id)

        return asyncio.run(_load())


@pytest.fixture
def api(tmp_path: Path) -> ApiHarness:
    engine = make_engine(tmp_path)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def _prepare() -> int:
        await init_db(engine)
        async with factory() as session:
            user, _ = await UserService().create_user(session, email="api@example.com", token=TOKEN)
            return user.id

    owner_id = asyncio.run(_prepare())

    async def _session_override():
        async with factory() as session:
            yield session

    chat = ScriptedChatClient()
    app = create_app()
    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_chat_client] = lambda: chat

    yield ApiHarness(client=TestClient(app), chat=chat, session_factory=factory, owner_id=owner_id)

    asyncio.run(engine.dispose())


def test_recommendation_requires_bearer_token(api: ApiHarness) -> None:
    response = api.client.post("/outfit-recommendations", json={"occasion": "brunch"})

    assert response.status_code == 401
    assert response.json() == {"error": "No authorization header"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_unknown_token_is_rejected(api: ApiHarness) -> None:
    response = api.client.post(
        "/outfit-recommendations",
        json={"occasion": "brunch"},
        headers={"Authorization": "Bearer not-a-real-token"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid user token"}


def test_empty_wardrobe_is_a_client_error(api: ApiHarness) -> None:
    response = api.client.post("/outfit-recommendations", json={"occasion": "brunch"}, headers=AUTH)

    assert response.status_code == 400
    assert "No clothing items found" in response.json()["error"]
    assert api.chat.calls == []


def test_recommendation_returns_resolved_outfit(api: ApiHarness) -> None:
    jacket = api.add_item("Blue Denim Jacket", "top", color="#1f3a93", tags=["casual"])
    api.add_item("Black Trousers", "bottom")
    shoes = api.add_item("Running Shoes", "shoes")
    necklace = api.add_item("Gold Necklace", "accessories")
    api.chat.reply = json.dumps(
        {
            "outfit": {
                "top": "Blue Denim Jacket",
                "bottom": None,
                "shoes": "Running Shoes",
                "accessories": ["Gold Necklace"],
            },
            "reasoning": "Relaxed and bright.",
            "styling_tips": "Cuff the jacket sleeves.",
        },
    )

    response = api.client.post(
        "/outfit-recommendations",
        json={"occasion": "casual outing", "weather": "hot"},
        headers=AUTH,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert [item["id"] for item in body["outfit"]] == [jacket["id"], shoes["id"], necklace["id"]]
    assert body["outfit"][0]["tags"] == ["casual"]
    assert body["reasoning"] == "Relaxed and bright."
    assert body["styling_tips"] == "Cuff the jacket sleeves."
    assert body["warnings"] == []
    assert [s.id for s in api.stored_suggestions()] == [body["suggestion_id"]]
    prompt = api.chat.calls[0][1]["content"]
    assert "Occasion: casual outing" in prompt
    assert "Weather: hot" in prompt


def test_missing_weather_defaults_to_mild(api: ApiHarness) -> None:
    api.add_item("Running Shoes", "shoes")
    api.chat.reply = json.dumps({"outfit": {"shoes": "running shoes"}, "reasoning": "", "styling_tips": ""})

    response = api.client.post("/outfit-recommendations", json={"occasion": "gym workout"}, headers=AUTH)

    assert response.status_code == 200
    assert "Weather: mild" in api.chat.calls[0][1]["content"]


def test_malformed_reply_is_a_server_error(api: ApiHarness) -> None:
    api.add_item("Running Shoes", "shoes")
    api.chat.reply = "I think the running shoes would be great!"

    response = api.client.post("/outfit-recommendations", json={"occasion": "gym workout"}, headers=AUTH)

    assert response.status_code == 502
    assert response.json() == {"error": "Invalid AI response format"}
    assert api.stored_suggestions() == []


def test_generation_failure_reason_is_surfaced(api: ApiHarness) -> None:
    api.add_item("Running Shoes", "shoes")
    api.chat.reply = GenerationUnavailableError("Failed to get AI recommendation: rate limit exceeded")

    response = api.client.post("/outfit-recommendations", json={"occasion": "gym workout"}, headers=AUTH)

    assert response.status_code == 502
    assert response.json() == {"error": "Failed to get AI recommendation: rate limit exceeded"}


@pytest.mark.parametrize("body", [{}, {"occasion": "   "}])
def test_occasion_is_required(api: ApiHarness, body: dict) -> None:
    api.add_item("Running Shoes", "shoes")

    response = api.client.post("/outfit-recommendations", json=body, headers=AUTH)

    assert response.status_code == 422
    assert "error" in response.json()
    assert api.chat.calls == []


def test_wardrobe_listing_is_scoped_and_newest_first(api: ApiHarness) -> None:
    older = api.add_item("Beige Trench Coat", "outerwear", weather_suitability=["rainy", "mild"])
    newer = api.add_item("Wool Beanie", "hat", occasion_type=["Casual Outings"])

    response = api.client.get("/clothing-items", headers=AUTH)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [newer["id"], older["id"]]
    assert response.json()[1]["weather_suitability"] == ["rainy", "mild"]


def test_unknown_category_is_rejected(api: ApiHarness) -> None:
    response = api.client.post(
        "/clothing-items",
        json={"name": "Mystery Garment", "category": "cape"},
        headers=AUTH,
    )

    assert response.status_code == 422
    assert "category" in response.json()["error"]


def test_delete_item(api: ApiHarness) -> None:
    item = api.add_item("Gold Necklace", "accessories")

    first = api.client.delete(f"/clothing-items/{item['id']}", headers=AUTH)
    second = api.client.delete(f"/clothing-items/{item['id']}", headers=AUTH)

    assert first.status_code == 204
    assert second.status_code == 404
    assert api.client.get("/clothing-items", headers=AUTH).json() == []


def test_metrics_endpoint_exposes_recommendation_counter(api: ApiHarness) -> None:
    api.client.post("/outfit-recommendations", json={"occasion": "brunch"}, headers=AUTH)

    response = api.client.get("/metrics/")

    assert response.status_code == 200
    assert 'outfit_recommendations_total{outcome="EmptyInventoryError"}' in response.text


def test_inventory_read_failure_keeps_error_envelope(
    api: ApiHarness,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    api.add_item("Running Shoes", "shoes")

    async def _db_down(self, session, **kwargs):
        raise SQLAlchemyError("db down")

    monkeypatch.setattr(WardrobeService, "list_user_items", _db_down)
    client = TestClient(api.client.app, raise_server_exceptions=False)

    response = client.post("/outfit-recommendations", json={"occasion": "brunch"}, headers=AUTH)

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Failed to fetch clothing items"}
    assert api.chat.calls == []
    metrics = client.get("/metrics/").text
    assert 'outfit_recommendations_total{outcome="InventoryUnavailableError"}' in metrics


def test_update_item_details(api: ApiHarness) -> None:
    item = api.add_item("Blue Shirt", "top", color="#0000ff", tags=["work"])

    response = api.client.patch(
        f"/clothing-items/{item['id']}",
        json={"name": " Navy Oxford Shirt ", "tags": ["work", " ", "formal"], "color": None},
        headers=AUTH,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["id"] == item["id"]
    assert body["name"] == "Navy Oxford Shirt"
    assert body["tags"] == ["work", "formal"]
    assert body["color"] is None
    assert body["category"] == "top"
    listed = api.client.get("/clothing-items", headers=AUTH).json()
    assert [entry["name"] for entry in listed] == ["Navy Oxford Shirt"]


def test_update_item_of_another_owner_is_not_found(api: ApiHarness) -> None:
    async def _foreign_item() -> int:
        async with api.session_factory() as session:
            stranger, _ = await UserService().create_user(session, email="stranger@example.com")
            item = await WardrobeService().add_item(session, user=stranger, name="Red Scarf", category="scarf")
            return item.id

    item_id = asyncio.run(_foreign_item())

    response = api.client.patch(f"/clothing-items/{item_id}", json={"name": "Mine now"}, headers=AUTH)

    assert response.status_code == 404
    assert response.json() == {"error": f"Clothing item {item_id} not found."}


def test_update_item_rejects_unknown_category(api: ApiHarness) -> None:
    item = api.add_item("Gold Necklace", "accessories")

    response = api.client.patch(f"/clothing-items/{item['id']}", json={"category": "cape"}, headers=AUTH)

    assert response.status_code == 422
    assert "category" in response.json()["error"]
    listed = api.client.get("/clothing-items", headers=AUTH).json()
    assert listed[0]["category"] == "accessories"
