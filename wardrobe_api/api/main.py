"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe_api.api.auth import CurrentUserDependency
from wardrobe_api.api.schemas import (
    ClothingItemCreate,
    ClothingItemOut,
    ClothingItemUpdate,
    ErrorResponse,
    OutfitRequest,
    OutfitResponse,
)
from wardrobe_api.config.settings import get_settings
from wardrobe_api.db import models
from wardrobe_api.db.session import get_session, init_db
from wardrobe_api.metrics.prometheus_exporter import metrics_app
from wardrobe_api.monitoring.logging import configure_logging
from wardrobe_api.nlp.chatgpt_client import ChatGPTClient, CompletionClient
from wardrobe_api.services.errors import RecommendationError
from wardrobe_api.services.outfit import OutfitMatcher
from wardrobe_api.services.wardrobe import WardrobeService

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


async def get_chat_client() -> AsyncIterator[CompletionClient]:
    """Provide a chat client for the duration of one request."""

    client = ChatGPTClient()
    try:
        yield client
    finally:
        await client.close()


async def _recommendation_error_handler(_: Request, exc: RecommendationError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=422,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    await init_db()
    yield


def create_app() -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Wardrobe Whisperer API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=_lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.add_exception_handler(RecommendationError, _recommendation_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.mount("/metrics", metrics_app())

    wardrobe_service = WardrobeService()

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness checks."""

        return {"status": "ok"}

    @app.get("/clothing-items", response_model=list[ClothingItemOut], tags=["wardrobe"])
    async def list_clothing_items(
        user: models.User = CurrentUserDependency,
        session: AsyncSession = Depends(get_session),
    ) -> list[models.ClothingItem]:
        """Return the caller's wardrobe, newest first."""

        return await wardrobe_service.list_user_items(session, user=user, newest_first=True)

    @app.post(
        "/clothing-items",
        response_model=ClothingItemOut,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        tags=["wardrobe"],
    )
    async def create_clothing_item(
        payload: ClothingItemCreate,
        user: models.User = CurrentUserDependency,
        session: AsyncSession = Depends(get_session),
    ) -> models.ClothingItem:
        return await wardrobe_service.add_item(session, user=user, **payload.model_dump())

    @app.patch(
        "/clothing-items/{item_id}",
        response_model=ClothingItemOut,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["wardrobe"],
    )
    async def update_clothing_item(
        item_id: int,
        payload: ClothingItemUpdate,
        user: models.User = CurrentUserDependency,
        session: AsyncSession = Depends(get_session),
    ) -> models.ClothingItem:
        """Edit the details of an owned item."""

        return await wardrobe_service.update_item(
            session,
            user=user,
            item_id=item_id,
            changes=payload.model_dump(exclude_unset=True),
        )

    @app.delete(
        "/clothing-items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses={404: {"model": ErrorResponse}},
        tags=["wardrobe"],
    )
    async def delete_clothing_item(
        item_id: int,
        user: models.User = CurrentUserDependency,
        session: AsyncSession = Depends(get_session),
    ) -> None:
        await wardrobe_service.remove_item(session, user=user, item_id=item_id)

    @app.post(
        "/outfit-recommendations",
        response_model=OutfitResponse,
        responses=ERROR_RESPONSES,
        tags=["outfits"],
    )
    async def recommend_outfit(
        payload: OutfitRequest,
        user: models.User = CurrentUserDependency,
        session: AsyncSession = Depends(get_session),
        chat_client: CompletionClient = Depends(get_chat_client),
    ) -> OutfitResponse:
        """Pick an outfit for the occasion from the caller's own wardrobe."""

        matcher = OutfitMatcher(chat_client, wardrobe_service=wardrobe_service)
        result = await matcher.recommend(
            session,
            user=user,
            occasion=payload.occasion,
            weather=payload.weather or settings.default_weather,
        )
        return OutfitResponse(
            outfit=[ClothingItemOut.model_validate(item) for item in result.items],
            reasoning=result.reasoning,
            styling_tips=result.styling_tips,
            suggestion_id=result.suggestion_id,
            warnings=result.warnings,
        )

    return app


app = create_app()
