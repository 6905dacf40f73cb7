"""Prometheus exporter helpers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from prometheus_client import Counter, make_asgi_app


outfit_recommendations_total = Counter(
    "outfit_recommendations_total",
    "Outfit recommendation requests by outcome.",
    ["outcome"],
)

unmatched_garment_names_total = Counter(
    "unmatched_garment_names_total",
    "Garment names returned by the model that matched nothing in the wardrobe.",
    ["slot"],
)

suggestion_persistence_failures_total = Counter(
    "suggestion_persistence_failures_total",
    "Outfit suggestions that could not be written to the database.",
)


def metrics_app() -> Callable[..., Awaitable[None]]:
    """Return an ASGI app serving the default registry."""

    return make_asgi_app()
