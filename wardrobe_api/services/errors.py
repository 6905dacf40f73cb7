"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations


class RecommendationError(RuntimeError):
    """Base class for failures that end a request with an ``{"error": ...}`` body."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthenticatedError(RecommendationError):
    """Raised when the bearer token is missing or unknown."""

    status_code = 401


class InvalidOutfitRequest(RecommendationError):
    """Raised when the outfit request itself is unusable (e.g. blank occasion)."""

    status_code = 422


class EmptyInventoryError(RecommendationError):
    """Raised when the owner has no clothing items to choose from."""

    status_code = 400


class ClothingItemNotFound(RecommendationError):
    """Raised when an item does not exist or belongs to someone else."""

    status_code = 404


class InventoryUnavailableError(RecommendationError):
    """Raised when the owner's wardrobe cannot be read from the database."""

    status_code = 500


class GenerationUnavailableError(RecommendationError):
    """Raised when the text-generation service cannot be reached or refuses the call."""

    status_code = 502


class MalformedReplyError(RecommendationError):
    """Raised when the generation reply is not valid JSON of the expected shape."""

    status_code = 502


class PersistenceFailed(RecommendationError):
    """Suggestion could not be stored; reported as a warning, never raised to the client."""

    status_code = 500
