# shopsense/domain/errors.py
from typing import Optional

# Stages an external call can fail in; carried on ExternalCallError
STAGE_EXTRACTION = "extraction"
STAGE_GENERATION = "generation"
STAGE_COMPARISON = "comparison"
STAGE_TRANSLATION = "translation"
STAGE_VISION = "vision"
STAGE_AUGMENTATION = "augmentation"


class ShopSenseError(Exception):
    """Base class for every error raised by the recommendation core."""


class QueryValidationError(ShopSenseError):
    """The incoming query is malformed and was rejected before retrieval."""


class NoMatchError(ShopSenseError):
    """Retrieval produced zero candidates. Retrying needs a different query."""

    def __init__(self, message: str = "No products found matching your criteria. Please try a different search."):
        super().__init__(message)


class ExternalCallError(ShopSenseError):
    """
    An LLM collaborator call failed, timed out, or returned data we could not use.
    `stage` tells the caller which step of the pipeline broke.
    """

    def __init__(self, stage: str, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(f"[{stage}] {message}")
        self.stage = stage
        self.message = message
        self.cause = cause
