"""
Error types raised by the feature extractor and the similarity engine.

Every failure the engine can report is one of the classes below, so callers
can catch SimilarityError to handle all of them or a subclass to handle one.
"""
from typing import Optional


class SimilarityError(Exception):
    """Base class for every error raised by pointsim."""


class EmptyInputError(SimilarityError):
    """The extractor was given zero points."""

    def __init__(self, message: str = "No points provided"):
        super().__init__(message)


class InvalidPointsError(SimilarityError, ValueError):
    """The points could not be read as (x, y, value) triples of numbers."""


class EmptySelectionError(SimilarityError):
    """rank() was called with no selected image ids."""

    def __init__(self, message: str = "No selected images provided"):
        super().__init__(message)


class CacheUninitializedError(SimilarityError):
    """The feature cache has not been created yet."""

    def __init__(self, message: str = "Cache not initialized"):
        super().__init__(message)


class MissingFeaturesError(SimilarityError, KeyError):
    """A selected image id has no cached features."""

    def __init__(self, image_id: str):
        self.image_id = image_id
        super().__init__(image_id)

    def __str__(self) -> str:
        return f"Features not found for selected image: {self.image_id}"


class FeatureLengthMismatchError(SimilarityError):
    """Two feature vectors that must be combined have different lengths."""

    def __init__(self, expected: int, actual: int, image_id: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.image_id = image_id
        where = f" for image {image_id}" if image_id else ""
        super().__init__(f"Feature vector length {actual}{where} does not match expected {expected}")


class LockError(SimilarityError):
    """The cache lock could not be acquired or the cache is corrupted."""

    def __init__(self, message: str = "Failed to lock cache: cache corrupted, restart required"):
        super().__init__(message)
