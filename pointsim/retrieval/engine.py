from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple
import numpy as np

from pointsim.common.errors import (
    CacheUninitializedError,
    EmptySelectionError,
    FeatureLengthMismatchError,
    MissingFeaturesError,
)
from pointsim.common.types import FeatureRecord, SimilarityResult
from pointsim.features.extractor import FeatureExtractor, PointsLike, extract_many
from pointsim.features.registry import FEATURE_LENGTH
from pointsim.retrieval.cache import FeatureCache
from pointsim.retrieval.similarity import average_features, cosine_similarities, sort_results
from pointsim.util.config import EngineConfig
from pointsim.util.logger import logger


class SimilarityEngine:
    def __init__(self, cache: Optional[FeatureCache] = None, config: Optional[EngineConfig] = None):
        """
        Ranks cached images by similarity to a selection of other cached images.
        :param cache: The feature cache to operate on (a new one is created if omitted).
            An injected cache keeps its own lock_timeout; config.lock_timeout only
            applies to the cache created here.
        :param config: Engine settings (defaults if omitted)
        """
        self.config = config if config is not None else EngineConfig()
        self.cache = cache if cache is not None else FeatureCache(lock_timeout=self.config.lock_timeout)

    def initialize(self) -> None:
        """
        Reset the cache to an empty dataset. Safe to call any number of times.
        """
        self.cache.reset()
        logger.info("Dataset cache initialized")

    def cache_features(self, image_id: str, points: PointsLike) -> None:
        """
        Extract the descriptor of an image and store it, replacing any previous one.
        Extraction runs before the cache lock is taken.
        """
        features = FeatureExtractor.extract(points)
        self.cache.upsert(image_id, features)
        logger.debug(f"Cached features for image: {image_id}")

    def cache_many(self, items: Mapping[str, PointsLike]) -> int:
        """
        Cache several images at once. Nothing is stored unless every
        extraction succeeds.

        Returns:
            Number of images cached
        """
        extracted = extract_many(items.items())
        self.cache.upsert_many(extracted)
        logger.info(f"Cached features for {len(extracted)} images")
        return len(extracted)

    def rank(self, selected_ids: Sequence[str], limit: Optional[int] = None) -> List[SimilarityResult]:
        """
        Rank every cached image that is not selected by cosine similarity to
        the mean descriptor of the selected images.

        Args:
            selected_ids: Images forming the query, in caller order
            limit: Keep only the top `limit` results (falls back to config.default_limit)

        Returns:
            Results sorted by similarity descending, ties by image id, NaN scores last

        Raises:
            EmptySelectionError, CacheUninitializedError, MissingFeaturesError,
            FeatureLengthMismatchError, LockError
        """
        if not selected_ids:
            logger.warning("Similarity requested with an empty selection")
            raise EmptySelectionError()

        if limit is None:
            limit = self.config.default_limit

        with self.cache.exclusive() as cache:
            entries = cache.entries
            if entries is None:
                logger.warning("Similarity requested before the dataset cache was initialized")
                raise CacheUninitializedError()

            selected = []
            for image_id in selected_ids:
                features = entries.get(image_id)
                if features is None:
                    logger.warning(f"Features not found for selected image: {image_id}")
                    raise MissingFeaturesError(image_id)
                selected.append((image_id, features))

            query = average_features(selected)
            if query.shape[0] != FEATURE_LENGTH:
                raise FeatureLengthMismatchError(FEATURE_LENGTH, query.shape[0])

            excluded = set(selected_ids)
            candidate_ids = [image_id for image_id in entries if image_id not in excluded]
            if not candidate_ids:
                logger.info("No candidates left after excluding the selection")
                return []

            for image_id in candidate_ids:
                if len(entries[image_id]) != FEATURE_LENGTH:
                    raise FeatureLengthMismatchError(FEATURE_LENGTH, len(entries[image_id]), image_id)

            matrix = np.stack([entries[image_id] for image_id in candidate_ids])
            scores = cosine_similarities(query, matrix)

            results = [
                SimilarityResult(image_id=image_id, similarity=float(score))
                for image_id, score in zip(candidate_ids, scores)
            ]
            ranked = sort_results(results, limit)

        logger.info(f"Ranked {len(results)} images against a selection of {len(selected_ids)}")
        return ranked

    def status(self) -> Tuple[int, List[str]]:
        """
        Returns:
            (number of cached images, their ids sorted), or (0, []) before initialization
        """
        with self.cache.exclusive() as cache:
            if cache.entries is None:
                return 0, []
            return len(cache.entries), sorted(cache.entries)

    def has_features(self, image_id: str) -> bool:
        """Whether a descriptor is cached for this image"""
        return self.cache.contains(image_id)

    def get_features(self, image_id: str) -> FeatureRecord:
        """
        Look up the cached descriptor of one image.

        Raises:
            CacheUninitializedError, MissingFeaturesError, LockError
        """
        with self.cache.exclusive() as cache:
            if cache.entries is None:
                raise CacheUninitializedError()
            features = cache.entries.get(image_id)
            if features is None:
                raise MissingFeaturesError(image_id)
            return FeatureRecord(image_id=image_id, features=features)
