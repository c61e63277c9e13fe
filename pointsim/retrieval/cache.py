"""
Lock-guarded store of image descriptors.

The cache starts out uninitialized (entries is None). Every read or write of
the mapping goes through FeatureCache.exclusive(), which serializes callers
on a single lock. If an unexpected exception escapes a critical section the
mapping may be half-written, so the cache is poisoned and every later access
raises LockError instead of serving possibly corrupted data.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from pointsim.common.errors import LockError, SimilarityError
from pointsim.common.types import FeatureVector
from pointsim.util.config import is_valid_lock_timeout
from pointsim.util.logger import logger


class FeatureCache:
    def __init__(self, lock_timeout: float = 5.0):
        """
        :param lock_timeout: Seconds to wait for the lock before giving up (-1 waits forever)
        """
        if not is_valid_lock_timeout(lock_timeout):
            raise ValueError(f"lock_timeout must be -1 or a non-negative number of seconds, got {lock_timeout}")
        self.lock_timeout = lock_timeout
        self.entries: Optional[Dict[str, FeatureVector]] = None
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextmanager
    def exclusive(self) -> Iterator["FeatureCache"]:
        """
        Hold the cache lock for the duration of the with-block.

        Raises:
            LockError: the cache is poisoned or the lock timed out
        """
        if self._poisoned:
            raise LockError()

        if not self._lock.acquire(timeout=self.lock_timeout):
            logger.error(f"Timed out after {self.lock_timeout}s waiting for the feature cache lock")
            raise LockError(f"Failed to lock cache within {self.lock_timeout}s")

        try:
            # Re-check: the previous holder may have poisoned it while we waited
            if self._poisoned:
                raise LockError()
            yield self
        except SimilarityError:
            raise
        except BaseException as e:
            self._poisoned = True
            logger.error(f"Feature cache poisoned by {type(e).__name__}: {e}")
            raise
        finally:
            self._lock.release()

    # ---- Operations on the mapping (each takes the lock itself) ----

    def reset(self) -> None:
        """Replace the mapping with an empty one, dropping every entry"""
        with self.exclusive():
            self.entries = {}

    def upsert(self, image_id: str, features: FeatureVector) -> None:
        """Insert or overwrite one entry, creating the mapping if needed"""
        with self.exclusive():
            if self.entries is None:
                self.entries = {}
            self.entries[image_id] = features

    def upsert_many(self, items: Dict[str, FeatureVector]) -> None:
        """Insert or overwrite several entries in one critical section"""
        with self.exclusive():
            if self.entries is None:
                self.entries = {}
            self.entries.update(items)

    def contains(self, image_id: str) -> bool:
        with self.exclusive():
            return self.entries is not None and image_id in self.entries

    def __len__(self) -> int:
        with self.exclusive():
            return 0 if self.entries is None else len(self.entries)
