import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def is_valid_lock_timeout(timeout: float) -> bool:
    """threading.Lock accepts -1 (wait forever) or a finite, non-negative number of seconds"""
    return timeout == -1 or (math.isfinite(timeout) and timeout >= 0)


@dataclass
class EngineConfig:
    """
    Runtime settings for the similarity engine.

    Attributes:
        lock_timeout: Seconds to wait for the cache lock before raising LockError (-1 waits forever)
        log_level: Minimum level for the stderr log sink
        log_file: Optional path for a rotating file sink
        default_limit: Max results returned by rank() when no limit is passed (None = all)
    """
    lock_timeout: float = 5.0
    log_level: str = "INFO"
    log_file: Optional[str] = None
    default_limit: Optional[int] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Factory: Reads POINTSIM_* variables (after loading a .env file if present).
        Malformed or out-of-range numbers fall back to the defaults.
        """
        load_dotenv()
        defaults = cls()

        raw_timeout = os.getenv("POINTSIM_LOCK_TIMEOUT")
        lock_timeout = _parse_number(raw_timeout, float, defaults.lock_timeout)
        if not is_valid_lock_timeout(lock_timeout):
            _warn_fallback(raw_timeout, defaults.lock_timeout)
            lock_timeout = defaults.lock_timeout

        default_limit = _parse_number(os.getenv("POINTSIM_DEFAULT_LIMIT"), int, defaults.default_limit)
        if default_limit is not None and default_limit <= 0:
            default_limit = None

        return cls(
            lock_timeout=lock_timeout,
            log_level=os.getenv("POINTSIM_LOG_LEVEL", defaults.log_level).upper(),
            log_file=os.getenv("POINTSIM_LOG_FILE") or None,
            default_limit=default_limit,
        )


def _warn_fallback(raw, fallback) -> None:
    # The logger is configured from this module, so it is not available yet
    print(f"⚠️ Warning: ignoring malformed value '{raw}', using {fallback}")


def _parse_number(raw: Optional[str], cast, fallback):
    if raw is None or not raw.strip():
        return fallback
    try:
        return cast(raw)
    except ValueError:
        _warn_fallback(raw, fallback)
        return fallback
