"""
Utility helpers for the learning-path engine.

Provides:
- Structured logging configuration with timestamps.
- A timing context manager for pipeline stages.
- Small text helpers shared by the extractor and the scorer.
"""

import contextlib
import logging
import re
import time
from typing import Generator, Iterable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_logging(
    level: int = logging.INFO,
    fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt: str = "%Y-%m-%dT%H:%M:%S%z",
) -> None:
    """Configure the root logger with timestamped structured output."""
    logging.basicConfig(level=level, format=fmt, datefmt=datefmt, force=True)


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def timed(label: str) -> Generator[None, None, None]:
    """Context manager that logs elapsed wall-clock time for *label*."""
    t0 = time.monotonic()
    yield
    elapsed_ms = (time.monotonic() - t0) * 1000
    logger.info("⏱  %s completed in %.1fms.", label, elapsed_ms)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

_MULTI_SPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    return _MULTI_SPACE.sub(" ", text).strip()


def contains_ci(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test; a blank *needle* never matches."""
    needle = needle.strip().lower()
    if not needle:
        return False
    return needle in (haystack or "").lower()


def any_contains_ci(haystacks: Iterable[str], needle: str) -> bool:
    """``True`` if *needle* occurs (case-insensitively) in any of *haystacks*."""
    return any(contains_ci(h, needle) for h in haystacks)
