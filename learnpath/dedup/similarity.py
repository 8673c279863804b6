"""
Near-duplicate removal for scored steps.

A generator often restates the same step twice ("Intro to React",
"Introduction to React").  Steps are compared pairwise with a normalised
Levenshtein similarity::

    sim(a, b) = (max_len - edit_distance(a, b)) / max_len

computed case-insensitively, with ``sim("", "") = 1.0``.  A step is
dropped when, against any step already kept, its title similarity
exceeds the title threshold or its description similarity exceeds the
description threshold.  First occurrences win.

Cost is O(n²) pairs × O(L₁·L₂) time per pair and O(min(L₁, L₂)) memory,
fine for the handful of steps one generator response contains.
"""

import logging
from typing import List, Optional

import numpy as np

from learnpath.config import DedupThresholds
from learnpath.models import ScoredStep

logger = logging.getLogger(__name__)


# =========================================================================
# Edit distance
# =========================================================================


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance between *a* and *b*."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two rows of the DP matrix, sized on the shorter string.
    if len(b) > len(a):
        a, b = b, a

    previous = np.arange(len(b) + 1, dtype=np.int64)
    current = np.empty_like(previous)

    for i, char_a in enumerate(a, 1):
        current[0] = i
        for j, char_b in enumerate(b, 1):
            if char_a == char_b:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(
                    previous[j - 1],  # substitution
                    current[j - 1],   # insertion
                    previous[j],      # deletion
                )
        previous, current = current, previous
    return int(previous[len(b)])


def string_similarity(a: str, b: str) -> float:
    """Case-insensitive similarity in [0, 1]; identical strings score 1.0."""
    a, b = (a or "").lower(), (b or "").lower()
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein_distance(a, b)) / max_len


# =========================================================================
# Public API
# =========================================================================


def _duplicate_of(
    step: ScoredStep,
    kept: List[ScoredStep],
    thresholds: DedupThresholds,
) -> Optional[ScoredStep]:
    for existing in kept:
        if string_similarity(step.title, existing.title) > thresholds.title:
            return existing
        if string_similarity(step.description, existing.description) > thresholds.description:
            return existing
    return None


def dedupe_steps(
    steps: List[ScoredStep],
    thresholds: Optional[DedupThresholds] = None,
) -> List[ScoredStep]:
    """Drop later near-duplicates, keeping first-seen order.

    Args:
        steps: Scored steps in generator order.
        thresholds: Title / description similarity thresholds
                    (default 0.6 / 0.7).

    Returns:
        The kept subsequence of *steps*.
    """
    thresholds = thresholds or DedupThresholds()
    kept: List[ScoredStep] = []

    for step in steps:
        original = _duplicate_of(step, kept, thresholds)
        if original is not None:
            logger.debug(
                "Dropping %s (%r) as a near-duplicate of %s (%r).",
                step.id, step.title, original.id, original.title,
            )
            continue
        kept.append(step)

    removed = len(steps) - len(kept)
    if removed:
        logger.info("Deduplication removed %d of %d step(s).", removed, len(steps))
    return kept
