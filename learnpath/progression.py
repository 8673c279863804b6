"""
Progression ordering of scored steps.

Steps closest to the learner's current level come first; within the same
distance, higher relevance comes first.  Difficulty distance always wins
over relevance, so a well-matched step is never pushed behind a
mismatched one just because the latter scored better on interests.

Python's ``sorted`` is stable, so steps tied on both keys keep their
incoming order.
"""

import logging
from typing import List, Tuple

from learnpath.models import ScoredStep, skill_ordinal

logger = logging.getLogger(__name__)


def difficulty_distance(difficulty: str, current_skill_level: str) -> int:
    """``|ordinal(difficulty) - ordinal(level)|``; 0 when the level is unknown."""
    learner_idx = skill_ordinal(current_skill_level)
    step_idx = skill_ordinal(difficulty)
    if learner_idx is None or step_idx is None:
        return 0
    return abs(step_idx - learner_idx)


def order_steps(
    steps: List[ScoredStep],
    current_skill_level: str,
) -> List[ScoredStep]:
    """Return *steps* sorted by (distance ascending, relevance descending).

    The input list is left untouched.
    """
    if skill_ordinal(current_skill_level) is None:
        logger.warning(
            "Unknown skill level %r, ordering by relevance only.",
            current_skill_level,
        )

    def _key(step: ScoredStep) -> Tuple[int, float]:
        return (
            difficulty_distance(step.difficulty, current_skill_level),
            -step.relevance_score,
        )

    return sorted(steps, key=_key)
