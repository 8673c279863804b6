"""
Relevance scoring of step candidates against a learner profile.

Four components, each in [0, 1]:

- ``skill_level``: ``1 - 0.3·|Δ|`` where Δ is the distance between the
  step difficulty and the learner's level (0 if either is unknown).
- ``interests``: per interest, 0.6 for a title match plus 0.4 for a
  description match, averaged over interests.
- ``goals``: per goal, 0.7 for a learning-outcome match plus 0.3 for a
  description match, averaged over goals.
- ``prerequisites``: fraction of prerequisites the learner has completed
  (1.0 when the step has none).

Formula: ``10 · clip(Σ wᵢ·cᵢ, 0, 1)`` with weights from
``ScoringWeights`` (default 0.30 / 0.25 / 0.25 / 0.20).

Matching is case-insensitive substring matching throughout.  Scoring is
pure: the same candidate and profile always give the same score.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from learnpath.config import ScoringWeights
from learnpath.models import LearnerProfile, ScoredStep, StepCandidate, skill_ordinal
from learnpath.utils import any_contains_ci, contains_ci

logger = logging.getLogger(__name__)

SKILL_GAP_PENALTY = 0.3

INTEREST_TITLE_CREDIT = 0.6
INTEREST_DESCRIPTION_CREDIT = 0.4

GOAL_OUTCOME_CREDIT = 0.7
GOAL_DESCRIPTION_CREDIT = 0.3

MAX_SCORE = 10.0

_COMPONENTS = ("skill_level", "interests", "goals", "prerequisites")


# =========================================================================
# Components
# =========================================================================


def skill_alignment(difficulty: str, current_skill_level: str) -> float:
    """Closeness of the step difficulty to the learner's level."""
    step_idx = skill_ordinal(difficulty)
    learner_idx = skill_ordinal(current_skill_level)
    if step_idx is None or learner_idx is None:
        return 0.0
    return max(0.0, 1.0 - SKILL_GAP_PENALTY * abs(step_idx - learner_idx))


def interest_alignment(candidate: StepCandidate, interests: List[str]) -> float:
    """Average per-interest match credit against title and description.

    Unlike a plain substring test, a blank interest matches nothing; it
    still counts in the average.
    """
    if not interests:
        return 0.0
    total = 0.0
    for interest in interests:
        credit = 0.0
        if contains_ci(candidate.title, interest):
            credit += INTEREST_TITLE_CREDIT
        if contains_ci(candidate.description, interest):
            credit += INTEREST_DESCRIPTION_CREDIT
        total += min(1.0, credit)
    return total / len(interests)


def goal_alignment(candidate: StepCandidate, goals: List[str]) -> float:
    """Average per-goal match credit against outcomes and description.

    A blank goal matches nothing (plain substring semantics would match
    everything) and still counts in the average.
    """
    if not goals:
        return 0.0
    total = 0.0
    for goal in goals:
        credit = 0.0
        if any_contains_ci(candidate.learning_outcomes, goal):
            credit += GOAL_OUTCOME_CREDIT
        if contains_ci(candidate.description, goal):
            credit += GOAL_DESCRIPTION_CREDIT
        total += min(1.0, credit)
    return total / len(goals)


def prerequisite_satisfaction(
    prerequisites: List[str],
    completed_courses: List[str],
) -> float:
    """Fraction of *prerequisites* found among *completed_courses*.

    A prerequisite counts as done when it occurs (case-insensitively) in the
    name of any completed course.  No prerequisites means nothing blocks the
    step, so it gets full credit.
    """
    if not prerequisites:
        return 1.0
    done = sum(
        1 for prereq in prerequisites if any_contains_ci(completed_courses, prereq)
    )
    return done / len(prerequisites)


def component_scores(
    candidate: StepCandidate,
    profile: LearnerProfile,
) -> Dict[str, float]:
    """Raw (unweighted) component values for *candidate*."""
    return {
        "skill_level": skill_alignment(candidate.difficulty, profile.current_skill_level),
        "interests": interest_alignment(candidate, profile.interests),
        "goals": goal_alignment(candidate, profile.learning_goals),
        "prerequisites": prerequisite_satisfaction(
            candidate.prerequisites, profile.completed_courses
        ),
    }


# =========================================================================
# Public API
# =========================================================================


def relevance_score(
    candidate: StepCandidate,
    profile: LearnerProfile,
    weights: Optional[ScoringWeights] = None,
) -> float:
    """Relevance of *candidate* to *profile* on a 0–10 scale."""
    weights = weights or ScoringWeights()
    components = component_scores(candidate, profile)

    w = np.array([getattr(weights, name) for name in _COMPONENTS], dtype=np.float64)
    c = np.array([components[name] for name in _COMPONENTS], dtype=np.float64)
    combined = float(np.clip(np.dot(w, c), 0.0, 1.0))

    logger.debug(
        "Scored %s (%r): components=%s → %.4f",
        candidate.id, candidate.title, components, combined * MAX_SCORE,
    )
    return combined * MAX_SCORE


def score_step(
    candidate: StepCandidate,
    profile: LearnerProfile,
    weights: Optional[ScoringWeights] = None,
) -> ScoredStep:
    """Attach a relevance score to *candidate*."""
    return ScoredStep(
        **candidate.model_dump(),
        relevance_score=relevance_score(candidate, profile, weights),
    )


def score_steps(
    candidates: List[StepCandidate],
    profile: LearnerProfile,
    weights: Optional[ScoringWeights] = None,
) -> List[ScoredStep]:
    """Score every candidate, preserving order."""
    return [score_step(c, profile, weights) for c in candidates]
