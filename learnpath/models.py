"""
Pydantic models for the learning-path recommendation engine.

Input: the learner profile supplied by the caller.
Pipeline: step candidates (extracted), scored steps (ranked).
Output helpers: a summary of one generated path.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =========================================================================
# Skill levels
# =========================================================================

SkillLevel = Literal["beginner", "intermediate", "advanced"]

SKILL_LEVELS = ("beginner", "intermediate", "advanced")

DEFAULT_DURATION = "2-3 weeks"


def skill_ordinal(level: Optional[str]) -> Optional[int]:
    """Map a skill level to 0/1/2, or ``None`` if it is not recognised."""
    if not level:
        return None
    key = level.strip().lower()
    if key in SKILL_LEVELS:
        return SKILL_LEVELS.index(key)
    return None


# =========================================================================
# Input
# =========================================================================


class LearnerProfile(BaseModel):
    """Everything the engine knows about one learner for one call."""

    model_config = ConfigDict(frozen=True)

    completed_courses: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    current_skill_level: str = "beginner"
    preferred_learning_style: str = ""
    learning_goals: List[str] = Field(default_factory=list)

    @field_validator("current_skill_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().lower()


# =========================================================================
# Pipeline records
# =========================================================================


class StepCandidate(BaseModel):
    """A single learning step parsed out of generator text."""

    id: str
    title: str = Field(min_length=1)
    description: str = ""
    difficulty: SkillLevel = "beginner"
    duration: str = DEFAULT_DURATION
    modules: List[str] = Field(default_factory=list)
    prerequisites: List[str] = Field(default_factory=list)
    learning_outcomes: List[str] = Field(default_factory=list)


class ScoredStep(StepCandidate):
    """A ``StepCandidate`` with its relevance to the learner attached."""

    relevance_score: float = Field(ge=0.0, le=10.0)


# =========================================================================
# Summary
# =========================================================================


class PathSummary(BaseModel):
    """Summary written alongside a generated path by the CLI."""

    candidates_extracted: int = 0
    duplicates_removed: int = 0
    steps_returned: int = 0
    avg_relevance: float = 0.0
    difficulty_distribution: Dict[str, int] = Field(
        default_factory=lambda: {"beginner": 0, "intermediate": 0, "advanced": 0}
    )
