"""
pytest suite for relevance scoring.

Covers each component in isolation, the weighted total, bounds and
determinism.
"""

import os
import sys

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from learnpath.config import ScoringWeights
from learnpath.models import LearnerProfile, StepCandidate
from learnpath.scoring.relevance import (
    component_scores,
    goal_alignment,
    interest_alignment,
    prerequisite_satisfaction,
    relevance_score,
    score_step,
    score_steps,
    skill_alignment,
)


# =========================================================================
# Helpers
# =========================================================================


def _step(**kwargs) -> StepCandidate:
    kwargs.setdefault("id", "step-1")
    kwargs.setdefault("title", "Untitled")
    return StepCandidate(**kwargs)


def _profile(**kwargs) -> LearnerProfile:
    return LearnerProfile(**kwargs)


# =========================================================================
# Test: components
# =========================================================================


class TestSkillAlignment:

    @pytest.mark.parametrize("difficulty,level,expected", [
        ("beginner", "beginner", 1.0),
        ("intermediate", "beginner", 0.7),
        ("advanced", "beginner", 0.4),
        ("beginner", "advanced", 0.4),
    ])
    def test_distance_penalty(self, difficulty, level, expected):
        assert skill_alignment(difficulty, level) == pytest.approx(expected)

    def test_unknown_level_scores_zero(self):
        assert skill_alignment("beginner", "guru") == 0.0

    def test_level_case_insensitive(self):
        assert skill_alignment("intermediate", " Intermediate ") == pytest.approx(1.0)


class TestInterestAlignment:

    def test_title_and_description_credit(self):
        step = _step(title="Intro to Web", description="learn web basics")
        assert interest_alignment(step, ["web"]) == pytest.approx(1.0)

    def test_title_only(self):
        step = _step(title="React Hooks", description="state management")
        assert interest_alignment(step, ["react"]) == pytest.approx(0.6)

    def test_description_only(self):
        step = _step(title="Hooks", description="Hooks in React")
        assert interest_alignment(step, ["REACT"]) == pytest.approx(0.4)

    def test_averaged_over_interests(self):
        step = _step(title="Python Basics")
        assert interest_alignment(step, ["python", "rust"]) == pytest.approx(0.3)

    def test_no_interests_scores_zero(self):
        assert interest_alignment(_step(title="Anything"), []) == 0.0

    def test_blank_interest_never_matches(self):
        assert interest_alignment(_step(title="Anything"), ["  "]) == 0.0

    def test_blank_interest_dilutes_average(self):
        step = _step(title="Web basics", description="web pages")
        assert interest_alignment(step, ["web", ""]) == pytest.approx(0.5)


class TestGoalAlignment:

    def test_outcome_match(self):
        step = _step(learning_outcomes=["Build a website from scratch"])
        assert goal_alignment(step, ["build a website"]) == pytest.approx(0.7)

    def test_outcome_and_description(self):
        step = _step(
            description="You will build a website.",
            learning_outcomes=["build a website"],
        )
        assert goal_alignment(step, ["Build a Website"]) == pytest.approx(1.0)

    def test_no_goals_scores_zero(self):
        assert goal_alignment(_step(), []) == 0.0

    def test_blank_goal_never_matches(self):
        step = _step(
            description="You will build a website.",
            learning_outcomes=["build a website"],
        )
        assert goal_alignment(step, [""]) == 0.0
        assert goal_alignment(step, ["build a website", " "]) == pytest.approx(0.5)


class TestPrerequisiteSatisfaction:

    def test_no_prerequisites_full_credit(self):
        assert prerequisite_satisfaction([], []) == 1.0

    def test_exact_match_full_credit(self):
        assert prerequisite_satisfaction(["Intro to X"], ["Intro to X"]) == 1.0

    def test_case_insensitive(self):
        assert prerequisite_satisfaction(["intro to x"], ["INTRO TO X"]) == 1.0

    def test_partial(self):
        assert prerequisite_satisfaction(
            ["HTML", "JavaScript"], ["HTML & CSS Basics"]
        ) == pytest.approx(0.5)

    def test_nothing_completed(self):
        assert prerequisite_satisfaction(["HTML"], []) == 0.0


# =========================================================================
# Test: total score
# =========================================================================


class TestRelevanceScore:

    def test_scenario_a_score_above_five(self):
        profile = _profile(
            current_skill_level="beginner",
            interests=["web"],
            learning_goals=["build a website"],
            completed_courses=[],
        )
        step = _step(
            title="Intro to Web",
            description="learn web basics",
            difficulty="beginner",
            learning_outcomes=["build a website"],
        )
        # 0.30·1 + 0.25·1 + 0.25·0.7 + 0.20·1 = 0.925
        assert relevance_score(step, profile) == pytest.approx(9.25)
        assert relevance_score(step, profile) > 5.0

    def test_prerequisite_component_contributes_full_weight(self):
        step = _step(prerequisites=["Intro to X"], difficulty="advanced")
        done = _profile(current_skill_level="guru", completed_courses=["Intro to X"])
        not_done = _profile(current_skill_level="guru", completed_courses=[])
        assert relevance_score(step, done) == pytest.approx(2.0)
        assert relevance_score(step, not_done) == pytest.approx(0.0)

    def test_degenerate_profile(self):
        """Empty interests and goals zero two components; still valid."""
        profile = _profile(current_skill_level="beginner")
        step = _step(difficulty="beginner")
        assert relevance_score(step, profile) == pytest.approx(5.0)

    def test_perfect_match_is_ten(self):
        profile = _profile(
            current_skill_level="advanced",
            interests=["graphs"],
            learning_goals=["graphs"],
        )
        step = _step(
            title="Graphs",
            description="graphs",
            difficulty="advanced",
            learning_outcomes=["graphs"],
        )
        assert relevance_score(step, profile) == pytest.approx(10.0)

    def test_custom_weights(self):
        weights = ScoringWeights(skill_level=1.0, interests=0.0, goals=0.0, prerequisites=0.0)
        profile = _profile(current_skill_level="beginner")
        step = _step(difficulty="intermediate")
        assert relevance_score(step, profile, weights) == pytest.approx(7.0)

    def test_component_scores_keys(self):
        comps = component_scores(_step(), _profile())
        assert set(comps) == {"skill_level", "interests", "goals", "prerequisites"}


class TestScoreProperties:

    @pytest.mark.parametrize("difficulty", ["beginner", "intermediate", "advanced"])
    @pytest.mark.parametrize("level", ["beginner", "intermediate", "advanced", "unknown"])
    def test_score_in_bounds(self, difficulty, level):
        profile = _profile(
            current_skill_level=level,
            interests=["data", "a", "zzz"],
            learning_goals=["data", "zzz"],
            completed_courses=["Data 101"],
        )
        step = _step(
            title="Data Science",
            description="data data data",
            difficulty=difficulty,
            prerequisites=["Data 101", "Stats"],
            learning_outcomes=["data skills"],
        )
        score = relevance_score(step, profile)
        assert 0.0 <= score <= 10.0

    def test_deterministic(self):
        profile = _profile(interests=["web"], learning_goals=["css"])
        step = _step(title="Web Design", description="css layouts")
        assert relevance_score(step, profile) == relevance_score(step, profile)

    def test_score_step_keeps_fields(self):
        step = _step(title="Web", modules=["HTML"])
        scored = score_step(step, _profile(interests=["web"]))
        assert scored.title == "Web"
        assert scored.modules == ["HTML"]
        assert 0.0 <= scored.relevance_score <= 10.0

    def test_score_steps_preserves_order(self):
        steps = [_step(id="step-1", title="A"), _step(id="step-2", title="B")]
        scored = score_steps(steps, _profile())
        assert [s.id for s in scored] == ["step-1", "step-2"]


# =========================================================================
# Test: weights validation
# =========================================================================


class TestScoringWeights:

    def test_defaults_sum_to_one(self):
        w = ScoringWeights()
        assert (w.skill_level, w.interests, w.goals, w.prerequisites) == (0.30, 0.25, 0.25, 0.20)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            ScoringWeights(skill_level=0.5, interests=0.5, goals=0.5, prerequisites=0.5)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ScoringWeights(skill_level=-0.2, interests=0.5, goals=0.5, prerequisites=0.2)
