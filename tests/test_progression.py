"""
pytest suite for progression ordering.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from learnpath.models import ScoredStep
from learnpath.progression import difficulty_distance, order_steps


def _scored(step_id: str, difficulty: str, score: float) -> ScoredStep:
    return ScoredStep(
        id=step_id, title=step_id, difficulty=difficulty, relevance_score=score
    )


class TestDifficultyDistance:

    @pytest.mark.parametrize("difficulty,level,expected", [
        ("beginner", "beginner", 0),
        ("advanced", "beginner", 2),
        ("beginner", "intermediate", 1),
        ("advanced", "intermediate", 1),
    ])
    def test_distance(self, difficulty, level, expected):
        assert difficulty_distance(difficulty, level) == expected

    def test_unknown_level_is_zero(self):
        assert difficulty_distance("advanced", "wizard") == 0


class TestOrderSteps:

    def test_difficulty_dominates_relevance(self):
        steps = [
            _scored("adv", "advanced", 9.0),
            _scored("mid", "intermediate", 5.0),
        ]
        ordered = order_steps(steps, "intermediate")
        assert [s.id for s in ordered] == ["mid", "adv"]

    def test_relevance_descending_within_distance(self):
        steps = [
            _scored("low", "beginner", 2.0),
            _scored("high", "beginner", 8.0),
            _scored("mid", "beginner", 5.0),
        ]
        ordered = order_steps(steps, "beginner")
        assert [s.id for s in ordered] == ["high", "mid", "low"]

    def test_ties_keep_input_order(self):
        steps = [
            _scored("first", "beginner", 6.0),
            _scored("second", "advanced", 6.0),
            _scored("third", "beginner", 6.0),
            _scored("fourth", "advanced", 6.0),
        ]
        ordered = order_steps(steps, "intermediate")
        assert [s.id for s in ordered] == ["first", "second", "third", "fourth"]

    def test_full_progression(self):
        steps = [
            _scored("a", "advanced", 9.5),
            _scored("b", "beginner", 3.0),
            _scored("i", "intermediate", 1.0),
        ]
        ordered = order_steps(steps, "beginner")
        assert [s.id for s in ordered] == ["b", "i", "a"]

    def test_unknown_level_orders_by_relevance(self):
        steps = [
            _scored("a", "advanced", 4.0),
            _scored("b", "beginner", 7.0),
        ]
        ordered = order_steps(steps, "wizard")
        assert [s.id for s in ordered] == ["b", "a"]

    def test_input_not_mutated(self):
        steps = [_scored("x", "advanced", 1.0), _scored("y", "beginner", 9.0)]
        order_steps(steps, "beginner")
        assert [s.id for s in steps] == ["x", "y"]

    def test_empty(self):
        assert order_steps([], "beginner") == []
