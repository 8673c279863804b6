"""
Learning-Path Recommendation Engine
Turns a learner profile and loosely structured generator text into a
deduplicated, scored and progression-ordered sequence of learning steps.
"""

__version__ = "0.1.0"
