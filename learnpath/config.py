"""
Engine configuration.

Scoring weights, deduplication thresholds and generator endpoint settings
are policy, not code: they live in an ``EngineConfig`` that can be saved to
and loaded from JSON.  Keep one config per deployment so scores stay
reproducible.
"""

import json
import logging
import os

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

_WEIGHT_TOLERANCE = 1e-6


class ScoringWeights(BaseModel):
    """Weights of the four relevance components (must sum to 1.0)."""

    skill_level: float = Field(default=0.30, ge=0.0)
    interests: float = Field(default=0.25, ge=0.0)
    goals: float = Field(default=0.25, ge=0.0)
    prerequisites: float = Field(default=0.20, ge=0.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeights":
        total = self.skill_level + self.interests + self.goals + self.prerequisites
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ValueError(f"scoring weights must sum to 1.0, got {total:.6f}")
        return self


class DedupThresholds(BaseModel):
    """Similarity above which a later step counts as a duplicate."""

    title: float = Field(default=0.6, ge=0.0, le=1.0)
    description: float = Field(default=0.7, ge=0.0, le=1.0)


class GeneratorSettings(BaseModel):
    """Where and how to call the OpenAI-compatible text generator."""

    base_url: str = "https://glhf.chat/api/openai/v1"
    model: str = "Qwen2.5-Coder-32B-Instruct-AWQ-128k"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    timeout: float = Field(default=30.0, gt=0.0)
    api_key_env: str = "LEARNPATH_API_KEY"
    system_prompt: str = (
        "You are an expert educational AI that creates personalized learning paths."
    )


class EngineConfig(BaseModel):
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    dedup: DedupThresholds = Field(default_factory=DedupThresholds)
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)


def load_config(path: str) -> EngineConfig:
    """Load an ``EngineConfig`` from a JSON file; missing keys use defaults."""
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    config = EngineConfig.model_validate(data)
    logger.info("Loaded engine config from %s", path)
    return config


def save_config(config: EngineConfig, path: str) -> None:
    """Write *config* to *path* as indented JSON."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(config.model_dump_json(indent=2))
    logger.info("Config saved → %s", path)
