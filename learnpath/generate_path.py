"""
Learning-path generation: orchestration + CLI.

Usage::

    python -m learnpath.generate_path \\
        --profile ./data/profile.json \\
        --out ./data/learning_path.json

    # Re-run the pipeline on saved generator output (no network call)
    python -m learnpath.generate_path \\
        --profile ./data/profile.json --raw-text ./data/response.txt

Builds a prompt from the learner profile, asks the external generator for
a step-by-step path, then extracts, scores, deduplicates and orders the
steps.  Results are written as JSON together with a ``PathSummary``.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import List, Optional, Tuple

from learnpath.config import EngineConfig, load_config, save_config
from learnpath.dedup.similarity import dedupe_steps
from learnpath.extractors.step_extractor import extract_steps
from learnpath.generators.chat_client import (
    ChatCompletionGenerator,
    GenerationError,
    build_prompt,
)
from learnpath.models import LearnerProfile, PathSummary, ScoredStep
from learnpath.progression import order_steps
from learnpath.scoring.relevance import score_steps
from learnpath.utils import setup_logging, timed

logger = logging.getLogger(__name__)


# =========================================================================
# Summary
# =========================================================================


def _build_summary(
    n_extracted: int,
    steps: List[ScoredStep],
) -> PathSummary:
    """Build the PathSummary for one generated path."""
    dist = {"beginner": 0, "intermediate": 0, "advanced": 0}
    for step in steps:
        dist[step.difficulty] += 1

    avg = sum(s.relevance_score for s in steps) / len(steps) if steps else 0.0

    return PathSummary(
        candidates_extracted=n_extracted,
        duplicates_removed=n_extracted - len(steps),
        steps_returned=len(steps),
        avg_relevance=round(avg, 4),
        difficulty_distribution=dist,
    )


# =========================================================================
# Pipeline
# =========================================================================


def _run_stages(
    raw_text: str,
    profile: LearnerProfile,
    config: EngineConfig,
) -> Tuple[List[ScoredStep], PathSummary]:
    """extract → score → dedupe → order, plus a summary."""
    with timed("Step extraction"):
        candidates = extract_steps(raw_text)

    if not candidates:
        logger.warning("No steps could be extracted from the generator output.")
        return [], _build_summary(0, [])

    with timed("Relevance scoring"):
        scored = score_steps(candidates, profile, config.weights)

    with timed("Deduplication"):
        unique = dedupe_steps(scored, config.dedup)

    with timed("Progression ordering"):
        ordered = order_steps(unique, profile.current_skill_level)

    return ordered, _build_summary(len(candidates), ordered)


def build_learning_path(
    raw_text: str,
    profile: LearnerProfile,
    config: Optional[EngineConfig] = None,
) -> List[ScoredStep]:
    """Turn generator text into an ordered, deduplicated list of steps.

    An empty list means the text held no well-formed step; it is not an
    error.
    """
    steps, _summary = _run_stages(raw_text, profile, config or EngineConfig())
    return steps


async def _request_text(profile, config, generator) -> str:
    if generator is None:
        generator = ChatCompletionGenerator(config.generator)
    prompt = build_prompt(profile)
    logger.debug("Prompt:\n%s", prompt)
    with timed("Generator request"):
        return await generator.generate(prompt)


async def generate_learning_path(
    profile: LearnerProfile,
    generator=None,
    config: Optional[EngineConfig] = None,
) -> List[ScoredStep]:
    """Generate an ordered learning path for *profile*.

    Args:
        profile: The learner.
        generator: Object with an async ``generate(prompt) -> str``.
                   Defaults to a ``ChatCompletionGenerator`` built from
                   ``config.generator``.
        config: Engine configuration (defaults if ``None``).

    Returns:
        Ordered ``ScoredStep`` list, possibly empty.

    Raises:
        GenerationError: The generator could not be reached, timed out or
            failed at the transport level.  Nothing is retried here.
    """
    config = config or EngineConfig()
    raw_text = await _request_text(profile, config, generator)
    return build_learning_path(raw_text, profile, config)


def generate_learning_path_sync(
    profile: LearnerProfile,
    generator=None,
    config: Optional[EngineConfig] = None,
) -> List[ScoredStep]:
    """Blocking wrapper around ``generate_learning_path`` for scripts."""
    return asyncio.run(generate_learning_path(profile, generator, config))


def run_pipeline(
    profile: LearnerProfile,
    raw_text: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    generator=None,
) -> Tuple[List[ScoredStep], PathSummary]:
    """Execute the full pipeline and return the steps with their summary.

    When *raw_text* is given the generator is not called.
    """
    config = config or EngineConfig()
    if raw_text is None:
        raw_text = asyncio.run(_request_text(profile, config, generator))
    return _run_stages(raw_text, profile, config)


# =========================================================================
# CLI
# =========================================================================


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="python -m learnpath.generate_path",
        description="Generate a scored, ordered learning path for one learner.",
    )
    parser.add_argument(
        "--profile",
        help="Path to a JSON file holding the learner profile.",
    )
    parser.add_argument(
        "--raw-text",
        default=None,
        help="Use saved generator output from this file instead of calling the generator.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Engine config JSON (weights, thresholds, generator settings).",
    )
    parser.add_argument(
        "--out",
        default="./data/learning_path.json",
        help="Output JSON path (default: ./data/learning_path.json).",
    )
    parser.add_argument(
        "--save-config",
        default=None,
        help="Write the effective config to this path and exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def _write_output(path: str, steps: List[ScoredStep], summary: PathSummary) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    payload = {
        "summary": summary.model_dump(),
        "steps": [s.model_dump() for s in steps],
    }
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    logger.info("📄 Learning path written to %s", path)


def main(argv=None):
    """CLI entry-point."""
    args = _parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config) if args.config else EngineConfig()

    if args.save_config:
        save_config(config, args.save_config)
        return

    if not args.profile:
        logger.error("--profile is required unless --save-config is given.")
        sys.exit(2)

    with open(args.profile, "r", encoding="utf-8") as fh:
        profile = LearnerProfile.model_validate(json.load(fh))

    raw_text = None
    if args.raw_text:
        with open(args.raw_text, "r", encoding="utf-8") as fh:
            raw_text = fh.read()

    logger.info(
        "Generating path: level=%s, interests=%d, goals=%d, offline=%s",
        profile.current_skill_level,
        len(profile.interests),
        len(profile.learning_goals),
        raw_text is not None,
    )

    try:
        steps, summary = run_pipeline(profile, raw_text=raw_text, config=config)
    except GenerationError as exc:
        logger.error("Generator call failed (%s): %s", exc.status, exc.original)
        sys.exit(1)

    _write_output(args.out, steps, summary)

    logger.info(
        "✅ Path complete: extracted=%d, duplicates=%d, returned=%d, "
        "avg_relevance=%.2f, difficulty=%s",
        summary.candidates_extracted,
        summary.duplicates_removed,
        summary.steps_returned,
        summary.avg_relevance,
        summary.difficulty_distribution,
    )
    sys.exit(0)


if __name__ == "__main__":
    main()
