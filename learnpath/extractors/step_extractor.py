"""
Learning-step extraction from free-form generator text.

The generator is asked to answer in a loose labelled format::

    Step 1:
    Title: Intro to Web
    Description: learn web basics
    Difficulty: beginner
    Duration: 1 week
    Key Modules:
    - HTML
    - CSS
    Prerequisites:
    - (none)
    Learning Outcomes:
    - build a website

Nothing guarantees it will, so parsing is tolerant and runs in two stages:

1. Split the text into segments on the ``Step <n>:`` marker.  Anything
   before the first marker is preamble and is ignored.
2. Inside each segment, locate the labelled fields.  Labels only count at
   the start of a line (or straight after the step marker).  A field's text runs
   from its label to the next recognised label (or the segment end).
   Missing fields fall back to defaults; a segment without a title is
   dropped.

Every failure is contained here: the caller always gets a list.
"""

import logging
import re
from typing import Dict, List, Optional

from learnpath.models import DEFAULT_DURATION, StepCandidate
from learnpath.utils import collapse_whitespace

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Patterns
# -------------------------------------------------------------------------

_STEP_MARKER = re.compile(r"\bStep\s*\d+\s*:", re.IGNORECASE)

# Label at the start of a line, after optional indentation, bullet, quote or
# heading markup, with optional emphasis around the colon (``Title:``,
# ``**Title:**``, ``**Title**:``).  A label word mid-sentence is plain text.
_LABEL_RE = re.compile(
    r"^[ \t>#*_-]*"
    r"(title|description|difficulty|duration|key\s+modules|prerequisites|learning\s+outcomes)"
    r"[*_]*[ \t]*:[*_]*",
    re.IGNORECASE | re.MULTILINE,
)

_LABEL_KEYS = {
    "title": "title",
    "description": "description",
    "difficulty": "difficulty",
    "duration": "duration",
    "key modules": "modules",
    "prerequisites": "prerequisites",
    "learning outcomes": "learning_outcomes",
}

_LEVEL_RE = re.compile(r"\b(beginner|intermediate|advanced)\b", re.IGNORECASE)

_BULLET_RE = re.compile(r"^\s*(?:[-*•+]|\d+[.)])\s*")

_MARKUP_CHARS = "*_#`"

# List entries that mean "nothing here".
_PLACEHOLDERS = frozenset({
    "none", "n/a", "na", "nil", "nothing", "none required", "no prerequisites",
})


# -------------------------------------------------------------------------
# Stage 1: segments
# -------------------------------------------------------------------------


def _split_segments(raw_text: str) -> List[str]:
    """Return the text of each ``Step <n>:`` segment, preamble excluded."""
    parts = _STEP_MARKER.split(raw_text)
    return parts[1:]


# -------------------------------------------------------------------------
# Stage 2: fields
# -------------------------------------------------------------------------


def _split_fields(segment: str) -> Dict[str, str]:
    """Map field key → raw field text.  The first occurrence of a label wins."""
    matches = list(_LABEL_RE.finditer(segment))
    fields: Dict[str, str] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(segment)
        key = _LABEL_KEYS[collapse_whitespace(match.group(1)).lower()]
        if key not in fields:
            fields[key] = segment[match.end():end]
    return fields


def _strip_markup(text: str) -> str:
    return text.strip().strip(_MARKUP_CHARS).strip()


def _first_line(text: Optional[str]) -> str:
    """First non-blank line of *text*, markdown emphasis removed."""
    if not text:
        return ""
    for line in text.splitlines():
        cleaned = _strip_markup(line)
        if cleaned:
            return cleaned
    return ""


def _scalar(text: Optional[str]) -> str:
    """Whole field text on one line, trailing list/markdown debris removed."""
    if not text:
        return ""
    return _strip_markup(collapse_whitespace(text).rstrip(" -*_"))


def _list_items(text: Optional[str]) -> List[str]:
    """Split a list field into its entries (one per line)."""
    if not text:
        return []
    items: List[str] = []
    for line in text.splitlines():
        item = _strip_markup(_BULLET_RE.sub("", line, count=1))
        if not item:
            continue
        if item.lower().strip(" .()[]") in _PLACEHOLDERS:
            continue
        items.append(item)
    return items


def _difficulty(text: Optional[str]) -> str:
    if text:
        match = _LEVEL_RE.search(text)
        if match:
            return match.group(1).lower()
        logger.debug("Unrecognised difficulty %r, defaulting to beginner.", _first_line(text))
    return "beginner"


def _parse_segment(position: int, segment: str) -> Optional[StepCandidate]:
    """Build a ``StepCandidate`` from one segment, or ``None`` if it has no title."""
    fields = _split_fields(segment)

    title = _first_line(fields.get("title"))
    if not title:
        logger.debug("Segment %d has no title, dropping it.", position)
        return None

    return StepCandidate(
        id=f"step-{position}",
        title=title,
        description=_scalar(fields.get("description")),
        difficulty=_difficulty(fields.get("difficulty")),
        duration=_first_line(fields.get("duration")) or DEFAULT_DURATION,
        modules=_list_items(fields.get("modules")),
        prerequisites=_list_items(fields.get("prerequisites")),
        learning_outcomes=_list_items(fields.get("learning_outcomes")),
    )


# -------------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------------


def extract_steps(
    raw_text: Optional[str],
    max_text_chars: int = 100_000,
) -> List[StepCandidate]:
    """Parse generator output into step candidates, in source order.

    Args:
        raw_text: Text returned by the generator.
        max_text_chars: Truncate input beyond this length to cap cost.

    Returns:
        A list of ``StepCandidate``; empty when nothing parseable is found.
        This function does not raise.
    """
    if not raw_text or not raw_text.strip():
        return []

    try:
        segments = _split_segments(raw_text[:max_text_chars])
        steps: List[StepCandidate] = []
        for position, segment in enumerate(segments, 1):
            step = _parse_segment(position, segment)
            if step is not None:
                steps.append(step)
    except Exception as exc:
        logger.error("Failed to parse generator output: %s", exc, exc_info=True)
        return []

    logger.info(
        "Extracted %d step(s) from %d segment(s).", len(steps), len(segments)
    )
    return steps
