"""Score normalization for validator results.

The validator has emitted two scoring layouts over its lifetime::

    # current
    {"compliance": {"total": 92, "rating": "Excellent"},
     "trust": {"total": 86, "rating": "Good"},
     "availability": {"total": 88, "rating": "Good"} | null,
     "productionReady": true}

    # legacy
    {"complianceScore": 81,
     "trustScore": 77,
     "availability": {"score": 0, "tested": false}}

Fields are probed current-layout first, then legacy, per field, so mixed
payloads resolve too.
"""

import json
import math
from collections.abc import Mapping
from typing import Any

from .models import NOT_TESTED, NormalizedScores, ValidationResult

PRODUCTION_READY_THRESHOLD = 80

# (lower bound, label), highest first
RATING_BANDS: tuple[tuple[float, str], ...] = (
    (90, "Excellent"),
    (80, "Good"),
    (70, "Fair"),
)
LOWEST_RATING = "Needs Improvement"

SCORE_COMPONENTS = ("compliance", "trust", "availability")


def _number(value: Any) -> int | float | None:
    """Return value if it is a finite JSON number, else None.

    Python's json module also decodes NaN, Infinity and integers too large
    for a float; none of those is a usable score.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        finite = math.isfinite(value)
    except OverflowError:
        return None
    return value if finite else None


def _section(scoring: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Return a nested scoring section, or an empty mapping."""
    value = scoring.get(key)
    return value if isinstance(value, Mapping) else {}


def format_score(value: float) -> str:
    """Render a score the way the validator prints it.

    Integral values drop the fractional part (``88.0`` -> ``"88"``).
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _resolve_total(scoring: Mapping[str, Any], nested: str, flat: str) -> float:
    total = _number(_section(scoring, nested).get("total"))
    if total is not None:
        return total
    legacy = _number(scoring.get(flat))
    if legacy is not None:
        return legacy
    return 0


def _resolve_availability(scoring: Mapping[str, Any]) -> str:
    availability = scoring.get("availability")
    if not isinstance(availability, Mapping):
        return NOT_TESTED

    total = _number(availability.get("total"))
    if total is not None:
        return format_score(total)

    score = _number(availability.get("score"))
    if score is not None:
        # Legacy payloads report score 0 for skipped checks; only an explicit
        # tested=false marks them as skipped.
        if availability.get("tested") is False:
            return NOT_TESTED
        return format_score(score)

    return NOT_TESTED


def calculate_scores(result: ValidationResult) -> NormalizedScores:
    """Normalize a validator result into a single score record.

    Never raises: missing or malformed fields fall back to defaults.

    Args:
        result: Decoded validator output.

    Returns:
        NormalizedScores for the result.
    """
    scoring = result.scoring_result
    if scoring is None:
        return NormalizedScores()

    compliance_score = _resolve_total(scoring, "compliance", "complianceScore")
    trust_score = _resolve_total(scoring, "trust", "trustScore")
    availability_score = _resolve_availability(scoring)

    production_ready = scoring.get("productionReady")
    if not isinstance(production_ready, bool):
        production_ready = compliance_score >= PRODUCTION_READY_THRESHOLD

    return NormalizedScores(
        compliance_score=compliance_score,
        trust_score=trust_score,
        availability_score=availability_score,
        production_ready=production_ready,
    )


def get_rating(score: float) -> str:
    """Classify a 0-100 score into a rating band.

    Args:
        score: Score to classify.

    Returns:
        "Excellent", "Good", "Fair" or "Needs Improvement".
    """
    for lower_bound, label in RATING_BANDS:
        if score >= lower_bound:
            return label
    return LOWEST_RATING


def get_supplied_rating(result: ValidationResult, component: str) -> str | None:
    """Return the rating the validator attached to a score component, if any.

    Args:
        result: Decoded validator output.
        component: One of "compliance", "trust", "availability".

    Returns:
        The non-empty rating string, or None.
    """
    if result.scoring_result is None:
        return None
    rating = _section(result.scoring_result, component).get("rating")
    if isinstance(rating, str) and rating:
        return rating
    return None


def resolve_ratings(
    result: ValidationResult, scores: NormalizedScores
) -> dict[str, str | None]:
    """Pick a display rating for each score component.

    The validator's own rating wins; otherwise the score is classified with
    get_rating. Availability has no rating when it was not tested.
    """
    resolved_scores: dict[str, float | None] = {
        "compliance": scores.compliance_score,
        "trust": scores.trust_score,
        "availability": (
            float(scores.availability_score) if scores.availability_tested else None
        ),
    }

    ratings: dict[str, str | None] = {}
    for component in SCORE_COMPONENTS:
        score = resolved_scores[component]
        if score is None:
            ratings[component] = None
            continue
        ratings[component] = get_supplied_rating(result, component) or get_rating(
            score
        )
    return ratings


def describe_issue(issue: Any) -> str:
    """Render an error or warning record as display text.

    Validators emit either plain strings or objects with a ``message`` field.
    """
    if isinstance(issue, Mapping):
        message = issue.get("message")
        if message:
            return str(message)
    if isinstance(issue, str):
        return issue
    return json.dumps(issue, default=str, separators=(",", ":"))
