"""Argument building and score normalization for the capiscio validator."""

from .arguments import build_validate_args, normalize_timeout
from .models import (
    NOT_TESTED,
    NormalizedScores,
    ValidationOptions,
    ValidationResult,
)
from .scoring import (
    calculate_scores,
    describe_issue,
    format_score,
    get_rating,
    get_supplied_rating,
    resolve_ratings,
)

__all__ = [
    "NOT_TESTED",
    "NormalizedScores",
    "ValidationOptions",
    "ValidationResult",
    "build_validate_args",
    "calculate_scores",
    "describe_issue",
    "format_score",
    "get_rating",
    "get_supplied_rating",
    "normalize_timeout",
    "resolve_ratings",
]
