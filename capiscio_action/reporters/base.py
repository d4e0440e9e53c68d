"""Base reporter interface and report model."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from capiscio_action.validation import (
    NormalizedScores,
    ValidationResult,
    calculate_scores,
    describe_issue,
    format_score,
    resolve_ratings,
)


class ValidationReport(BaseModel):
    """Everything a reporter needs about one validation run."""

    agent_card: str = Field(..., description="Validated agent card path")
    result: ValidationResult = Field(..., description="Decoded validator output")
    scores: NormalizedScores = Field(..., description="Normalized scores")
    ratings: dict[str, str | None] = Field(
        default_factory=dict, description="Display rating per score component"
    )

    @classmethod
    def from_result(
        cls, agent_card: str, result: ValidationResult
    ) -> "ValidationReport":
        """Create a report, normalizing scores and resolving ratings.

        Args:
            agent_card: Validated agent card path.
            result: Decoded validator output.

        Returns:
            ValidationReport instance.
        """
        scores = calculate_scores(result)
        return cls(
            agent_card=agent_card,
            result=result,
            scores=scores,
            ratings=resolve_ratings(result, scores),
        )

    @property
    def status(self) -> str:
        """Return "passed" or "failed"."""
        return "passed" if self.result.success else "failed"

    @property
    def has_scoring(self) -> bool:
        """Return whether the validator produced a scoring result."""
        return self.result.scoring_result is not None

    @property
    def error_messages(self) -> list[str]:
        return [describe_issue(e) for e in self.result.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [describe_issue(w) for w in self.result.warnings]

    def to_outputs(self) -> dict[str, str]:
        """Return the step outputs for this report, keyed by output name."""
        return {
            "result": self.status,
            "error-count": str(self.result.error_count),
            "warning-count": str(self.result.warning_count),
            "compliance-score": format_score(self.scores.compliance_score),
            "trust-score": format_score(self.scores.trust_score),
            "availability-score": self.scores.availability_score,
            "production-ready": str(self.scores.production_ready).lower(),
        }


class Reporter(ABC):
    """Base class for reporters.

    Reporters publish a validation report to one destination.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the reporter name."""

    @abstractmethod
    def report(self, report: ValidationReport) -> None:
        """Publish the report.

        Args:
            report: Validation report to publish.
        """

    def _format_score_line(self, score: float, rating: str | None) -> str:
        """Format a score with its rating, e.g. ``92/100 (Excellent)``."""
        text = f"{format_score(score)}/100"
        if rating:
            text += f" ({rating})"
        return text
