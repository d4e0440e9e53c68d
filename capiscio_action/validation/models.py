"""Data models for agent card validation."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

NOT_TESTED = "not-tested"


class ValidationOptions(BaseModel):
    """Options controlling a single validator invocation."""

    model_config = ConfigDict(frozen=True)

    agent_card_path: str = Field(
        ..., description="Path or URL of the agent card, passed through verbatim"
    )
    strict: bool = Field(default=False, description="Enable strict validation mode")
    test_live: bool = Field(
        default=False, description="Test the live agent endpoint for availability"
    )
    skip_signature: bool = Field(
        default=False, description="Skip JWS signature verification"
    )
    timeout: str = Field(
        default="",
        description=(
            "Request timeout. Empty means unset, bare digits are milliseconds, "
            "anything else must already carry a unit (e.g. 10s)"
        ),
    )


class ValidationResult(BaseModel):
    """Decoded JSON document emitted by ``capiscio validate --json``.

    The scoring payload is deliberately kept as a raw mapping: the validator
    has shipped more than one layout for it, and the normalizer needs to see
    the difference between a missing key, an explicit ``null`` and a value.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = Field(
        default=False,
        validation_alias=AliasChoices("success", "valid"),
        description="Overall validation verdict",
    )
    errors: list[Any] = Field(default_factory=list, description="Error records")
    warnings: list[Any] = Field(default_factory=list, description="Warning records")
    scoring_result: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("scoringResult", "scoring_result"),
        description="Raw scoring payload (new nested or legacy flat layout)",
    )

    @field_validator("errors", "warnings", mode="before")
    @classmethod
    def coerce_issue_list(cls, v: Any) -> Any:
        """Treat a missing or null issue list as empty."""
        if v is None:
            return []
        return v

    @field_validator("scoring_result", mode="before")
    @classmethod
    def drop_malformed_scoring(cls, v: Any) -> Any:
        """Anything other than a JSON object is treated as no scoring result."""
        if isinstance(v, dict):
            return v
        return None

    @property
    def error_count(self) -> int:
        """Number of errors reported by the validator."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of warnings reported by the validator."""
        return len(self.warnings)


class NormalizedScores(BaseModel):
    """Scores resolved from any supported scoring layout."""

    compliance_score: float = Field(
        default=0, description="Compliance score (0-100)"
    )
    trust_score: float = Field(default=0, description="Trust score (0-100)")
    availability_score: str = Field(
        default=NOT_TESTED,
        description="Availability score as text, or 'not-tested'",
    )
    production_ready: bool = Field(
        default=False, description="Whether the card meets the production bar"
    )

    @property
    def availability_tested(self) -> bool:
        """Return whether an availability score was produced."""
        return self.availability_score != NOT_TESTED
