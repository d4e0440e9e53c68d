"""Tests for WorkflowReporter and ValidationReport."""

from io import StringIO
from pathlib import Path
from typing import Any

import pytest

from capiscio_action.github import Workflow
from capiscio_action.reporters import ValidationReport, WorkflowReporter
from capiscio_action.validation import ValidationResult


def _report(data: dict[str, Any]) -> ValidationReport:
    return ValidationReport.from_result(
        "./agent-card.json", ValidationResult.model_validate(data)
    )


@pytest.fixture
def stream() -> StringIO:
    return StringIO()


@pytest.fixture
def workflow(stream: StringIO) -> Workflow:
    """Workflow without an output file, so outputs are echoed as commands."""
    return Workflow(output=stream, env={})


class TestValidationReport:
    """Tests for ValidationReport."""

    def test_outputs_new_format(self, new_format_result: dict[str, Any]) -> None:
        """Test step outputs for the nested layout."""
        assert _report(new_format_result).to_outputs() == {
            "result": "passed",
            "error-count": "0",
            "warning-count": "0",
            "compliance-score": "92",
            "trust-score": "86",
            "availability-score": "88",
            "production-ready": "true",
        }

    def test_outputs_failed(self, failed_result: dict[str, Any]) -> None:
        """Test step outputs for a failed validation."""
        assert _report(failed_result).to_outputs() == {
            "result": "failed",
            "error-count": "2",
            "warning-count": "1",
            "compliance-score": "40",
            "trust-score": "55",
            "availability-score": "not-tested",
            "production-ready": "false",
        }

    def test_outputs_without_scoring(self) -> None:
        """Test step outputs when the validator sent no scores."""
        outputs = _report({"success": True}).to_outputs()
        assert outputs["compliance-score"] == "0"
        assert outputs["trust-score"] == "0"
        assert outputs["availability-score"] == "not-tested"
        assert outputs["production-ready"] == "false"

    def test_issue_messages(self, failed_result: dict[str, Any]) -> None:
        """Test rendering of heterogeneous issue records."""
        report = _report(failed_result)
        assert report.error_messages == ["name is required", "url must be absolute"]
        assert report.warning_messages == ['{"code":"NO_SIGNATURE"}']


class TestWorkflowReporter:
    """Tests for WorkflowReporter."""

    def test_name(self, workflow: Workflow) -> None:
        """Test reporter name."""
        assert WorkflowReporter(workflow).name == "workflow"

    def test_new_format(
        self,
        workflow: Workflow,
        stream: StringIO,
        new_format_result: dict[str, Any],
    ) -> None:
        """Test the score block with validator-supplied ratings."""
        WorkflowReporter(workflow).report(_report(new_format_result))
        lines = stream.getvalue().splitlines()

        assert "::set-output name=result::passed" in lines
        assert "::set-output name=availability-score::88" in lines
        assert "📊 Quality Scores:" in lines
        assert "  Compliance: 92/100 (Excellent)" in lines
        assert "  Trust: 86/100 (Good)" in lines
        assert "  Availability: 88/100 (Good)" in lines
        assert "🎯 Production Ready: ✅ YES" in lines
        assert not any(line.startswith("::error::") for line in lines)

    def test_legacy_format(
        self,
        workflow: Workflow,
        stream: StringIO,
        legacy_format_result: dict[str, Any],
    ) -> None:
        """Test derived ratings and untested availability."""
        WorkflowReporter(workflow).report(_report(legacy_format_result))
        lines = stream.getvalue().splitlines()

        assert "  Compliance: 81/100 (Good)" in lines
        assert "  Trust: 77/100 (Fair)" in lines
        assert "  Availability: not tested" in lines
        assert "🎯 Production Ready: ✅ YES" in lines

    def test_errors_and_warnings(
        self,
        workflow: Workflow,
        stream: StringIO,
        failed_result: dict[str, Any],
    ) -> None:
        """Test error and warning annotations."""
        WorkflowReporter(workflow).report(_report(failed_result))
        lines = stream.getvalue().splitlines()

        assert "::error::❌ Found 2 error(s):" in lines
        assert "::error::  - name is required" in lines
        assert "::error::  - url must be absolute" in lines
        assert "::warning::⚠️  Found 1 warning(s):" in lines
        assert '::warning::  - {"code":"NO_SIGNATURE"}' in lines
        assert "🎯 Production Ready: ❌ NO" in lines
        assert "  Compliance: 40/100 (Poor)" in lines
        assert "  Trust: 55/100 (Needs Improvement)" in lines

    def test_no_score_block_without_scoring(
        self, workflow: Workflow, stream: StringIO
    ) -> None:
        """Test that no score block is printed without a scoring result."""
        WorkflowReporter(workflow).report(_report({"success": True}))
        output = stream.getvalue()
        assert "Quality Scores" not in output
        assert "::set-output name=compliance-score::0" in output

    def test_outputs_file(
        self, tmp_path: Path, new_format_result: dict[str, Any]
    ) -> None:
        """Test that outputs go to GITHUB_OUTPUT when available."""
        output_file = tmp_path / "gh_output.txt"
        stream = StringIO()
        workflow = Workflow(output=stream, env={"GITHUB_OUTPUT": str(output_file)})

        WorkflowReporter(workflow).report(_report(new_format_result))

        text = output_file.read_text()
        for name in (
            "result",
            "error-count",
            "warning-count",
            "compliance-score",
            "trust-score",
            "availability-score",
            "production-ready",
        ):
            assert f"{name}<<ghadelimiter_" in text
        assert "set-output" not in stream.getvalue()
