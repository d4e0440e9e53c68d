"""Reporter that publishes step outputs and log lines."""

from capiscio_action.github import Workflow

from .base import Reporter, ValidationReport


class WorkflowReporter(Reporter):
    """Sets the action outputs and prints scores, errors and warnings."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "workflow"

    def report(self, report: ValidationReport) -> None:
        """Set outputs and write the human-readable report.

        Args:
            report: Validation report to publish.
        """
        for name, value in report.to_outputs().items():
            self._workflow.set_output(name, value)

        if report.has_scoring:
            self._write_scores(report)
        self._write_errors(report)
        self._write_warnings(report)

    def _write_scores(self, report: ValidationReport) -> None:
        wf = self._workflow
        scores = report.scores

        wf.info()
        wf.info("📊 Quality Scores:")
        wf.info(
            "  Compliance: "
            + self._format_score_line(
                scores.compliance_score, report.ratings.get("compliance")
            )
        )
        wf.info(
            "  Trust: "
            + self._format_score_line(scores.trust_score, report.ratings.get("trust"))
        )
        if scores.availability_tested:
            wf.info(
                "  Availability: "
                + self._format_score_line(
                    float(scores.availability_score),
                    report.ratings.get("availability"),
                )
            )
        else:
            wf.info("  Availability: not tested")

        wf.info()
        ready = "✅ YES" if scores.production_ready else "❌ NO"
        wf.info(f"🎯 Production Ready: {ready}")

    def _write_errors(self, report: ValidationReport) -> None:
        messages = report.error_messages
        if not messages:
            return
        self._workflow.info()
        self._workflow.error(f"❌ Found {len(messages)} error(s):")
        for message in messages:
            self._workflow.error(f"  - {message}")

    def _write_warnings(self, report: ValidationReport) -> None:
        messages = report.warning_messages
        if not messages:
            return
        self._workflow.info()
        self._workflow.warning(f"⚠️  Found {len(messages)} warning(s):")
        for message in messages:
            self._workflow.warning(f"  - {message}")
