"""Markdown job summary reporter.

Writes a results table to the GitHub Actions job summary, e.g.:

    ## 🛡️ Agent Card Validation

    **Agent card:** `./agent-card.json` | **Result:** ✅ Passed

    | Score | Value | Rating |
    |---|---|---|
    | Compliance | 92/100 | Excellent |
    | Trust | 86/100 | Good |
    | Availability | not tested | - |
"""

from capiscio_action.github import Workflow
from capiscio_action.validation import format_score

from .base import Reporter, ValidationReport


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class SummaryReporter(Reporter):
    """Reporter that appends a Markdown summary to the job summary."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "summary"

    def report(self, report: ValidationReport) -> None:
        """Append the summary if the runner provides a summary file.

        Args:
            report: Validation report to publish.
        """
        self._workflow.append_summary(self.render(report))

    def render(self, report: ValidationReport) -> str:
        """Render the report as Markdown."""
        status = "✅ Passed" if report.result.success else "❌ Failed"
        lines = [
            "## 🛡️ Agent Card Validation",
            "",
            f"**Agent card:** `{report.agent_card}` | **Result:** {status}",
            "",
            f"Errors: {report.result.error_count} | "
            f"Warnings: {report.result.warning_count}",
            "",
        ]

        if report.has_scoring:
            lines.extend(self._render_scores(report))

        lines.extend(self._render_issues("Errors", report.error_messages))
        lines.extend(self._render_issues("Warnings", report.warning_messages))

        return "\n".join(lines) + "\n"

    def _render_scores(self, report: ValidationReport) -> list[str]:
        scores = report.scores
        if scores.availability_tested:
            availability = f"{scores.availability_score}/100"
        else:
            availability = "not tested"

        compliance = f"{format_score(scores.compliance_score)}/100"
        trust = f"{format_score(scores.trust_score)}/100"
        rows = [
            ("Compliance", compliance, "compliance"),
            ("Trust", trust, "trust"),
            ("Availability", availability, "availability"),
        ]

        lines = ["| Score | Value | Rating |", "|---|---|---|"]
        for label, value, component in rows:
            rating = report.ratings.get(component) or "-"
            lines.append(f"| {label} | {value} | {_escape_cell(rating)} |")

        ready = "✅ Yes" if scores.production_ready else "❌ No"
        lines.extend(["", f"**Production ready:** {ready}", ""])
        return lines

    def _render_issues(self, title: str, messages: list[str]) -> list[str]:
        if not messages:
            return []
        lines = [f"### {title}", ""]
        lines.extend(f"- {_escape_cell(message)}" for message in messages)
        lines.append("")
        return lines
