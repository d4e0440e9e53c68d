"""Reporters for publishing validation results to the CI runner."""

from .base import Reporter, ValidationReport
from .summary_reporter import SummaryReporter
from .workflow_reporter import WorkflowReporter

__all__ = [
    "Reporter",
    "SummaryReporter",
    "ValidationReport",
    "WorkflowReporter",
]
