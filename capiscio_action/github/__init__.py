"""GitHub Actions runner integration."""

from .workflow import EXIT_FAILURE, EXIT_SUCCESS, Workflow, escape_data

__all__ = [
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "Workflow",
    "escape_data",
]
