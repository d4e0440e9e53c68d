"""GitHub Actions workflow commands.

Implements the parts of the runner protocol the action needs: reading
``INPUT_*`` variables, writing step outputs and job summaries through the
files the runner provides, and emitting ``::command::`` lines on stdout.
"""

import os
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from capiscio_action.core.exceptions import InputError
from capiscio_action.core.logging import get_logger

logger = get_logger(__name__)

TRUE_VALUES = frozenset({"true", "True", "TRUE"})
FALSE_VALUES = frozenset({"false", "False", "FALSE"})

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def escape_data(value: str) -> str:
    """Escape command data so it stays on one workflow command line."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class Workflow:
    """Interface to the GitHub Actions runner for one action run.

    Tracks the exit code: set_failed() marks the run as failed, and the
    caller turns exit_code into the process status.
    """

    def __init__(
        self,
        output: TextIO | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the workflow interface.

        Args:
            output: Stream for log lines and commands (defaults to sys.stdout).
            env: Environment mapping (defaults to os.environ).
        """
        self._output = output if output is not None else sys.stdout
        self._env = env if env is not None else os.environ
        self.exit_code = EXIT_SUCCESS

    @property
    def env(self) -> Mapping[str, str]:
        """Return the environment this workflow reads from."""
        return self._env

    @property
    def failed(self) -> bool:
        """Return whether set_failed() has been called."""
        return self.exit_code != EXIT_SUCCESS

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def get_input(self, name: str, required: bool = False) -> str:
        """Read an action input.

        Args:
            name: Input name as declared in action.yml (e.g. "agent-card").
            required: Raise if the input is missing or empty.

        Returns:
            The trimmed input value, "" when unset.

        Raises:
            InputError: If a required input is missing.
        """
        env_name = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self._env.get(env_name, "").strip()
        if required and not value:
            raise InputError("Input required and not supplied", input_name=name)
        return value

    def get_boolean_input(self, name: str, default: bool = False) -> bool:
        """Read a boolean action input.

        Only the YAML 1.2 core schema spellings are accepted.

        Args:
            name: Input name as declared in action.yml.
            default: Value used when the input is empty.

        Raises:
            InputError: If the value is not a recognised boolean.
        """
        value = self.get_input(name)
        if not value:
            return default
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise InputError(
            f"Input does not meet YAML 1.2 Core Schema specification: {value!r}. "
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`",
            input_name=name,
        )

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def set_output(self, name: str, value: object) -> None:
        """Set a step output.

        Args:
            name: Output name.
            value: Output value; converted with str().
        """
        text = str(value)
        output_file = self._env.get("GITHUB_OUTPUT")
        if not output_file:
            self._issue("set-output", text, name=name)
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")

    def append_summary(self, markdown: str) -> bool:
        """Append Markdown to the job summary.

        Returns:
            True if a summary file was available and written.
        """
        summary_file = self._env.get("GITHUB_STEP_SUMMARY")
        if not summary_file:
            logger.debug("step_summary_unavailable")
            return False

        path = Path(summary_file)
        with open(path, "a", encoding="utf-8") as f:
            f.write(markdown)
            if not markdown.endswith("\n"):
                f.write("\n")
        return True

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _write(self, text: str = "") -> None:
        self._output.write(text + "\n")

    def _issue(self, command: str, message: str = "", **properties: str) -> None:
        props = ",".join(
            f"{key}={escape_property(value)}"
            for key, value in properties.items()
            if value
        )
        head = f"::{command} {props}" if props else f"::{command}"
        self._write(f"{head}::{escape_data(message)}")

    def info(self, message: str = "") -> None:
        """Write a plain log line."""
        self._write(message)

    def debug(self, message: str) -> None:
        """Write a debug line (shown when step debug logging is enabled)."""
        self._issue("debug", message)

    def notice(self, message: str) -> None:
        """Write a notice annotation."""
        self._issue("notice", message)

    def warning(self, message: str, file: str | None = None) -> None:
        """Write a warning annotation."""
        self._issue("warning", message, file=file or "")

    def error(self, message: str, file: str | None = None) -> None:
        """Write an error annotation."""
        self._issue("error", message, file=file or "")

    def set_failed(self, message: str) -> None:
        """Mark the action as failed and log the reason."""
        self.exit_code = EXIT_FAILURE
        self.error(message)
