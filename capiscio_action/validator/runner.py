"""Run the capiscio validator as a subprocess."""

import asyncio
import json
import shlex
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from capiscio_action.core.logging import get_logger
from capiscio_action.validation import ValidationResult

from .exceptions import ValidatorExecutionError, ValidatorOutputError

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidatorOutput:
    """Captured result of one validator process."""

    command: list[str]
    exit_code: int
    stdout: str
    stderr: str

    @property
    def command_line(self) -> str:
        """Return the command as a shell-quoted string for display."""
        return shlex.join(self.command)


class ValidatorRunner:
    """
    Runs ``capiscio`` with a prepared argument list.

    The validator exits non-zero for invalid cards but still prints its JSON
    result, so the exit code is reported rather than raised.
    """

    def __init__(self, binary: Path | str, timeout_seconds: float = 600) -> None:
        """
        Initialize the runner.

        Args:
            binary: Path to the validator executable.
            timeout_seconds: Wall-clock limit for a single run.
        """
        self._binary = str(binary)
        self._timeout_seconds = timeout_seconds

    @property
    def binary(self) -> str:
        return self._binary

    async def run(self, args: list[str]) -> ValidatorOutput:
        """
        Execute the validator and capture its output.

        Args:
            args: Arguments after the binary, e.g. from build_validate_args().

        Returns:
            ValidatorOutput with decoded stdout and stderr.

        Raises:
            ValidatorExecutionError: If the binary cannot be started or the
                run exceeds the timeout.
        """
        cmd = [self._binary, *args]
        logger.debug("validator_started", command=cmd)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ValidatorExecutionError(
                f"Validator not found: {self._binary}",
                cause=e,
            ) from e
        except OSError as e:
            raise ValidatorExecutionError(
                f"Failed to execute validator: {e}",
                cause=e,
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as e:
            process.kill()
            await process.wait()
            raise ValidatorExecutionError(
                f"Validator timed out after {self._timeout_seconds}s",
                timeout_seconds=self._timeout_seconds,
            ) from e

        exit_code = process.returncode if process.returncode is not None else -1
        logger.debug("validator_finished", exit_code=exit_code)

        return ValidatorOutput(
            command=cmd,
            exit_code=exit_code,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )


def parse_result(output: ValidatorOutput) -> ValidationResult:
    """
    Decode validator stdout into a ValidationResult.

    Raises:
        ValidatorOutputError: If stdout is not a JSON object matching the
            result shape.
    """
    try:
        data = json.loads(output.stdout)
    except json.JSONDecodeError as e:
        raise ValidatorOutputError(
            f"Failed to parse validation output as JSON: {e}",
            exit_code=output.exit_code,
            stdout=output.stdout,
            stderr=output.stderr,
            cause=e,
        ) from e

    if not isinstance(data, dict):
        raise ValidatorOutputError(
            f"Expected a JSON object, got {type(data).__name__}",
            exit_code=output.exit_code,
            stdout=output.stdout,
            stderr=output.stderr,
        )

    try:
        return ValidationResult.model_validate(data)
    except PydanticValidationError as e:
        raise ValidatorOutputError(
            f"Unexpected validation output format: {e}",
            exit_code=output.exit_code,
            stdout=output.stdout,
            stderr=output.stderr,
            cause=e,
        ) from e
