"""Main CLI entry point for capiscio-action."""

import asyncio
import json
import platform
import shlex
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError as PydanticValidationError

from capiscio_action import __version__
from capiscio_action.action import ActionInputs, run_action
from capiscio_action.core.exceptions import InputError
from capiscio_action.core.logging import configure_logging_from_settings
from capiscio_action.core.settings import ActionSettings, get_settings
from capiscio_action.github import Workflow
from capiscio_action.validation import (
    ValidationOptions,
    ValidationResult,
    build_validate_args,
    calculate_scores,
    resolve_ratings,
)

EXIT_ERROR = 2  # Error (invalid input, unreadable file, etc.)


def _json_number(value: float) -> int | float:
    """Drop the fractional part of integral scores (92.0 -> 92)."""
    return int(value) if value.is_integer() else value


class ConfigContext:
    """Context object to hold configuration state."""

    def __init__(self) -> None:
        """Initialize config context."""
        self.config_file: Path | None = None
        self.verbose: bool = False
        self._settings: ActionSettings | None = None

    @property
    def settings(self) -> ActionSettings:
        """Load settings on first use."""
        if self._settings is None:
            overrides: dict[str, Any] = {}
            if self.verbose:
                overrides["log_level"] = "DEBUG"
            try:
                self._settings = get_settings(self.config_file, **overrides)
            except PydanticValidationError as e:
                raise click.ClickException(f"Invalid configuration: {e}") from e
        return self._settings

    def configure_logging(self) -> None:
        """Apply logging settings."""
        configure_logging_from_settings(self.settings)


pass_config = click.make_pass_decorator(ConfigContext, ensure=True)


def _validation_flags(func: Any) -> Any:
    """Attach the validator option flags shared by several commands."""
    decorators = [
        click.option("--strict", is_flag=True, help="Enable strict validation"),
        click.option(
            "--test-live",
            is_flag=True,
            help="Test the live agent endpoint for availability",
        ),
        click.option(
            "--skip-signature",
            is_flag=True,
            help="Skip JWS signature verification",
        ),
        click.option(
            "--timeout",
            type=str,
            default="",
            help="Request timeout; bare numbers are milliseconds (e.g. 5000, 10s)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _execute(config: ConfigContext, inputs: ActionInputs) -> None:
    """Run the action pipeline and exit with its status."""
    config.configure_logging()
    exit_code = asyncio.run(run_action(inputs, config.settings, Workflow()))
    sys.exit(exit_code)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to capiscio.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="capiscio-action")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """capiscio-action - validate A2A agent cards in CI.

    Examples:

      # GitHub Actions entrypoint (inputs from INPUT_* variables)
      capiscio-action run

      # Validate a card locally
      capiscio-action validate ./agent-card.json --strict --timeout 5000

      # Show the validator command line
      capiscio-action args ./agent-card.json --test-live

      # Normalize saved validator output
      capiscio-action scores result.json
    """
    ctx.ensure_object(ConfigContext)
    config_ctx = ctx.obj
    config_ctx.config_file = config_file
    config_ctx.verbose = verbose

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="version")
def version_cmd() -> None:
    """Show version information."""
    click.echo(f"capiscio-action v{__version__}")
    click.echo(f"Python: {sys.version.split()[0]}")
    click.echo(f"Platform: {platform.system()} {platform.machine()}")


@cli.command(name="run")
@pass_config
def run_cmd(config: ConfigContext) -> None:
    """Run as a GitHub Action, reading inputs from the environment.

    Inputs: agent-card, strict, test-live, skip-signature, timeout,
    fail-on-warnings, require-production-ready.
    """
    workflow = Workflow()
    try:
        inputs = ActionInputs.from_workflow(workflow)
    except InputError as e:
        workflow.set_failed(str(e))
        sys.exit(workflow.exit_code)

    _execute(config, inputs)


@cli.command(name="validate")
@click.argument("agent_card", type=str)
@_validation_flags
@click.option(
    "--fail-on-warnings",
    is_flag=True,
    help="Fail when the validator reports warnings",
)
@click.option(
    "--require-production-ready",
    is_flag=True,
    help="Fail when the card is not production ready",
)
@pass_config
def validate_cmd(
    config: ConfigContext,
    agent_card: str,
    strict: bool,
    test_live: bool,
    skip_signature: bool,
    timeout: str,
    fail_on_warnings: bool,
    require_production_ready: bool,
) -> None:
    """Validate AGENT_CARD with the capiscio validator.

    Examples:

      capiscio-action validate ./agent-card.json

      capiscio-action validate https://agent.example.com/.well-known/agent.json \\
          --test-live --timeout 10s
    """
    inputs = ActionInputs(
        options=ValidationOptions(
            agent_card_path=agent_card,
            strict=strict,
            test_live=test_live,
            skip_signature=skip_signature,
            timeout=timeout,
        ),
        fail_on_warnings=fail_on_warnings,
        require_production_ready=require_production_ready,
    )
    _execute(config, inputs)


@cli.command(name="args")
@click.argument("agent_card", type=str)
@_validation_flags
def args_cmd(
    agent_card: str,
    strict: bool,
    test_live: bool,
    skip_signature: bool,
    timeout: str,
) -> None:
    """Print the validator command line for AGENT_CARD."""
    options = ValidationOptions(
        agent_card_path=agent_card,
        strict=strict,
        test_live=test_live,
        skip_signature=skip_signature,
        timeout=timeout,
    )
    click.echo(shlex.join(["capiscio", *build_validate_args(options)]))


@cli.command(name="scores")
@click.argument("result_file", type=click.File("r"))
def scores_cmd(result_file: Any) -> None:
    """Normalize validator JSON output from RESULT_FILE ('-' for stdin).

    Prints the normalized scores and display ratings as JSON.
    """
    try:
        data = json.load(result_file)
    except json.JSONDecodeError as e:
        click.echo(f"Error: invalid JSON: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if not isinstance(data, dict):
        click.echo("Error: expected a JSON object", err=True)
        sys.exit(EXIT_ERROR)

    try:
        result = ValidationResult.model_validate(data)
    except PydanticValidationError as e:
        click.echo(f"Error: unexpected validation output format: {e}", err=True)
        sys.exit(EXIT_ERROR)

    scores = calculate_scores(result)
    payload = {
        "success": result.success,
        "errorCount": result.error_count,
        "warningCount": result.warning_count,
        "complianceScore": _json_number(scores.compliance_score),
        "trustScore": _json_number(scores.trust_score),
        "availabilityScore": scores.availability_score,
        "productionReady": scores.production_ready,
        "ratings": resolve_ratings(result, scores),
    }
    click.echo(json.dumps(payload, indent=2))


def main() -> None:
    """Console script entry point."""
    cli(obj=ConfigContext())


if __name__ == "__main__":
    main()
