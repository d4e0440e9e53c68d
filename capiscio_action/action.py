"""Action orchestration: inputs -> validator run -> outputs -> verdict."""

import asyncio
import shlex

from pydantic import BaseModel, Field

from capiscio_action.core.exceptions import ActionError
from capiscio_action.core.logging import get_logger
from capiscio_action.core.settings import ActionSettings
from capiscio_action.github import Workflow
from capiscio_action.reporters import (
    Reporter,
    SummaryReporter,
    ValidationReport,
    WorkflowReporter,
)
from capiscio_action.validation import (
    NormalizedScores,
    ValidationOptions,
    ValidationResult,
    build_validate_args,
    format_score,
)
from capiscio_action.validator import (
    ValidatorInstaller,
    ValidatorOutputError,
    ValidatorRunner,
    parse_result,
)

logger = get_logger(__name__)

DEFAULT_AGENT_CARD = "./agent-card.json"


class ActionInputs(BaseModel):
    """Inputs of one action run."""

    options: ValidationOptions = Field(..., description="Validator options")
    fail_on_warnings: bool = Field(
        default=False, description="Fail the run when warnings are reported"
    )
    require_production_ready: bool = Field(
        default=False,
        description="Fail the run when the card is not production ready",
    )

    @classmethod
    def from_workflow(cls, workflow: Workflow) -> "ActionInputs":
        """Read inputs declared in action.yml.

        Raises:
            InputError: If a boolean input has an unsupported value.
        """
        options = ValidationOptions(
            agent_card_path=workflow.get_input("agent-card") or DEFAULT_AGENT_CARD,
            strict=workflow.get_boolean_input("strict"),
            test_live=workflow.get_boolean_input("test-live"),
            skip_signature=workflow.get_boolean_input("skip-signature"),
            timeout=workflow.get_input("timeout"),
        )
        return cls(
            options=options,
            fail_on_warnings=workflow.get_boolean_input("fail-on-warnings"),
            require_production_ready=workflow.get_boolean_input(
                "require-production-ready"
            ),
        )


class Verdict(BaseModel):
    """Terminal outcome of a run."""

    passed: bool
    message: str


def decide_verdict(
    result: ValidationResult,
    scores: NormalizedScores,
    inputs: ActionInputs,
) -> Verdict:
    """Decide whether the run passes.

    Checks, in order: validator verdict, warnings policy, production
    readiness policy.
    """
    if not result.success:
        return Verdict(
            passed=False,
            message=f"Validation failed with {result.error_count} error(s)",
        )

    if inputs.fail_on_warnings and result.warning_count > 0:
        return Verdict(
            passed=False,
            message=(
                f"Validation passed but found {result.warning_count} warning(s) "
                "(fail-on-warnings enabled)"
            ),
        )

    if inputs.require_production_ready and not scores.production_ready:
        return Verdict(
            passed=False,
            message=(
                "Validation passed but the agent card is not production ready "
                f"(compliance score {format_score(scores.compliance_score)})"
            ),
        )

    return Verdict(passed=True, message="Validation passed!")


async def run_action(
    inputs: ActionInputs,
    settings: ActionSettings,
    workflow: Workflow,
    reporters: list[Reporter] | None = None,
) -> int:
    """Validate an agent card and publish the outcome.

    Failures never propagate: they are reported through workflow.set_failed()
    and reflected in the returned exit code.

    Args:
        inputs: Action inputs.
        settings: Runtime settings.
        workflow: Runner interface for logs and outputs.
        reporters: Reporters to publish with. Defaults to step outputs and
            the job summary.

    Returns:
        Process exit code.
    """
    card = inputs.options.agent_card_path
    if reporters is None:
        reporters = [WorkflowReporter(workflow), SummaryReporter(workflow)]

    workflow.info(f"🚀 Validating A2A agent card: {card}")

    try:
        installer = ValidatorInstaller(settings, env=workflow.env)
        if not settings.validator_path:
            workflow.info(
                f"📦 Installing capiscio validator v{settings.validator_version}..."
            )
        binary = await asyncio.to_thread(installer.install)

        args = build_validate_args(inputs.options)
        workflow.info(f"🔍 Running: capiscio {shlex.join(args)}")
        runner = ValidatorRunner(binary, timeout_seconds=settings.process_timeout)
        output = await runner.run(args)

        if output.stdout:
            workflow.debug(f"CLI Output: {output.stdout}")
        if output.stderr:
            workflow.debug(f"CLI Error Output: {output.stderr}")

        try:
            result = parse_result(output)
        except ValidatorOutputError as e:
            logger.error("validator_output_invalid", error=str(e))
            workflow.error("Failed to parse validation output as JSON")
            workflow.error(f"Raw output: {e.stdout}")
            workflow.error(f"Error output: {e.stderr}")
            workflow.set_failed(f"Validation failed with exit code {e.exit_code}")
            return workflow.exit_code

        report = ValidationReport.from_result(card, result)
        for reporter in reporters:
            reporter.report(report)

        verdict = decide_verdict(result, report.scores, inputs)
        logger.info(
            "validation_finished",
            agent_card=card,
            passed=verdict.passed,
            exit_code=output.exit_code,
        )
        if verdict.passed:
            workflow.info()
            workflow.info(f"✅ {verdict.message}")
        else:
            workflow.set_failed(verdict.message)

    except ActionError as e:
        logger.error("action_failed", error=str(e))
        workflow.set_failed(str(e))
    except OSError as e:
        logger.error("workflow_io_failed", error=str(e))
        workflow.set_failed(f"Failed to write workflow files: {e}")

    return workflow.exit_code
