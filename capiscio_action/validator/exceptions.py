"""Validator-specific exceptions."""

from capiscio_action.core.exceptions import ActionError


class ValidatorError(ActionError):
    """Base exception for validator acquisition and execution errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class UnsupportedPlatformError(ValidatorError):
    """Raised when no validator build exists for the host platform."""

    def __init__(self, os_name: str, arch: str) -> None:
        self.os_name = os_name
        self.arch = arch
        super().__init__(f"Unsupported platform: {os_name}/{arch}")


class ValidatorInstallError(ValidatorError):
    """Raised when the validator binary cannot be downloaded or installed."""

    def __init__(
        self,
        message: str = "Failed to install validator",
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        super().__init__(message, cause=cause)


class ValidatorExecutionError(ValidatorError):
    """Raised when the validator process cannot be started or completed."""

    def __init__(
        self,
        message: str = "Validator execution failed",
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message, cause=cause)


class ValidatorOutputError(ValidatorError):
    """Raised when validator output is not a JSON validation result."""

    def __init__(
        self,
        message: str = "Invalid validator output",
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        cause: Exception | None = None,
    ) -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message, cause=cause)
