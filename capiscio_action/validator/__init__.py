"""Acquisition and execution of the capiscio validator binary."""

from .exceptions import (
    UnsupportedPlatformError,
    ValidatorError,
    ValidatorExecutionError,
    ValidatorInstallError,
    ValidatorOutputError,
)
from .installer import PlatformTarget, ValidatorInstaller, detect_platform
from .runner import ValidatorOutput, ValidatorRunner, parse_result

__all__ = [
    "PlatformTarget",
    "UnsupportedPlatformError",
    "ValidatorError",
    "ValidatorExecutionError",
    "ValidatorInstallError",
    "ValidatorInstaller",
    "ValidatorOutput",
    "ValidatorOutputError",
    "ValidatorRunner",
    "detect_platform",
    "parse_result",
]
