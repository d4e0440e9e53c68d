"""Command line construction for ``capiscio validate``."""

import re

from .models import ValidationOptions

_DIGITS_ONLY = re.compile(r"[0-9]+")


def normalize_timeout(timeout: str) -> str:
    """Give a bare timeout value an explicit millisecond unit.

    Values that already carry a unit are passed through untouched, including
    units the validator may not understand; it reports those itself.

    Args:
        timeout: Timeout as supplied by the user.

    Returns:
        ``""`` for an empty value, ``"<n>ms"`` for digits only, otherwise
        the input unchanged.
    """
    if not timeout:
        return ""
    if _DIGITS_ONLY.fullmatch(timeout):
        return f"{timeout}ms"
    return timeout


def build_validate_args(options: ValidationOptions) -> list[str]:
    """Build the argument list for a ``capiscio validate`` invocation.

    Args:
        options: Validation options.

    Returns:
        Ordered arguments, starting with ``validate <card> --json``.
    """
    args = ["validate", options.agent_card_path, "--json"]

    if options.strict:
        args.append("--strict")
    if options.test_live:
        args.append("--test-live")
    if options.skip_signature:
        args.append("--skip-signature")
    if options.timeout:
        args.extend(["--timeout", normalize_timeout(options.timeout)])

    return args
