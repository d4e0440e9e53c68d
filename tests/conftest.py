"""Shared pytest fixtures for capiscio-action tests."""

import json
import stat
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from capiscio_action.core.settings import ActionSettings


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Keep tests away from real config files and CI variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GITHUB_OUTPUT",
        "GITHUB_STEP_SUMMARY",
        "RUNNER_TOOL_CACHE",
        "CAPISCIO_VALIDATOR_PATH",
        "CAPISCIO_VALIDATOR_VERSION",
        "CAPISCIO_INSTALL_DIR",
        "CAPISCIO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def new_format_result() -> dict[str, Any]:
    """Validator output using the nested scoring layout."""
    return {
        "success": True,
        "errors": [],
        "warnings": [],
        "scoringResult": {
            "compliance": {"total": 92, "rating": "Excellent"},
            "trust": {"total": 86, "rating": "Good"},
            "availability": {"total": 88, "rating": "Good"},
            "productionReady": True,
        },
    }


@pytest.fixture
def legacy_format_result() -> dict[str, Any]:
    """Validator output using the flat legacy scoring layout."""
    return {
        "success": True,
        "errors": [],
        "warnings": [],
        "scoringResult": {
            "complianceScore": 81,
            "trustScore": 77,
            "availability": {"score": 0, "tested": False},
        },
    }


@pytest.fixture
def failed_result() -> dict[str, Any]:
    """Validator output for an invalid card."""
    return {
        "success": False,
        "errors": [
            {"code": "MISSING_FIELD", "message": "name is required"},
            "url must be absolute",
        ],
        "warnings": [{"code": "NO_SIGNATURE"}],
        "scoringResult": {
            "compliance": {"total": 40, "rating": "Poor"},
            "trust": {"total": 55, "rating": None},
            "availability": None,
            "productionReady": False,
        },
    }


FakeValidatorFactory = Callable[..., Path]


@pytest.fixture
def fake_validator(tmp_path: Path) -> FakeValidatorFactory:
    """Create an executable that behaves like ``capiscio validate --json``.

    The script records its arguments in ``<name>.args.json`` and prints
    the given stdout/stderr before exiting with exit_code.
    """

    def _create(
        stdout: str | dict[str, Any] = "",
        stderr: str = "",
        exit_code: int = 0,
        name: str = "capiscio",
        sleep: float = 0,
    ) -> Path:
        bin_dir = tmp_path / "fake-bin"
        bin_dir.mkdir(exist_ok=True)

        if isinstance(stdout, dict):
            stdout = json.dumps(stdout)

        payload = bin_dir / f"{name}.payload.json"
        payload.write_text(
            json.dumps({"stdout": stdout, "stderr": stderr, "exit_code": exit_code})
        )
        args_file = bin_dir / f"{name}.args.json"

        script = bin_dir / name
        script.write_text(
            f"#!{sys.executable}\n"
            "import json, sys, time\n"
            f"time.sleep({sleep!r})\n"
            f"with open({str(args_file)!r}, 'w') as f:\n"
            "    json.dump(sys.argv[1:], f)\n"
            f"with open({str(payload)!r}) as f:\n"
            "    data = json.load(f)\n"
            "sys.stdout.write(data['stdout'])\n"
            "sys.stderr.write(data['stderr'])\n"
            "sys.exit(data['exit_code'])\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IEXEC)
        return script

    return _create


@pytest.fixture
def settings(tmp_path: Path) -> ActionSettings:
    """Settings that install into the test directory."""
    return ActionSettings(
        _skip_file_loading=True,
        install_dir=str(tmp_path / "tools"),
    )
