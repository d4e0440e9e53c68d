"""Unit tests for ValidatorInstaller."""

import os
from pathlib import Path

import httpx
import pytest

from capiscio_action.core.settings import ActionSettings
from capiscio_action.validator import (
    PlatformTarget,
    UnsupportedPlatformError,
    ValidatorInstaller,
    ValidatorInstallError,
    detect_platform,
)

LINUX_AMD64 = PlatformTarget(os_name="linux", arch="amd64")


class TestDetectPlatform:
    """Tests for detect_platform()."""

    @pytest.mark.parametrize(
        ("system", "machine", "asset"),
        [
            ("Linux", "x86_64", "capiscio-linux-amd64"),
            ("Linux", "aarch64", "capiscio-linux-arm64"),
            ("Darwin", "arm64", "capiscio-darwin-arm64"),
            ("Darwin", "x86_64", "capiscio-darwin-amd64"),
            ("Windows", "AMD64", "capiscio-windows-amd64.exe"),
        ],
    )
    def test_supported(self, system: str, machine: str, asset: str) -> None:
        """Test asset names for supported platforms."""
        assert detect_platform(system, machine).asset_name == asset

    def test_windows_binary_name(self) -> None:
        """Test the installed file name on Windows."""
        assert detect_platform("Windows", "AMD64").binary_name == "capiscio.exe"
        assert LINUX_AMD64.binary_name == "capiscio"

    @pytest.mark.parametrize(
        ("system", "machine"),
        [("FreeBSD", "x86_64"), ("Linux", "i686"), ("Linux", "s390x")],
    )
    def test_unsupported(self, system: str, machine: str) -> None:
        """Test that unknown platforms are rejected with their names."""
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            detect_platform(system, machine)
        assert exc_info.value.os_name == system
        assert exc_info.value.arch == machine
        assert f"{system}/{machine}" in str(exc_info.value)


class TestValidatorInstaller:
    """Tests for ValidatorInstaller.install()."""

    def test_configured_path(self, tmp_path: Path) -> None:
        """Test that an explicit validator path skips downloading."""
        binary = tmp_path / "capiscio"
        binary.write_text("#!/bin/sh\n")
        settings = ActionSettings(_skip_file_loading=True, validator_path=str(binary))

        def fail(request: httpx.Request) -> httpx.Response:
            raise AssertionError("unexpected download")

        installer = ValidatorInstaller(
            settings, env={}, target=LINUX_AMD64, transport=httpx.MockTransport(fail)
        )
        assert installer.install() == binary

    def test_configured_path_missing(self, tmp_path: Path) -> None:
        """Test that a missing configured binary is an install error."""
        settings = ActionSettings(
            _skip_file_loading=True, validator_path=str(tmp_path / "nope")
        )
        installer = ValidatorInstaller(settings, env={}, target=LINUX_AMD64)
        with pytest.raises(ValidatorInstallError, match="not found"):
            installer.install()

    def test_download(self, settings: ActionSettings) -> None:
        """Test downloading and installing a binary."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, content=b"binary-content")

        installer = ValidatorInstaller(
            settings,
            env={},
            target=LINUX_AMD64,
            transport=httpx.MockTransport(handler),
        )
        path = installer.install()

        assert requested == [
            "https://github.com/capiscio/capiscio-core/releases/download"
            "/v2.0.0/capiscio-linux-amd64"
        ]
        assert path == Path(settings.install_dir or "") / "2.0.0" / "capiscio"
        assert path.read_bytes() == b"binary-content"
        assert os.access(path, os.X_OK)
        assert [p.name for p in path.parent.iterdir()] == ["capiscio"]

    def test_reuses_installed_binary(self, settings: ActionSettings) -> None:
        """Test that an existing install is not downloaded again."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(200, content=b"v1")

        installer = ValidatorInstaller(
            settings,
            env={},
            target=LINUX_AMD64,
            transport=httpx.MockTransport(handler),
        )
        first = installer.install()
        second = installer.install()

        assert first == second
        assert calls == 1

    def test_runner_tool_cache(self, tmp_path: Path) -> None:
        """Test installing into the runner tool cache."""
        settings = ActionSettings(_skip_file_loading=True)
        installer = ValidatorInstaller(
            settings,
            env={"RUNNER_TOOL_CACHE": str(tmp_path)},
            target=LINUX_AMD64,
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, content=b"x")
            ),
        )
        assert installer.install() == tmp_path / "capiscio" / "2.0.0" / "capiscio"

    def test_http_error(self, settings: ActionSettings) -> None:
        """Test that a missing release asset is reported with its URL."""
        installer = ValidatorInstaller(
            settings,
            env={},
            target=LINUX_AMD64,
            transport=httpx.MockTransport(lambda request: httpx.Response(404)),
        )
        with pytest.raises(ValidatorInstallError, match="HTTP 404") as exc_info:
            installer.install()

        assert exc_info.value.url == installer.download_url
        assert not installer.install_path.exists()
        assert list(installer.install_path.parent.iterdir()) == []

    def test_connection_error(self, settings: ActionSettings) -> None:
        """Test that transport failures become install errors."""

        def raise_connect_error(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        installer = ValidatorInstaller(
            settings,
            env={},
            target=LINUX_AMD64,
            transport=httpx.MockTransport(raise_connect_error),
        )
        with pytest.raises(ValidatorInstallError, match="Connection refused") as exc:
            installer.install()
        assert isinstance(exc.value.cause, httpx.ConnectError)
