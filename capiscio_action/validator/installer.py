"""Download and install the capiscio validator binary."""

import os
import platform
import stat
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import httpx

from capiscio_action.core.logging import get_logger
from capiscio_action.core.settings import ActionSettings

from .exceptions import UnsupportedPlatformError, ValidatorInstallError

logger = get_logger(__name__)

BINARY_NAME = "capiscio"

OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
}

ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


@dataclass(frozen=True)
class PlatformTarget:
    """A platform the validator is released for."""

    os_name: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os_name == "windows"

    @property
    def asset_name(self) -> str:
        """Release asset name, e.g. ``capiscio-linux-amd64``."""
        suffix = ".exe" if self.is_windows else ""
        return f"{BINARY_NAME}-{self.os_name}-{self.arch}{suffix}"

    @property
    def binary_name(self) -> str:
        """File name of the installed binary."""
        return f"{BINARY_NAME}.exe" if self.is_windows else BINARY_NAME


def detect_platform(
    system: str | None = None, machine: str | None = None
) -> PlatformTarget:
    """Resolve the host (or given) platform to a release target.

    Args:
        system: OS name as reported by platform.system(). Defaults to the host.
        machine: CPU architecture as reported by platform.machine().

    Returns:
        PlatformTarget for the platform.

    Raises:
        UnsupportedPlatformError: If no validator build exists for it.
    """
    raw_system = system if system is not None else platform.system()
    raw_machine = machine if machine is not None else platform.machine()

    os_name = OS_ALIASES.get(raw_system.lower())
    arch = ARCH_ALIASES.get(raw_machine.lower())
    if os_name is None or arch is None:
        raise UnsupportedPlatformError(raw_system, raw_machine)

    return PlatformTarget(os_name=os_name, arch=arch)


class ValidatorInstaller:
    """Makes a validator binary available on the local filesystem.

    Resolution order:
    1. ``settings.validator_path`` when configured
    2. A previously installed binary for the configured version
    3. A fresh download from the release host
    """

    def __init__(
        self,
        settings: ActionSettings,
        env: Mapping[str, str] | None = None,
        target: PlatformTarget | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the installer.

        Args:
            settings: Action settings (version, paths, download options).
            env: Environment mapping used to locate the runner tool cache.
            target: Platform to install for. Detected lazily if None.
            transport: Optional httpx transport, used by tests.
        """
        self._settings = settings
        self._env = env if env is not None else os.environ
        self._target = target
        self._transport = transport

    @property
    def target(self) -> PlatformTarget:
        """Return the platform target, detecting it on first use."""
        if self._target is None:
            self._target = detect_platform()
        return self._target

    @property
    def install_path(self) -> Path:
        """Return where the configured version is installed."""
        install_dir = self._settings.resolve_install_dir(self._env)
        return install_dir / self._settings.validator_version / self.target.binary_name

    @property
    def download_url(self) -> str:
        """Return the download URL for the configured version."""
        return self._settings.download_url_for(self.target.asset_name)

    def install(self) -> Path:
        """Return the path of a runnable validator binary.

        Raises:
            UnsupportedPlatformError: If the host platform has no build.
            ValidatorInstallError: If the binary cannot be obtained.
        """
        if self._settings.validator_path:
            path = Path(self._settings.validator_path).expanduser()
            if not path.is_file():
                raise ValidatorInstallError(
                    f"Configured validator not found: {path}",
                )
            logger.info("validator_configured", path=str(path))
            return path

        path = self.install_path
        if path.is_file():
            logger.info(
                "validator_reused",
                version=self._settings.validator_version,
                path=str(path),
            )
            return path

        self._download(self.download_url, path)
        logger.info(
            "validator_installed",
            version=self._settings.validator_version,
            path=str(path),
        )
        return path

    def _download(self, url: str, destination: Path) -> None:
        """Stream url into destination, replacing it atomically."""
        logger.info("validator_download_started", url=url)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=".capiscio-", dir=destination.parent
            )
        except OSError as e:
            raise ValidatorInstallError(
                f"Cannot create install directory {destination.parent}: {e}",
                url=url,
                cause=e,
            ) from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                with httpx.Client(
                    timeout=self._settings.download_timeout,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    with client.stream("GET", url) as response:
                        response.raise_for_status()
                        for chunk in response.iter_bytes():
                            f.write(chunk)

            mode = temp_path.stat().st_mode
            temp_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(temp_path, destination)
        except httpx.HTTPStatusError as e:
            raise ValidatorInstallError(
                f"Failed to download validator from {url}: "
                f"HTTP {e.response.status_code}",
                url=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise ValidatorInstallError(
                f"Failed to download validator from {url}: {e}",
                url=url,
                cause=e,
            ) from e
        except OSError as e:
            raise ValidatorInstallError(
                f"Failed to write validator to {destination}: {e}",
                url=url,
                cause=e,
            ) from e
        finally:
            temp_path.unlink(missing_ok=True)
