"""capiscio-action configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides (CLI options, tests)
2. Environment variables (with CAPISCIO_ prefix)
3. Configuration files (capiscio.config.yaml)
4. Default values

Action inputs (``INPUT_*``) are not settings; they are read through
:mod:`capiscio_action.github.workflow`.

Example usage:
    from capiscio_action.core.settings import get_settings

    settings = get_settings()
    print(settings.validator_version)

Environment variable support:
    CAPISCIO_LOG_LEVEL=DEBUG
    CAPISCIO_VALIDATOR_VERSION=2.1.0
    CAPISCIO_VALIDATOR_PATH=/usr/local/bin/capiscio
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["capiscio.config.yaml", "capiscio.config.yml"]

DEFAULT_VALIDATOR_VERSION = "2.0.0"
DEFAULT_DOWNLOAD_BASE_URL = "https://github.com/capiscio/capiscio-core/releases/download"


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Dictionary of configuration values, empty if unreadable.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


class ActionSettings(BaseSettings):
    """Settings for the action runtime.

    Example:
        settings = ActionSettings(validator_version="2.1.0")
        print(settings.download_url_for("capiscio-linux-amd64"))
    """

    model_config = SettingsConfigDict(
        env_prefix="CAPISCIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool | None = Field(
        default=None,
        description="Render logs as JSON. None auto-detects from the terminal",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    validator_version: str = Field(
        default=DEFAULT_VALIDATOR_VERSION,
        min_length=1,
        description="capiscio validator release to install",
    )
    validator_path: str | None = Field(
        default=None,
        description="Use this validator binary instead of downloading one",
    )
    install_dir: str | None = Field(
        default=None,
        description=(
            "Directory for downloaded validators. Defaults to "
            "$RUNNER_TOOL_CACHE/capiscio, then ~/.capiscio/bin"
        ),
    )
    download_base_url: str = Field(
        default=DEFAULT_DOWNLOAD_BASE_URL,
        description="Base URL of validator release assets",
    )
    download_timeout: float = Field(
        default=60.0,
        ge=1,
        le=600,
        description="Validator download timeout in seconds",
    )
    process_timeout: int = Field(
        default=600,
        ge=1,
        le=3600,
        description="Wall-clock limit for one validator run in seconds (1-3600)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("validator_version")
    @classmethod
    def strip_version_prefix(cls, v: str) -> str:
        """Accept both '2.0.0' and 'v2.0.0'."""
        return v.strip().removeprefix("v")

    @field_validator("download_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so asset paths can be appended."""
        return v.rstrip("/")

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from capiscio.config.yaml under explicit values."""
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if config_path:
            file_config = _load_yaml_config(config_path)
            if file_config:
                logger.debug("Loaded configuration from %s", config_path)
                return {**file_config, **data}

        return data

    def resolve_install_dir(self, env: Mapping[str, str] | None = None) -> Path:
        """Return the directory validator binaries are installed into.

        Args:
            env: Environment mapping used to look up RUNNER_TOOL_CACHE.

        Returns:
            Install directory (not created).
        """
        if self.install_dir:
            return Path(self.install_dir).expanduser()

        tool_cache = (env or {}).get("RUNNER_TOOL_CACHE")
        if tool_cache:
            return Path(tool_cache) / "capiscio"

        return Path.home() / ".capiscio" / "bin"

    def download_url_for(self, asset_name: str) -> str:
        """Return the release download URL for a validator asset."""
        return f"{self.download_base_url}/v{self.validator_version}/{asset_name}"


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> ActionSettings:
    """Get settings instance.

    Args:
        config_file: Optional explicit path to configuration file.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured ActionSettings instance.

    Example:
        settings = get_settings(log_level="DEBUG")
        settings = get_settings(config_file=Path("ci/capiscio.yaml"))
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return ActionSettings(**merged)

    return ActionSettings(**overrides)
