"""
Configuration for the artifact publisher.

Values are looked up by name with the following precedence:

1. environment variables
2. ``.publisher.env`` in the project directory (current directory by default)
3. ``.publisher.env`` in the user's home directory

Both files use dotenv syntax and are parsed with python-dotenv. Nothing is
written back into ``os.environ``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values

from artifact_publisher.utils.logging import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_FORMAT,
    get_logger,
)

logger = get_logger(__name__)

CONFIG_FILE_NAME = ".publisher.env"

# Values of DRY_RUN that mean "not a dry run"
_FALSE_VALUES = ("", "false", "0", "no")


class ConfigSource:
    """
    Named configuration values: environment > project file > home file.

    Example:
        >>> source = ConfigSource()
        >>> source.read("GCS_BUCKET")
        'my-release-bucket'
    """

    def __init__(
        self,
        project_dir: Optional[Union[str, Path]] = None,
        home_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir else Path.home()
        self._project_values: Optional[Dict[str, Optional[str]]] = None
        self._home_values: Optional[Dict[str, Optional[str]]] = None

    @staticmethod
    def _load_file(directory: Path) -> Dict[str, Optional[str]]:
        config_path = directory / CONFIG_FILE_NAME
        if not config_path.is_file():
            return {}
        logger.debug(f"Loading configuration file: {config_path}")
        return dict(dotenv_values(config_path))

    @property
    def project_values(self) -> Dict[str, Optional[str]]:
        if self._project_values is None:
            self._project_values = self._load_file(self.project_dir)
        return self._project_values

    @property
    def home_values(self) -> Dict[str, Optional[str]]:
        if self._home_values is None:
            self._home_values = self._load_file(self.home_dir)
        return self._home_values

    def read(self, name: str) -> Optional[str]:
        """
        Look up a configuration value.

        Args:
            name: Variable name

        Returns:
            The first non-empty value found, or None
        """
        for values in (os.environ, self.project_values, self.home_values):
            value = values.get(name)
            if value:
                return value
        return None


def is_dry_run() -> bool:
    """
    Whether the process runs in dry-run mode.

    Reads DRY_RUN on every call. Anything except an unset/empty value,
    "false", "0" or "no" enables dry-run.
    """
    return os.getenv("DRY_RUN", "").strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class ConfigVar:
    """
    Reference to a named configuration value.

    Attributes:
        name: Current variable name
        legacy_name: Older name still honoured when ``name`` is unset
    """

    name: str
    legacy_name: Optional[str] = None

    def read(self, source: ConfigSource) -> Optional[str]:
        value = source.read(self.name)
        if value or not self.legacy_name:
            return value

        value = source.read(self.legacy_name)
        if value:
            logger.warning(
                f"Usage of `{self.legacy_name}` is deprecated, "
                f"please use `{self.name}` instead"
            )
        return value


@dataclass
class PublisherConfig:
    """Publisher configuration."""

    # Google Cloud Storage
    bucket_name: str

    # Where to look for service account credentials
    credentials_json_var: ConfigVar = field(
        default_factory=lambda: ConfigVar(
            "GCS_CREDENTIALS_JSON", legacy_name="GOOGLE_CREDENTIALS_JSON"
        )
    )
    credentials_path_var: ConfigVar = field(
        default_factory=lambda: ConfigVar(
            "GCS_CREDENTIALS_PATH", legacy_name="GOOGLE_APPLICATION_CREDENTIALS"
        )
    )

    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_OUTPUT_FORMAT
    metrics_enabled: bool = True

    @classmethod
    def from_env(cls, source: Optional[ConfigSource] = None) -> "PublisherConfig":
        """
        Load configuration through a ConfigSource.

        Args:
            source: Configuration source (default: environment and dotenv files)

        Returns:
            PublisherConfig instance with loaded values

        Raises:
            ValueError: If GCS_BUCKET is not configured
        """
        source = source or ConfigSource()

        bucket_name = source.read("GCS_BUCKET")
        if not bucket_name:
            raise ValueError(
                "GCS_BUCKET is required. "
                f"Export it or set it in {CONFIG_FILE_NAME}."
            )

        return cls(
            bucket_name=bucket_name,
            log_level=get_log_level(source),
            log_format=get_log_format(source),
            metrics_enabled=get_metrics_enabled(source),
        )


# Global config instance (lazy-loaded)
_config: Optional[PublisherConfig] = None


def get_config() -> PublisherConfig:
    """
    Get or create the publisher configuration singleton.

    Example:
        >>> config = get_config()
        >>> print(config.bucket_name)
        my-release-bucket
    """
    global _config
    if _config is None:
        _config = PublisherConfig.from_env()
    return _config


def get_log_level(source: Optional[ConfigSource] = None) -> str:
    """Log level from PUBLISHER_LOG_LEVEL, honouring file precedence."""
    source = source or ConfigSource()
    return source.read("PUBLISHER_LOG_LEVEL") or DEFAULT_LOG_LEVEL


def get_log_format(source: Optional[ConfigSource] = None) -> str:
    """Log output format from LOG_FORMAT ("text" or "json")."""
    source = source or ConfigSource()
    return (source.read("LOG_FORMAT") or DEFAULT_OUTPUT_FORMAT).lower()


def get_metrics_enabled(source: Optional[ConfigSource] = None) -> bool:
    """Whether METRICS_ENABLED leaves metrics on (anything but "true" disables)."""
    source = source or ConfigSource()
    return (source.read("METRICS_ENABLED") or "true").lower() == "true"
