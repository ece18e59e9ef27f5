"""macutils runtime configuration and settings."""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from macutils.core.errors import ConfigError

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class MacUtilsConfig:
    """Runtime configuration for macutils operations.

    Attributes:
        model_identifier: Hardware model override (default: read from sysctl)
        scan_timeout: Timeout in seconds for each collector command (default: 30)
        strict_installer_versions: Treat unknown installer names as invalid (default: False)
        sort_installers_numerically: Sort installers by dotted version instead of text (default: False)
        mock: Use canned disk records instead of running diskutil (default: False)
        strict_scan: Raise ScanError when a collector command fails (default: False)
    """

    model_identifier: Optional[str] = None
    scan_timeout: int = 30
    strict_installer_versions: bool = False
    sort_installers_numerically: bool = False
    mock: bool = False
    strict_scan: bool = False

    @classmethod
    def from_env(cls) -> "MacUtilsConfig":
        """Create config from environment variables.

        Environment variables:
            MU_MODEL_IDENTIFIER: Hardware model override, e.g. MacBookPro15,1
            MU_SCAN_TIMEOUT: Collector command timeout in seconds
            MU_STRICT_INSTALLER_VERSIONS: 1 to reject unknown installer names
            MU_SORT_INSTALLERS_NUMERICALLY: 1 to sort installers by dotted version
            MU_MOCK: 1 to use canned disk records
            MU_STRICT_SCAN: 1 to fail the scan on collector errors

        Returns:
            MacUtilsConfig instance with values from environment or defaults
        """
        return cls(
            model_identifier=os.getenv("MU_MODEL_IDENTIFIER") or None,
            scan_timeout=int(os.getenv("MU_SCAN_TIMEOUT", cls.scan_timeout)),
            strict_installer_versions=_env_flag(
                "MU_STRICT_INSTALLER_VERSIONS", cls.strict_installer_versions
            ),
            sort_installers_numerically=_env_flag(
                "MU_SORT_INSTALLERS_NUMERICALLY", cls.sort_installers_numerically
            ),
            mock=_env_flag("MU_MOCK", cls.mock),
            strict_scan=_env_flag("MU_STRICT_SCAN", cls.strict_scan),
        )

    @classmethod
    def from_file(cls, path: Path) -> "MacUtilsConfig":
        """Load config from a YAML file.

        Keys not present in the file keep their environment/default values.
        Unknown keys are rejected so typos do not pass silently.

        Raises:
            ConfigError: If the file is missing, not YAML, or has unknown keys
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

        config = cls.from_env()
        for key, value in data.items():
            setattr(config, key, value)
        return config


# Global config instance (can be overridden)
_config: Optional[MacUtilsConfig] = None


def get_config() -> MacUtilsConfig:
    """Get the global macutils configuration.

    Returns:
        MacUtilsConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = MacUtilsConfig.from_env()
    return _config


def set_config(config: Optional[MacUtilsConfig]):
    """Set the global macutils configuration.

    Args:
        config: MacUtilsConfig instance to use globally, or None to reset
    """
    global _config
    _config = config
