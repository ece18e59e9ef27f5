"""macOS installer version catalog."""
from enum import Enum
from typing import Dict, List, Optional


class Version(str, Enum):
    """Installer versions known to macutils, oldest first."""
    MAVERICKS = "10.9"
    EL_CAPITAN = "10.11"
    SIERRA = "10.12"
    HIGH_SIERRA = "10.13"
    MOJAVE = "10.14"


# Version number marking an installer whose version could not be resolved
VERSION_NOT_AVAILABLE = "0.0"

OLDEST_SUPPORTED = Version.EL_CAPITAN
NEWEST_SUPPORTED = Version.MOJAVE


class VersionCatalog:
    """Bidirectional mapping between version numbers and installer names.

    Lookups outside the table fall back to El Capitan, the oldest version
    the tool installs. Use lookup_version() when an unknown name must stay
    unknown.
    """

    _NAMES: Dict[Version, str] = {
        Version.MAVERICKS: "Install OS X Mavericks",
        Version.EL_CAPITAN: "Install OS X El Capitan",
        Version.SIERRA: "Install macOS Sierra",
        Version.HIGH_SIERRA: "Install macOS High Sierra",
        Version.MOJAVE: "Install macOS Mojave",
    }
    _VERSIONS: Dict[str, Version] = {name: version for version, name in _NAMES.items()}

    @classmethod
    def name_for_version(cls, version_number: str) -> str:
        try:
            return cls._NAMES[Version(version_number)]
        except ValueError:
            return cls._NAMES[OLDEST_SUPPORTED]

    @classmethod
    def version_for_name(cls, name: str) -> str:
        return cls._VERSIONS.get(name, OLDEST_SUPPORTED).value

    @classmethod
    def lookup_version(cls, name: str) -> Optional[str]:
        """Return the version number for name, or None when it is not catalogued."""
        version = cls._VERSIONS.get(name)
        return version.value if version else None

    @classmethod
    def names(cls) -> List[str]:
        """Installer names ordered oldest to newest."""
        return [cls._NAMES[version] for version in Version]


def version_key(version_number: str) -> tuple:
    """Sort key comparing dotted version numbers numerically."""
    parts = []
    for part in version_number.split("."):
        parts.append(int(part) if part.isdigit() else -1)
    return tuple(parts)
