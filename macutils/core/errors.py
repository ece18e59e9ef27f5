"""Error taxonomy for macutils.

Most bad input degrades an item instead of raising: missing fields take
sentinel defaults, invalid volumes are filtered, duplicates are dropped.
The exceptions below cover the boundary where macutils talks to the host.
"""


class MacUtilsError(Exception):
    """Base class for all macutils exceptions."""


class ScanError(MacUtilsError):
    """Raised when a collector command fails or returns an unreadable property list."""


class ConfigError(MacUtilsError):
    """Raised when a configuration file cannot be read or is malformed."""
