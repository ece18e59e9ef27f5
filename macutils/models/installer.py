"""Installer models."""
import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from macutils.models.versions import VERSION_NOT_AVAILABLE

APP_LABEL_NOT_AVAILABLE = "Not Available"


@dataclass(frozen=True)
class IconImage:
    """Icon bytes loaded from an app bundle, or a named placeholder."""
    name: str
    data: bytes = b""
    path: Optional[Path] = None

    @property
    def is_placeholder(self) -> bool:
        return self.path is None


# Shown when the installer bundle has no readable icon
PROHIBITED_ICON = IconImage(name="NSProhibited")


@dataclass(eq=False)
class Installer:
    """A bootable OS installer found on a volume.

    The installer keeps the owning volume's id, name and mount point rather
    than the volume itself.
    """
    version_name: str
    volume_id: str
    volume_name: str
    mount_point: str
    version_number: str = VERSION_NOT_AVAILABLE
    app_label: str = APP_LABEL_NOT_AVAILABLE
    icon: Optional[IconImage] = None
    installable_versions: Tuple[str, ...] = field(default_factory=tuple)
    is_selected: bool = False

    @property
    def id(self) -> str:
        # Two installers with the same name share an id
        return hashlib.md5(self.version_name.encode("utf-8")).hexdigest()

    @property
    def is_valid(self) -> bool:
        return (
            self.app_label != APP_LABEL_NOT_AVAILABLE
            and self.version_number != VERSION_NOT_AVAILABLE
        )

    @property
    def can_install(self) -> bool:
        """True if the host running the scan may install this version."""
        return self.version_number in self.installable_versions

    @property
    def app_path(self) -> Path:
        return Path(self.mount_point) / f"{self.version_name}.app"

    @property
    def description(self) -> str:
        has_icon = "yes" if self.icon and not self.icon.is_placeholder else "no"
        return (
            f"Installer - {self.version_number} - {self.version_name} - "
            f"Icon: {has_icon} - Valid: {self.is_valid}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Installer):
            return NotImplemented
        return (
            self.version_number == other.version_number
            and self.version_name == other.version_name
        )

    def __hash__(self) -> int:
        return hash((self.version_number, self.version_name))
