"""Volume model and installer detection."""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Optional

from macutils.core.logger import get_logger
from macutils.models.disk import (
    INVALID,
    DiskRef,
    MeasurementUnit,
    new_item_id,
    read_str,
    size_is_installable,
)

if TYPE_CHECKING:
    from macutils.inventory.installers import InstallerFactory
    from macutils.models.installer import Installer

logger = get_logger(__name__)

# Names, mount points and content tags that never describe a usable volume
EXCLUDED_PROPERTY_VALUES = frozenset({"EFI", INVALID, "VM", "Apple_APFS"})

INSTALLER_NAME_MARKERS = ("Install OS X", "Install macOS")


def looks_like_installer(volume_name: str) -> bool:
    """True if the volume name carries an OS installer marker."""
    return any(marker in volume_name for marker in INSTALLER_NAME_MARKERS)


@dataclass(eq=False)
class Volume:
    """A mountable partition or APFS volume on a disk."""
    parent_disk: DiskRef
    id: str = field(default_factory=new_item_id)
    device_identifier: str = ""
    disk_uuid: str = ""
    volume_uuid: str = ""
    mount_point: str = INVALID
    volume_name: str = INVALID
    content: str = "Apple_HFS"
    size: float = 0.0
    measurement_unit: MeasurementUnit = MeasurementUnit.GB
    contains_installer: bool = False
    installer: Optional["Installer"] = None

    @property
    def is_valid(self) -> bool:
        return (
            self.volume_name not in EXCLUDED_PROPERTY_VALUES
            and self.mount_point not in EXCLUDED_PROPERTY_VALUES
        )

    @property
    def is_installable(self) -> bool:
        if self.parent_disk.is_fake:
            return True
        return (
            size_is_installable(self.size, self.measurement_unit)
            and self.content not in EXCLUDED_PROPERTY_VALUES
        )

    def check_if_contains_installer(self, factory: "InstallerFactory") -> None:
        """Attach an installer when the name matches, detach it when it stops matching.

        A detached installer is not destroyed; whoever still holds it (the
        repository, for one) keeps it.
        """
        matches = looks_like_installer(self.volume_name)

        if matches and not self.contains_installer:
            candidate = factory.build(self)
            if candidate.is_valid:
                self.installer = candidate
                self.contains_installer = True
                logger.debug(f"Volume {self.volume_name} holds {candidate.version_name}")
        elif self.contains_installer and not matches:
            logger.debug(f"Volume {self.volume_name} no longer holds an installer")
            self.contains_installer = False

    def update_with_apfs_data(self, records: Iterable[Any],
                              factory: "InstallerFactory") -> None:
        """Fold APFS metadata records into this volume and re-check for an installer."""
        for record in records:
            volume_uuid = read_str(record, "APFSVolumeUUID")
            if volume_uuid is not None:
                self.volume_uuid = volume_uuid

            disk_uuid = read_str(record, "DiskUUID")
            if disk_uuid is not None:
                self.disk_uuid = disk_uuid

            if self.contains_installer and isinstance(record, dict):
                capacity = record.get("CapacityInUse")
                if isinstance(capacity, (int, float)) and not isinstance(capacity, bool):
                    self.size = float(capacity)

            self.check_if_contains_installer(factory)

    @property
    def description(self) -> str:
        if self.parent_disk.is_fake:
            return f"FakeVolume\n\tFakeDisk: {self.parent_disk}\n"

        installer = self.installer.description if self.installer else "None"
        return (
            f"Volume:\n"
            f"\tDevice Identifier: {self.device_identifier}\n"
            f"\tDisk UUID: {self.disk_uuid}\n"
            f"\tInstallable: {self.is_installable}\n"
            f"\tMount Point: {self.mount_point}\n"
            f"\tVolume Name: {self.volume_name}\n"
            f"\tVolume UUID: {self.volume_uuid}\n"
            f"\tInstaller: {installer}\n"
            f"\tSize: {self.size} {self.measurement_unit.value}\n"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Volume):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
