"""Disk and volume parsing from property-list records.

Records come from diskutil (partition-table shape) and hdiutil (disk-image
shape). Every field is read on its own: a missing or mistyped key keeps the
field's default, so a partial record still yields a Disk or Volume and never
stops the rest of the scan.
"""
from pathlib import PurePosixPath
from typing import Any, Iterable, List, Optional

from macutils.core.logger import get_logger
from macutils.inventory.installers import InstallerFactory
from macutils.inventory.repository import ItemRepository
from macutils.models.disk import (
    BYTES_PER_GB,
    INVALID,
    Disk,
    DiskRef,
    MeasurementUnit,
    new_item_id,
    normalize_size,
    read_size,
    read_str,
)
from macutils.models.volume import Volume

logger = get_logger(__name__)

FAKE_DISK_IDENTIFIER = "FakeDisk"
FAKE_DISK_SIZE_BYTES = 500 * BYTES_PER_GB


def _last_path_component(path: str) -> str:
    return PurePosixPath(path).name or path


def _records(value: Any) -> List[dict]:
    if not isinstance(value, (list, tuple)):
        return []
    return [record for record in value if isinstance(record, dict)]


class DiskParser:
    """Turns raw disk and volume records into registered items."""

    def __init__(self, repository: Optional[ItemRepository], installers: InstallerFactory):
        self.repository = repository
        self.installers = installers

    # -----------------------------
    #  Disks
    # -----------------------------
    def parse_disk(self, record: Any) -> Disk:
        """Build a Disk and its volumes from a diskutil disk record."""
        disk_id = new_item_id()
        device_identifier = read_str(record, "DeviceIdentifier", INVALID)
        content = read_str(record, "Content", INVALID)
        size, unit = read_size(record) or (0.0, MeasurementUnit.GB)

        parent = DiskRef(
            id=disk_id,
            device_identifier=device_identifier,
            size=size,
            measurement_unit=unit,
        )

        # APFSVolumes wins over Partitions when a record has both
        raw_volumes: Any = None
        if isinstance(record, dict):
            if isinstance(record.get("APFSVolumes"), list):
                raw_volumes = record["APFSVolumes"]
            elif isinstance(record.get("Partitions"), list):
                raw_volumes = record["Partitions"]

        volumes = tuple(self.parse_volume(v, parent) for v in _records(raw_volumes))

        disk = Disk(
            id=disk_id,
            device_identifier=device_identifier,
            content=content,
            size=size,
            measurement_unit=unit,
            volumes=volumes,
        )
        self._register(disk)
        return disk

    def parse_disks(self, records: Iterable[Any]) -> List[Disk]:
        return [self.parse_disk(record) for record in records]

    def fake_disk(self, size_bytes: int = FAKE_DISK_SIZE_BYTES) -> Disk:
        """Placeholder disk with a single synthetic volume, for hosts with no usable disk."""
        disk_id = new_item_id()
        size, unit = normalize_size(size_bytes)
        parent = DiskRef(
            id=disk_id,
            device_identifier=FAKE_DISK_IDENTIFIER,
            size=size,
            measurement_unit=unit,
            is_fake=True,
        )
        disk = Disk(
            id=disk_id,
            device_identifier=FAKE_DISK_IDENTIFIER,
            content="FakeDisk_Null",
            size=size,
            measurement_unit=unit,
            volumes=(self.fake_volume(parent),),
            is_fake=True,
        )
        self._register(disk)
        return disk

    # -----------------------------
    #  Volumes
    # -----------------------------
    def parse_volume(self, record: Any, parent: DiskRef) -> Volume:
        """Volume from a diskutil partition or APFS volume record."""
        volume = Volume(parent_disk=parent)

        device_identifier = read_str(record, "DeviceIdentifier")
        if device_identifier is not None:
            volume.device_identifier = device_identifier

        disk_uuid = read_str(record, "DiskUUID")
        if disk_uuid is not None:
            volume.disk_uuid = disk_uuid

        mount_point = read_str(record, "MountPoint")
        if mount_point is not None:
            volume.mount_point = mount_point

        content = read_str(record, "Content")
        if content is not None:
            volume.content = content

        size = read_size(record)
        if size is not None:
            volume.size, volume.measurement_unit = size

        volume_name = read_str(record, "VolumeName")
        if volume_name is not None:
            volume.volume_name = volume_name

        volume_uuid = read_str(record, "VolumeUUID")
        if volume_uuid is not None:
            volume.volume_uuid = volume_uuid

        self._finish(volume)
        return volume

    def parse_image_volume(self, record: Any, parent: DiskRef) -> Volume:
        """Volume from an hdiutil system-entity record of a mounted disk image."""
        volume = Volume(parent_disk=parent)

        mount_point = read_str(record, "mount-point")
        if mount_point is not None:
            volume.mount_point = mount_point

        content = read_str(record, "content-hint")
        if content is not None:
            volume.content = content

        device_identifier = read_str(record, "dev-entry")
        if device_identifier is not None:
            volume.device_identifier = device_identifier

        volume_uuid = read_str(record, "unmapped-content-hint")
        if volume_uuid is not None:
            volume.volume_uuid = volume_uuid

        volume.volume_name = _last_path_component(volume.mount_point)
        volume.size = 0.0

        self._finish(volume)
        return volume

    def network_volume(self, mount_point: str, parent: DiskRef, content: str = "NFS") -> Volume:
        """Volume for a manually specified mount such as a network share."""
        volume = Volume(
            parent_disk=parent,
            mount_point=mount_point,
            content=content,
            volume_name=_last_path_component(mount_point),
        )
        if volume.is_valid:
            self._register(volume)
        return volume

    def fake_volume(self, parent: DiskRef) -> Volume:
        """Synthetic volume mirroring a fake disk's size."""
        volume = Volume(parent_disk=parent)
        if parent.is_fake:
            volume.mount_point = "/tmp"
            volume.volume_name = FAKE_DISK_IDENTIFIER
            volume.content = "FakeDisk_Null"
        else:
            logger.error(
                f"Synthetic volume requested for real disk {parent.device_identifier}; "
                "only fake disks take synthetic volumes"
            )

        volume.size = parent.size
        volume.measurement_unit = parent.measurement_unit
        if volume.is_valid:
            self._register(volume)
        return volume

    def apply_apfs_data(self, volume: Volume, records: Iterable[Any]) -> None:
        """Fold APFS metadata into volume, attaching or detaching its installer."""
        volume.update_with_apfs_data(records, self.installers)

    def _finish(self, volume: Volume) -> None:
        if not volume.is_valid:
            logger.debug(f"Skipping invalid volume {volume.volume_name} at {volume.mount_point}")
            return
        volume.check_if_contains_installer(self.installers)
        self._register(volume)

    def _register(self, item) -> None:
        if self.repository is not None:
            self.repository.add(item)
