"""Disk, disk-image and network-share scanner."""
import plistlib
import subprocess
from typing import Any, Callable, Dict, List, Optional, Set

import psutil

from macutils.compat.model_year import ModelCompatibilityEngine
from macutils.core.config import MacUtilsConfig, get_config
from macutils.core.errors import ScanError
from macutils.core.logger import get_logger
from macutils.discovery.hwdetect import SystemDetector
from macutils.inventory.installers import InstallerFactory
from macutils.inventory.parser import DiskParser
from macutils.inventory.repository import ItemRepository
from macutils.models.disk import BYTES_PER_GB, INVALID, Disk, DiskRef, new_item_id
from macutils.models.volume import Volume

logger = get_logger(__name__)

NETWORK_FILESYSTEMS = {"nfs": "NFS", "smbfs": "SMB", "afpfs": "AFP", "webdav": "WebDAV"}

PlistRunner = Callable[[List[str]], bytes]


class DiskScanner:
    """Runs the macOS storage tools and feeds their records to a DiskParser."""

    def __init__(
        self,
        parser: DiskParser,
        run_cmd: Optional[PlistRunner] = None,
        mock: bool = False,
        timeout: int = 30,
        strict: bool = False,
    ):
        self.parser = parser
        self.run_cmd = run_cmd or self._run
        self.mock = mock
        self.timeout = timeout
        self.strict = strict

    def scan(self) -> List[Disk]:
        """Discover disks, mounted images and APFS metadata.

        Falls back to a fake disk when nothing real turns up.
        """
        disks = self.discover_disks()
        seen = {disk.device_identifier for disk in disks}
        disks.extend(self.discover_disk_images(seen))

        if disks:
            self.apply_apfs_metadata(disks)
        else:
            logger.warning("No disks discovered; using a placeholder disk")
            disks.append(self.parser.fake_disk())

        return disks

    def discover_disks(self) -> List[Disk]:
        """Parse every disk reported by `diskutil list -plist`."""
        if self.mock:
            return self.parser.parse_disks(_mock_disk_records())

        data = self._load_plist(["diskutil", "list", "-plist"])
        records = data.get("AllDisksAndPartitions", []) if isinstance(data, dict) else []
        return self.parser.parse_disks(records)

    def discover_disk_images(self, seen: Optional[Set[str]] = None) -> List[Disk]:
        """Parse mounted disk images from `hdiutil info -plist`.

        Images whose device already came through diskutil are skipped.
        """
        seen = seen or set()
        if self.mock:
            images = _mock_image_records()
        else:
            data = self._load_plist(["hdiutil", "info", "-plist"])
            images = data.get("images", []) if isinstance(data, dict) else []

        disks = []
        for image in images:
            if not isinstance(image, dict):
                continue
            entities = [e for e in image.get("system-entities", []) if isinstance(e, dict)]
            device = _whole_disk_identifier(entities)
            if device in seen:
                continue

            disk_id = new_item_id()
            parent = DiskRef(id=disk_id, device_identifier=device)
            volumes = tuple(
                self.parser.parse_image_volume(entity, parent)
                for entity in entities
                if "mount-point" in entity
            )
            disk = Disk(
                id=disk_id,
                device_identifier=device,
                content=str(image.get("image-type", INVALID)),
                volumes=volumes,
            )
            if self.parser.repository is not None:
                self.parser.repository.add(disk)
            disks.append(disk)
        return disks

    def apply_apfs_metadata(self, disks: List[Disk]) -> None:
        """Match `diskutil apfs list -plist` volumes to scanned volumes by device."""
        if self.mock:
            containers = _mock_apfs_containers()
        else:
            data = self._load_plist(["diskutil", "apfs", "list", "-plist"])
            containers = data.get("Containers", []) if isinstance(data, dict) else []

        by_device: Dict[str, Volume] = {
            volume.device_identifier: volume
            for disk in disks
            for volume in disk.volumes
            if volume.device_identifier
        }

        for container in containers:
            if not isinstance(container, dict):
                continue
            for record in container.get("Volumes", []):
                if not isinstance(record, dict):
                    continue
                volume = by_device.get(record.get("DeviceIdentifier"))
                if volume is not None:
                    self.parser.apply_apfs_data(volume, [record])

    def discover_network_volumes(self) -> List[Volume]:
        """Register a volume for each mounted network share."""
        volumes = []
        try:
            partitions = psutil.disk_partitions(all=True)
        except OSError as e:
            logger.warning(f"Could not list mounted filesystems: {e}")
            return volumes

        for partition in partitions:
            content = NETWORK_FILESYSTEMS.get(partition.fstype)
            if content is None:
                continue
            parent = DiskRef(id=new_item_id(), device_identifier=partition.device)
            volumes.append(self.parser.network_volume(partition.mountpoint, parent, content))
        return volumes

    # -----------------------------
    #  Command helpers
    # -----------------------------
    def _load_plist(self, args: List[str]) -> Any:
        """Run a plist-emitting command; an empty dict stands in for any failure."""
        try:
            return plistlib.loads(self.run_cmd(args))
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            message = f"{' '.join(args)} failed: {e}"
        except (plistlib.InvalidFileException, ValueError) as e:
            message = f"{' '.join(args)} returned an unreadable property list: {e}"

        if self.strict:
            raise ScanError(message)
        logger.warning(message)
        return {}

    def _run(self, args: List[str]) -> bytes:
        result = subprocess.run(args, capture_output=True, check=True, timeout=self.timeout)
        return result.stdout


def _whole_disk_identifier(entities: List[dict]) -> str:
    """The /dev entry of the image's unmounted whole-disk entity, without /dev/."""
    for entity in entities:
        if "mount-point" not in entity and isinstance(entity.get("dev-entry"), str):
            return entity["dev-entry"].replace("/dev/", "", 1)
    return INVALID


def build_scanner(repository: ItemRepository, config: Optional[MacUtilsConfig] = None,
                  detector: Optional[SystemDetector] = None) -> DiskScanner:
    """Wire a DiskScanner to repository for the current host."""
    config = config or get_config()
    detector = detector or SystemDetector(config=config)
    engine = ModelCompatibilityEngine(detector.detect_model_identifier())
    factory = InstallerFactory(repository, engine, strict_versions=config.strict_installer_versions)
    return DiskScanner(
        DiskParser(repository, factory),
        mock=config.mock,
        timeout=config.scan_timeout,
        strict=config.strict_scan,
    )


def start_discovery(repository: ItemRepository, config: Optional[MacUtilsConfig] = None):
    """Kick off disk and application discovery in the background."""
    from macutils.discovery.applications import ApplicationScanner

    config = config or get_config()

    def scan_disks(repo: ItemRepository) -> List[Disk]:
        scanner = build_scanner(repo, config)
        disks = scanner.scan()
        if not config.mock:
            scanner.discover_network_volumes()
        return disks

    def scan_applications(repo: ItemRepository):
        return ApplicationScanner(repo).scan()

    return repository.populate_async(scan_disks, scan_applications)


# -----------------------------
#  Canned records for mock mode
# -----------------------------
def _mock_disk_records() -> List[Dict[str, Any]]:
    return [
        {
            "DeviceIdentifier": "disk0",
            "Content": "GUID_partition_scheme",
            "Size": 500277790720,
            "Partitions": [
                {
                    "DeviceIdentifier": "disk0s1",
                    "Content": "EFI",
                    "VolumeName": "EFI",
                    "Size": 209715200,
                },
                {
                    "DeviceIdentifier": "disk0s2",
                    "Content": "Apple_APFS",
                    "Size": 500068036608,
                },
            ],
        },
        {
            "DeviceIdentifier": "disk1",
            "Content": "EF57347C-0000-11AA-AA11-00306543ECAC",
            "Size": 500068036608,
            "APFSVolumes": [
                {
                    "DeviceIdentifier": "disk1s1",
                    "DiskUUID": "1A2B3C4D-0000-0000-0000-000000000001",
                    "MountPoint": "/",
                    "VolumeName": "Macintosh HD",
                    "VolumeUUID": "1A2B3C4D-0000-0000-0000-0000000000A1",
                    "Size": 500068036608,
                },
            ],
        },
        {
            "DeviceIdentifier": "disk2",
            "Content": "GUID_partition_scheme",
            "Size": 16 * BYTES_PER_GB,
            "Partitions": [
                {
                    "DeviceIdentifier": "disk2s2",
                    "Content": "Apple_HFS",
                    "MountPoint": "/Volumes/Install macOS Mojave",
                    "VolumeName": "Install macOS Mojave",
                    "VolumeUUID": "5E6F7A8B-0000-0000-0000-0000000000B2",
                    "Size": 15 * BYTES_PER_GB,
                },
            ],
        },
    ]


def _mock_image_records() -> List[Dict[str, Any]]:
    return [
        {
            "image-path": "/Users/Shared/HighSierra.dmg",
            "image-type": "read-only disk image",
            "system-entities": [
                {"dev-entry": "/dev/disk3", "content-hint": "GUID_partition_scheme"},
                {
                    "dev-entry": "/dev/disk3s1",
                    "content-hint": "Apple_HFS",
                    "mount-point": "/Volumes/Install macOS High Sierra",
                    "unmapped-content-hint": "48465300-0000-11AA-AA11-00306543ECAC",
                },
            ],
        },
    ]


def _mock_apfs_containers() -> List[Dict[str, Any]]:
    return [
        {
            "ContainerReference": "disk1",
            "Volumes": [
                {
                    "DeviceIdentifier": "disk1s1",
                    "APFSVolumeUUID": "1A2B3C4D-0000-0000-0000-0000000000A1",
                    "CapacityInUse": 182536110080,
                    "Name": "Macintosh HD",
                },
            ],
        },
    ]
