"""Tests for disk and volume record parsing."""
from macutils.inventory.parser import DiskParser
from macutils.models.disk import BYTES_PER_GB, DiskRef, MeasurementUnit
from macutils.models.volume import EXCLUDED_PROPERTY_VALUES


def _disk_record(**overrides):
    record = {
        "DeviceIdentifier": "disk0",
        "Content": "GUID_partition_scheme",
        "Size": 500 * BYTES_PER_GB,
        "Partitions": [
            {"DeviceIdentifier": "disk0s1", "VolumeName": "EFI", "Content": "EFI", "Size": 209715200},
            {
                "DeviceIdentifier": "disk0s2",
                "VolumeName": "Macintosh HD",
                "MountPoint": "/",
                "Content": "Apple_HFS",
                "Size": 499 * BYTES_PER_GB,
            },
        ],
    }
    record.update(overrides)
    return record


class TestParseDisk:
    """diskutil disk records."""

    def test_fields_and_volumes(self, parser):
        """Disk fields and child volumes come from the record."""
        disk = parser.parse_disk(_disk_record())

        assert disk.device_identifier == "disk0"
        assert disk.content == "GUID_partition_scheme"
        assert disk.size == 500.0
        assert disk.measurement_unit == MeasurementUnit.GB
        assert [v.device_identifier for v in disk.volumes] == ["disk0s1", "disk0s2"]

    def test_volumes_point_back_at_disk(self, parser):
        """Each volume's DiskRef names its disk."""
        disk = parser.parse_disk(_disk_record())
        for volume in disk.volumes:
            assert volume.parent_disk.id == disk.id
            assert volume.parent_disk.device_identifier == "disk0"

    def test_registers_disk_and_valid_volumes_only(self, parser, repository):
        """The EFI partition is parsed but not registered."""
        parser.parse_disk(_disk_record())

        assert [d.device_identifier for d in repository.get_disks()] == ["disk0"]
        assert [v.volume_name for v in repository.get_volumes()] == ["Macintosh HD"]

    def test_empty_record_yields_sentinel_disk(self, parser, repository):
        """An empty record gives an all-sentinel disk rather than an error."""
        disk = parser.parse_disk({})

        assert disk.device_identifier == "Invalid"
        assert disk.content == "Invalid"
        assert disk.size == 0.0
        assert disk.volumes == ()
        assert repository.get_disks() == [disk]

    def test_non_mapping_record_yields_sentinel_disk(self, parser):
        """A non-dict record gives a sentinel disk."""
        disk = parser.parse_disk(["not", "a", "dict"])
        assert disk.device_identifier == "Invalid"

    def test_wrong_field_types_fall_back(self, parser):
        """Mistyped fields keep their defaults."""
        disk = parser.parse_disk({"DeviceIdentifier": 7, "Content": None, "Size": "big", "Partitions": "x"})

        assert disk.device_identifier == "Invalid"
        assert disk.content == "Invalid"
        assert disk.size == 0.0
        assert disk.volumes == ()

    def test_negative_size_keeps_default(self, parser):
        """A negative Size leaves the disk at 0 GB."""
        disk = parser.parse_disk(_disk_record(Size=-5 * BYTES_PER_GB, Partitions=[]))
        assert disk.size == 0.0
        assert disk.measurement_unit == MeasurementUnit.GB

    def test_apfs_volumes_take_precedence(self, parser):
        """APFSVolumes wins over Partitions."""
        record = _disk_record(APFSVolumes=[
            {"DeviceIdentifier": "disk1s1", "VolumeName": "Data", "MountPoint": "/System/Volumes/Data"},
        ])
        disk = parser.parse_disk(record)
        assert [v.device_identifier for v in disk.volumes] == ["disk1s1"]

    def test_terabyte_disk(self, parser):
        """Disks past 1000 GB are reported in TB."""
        disk = parser.parse_disk(_disk_record(Size=2000 * BYTES_PER_GB, Partitions=[]))
        assert disk.measurement_unit == MeasurementUnit.TB
        assert disk.size == 2.0
        assert disk.is_installable is True

    def test_each_scan_gets_new_identity(self, parser, repository):
        """Parsing the same record twice yields two disks."""
        first = parser.parse_disk(_disk_record(Partitions=[]))
        second = parser.parse_disk(_disk_record(Partitions=[]))

        assert first.id != second.id
        assert len(repository.get_disks()) == 2

    def test_parse_disks(self, parser):
        """parse_disks keeps record order."""
        disks = parser.parse_disks([_disk_record(), _disk_record(DeviceIdentifier="disk1")])
        assert [d.device_identifier for d in disks] == ["disk0", "disk1"]

    def test_without_repository(self, installer_factory):
        """The parser works without a repository."""
        disk = DiskParser(None, installer_factory).parse_disk(_disk_record())
        assert len(disk.volumes) == 2


class TestParseVolume:
    """Partition-table volume records."""

    def test_all_fields(self, parser, parent_disk, installer_partition):
        """Every partition field is copied."""
        volume = parser.parse_volume(installer_partition, parent_disk)

        assert volume.device_identifier == "disk2s2"
        assert volume.disk_uuid == "D1SK-UUID"
        assert volume.volume_uuid == "V0LUME-UUID"
        assert volume.mount_point == "/Volumes/Install macOS Mojave"
        assert volume.volume_name == "Install macOS Mojave"
        assert volume.content == "Apple_HFS"
        assert volume.size == 15.0

    def test_defaults(self, parser, parent_disk):
        """An empty record gives an invalid volume with defaults."""
        volume = parser.parse_volume({}, parent_disk)

        assert volume.mount_point == "Invalid"
        assert volume.volume_name == "Invalid"
        assert volume.content == "Apple_HFS"
        assert volume.device_identifier == ""
        assert volume.is_valid is False

    def test_negative_size_keeps_default(self, parser, parent_disk):
        """A negative Size leaves the volume at 0 GB."""
        volume = parser.parse_volume({"VolumeName": "Data", "MountPoint": "/", "Size": -1}, parent_disk)
        assert volume.size == 0.0

    def test_invalid_volume_not_registered(self, parser, parent_disk, repository):
        """Excluded names and mount points never reach the repository."""
        parser.parse_volume({"VolumeName": "EFI", "MountPoint": "/Volumes/EFI"}, parent_disk)
        parser.parse_volume({"VolumeName": "Data", "MountPoint": "VM"}, parent_disk)
        assert repository.get_volumes() == []

    def test_installer_volume_gets_installer(self, parser, parent_disk, installer_partition, repository):
        """An installer partition is registered with its installer."""
        volume = parser.parse_volume(installer_partition, parent_disk)

        assert volume.contains_installer is True
        assert volume.installer.version_number == "10.14"
        assert repository.get_installers() == [volume.installer]
        assert repository.get_volumes() == [volume]


class TestParseImageVolume:
    """hdiutil disk-image records."""

    def test_fields(self, parser, parent_disk):
        """Image fields map onto the volume, name from the mount point."""
        volume = parser.parse_image_volume({
            "mount-point": "/Volumes/Install macOS High Sierra",
            "content-hint": "Apple_HFS",
            "dev-entry": "/dev/disk3s1",
            "unmapped-content-hint": "48465300-0000-11AA-AA11-00306543ECAC",
        }, parent_disk)

        assert volume.volume_name == "Install macOS High Sierra"
        assert volume.device_identifier == "/dev/disk3s1"
        assert volume.volume_uuid == "48465300-0000-11AA-AA11-00306543ECAC"
        assert volume.size == 0.0
        assert volume.installer.version_number == "10.13"

    def test_duplicate_mount_suffix(self, parser, parent_disk, repository):
        """A second mount of the same image (" 1" suffix) still resolves its version."""
        volume = parser.parse_image_volume({
            "mount-point": "/Volumes/Install macOS Mojave 1",
            "dev-entry": "/dev/disk5s1",
        }, parent_disk)

        assert volume.volume_name == "Install macOS Mojave 1"
        assert volume.installer.version_name == "Install macOS Mojave"
        assert volume.installer.version_number == "10.14"
        assert [i.version_number for i in repository.get_installers()] == ["10.14"]

    def test_missing_mount_point_is_invalid(self, parser, parent_disk, repository):
        """Without a mount point the image volume is not registered."""
        volume = parser.parse_image_volume({"dev-entry": "/dev/disk3"}, parent_disk)
        assert volume.is_valid is False
        assert repository.get_volumes() == []


class TestNetworkAndFakeVolumes:
    """Manual mounts and placeholder volumes."""

    def test_network_volume(self, parser, parent_disk, repository):
        """A share mount is registered with NFS content by default."""
        volume = parser.network_volume("/Volumes/Installers", parent_disk)

        assert volume.volume_name == "Installers"
        assert volume.content == "NFS"
        assert repository.get_volumes() == [volume]

    def test_network_volume_custom_content(self, parser, parent_disk):
        """The content tag can be overridden."""
        volume = parser.network_volume("/Volumes/share", parent_disk, content="SMB")
        assert volume.content == "SMB"

    def test_network_volume_never_checks_for_installer(self, parser, parent_disk, repository):
        """Share mounts skip installer detection."""
        volume = parser.network_volume("/Volumes/Install macOS Mojave", parent_disk)
        assert volume.contains_installer is False
        assert repository.get_installers() == []

    def test_fake_disk(self, parser, repository):
        """The placeholder disk carries one /tmp volume of its own size."""
        disk = parser.fake_disk()

        assert disk.is_fake is True
        assert len(disk.volumes) == 1
        volume = disk.volumes[0]
        assert volume.volume_name == "FakeDisk"
        assert volume.mount_point == "/tmp"
        assert volume.content == "FakeDisk_Null"
        assert volume.size == disk.size
        assert volume.measurement_unit == disk.measurement_unit
        assert volume.is_installable is True
        assert repository.get_disks() == [disk]
        assert repository.get_volumes() == [volume]

    def test_fake_volume_for_real_disk_not_registered(self, parser, repository):
        """A synthetic volume on a real disk is invalid and stays out of the repository."""
        parent = DiskRef(id="real", device_identifier="disk0", size=250.0)
        volume = parser.fake_volume(parent)

        assert volume.volume_name == "Invalid"
        assert volume.size == 250.0
        assert volume.is_valid is False
        assert repository.get_volumes() == []

    def test_registered_volumes_never_excluded(self, parser, parent_disk, repository):
        """No registered volume carries an excluded name."""
        parser.parse_disk(_disk_record())
        parser.parse_volume({}, parent_disk)
        parser.fake_volume(DiskRef(id="real", device_identifier="disk0"))
        parser.fake_disk()

        names = [v.volume_name for v in repository.get_volumes()]
        assert names == ["FakeDisk", "Macintosh HD"]
        assert not set(names) & EXCLUDED_PROPERTY_VALUES
