"""Builds Installer items from volumes that carry installer media."""
import plistlib
import re
from pathlib import Path
from typing import Optional, Sequence

from macutils.compat.model_year import ModelCompatibilityEngine
from macutils.core.config import get_config
from macutils.core.logger import get_logger
from macutils.inventory.repository import ItemRepository
from macutils.models.installer import PROHIBITED_ICON, IconImage, Installer
from macutils.models.versions import VERSION_NOT_AVAILABLE, VersionCatalog
from macutils.models.volume import Volume

logger = get_logger(__name__)

# "Install macOS Mojave.2" and "Install macOS Mojave 1" -> "Install macOS Mojave"
_NUMERIC_SUFFIX = re.compile(r"[ .][0-9].*")


def parse_version_name(volume_name: str) -> str:
    """Installer name without the ".2" or " 1" style suffix of a duplicate volume name."""
    return _NUMERIC_SUFFIX.sub("", volume_name, count=1)


def load_app_icon(mount_point: str, version_name: str) -> IconImage:
    """Read the bundle icon of <mount_point>/<version_name>.app.

    Any missing or unreadable piece yields PROHIBITED_ICON.
    """
    contents = Path(mount_point) / f"{version_name}.app" / "Contents"

    try:
        with open(contents / "Info.plist", "rb") as f:
            info = plistlib.load(f)
    except (OSError, plistlib.InvalidFileException, ValueError) as e:
        logger.debug(f"No readable Info.plist for {version_name}: {e}")
        return PROHIBITED_ICON

    image_name = info.get("CFBundleIconFile") if isinstance(info, dict) else None
    if not isinstance(image_name, str) or not image_name:
        return PROHIBITED_ICON

    if ".icns" not in image_name:
        image_name += ".icns"

    icon_path = contents / "Resources" / image_name
    try:
        data = icon_path.read_bytes()
    except OSError as e:
        logger.debug(f"Icon {icon_path} unreadable: {e}")
        return PROHIBITED_ICON

    return IconImage(name=image_name, data=data, path=icon_path)


class InstallerFactory:
    """Creates installers for volumes and registers them.

    Eligibility is judged against the host's compatibility engine, not the
    machine the installer volume was made on.
    """

    def __init__(
        self,
        repository: Optional[ItemRepository],
        engine: ModelCompatibilityEngine,
        strict_versions: Optional[bool] = None,
    ):
        self.repository = repository
        self.engine = engine
        if strict_versions is None:
            strict_versions = get_config().strict_installer_versions
        self.strict_versions = strict_versions

    @property
    def installable_versions(self) -> Sequence[str]:
        return self.engine.determine_installable_versions()

    def build(self, volume: Volume) -> Installer:
        """Create an Installer for volume and add it to the repository.

        The installer is registered even when it turns out invalid.
        """
        version_name = parse_version_name(volume.volume_name)

        if self.strict_versions:
            version_number = VersionCatalog.lookup_version(version_name) or VERSION_NOT_AVAILABLE
        else:
            version_number = VersionCatalog.version_for_name(version_name)

        installer = Installer(
            version_name=version_name,
            volume_id=volume.id,
            volume_name=volume.volume_name,
            mount_point=volume.mount_point,
            version_number=version_number,
            app_label=f"{version_name}.app",
            icon=load_app_icon(volume.mount_point, version_name),
            installable_versions=tuple(self.installable_versions),
        )

        if installer.can_install:
            logger.info(f"{self.engine.model_identifier} can install {installer.version_number}")

        if self.repository is not None:
            self.repository.add(installer)
        return installer
