"""Data models for macutils."""
from macutils.models.application import Application
from macutils.models.disk import Disk, DiskRef, MeasurementUnit, normalize_size
from macutils.models.installer import PROHIBITED_ICON, IconImage, Installer
from macutils.models.versions import Version, VersionCatalog
from macutils.models.volume import Volume

__all__ = [
    'Application',
    'Disk',
    'DiskRef',
    'IconImage',
    'Installer',
    'MeasurementUnit',
    'PROHIBITED_ICON',
    'Version',
    'VersionCatalog',
    'Volume',
    'normalize_size',
]
