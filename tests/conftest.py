"""Shared test fixtures for macutils tests."""
import logging

import pytest

from macutils.compat.model_year import ModelCompatibilityEngine
from macutils.core.config import set_config
from macutils.inventory.installers import InstallerFactory
from macutils.inventory.parser import DiskParser
from macutils.inventory.repository import ItemRepository
from macutils.models.disk import BYTES_PER_GB, DiskRef


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Keep MU_* variables and the global config from leaking between tests."""
    for var in ("MU_MODEL_IDENTIFIER", "MU_MOCK", "MU_CONFIG", "MU_SCAN_TIMEOUT",
                "MU_STRICT_INSTALLER_VERSIONS", "MU_SORT_INSTALLERS_NUMERICALLY",
                "MU_STRICT_SCAN"):
        monkeypatch.delenv(var, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def _quiet_logs():
    """Keep Rich log output out of captured CLI output."""
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("macutils"):
            logging.getLogger(name).setLevel(logging.WARNING)


@pytest.fixture
def repository():
    """Repository with lexicographic installer order."""
    return ItemRepository(sort_installers_numerically=False)


@pytest.fixture
def engine():
    """Compatibility engine for a 2018 MacBook Pro (Mojave capable)."""
    return ModelCompatibilityEngine("MacBookPro15,1")


@pytest.fixture
def installer_factory(repository, engine):
    """Lenient factory registering into repository."""
    return InstallerFactory(repository, engine, strict_versions=False)


@pytest.fixture
def parser(repository, installer_factory):
    """Parser wired to the shared repository and factory."""
    return DiskParser(repository, installer_factory)


@pytest.fixture
def parent_disk():
    """A real 500 GB parent disk reference."""
    return DiskRef(id="disk-under-test", device_identifier="disk2", size=500.0)


# Common record data
@pytest.fixture
def installer_partition():
    """diskutil partition record for a Mojave installer stick."""
    return {
        "DeviceIdentifier": "disk2s2",
        "DiskUUID": "D1SK-UUID",
        "Content": "Apple_HFS",
        "MountPoint": "/Volumes/Install macOS Mojave",
        "VolumeName": "Install macOS Mojave",
        "VolumeUUID": "V0LUME-UUID",
        "Size": 15 * BYTES_PER_GB,
    }
