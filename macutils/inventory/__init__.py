"""Item repository and the parsers that feed it."""
from macutils.inventory.events import ItemKind
from macutils.inventory.installers import InstallerFactory
from macutils.inventory.parser import DiskParser
from macutils.inventory.repository import ItemRepository

__all__ = ['DiskParser', 'InstallerFactory', 'ItemKind', 'ItemRepository']
