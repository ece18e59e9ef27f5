"""Item repository.

One store holds every disk, volume, installer and application a scan
discovers. Producers call add(); consumers subscribe to a kind and re-read
the sorted accessors when notified.

Inserts are deduplicated per kind by item id. A duplicate is dropped
without error or notification.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Union

from macutils.core.config import get_config
from macutils.core.logger import get_logger
from macutils.inventory.events import ItemKind, NotificationChannels
from macutils.models.application import Application
from macutils.models.disk import Disk
from macutils.models.installer import Installer
from macutils.models.versions import version_key
from macutils.models.volume import Volume

logger = get_logger(__name__)

Item = Union[Disk, Volume, Installer, Application]

_KINDS = {
    Disk: ItemKind.DISK,
    Volume: ItemKind.VOLUME,
    Installer: ItemKind.INSTALLER,
    Application: ItemKind.APPLICATION,
}


class ItemRepository:
    """Deduplicating, notifying store of discovered items."""

    def __init__(self, sort_installers_numerically: Optional[bool] = None):
        if sort_installers_numerically is None:
            sort_installers_numerically = get_config().sort_installers_numerically
        self.sort_installers_numerically = sort_installers_numerically

        self._lock = threading.RLock()
        self._items: Dict[ItemKind, List[Item]] = {kind: [] for kind in ItemKind}
        self._ids: Dict[ItemKind, set] = {kind: set() for kind in ItemKind}
        self.channels = NotificationChannels()
        self._executor: Optional[ThreadPoolExecutor] = None
        logger.debug("ItemRepository initialized")

    # -----------------------------
    #  Inserts
    # -----------------------------
    def add(self, item: Item) -> bool:
        """Store item unless one of the same kind has its id.

        Returns:
            True if the item was accepted (and a notification sent)
        """
        kind = _KINDS.get(type(item))
        if kind is None:
            raise TypeError(f"ItemRepository cannot store {type(item).__name__}")

        with self._lock:
            if item.id in self._ids[kind]:
                logger.debug(f"Ignoring duplicate {kind.name.lower()} {item.id}")
                return False
            self._ids[kind].add(item.id)
            self._items[kind].append(item)

        self._log_insert(kind, item)
        self.channels.post(kind)
        return True

    def add_disk(self, disk: Disk) -> bool:
        return self.add(disk)

    def add_volume(self, volume: Volume) -> bool:
        return self.add(volume)

    def add_installer(self, installer: Installer) -> bool:
        return self.add(installer)

    def add_application(self, application: Application) -> bool:
        return self.add(application)

    def _log_insert(self, kind: ItemKind, item: Item) -> None:
        if kind is ItemKind.APPLICATION:
            if item.is_utility:
                logger.info(f"Adding utility {item.id} to repo")
            else:
                logger.info(f"Adding application {item.id} to repo")
                logger.debug(item.description)
        else:
            logger.info(f"Adding {kind.name.lower()} {item.id} to repo")

    # -----------------------------
    #  Sorted accessors
    # -----------------------------
    def get_disks(self) -> List[Disk]:
        return sorted(self._snapshot(ItemKind.DISK), key=lambda d: d.device_identifier)

    def get_volumes(self) -> List[Volume]:
        return sorted(self._snapshot(ItemKind.VOLUME), key=lambda v: v.volume_name)

    def get_installers(self) -> List[Installer]:
        installers = self._snapshot(ItemKind.INSTALLER)
        if self.sort_installers_numerically:
            return sorted(installers, key=lambda i: version_key(i.version_number))
        return sorted(installers, key=lambda i: i.version_number)

    def get_applications(self) -> List[Application]:
        return sorted(self._snapshot(ItemKind.APPLICATION), key=lambda a: a.name)

    def _snapshot(self, kind: ItemKind) -> List[Item]:
        with self._lock:
            return list(self._items[kind])

    @property
    def count(self) -> int:
        with self._lock:
            return sum(len(items) for items in self._items.values())

    def __len__(self) -> int:
        return self.count

    # -----------------------------
    #  Notifications
    # -----------------------------
    def subscribe(self, kind: ItemKind, callback: Callable[[ItemKind], None]) -> Callable[[], None]:
        """Call callback after each accepted insert of kind. Returns an unsubscribe function."""
        return self.channels.subscribe(kind, callback)

    # -----------------------------
    #  Producers
    # -----------------------------
    def populate_async(self, *producers: Callable[["ItemRepository"], object]) -> List[Future]:
        """Run discovery producers in the background, each given this repository.

        Producers add items themselves; the returned futures are only for
        callers that want to wait or inspect failures.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=max(1, len(producers)), thread_name_prefix="macutils-scan"
            )

        futures = []
        for producer in producers:
            future = self._executor.submit(producer, self)
            future.add_done_callback(self._report_producer_failure)
            futures.append(future)
        return futures

    @staticmethod
    def _report_producer_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Discovery producer failed: {error}")

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
