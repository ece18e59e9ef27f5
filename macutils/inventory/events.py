"""Change notifications emitted by the item repository."""
from enum import Enum
from typing import Callable, Dict, List

from macutils.core.logger import get_logger

logger = get_logger(__name__)

Subscriber = Callable[["ItemKind"], None]


class ItemKind(Enum):
    """Kinds of item the repository stores, named after their notification."""
    DISK = "new_disk"
    VOLUME = "new_volume"
    INSTALLER = "new_installer"
    APPLICATION = "new_application"


class NotificationChannels:
    """Per-repository observer lists, one per item kind.

    Notifications carry only the kind; subscribers query the repository
    for the data.
    """

    def __init__(self):
        self._subscribers: Dict[ItemKind, List[Subscriber]] = {kind: [] for kind in ItemKind}

    def subscribe(self, kind: ItemKind, callback: Subscriber) -> Callable[[], None]:
        """Register callback for kind and return a function that removes it."""
        self._subscribers[kind].append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers[kind].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def post(self, kind: ItemKind) -> None:
        for callback in list(self._subscribers[kind]):
            try:
                callback(kind)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on {kind.value}: {e}")

    def subscriber_count(self, kind: ItemKind) -> int:
        return len(self._subscribers[kind])
