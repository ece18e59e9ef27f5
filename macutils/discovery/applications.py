"""Application and utility bundle discovery."""
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from macutils.core.logger import get_logger
from macutils.inventory.repository import ItemRepository
from macutils.models.application import Application

logger = get_logger(__name__)

APPLICATION_DIRS = (Path("/Applications"),)
UTILITY_DIRS = (Path("/Applications/Utilities"), Path("/System/Applications/Utilities"))


class ApplicationScanner:
    """Registers every .app bundle found in the application and utility folders."""

    def __init__(
        self,
        repository: Optional[ItemRepository],
        application_dirs: Sequence[Path] = APPLICATION_DIRS,
        utility_dirs: Sequence[Path] = UTILITY_DIRS,
    ):
        self.repository = repository
        self.application_dirs = application_dirs
        self.utility_dirs = utility_dirs

    def scan(self) -> List[Application]:
        found = []
        for directory in self.application_dirs:
            found.extend(self._scan_dir(directory, is_utility=False))
        for directory in self.utility_dirs:
            found.extend(self._scan_dir(directory, is_utility=True))
        return found

    def _scan_dir(self, directory: Path, is_utility: bool) -> List[Application]:
        if not directory.is_dir():
            return []

        found = []
        for bundle in sorted(directory.glob("*.app")):
            try:
                app = Application.from_bundle(bundle, is_utility=is_utility)
            except ValidationError as e:
                logger.warning(f"Skipping {bundle}: {e}")
                continue
            if self.repository is not None:
                self.repository.add(app)
            found.append(app)
        return found
