"""Installer eligibility from the hardware model identifier.

A model identifier looks like ``MacBookPro15,1``: a family name followed by
major and minor revision numbers. Within a family, newer hardware has a
larger ``<major><minor>`` figure, so "can this machine run Mojave" reduces
to comparing that figure with one cutoff per family.
"""
from typing import List, Optional, Tuple

from macutils.core.logger import get_logger
from macutils.models.versions import NEWEST_SUPPORTED, Version

logger = get_logger(__name__)

# (family prefix, digits the model must exceed for the newest version).
# MacBook must come after MacBookPro and MacBookAir since it is a prefix of both.
FAMILY_THRESHOLDS: Tuple[Tuple[str, int], ...] = (
    ("MacBookPro", 91),
    ("MacBookAir", 51),
    ("MacBook", 81),
    ("Macmini", 61),
    ("MacPro", 41),
    ("iMac", 131),
)

BASELINE_VERSIONS: Tuple[Version, ...] = (Version.EL_CAPITAN, Version.HIGH_SIERRA)


class ModelCompatibilityEngine:
    """Computes which installer versions a given model may run."""

    def __init__(self, model_identifier: str):
        self.model_identifier = model_identifier or ""
        self.installable_versions: List[Version] = list(BASELINE_VERSIONS)
        self._determined = False

    def determine_installable_versions(self) -> List[str]:
        """Installable version numbers for this model, newest first."""
        if not self._determined:
            self._accumulate()
            self._determined = True
        return [version.value for version in reversed(self.installable_versions)]

    def can_install(self, version_number: str) -> bool:
        return version_number in self.determine_installable_versions()

    def identifier_digits(self, family: str) -> Optional[int]:
        """The model's revision figure with family and commas removed, or None."""
        digits = self.model_identifier.replace(family, "").replace(",", "")
        if digits.isascii() and digits.isdigit():
            return int(digits)

        logger.warning(
            f"Unparseable model identifier '{self.model_identifier}'; "
            f"treating as {family} below the {NEWEST_SUPPORTED.value} cutoff"
        )
        return None

    def _accumulate(self) -> None:
        family = self.family
        if family is None:
            logger.debug(f"Unknown model family for '{self.model_identifier}'")
            return

        threshold = dict(FAMILY_THRESHOLDS)[family]
        digits = self.identifier_digits(family)

        if family == "MacPro":
            self.installable_versions.append(Version.MAVERICKS)

        if digits is not None and digits > threshold:
            self.installable_versions.append(NEWEST_SUPPORTED)

    @property
    def family(self) -> Optional[str]:
        for family, _ in FAMILY_THRESHOLDS:
            if family in self.model_identifier:
                return family
        return None


def installable_versions_for(model_identifier: str) -> List[str]:
    """Shortcut for ModelCompatibilityEngine(model).determine_installable_versions()."""
    return ModelCompatibilityEngine(model_identifier).determine_installable_versions()
