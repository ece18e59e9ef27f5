"""Disk models and size normalization."""
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:
    from macutils.models.volume import Volume

BYTES_PER_GB = 1073741824  # 2**30
INVALID = "Invalid"

# Smallest GB size a disk or volume needs to receive an install
MIN_INSTALLABLE_GB = 150.0


class MeasurementUnit(str, Enum):
    """Unit a normalized size is expressed in."""
    GB = "GB"
    TB = "TB"


def new_item_id() -> str:
    """Random opaque identity for a scanned disk or volume."""
    return uuid.uuid4().hex


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def normalize_size(size_bytes: int) -> Tuple[float, MeasurementUnit]:
    """Scale a raw byte count to GB, or TB past 1000 GB.

    The GB value is rounded half away from zero first; the TB value is that
    rounded figure divided by 1000 and keeps its fraction.
    """
    size = _round_half_away(size_bytes / BYTES_PER_GB)
    if size > 1000.0:
        return size / 1000.0, MeasurementUnit.TB
    return size, MeasurementUnit.GB


def read_size(record: Any, key: str = "Size") -> Optional[Tuple[float, MeasurementUnit]]:
    """Normalized size from record[key], or None when absent, negative or not an integer."""
    raw = record.get(key) if isinstance(record, dict) else None
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        return None
    return normalize_size(raw)


def read_str(record: Any, key: str, default: Optional[str] = None) -> Optional[str]:
    """record[key] when it is a string, else default."""
    value = record.get(key) if isinstance(record, dict) else None
    return value if isinstance(value, str) else default


def size_is_installable(size: float, unit: MeasurementUnit,
                        minimum_gb: float = MIN_INSTALLABLE_GB) -> bool:
    return size > minimum_gb if unit == MeasurementUnit.GB else True


@dataclass(frozen=True)
class DiskRef:
    """Read-only copy of the disk fields a volume needs to describe itself."""
    id: str
    device_identifier: str = INVALID
    size: float = 0.0
    measurement_unit: MeasurementUnit = MeasurementUnit.GB
    is_fake: bool = False

    def __str__(self) -> str:
        return f"{self.device_identifier} ({self.size} {self.measurement_unit.value})"


@dataclass(frozen=True, eq=False)
class Disk:
    """A physical or logical storage device and the volumes on it."""
    id: str = field(default_factory=new_item_id)
    device_identifier: str = INVALID
    content: str = INVALID
    size: float = 0.0
    measurement_unit: MeasurementUnit = MeasurementUnit.GB
    volumes: Tuple["Volume", ...] = ()
    is_fake: bool = False

    @property
    def is_installable(self) -> bool:
        return size_is_installable(self.size, self.measurement_unit)

    @property
    def ref(self) -> DiskRef:
        return DiskRef(
            id=self.id,
            device_identifier=self.device_identifier,
            size=self.size,
            measurement_unit=self.measurement_unit,
            is_fake=self.is_fake,
        )

    def main_volume(self) -> Optional["Volume"]:
        """Largest volume on the disk, or None for an empty disk."""
        if not self.volumes:
            return None
        return max(self.volumes, key=lambda v: v.size)

    @property
    def description(self) -> str:
        volumes = ", ".join(v.volume_name for v in self.volumes) or "none"
        return (
            f"Disk:\n"
            f"\tDevice Identifier: {self.device_identifier}\n"
            f"\tContent: {self.content}\n"
            f"\tSize: {self.size} {self.measurement_unit.value}\n"
            f"\tVolumes: {volumes}\n"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Disk):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
