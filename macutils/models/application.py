"""Application models for discovered app bundles."""
import hashlib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Application(BaseModel):
    """An application or utility bundle found on the host."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    name: str = Field(..., min_length=1, description="Display name, the bundle name without .app")
    path: Path = Field(..., description="Absolute path to the .app bundle")
    is_utility: bool = False

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: Path) -> Path:
        """Validate the path names an .app bundle."""
        if v.suffix != ".app":
            raise ValueError(f"Application path must end in .app. Got: {v}")
        return v

    @classmethod
    def from_bundle(cls, bundle: Path, is_utility: bool = False) -> 'Application':
        return cls(name=bundle.stem, path=bundle, is_utility=is_utility)

    @property
    def id(self) -> str:
        return hashlib.md5(str(self.path).encode("utf-8")).hexdigest()

    @property
    def is_valid(self) -> bool:
        return self.path.is_dir()

    @property
    def description(self) -> str:
        kind = "Utility" if self.is_utility else "Application"
        return f"{kind}: {self.name} ({self.path})"
