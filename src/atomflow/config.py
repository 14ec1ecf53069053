"""Configuration management for atomflow."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Config:
    """Central configuration with path properties and analysis knobs."""

    base_dir: Path = field(default_factory=lambda: Path.home() / ".atomflow")

    # Data journey tracing
    journey_max_depth: int = 5

    # Duplicate detection
    duplicate_threshold: float = 0.9
    min_duplicability: int = 50

    @property
    def log_dir(self) -> Path:
        return self.base_dir / "logs"

    def ensure_dirs(self) -> None:
        """Create directory tree if it doesn't exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
