"""Per-file processing result models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal, Optional


class Stage(Enum):
    """Pipeline stages, entered in declaration order and never re-entered."""

    IDLE = "idle"
    PROBING = "probing"
    SELECTING = "selecting"
    COMPILING = "compiling"
    ENCODING = "encoding"
    RELOCATING = "relocating"
    TAGGING = "tagging"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ProcessResult:
    """Result of processing a single file."""

    status: Literal["success", "failed", "dry_run"]
    file_path: Path
    output_path: Optional[Path] = None
    stage: Stage = Stage.DONE
    error: Optional[str] = None  # Error message if failed
    warnings: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.status == "success":
            target = self.output_path.name if self.output_path else "done"
            return f"✓ {self.file_path.name}: {target}"
        elif self.status == "dry_run":
            target = self.output_path.name if self.output_path else "?"
            return f"⊙ {self.file_path.name}: Would write {target} (dry run)"
        else:
            return f"✗ {self.file_path.name}: {self.stage.value} failed ({self.error})"
