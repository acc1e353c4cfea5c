"""File scanner for discovering media files to process."""

from pathlib import Path
from typing import List

from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)


class FileScanner:
    """Scan directories for media files."""

    SUPPORTED_EXTENSIONS = {".mkv", ".mp4", ".m4v", ".avi", ".ts", ".m2ts", ".mov", ".wmv"}

    def scan(
        self, path: Path, recursive: bool = True, extensions: set[str] | None = None
    ) -> List[Path]:
        """Scan a path for media files.

        Args:
            path: Path to scan (file or directory)
            recursive: If True, scan subdirectories recursively
            extensions: File extensions to include (default: common video containers)

        Returns:
            List of media file paths, sorted by path

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If path is not a file or directory
        """
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if extensions is None:
            extensions = self.SUPPORTED_EXTENSIONS
        extensions = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

        if path.is_file():
            if path.suffix.lower() in extensions:
                return [path]
            logger.warning(
                "File extension not supported",
                file=str(path),
                extension=path.suffix,
                supported=sorted(extensions),
            )
            return []

        if path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            # Hidden files are usually partial downloads or temp outputs
            files = sorted(
                p
                for p in candidates
                if p.is_file() and p.suffix.lower() in extensions and not p.name.startswith(".")
            )
            logger.info(
                "Directory scan complete",
                directory=str(path),
                recursive=recursive,
                total_files=len(files),
            )
            return files

        raise ValueError(f"Path is neither a file nor a directory: {path}")
