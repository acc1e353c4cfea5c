"""Executors for the external encoder (ffmpeg) and tag editor (mkvpropedit)."""

import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from mediaprep.exceptions import EncoderFailure, TagEditorFailure, ToolNotFound
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

STDERR_LIMIT = 500


class ExternalTool:
    """Base class for a command-line tool invoked as a subprocess."""

    name = "tool"

    def __init__(self, binary: str, timeout_seconds: Optional[int] = None):
        """Initialize the tool wrapper.

        Args:
            binary: Executable name or path
            timeout_seconds: Process timeout (None waits for completion)
        """
        self.binary = binary
        self.timeout_seconds = timeout_seconds
        self.path: Optional[str] = None

    def ensure_available(self) -> str:
        """Resolve the executable on PATH.

        Raises:
            ToolNotFound: If the executable cannot be found
        """
        if self.path is None:
            self.path = shutil.which(self.binary)
            if not self.path:
                raise ToolNotFound(f"{self.binary} not found in PATH - required for {self.name}")
        return self.path

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=self.timeout_seconds,
        )


class Encoder(ExternalTool):
    """ffmpeg wrapper."""

    name = "encoding"

    def build_command(self, encoder_args: Sequence[str], output_path: Path) -> list[str]:
        return [self.path or self.binary, "-hide_banner", "-y", *encoder_args, str(output_path)]

    def encode(self, file_path: Path, encoder_args: Sequence[str], output_path: Path) -> None:
        """Run ffmpeg with the compiled arguments.

        Args:
            file_path: Source file (for error reporting)
            encoder_args: Ordered ffmpeg arguments (inputs, maps, codecs)
            output_path: Destination file

        Raises:
            EncoderFailure: If ffmpeg fails or times out
        """
        self.ensure_available()
        cmd = self.build_command(encoder_args, output_path)

        logger.info("Encoding", file=str(file_path), output=str(output_path))
        logger.debug("Executing ffmpeg", file=str(file_path), command=cmd)

        try:
            result = self._run(cmd)
        except subprocess.TimeoutExpired as e:
            logger.error("ffmpeg timeout", file=str(file_path), timeout=self.timeout_seconds)
            raise EncoderFailure("ffmpeg timed out", file_path=file_path) from e

        if result.returncode != 0:
            stderr = (result.stderr or "")[-STDERR_LIMIT:]
            logger.error(
                "ffmpeg failed",
                file=str(file_path),
                returncode=result.returncode,
                stderr=stderr,
            )
            raise EncoderFailure(
                f"ffmpeg exited with status {result.returncode}",
                file_path=file_path,
                returncode=result.returncode,
                stderr=stderr,
            )

        logger.info("Encoding finished", file=str(file_path), output=str(output_path))


class TagEditor(ExternalTool):
    """mkvpropedit wrapper.

    mkvpropedit edits Matroska headers in place, so no temporary copy is
    needed.
    """

    name = "tagging"

    def build_command(self, target: Path, tag_args: Sequence[str]) -> list[str]:
        return [self.path or self.binary, str(target), *tag_args]

    def edit(self, target: Path, tag_args: Sequence[str]) -> None:
        """Apply the compiled edits to a Matroska file.

        Args:
            target: File to edit in place
            tag_args: Ordered mkvpropedit arguments

        Raises:
            TagEditorFailure: If mkvpropedit fails or times out
        """
        self.ensure_available()
        cmd = self.build_command(target, tag_args)

        logger.debug("Executing mkvpropedit", file=str(target), command=cmd)

        try:
            result = self._run(cmd)
        except subprocess.TimeoutExpired as e:
            logger.error("mkvpropedit timeout", file=str(target), timeout=self.timeout_seconds)
            raise TagEditorFailure("mkvpropedit timed out", file_path=target) from e

        if result.returncode != 0:
            stderr = (result.stderr or result.stdout or "")[-STDERR_LIMIT:]
            logger.error(
                "mkvpropedit failed",
                file=str(target),
                returncode=result.returncode,
                stderr=stderr,
            )
            raise TagEditorFailure(
                f"mkvpropedit exited with status {result.returncode}",
                file_path=target,
                returncode=result.returncode,
                stderr=stderr,
            )

        logger.info("Tags updated", file=str(target))
