"""Exception types raised by the mediaprep pipelines."""

from pathlib import Path
from typing import Optional


class MediaPrepError(Exception):
    """Base exception for mediaprep errors.

    Carries the offending file and the pipeline stage so every fatal error
    can be reported as "<file>: <stage> failed".
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        stage: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file_path = file_path
        self.stage = stage

    def __str__(self) -> str:
        parts = []
        if self.file_path is not None:
            parts.append(str(self.file_path))
        if self.stage:
            parts.append(self.stage)
        prefix = ": ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message


class InvalidArguments(MediaPrepError):
    """Conflicting or missing options, detected before anything runs."""

    pass


class ToolNotFound(MediaPrepError):
    """An external binary (mediainfo, ffmpeg, mkvpropedit) is not installed."""

    pass


class ProbeFailure(MediaPrepError):
    """The probe tool is missing, failed, or produced unparseable output."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        super().__init__(message, file_path=file_path, stage="probing")


class ProcessFailure(MediaPrepError):
    """An external process exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        stage: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message, file_path=file_path, stage=stage)
        self.returncode = returncode
        self.stderr = stderr


class EncoderFailure(ProcessFailure):
    """ffmpeg exited with a non-zero status."""

    def __init__(self, message: str, file_path: Optional[Path] = None, **kwargs):
        super().__init__(message, file_path=file_path, stage="encoding", **kwargs)


class TagEditorFailure(ProcessFailure):
    """mkvpropedit exited with a non-zero status."""

    def __init__(self, message: str, file_path: Optional[Path] = None, **kwargs):
        super().__init__(message, file_path=file_path, stage="tagging", **kwargs)
