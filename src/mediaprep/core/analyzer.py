"""Track analysis using MediaInfo."""

import json
import subprocess
from pathlib import Path

from mediaprep.core.normalizer import normalize_tracks
from mediaprep.exceptions import ProbeFailure
from mediaprep.models.track import Track
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)


class MediaProbe:
    """Read the stream layout of a media file with ``mediainfo --Output=JSON``."""

    def __init__(self, binary: str = "mediainfo", timeout_seconds: int = 60):
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    def probe(self, file_path: Path) -> list[Track]:
        """Extract normalized track information from a media file.

        Args:
            file_path: Path to the media file

        Returns:
            List of Track objects in probe order

        Raises:
            ProbeFailure: If mediainfo is missing, fails, or its output
                is not the expected JSON document
        """
        if not file_path.exists():
            raise ProbeFailure("File not found", file_path=file_path)

        logger.debug("Probing tracks", file=str(file_path))

        cmd = [self.binary, "--Output=JSON", str(file_path)]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            logger.error("mediainfo not found", binary=self.binary)
            raise ProbeFailure(f"{self.binary} not found", file_path=file_path) from e
        except subprocess.TimeoutExpired as e:
            logger.error("mediainfo timeout", file=str(file_path), timeout=self.timeout_seconds)
            raise ProbeFailure("mediainfo timed out", file_path=file_path) from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "mediainfo failed",
                file=str(file_path),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise ProbeFailure(
                f"mediainfo exited with status {e.returncode}", file_path=file_path
            ) from e

        tracks = normalize_tracks(self._track_records(result.stdout, file_path))

        logger.info(
            "Tracks probed",
            file=str(file_path),
            track_count=len(tracks),
            types=[t.type.value for t in tracks],
        )
        return tracks

    @staticmethod
    def _track_records(output: str, file_path: Path) -> list:
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse mediainfo output", file=str(file_path), error=str(e))
            raise ProbeFailure("Unparseable mediainfo output", file_path=file_path) from e

        media = data.get("media") if isinstance(data, dict) else None
        records = media.get("track") if isinstance(media, dict) else None
        if not isinstance(records, list):
            logger.error("mediainfo output has no media.track array", file=str(file_path))
            raise ProbeFailure("mediainfo output has no track list", file_path=file_path)
        return records
