"""Normalize raw MediaInfo track records into Track models.

Every field extractor here is total: absent, empty or non-numeric values
become None instead of raising, so one odd field never fails a probe.
"""

import math
from typing import Any, Iterable, Mapping, Optional

from mediaprep.models.track import Track, TrackType
from mediaprep.utils.language import language_name
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

KILOBITS = 1000
MEGABYTES = 1_000_000

_TRUTHY = {"yes", "true", "1"}
_INTERLACED = {"interlaced", "mbaff", "paff"}


def _text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for missing/empty values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> Optional[float]:
    """Parse a finite float from a probe value.

    MediaInfo occasionally reports several values separated by " / ";
    the first one is used.
    """
    text = _text(value)
    if text is None:
        return None
    text = text.split(" / ")[0].strip()
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer field; None when absent or non-numeric."""
    number = _number(value)
    if number is None:
        return None
    return int(round(number))


def parse_scaled(value: Any, divisor: int) -> Optional[int]:
    """Parse a numeric field, divide by ``divisor`` and round.

    Args:
        value: Raw probe value (e.g. ``"4500000"``, ``"N/A"``)
        divisor: 1000 for kilobits, 1,000,000 for megabytes

    Returns:
        Rounded integer or None when the value is unparsable
    """
    number = _number(value)
    if number is None:
        return None
    return int(round(number / divisor))


def parse_flag(value: Any) -> bool:
    """Parse a Yes/No style flag; absent values are False."""
    text = _text(value)
    return text is not None and text.lower() in _TRUTHY


def parse_scan_type(scan_type: Any, scan_order: Any = None) -> Optional[str]:
    """Reduce MediaInfo scan fields to "interlaced", "progressive" or None."""
    text = _text(scan_type)
    if text is not None:
        lowered = text.lower()
        if lowered in _INTERLACED:
            return "interlaced"
        if lowered == "progressive":
            return "progressive"
        return lowered

    order = _text(scan_order)
    if order is not None and order.upper() in ("TFF", "BFF"):
        return "interlaced"
    return None


def _attachments(record: Mapping[str, Any]) -> Optional[str]:
    extra = record.get("extra")
    if isinstance(extra, Mapping) and _text(extra.get("Attachments")):
        return _text(extra.get("Attachments"))
    return _text(record.get("Attachments"))


def normalize_track(record: Mapping[str, Any], index: int) -> Track:
    """Build a Track from one raw MediaInfo record.

    Args:
        record: Raw key/value track record
        index: Encoder stream index to assign (-1 for non-stream tracks)

    Returns:
        Normalized Track
    """
    track_type = TrackType.from_tag(_text(record.get("@type")))
    language_code = _text(record.get("Language"))
    type_order = parse_int(record.get("@typeorder")) or 1

    return Track(
        type=track_type,
        index=index,
        type_order=type_order,
        codec_id=_text(record.get("CodecID")),
        language_code=language_code,
        language_name=_text(record.get("Language_String")) or language_name(language_code),
        format=_text(record.get("Format_Commercial_IfAny")) or _text(record.get("Format")),
        title=_text(record.get("Title")),
        width=parse_int(record.get("Width")),
        height=parse_int(record.get("Height")),
        fps=_text(record.get("FrameRate")),
        channels=parse_int(record.get("Channels")),
        bitrate_kb=parse_scaled(record.get("BitRate"), KILOBITS),
        size_mb=parse_scaled(record.get("StreamSize"), MEGABYTES),
        size_bytes=parse_int(record.get("StreamSize")),
        element_count=parse_int(record.get("ElementCount")),
        scan_type=parse_scan_type(record.get("ScanType"), record.get("ScanOrder")),
        forced=parse_flag(record.get("Forced")),
        color_primaries=_text(record.get("colour_primaries")),
        color_matrix=_text(record.get("matrix_coefficients")),
        color_transfer=_text(record.get("transfer_characteristics")),
        hdr_format=_text(record.get("HDR_Format")),
        hdr_profile=_text(record.get("HDR_Format_Profile")),
        attachments_raw=_attachments(record),
    )


def normalize_tracks(records: Iterable[Mapping[str, Any]]) -> list[Track]:
    """Normalize a MediaInfo ``media.track`` array.

    Stream indexes are assigned sequentially from 0 in probe order; the
    General and Menu tracks are kept but do not consume an index.

    Args:
        records: Raw track records

    Returns:
        List of Track objects in probe order
    """
    tracks = []
    next_index = 0
    for record in records:
        if not isinstance(record, Mapping):
            logger.debug("Skipping non-mapping track record", record=repr(record))
            continue
        if not TrackType.from_tag(_text(record.get("@type"))).is_stream:
            tracks.append(normalize_track(record, index=-1))
            continue
        tracks.append(normalize_track(record, index=next_index))
        next_index += 1

    logger.debug(
        "Tracks normalized",
        track_count=len(tracks),
        types=[t.type.value for t in tracks],
    )
    return tracks
