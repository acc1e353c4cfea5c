"""Video stream argument compilation for ffmpeg and mkvpropedit."""

import math
from pathlib import Path
from typing import Optional

from mediaprep.models.encoding import TargetFormat, VideoCodec, VideoParameters
from mediaprep.models.track import Track
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FORMAT_LABEL = "H264"
DEFAULT_GOP = 240
PRESET = "slow"

# Source codec identifier -> display label
FORMAT_LABELS = {
    "V_MPEG4/ISO/AVC": "H264",
    "avc1": "H264",
    "V_MPEGH/ISO/HEVC": "HEVC",
    "hev1": "HEVC",
    "hvc1": "HEVC",
    "V_MPEG2": "MPEG2",
    "V_MS/VFW/FOURCC / WVC1": "VC1",
    "WVC1": "VC1",
    "V_VP9": "VP9",
    "vp09": "VP9",
    "V_AV1": "AV1",
    "av01": "AV1",
}

# Source codec identifier -> CUDA decoder
CUVID_DECODERS = {
    "V_MPEG4/ISO/AVC": "h264_cuvid",
    "avc1": "h264_cuvid",
    "V_MPEGH/ISO/HEVC": "hevc_cuvid",
    "hev1": "hevc_cuvid",
    "hvc1": "hevc_cuvid",
    "V_MPEG2": "mpeg2_cuvid",
    "V_MS/VFW/FOURCC / WVC1": "vc1_cuvid",
    "WVC1": "vc1_cuvid",
    "V_VP9": "vp9_cuvid",
    "vp09": "vp9_cuvid",
    "V_AV1": "av1_cuvid",
    "av01": "av1_cuvid",
}

RATE_CONTROL = {
    VideoCodec.X264: ("-c:v", "libx264", "-crf", "20"),
    VideoCodec.X265: ("-c:v", "libx265", "-crf", "22"),
    VideoCodec.H264_NVENC: ("-c:v", "h264_nvenc", "-rc:v", "vbr", "-cq:v", "21", "-b:v", "0"),
    VideoCodec.HEVC_NVENC: ("-c:v", "hevc_nvenc", "-rc:v", "vbr", "-cq:v", "23", "-b:v", "0"),
}

HW_UPLOAD_FILTER = "format=nv12|cuda,hwupload"
HW_DEINTERLACE_FILTER = "yadif_cuda=0:-1:0"
SW_DEINTERLACE_FILTER = "yadif=0:-1:0"

HDR_BASE_PARAMS = ("hdr-opt=1", "repeat-headers=1")
BT2020_MATRIX = "BT.2020 non-constant"
BT2020_PRIMARIES = "BT.2020"
PQ_TRANSFERS = {"PQ", "SMPTE ST 2084", "SMPTE 2084"}


def format_label(codec_id: Optional[str]) -> str:
    """Human-readable format label for a source codec identifier."""
    return FORMAT_LABELS.get(codec_id or "", DEFAULT_FORMAT_LABEL)


def hardware_decode_arguments(codec_id: Optional[str]) -> list[str]:
    """CUDA hwaccel setup; a cuvid decoder is added when the source maps to one."""
    args = ["-hwaccel", "cuda", "-hwaccel_output_format", "cuda"]
    decoder = CUVID_DECODERS.get(codec_id or "")
    if decoder:
        args.extend(["-hwaccel_device", "0", "-c:v", decoder])
    else:
        logger.debug("No CUDA decoder for source codec, decoding in software", codec_id=codec_id)
    return args


def input_arguments(input_path: Path, title: str) -> list[str]:
    """Input file, metadata stripping and file-level title."""
    return [
        "-i",
        str(input_path),
        "-map_metadata",
        "-1",
        "-metadata",
        f"title={title}",
    ]


def gop_size(fps: Optional[str]) -> int:
    """Keyframe interval of ten seconds, or 240 when fps is unknown."""
    try:
        rate = float(fps) if fps is not None else 0.0
    except ValueError:
        rate = 0.0
    if not math.isfinite(rate) or rate <= 0:
        return DEFAULT_GOP
    return int(round(rate * 10))


def build_filter_chain(
    track: Track,
    codec: VideoCodec,
    target_format: TargetFormat,
) -> Optional[str]:
    """Build the combined deinterlace + scale filter string.

    Deinterlacing always comes before scaling.

    Returns:
        Comma-joined filter chain, or None when no filtering is needed
    """
    target_height = target_format.height or track.height
    needs_scale = (
        target_format is not TargetFormat.NONE
        and bool(track.height)
        and track.height != target_height
    )
    needs_deinterlace = track.is_interlaced

    if not needs_scale and not needs_deinterlace:
        return None

    filters = []
    if codec.is_hardware:
        filters.append(HW_UPLOAD_FILTER)
        if needs_deinterlace:
            filters.append(HW_DEINTERLACE_FILTER)
        if needs_scale:
            filters.append(f"scale_cuda=-2:{target_height}:interp_algo=lanczos")
    else:
        if needs_deinterlace:
            filters.append(SW_DEINTERLACE_FILTER)
        if needs_scale:
            filters.append(f"scale=-2:{target_height}:flags=lanczos")

    return ",".join(filters)


def build_hdr_params(track: Track) -> Optional[str]:
    """Build the x265 HDR parameter string, or None for SDR sources."""
    if not track.hdr_profile and not track.hdr_format:
        return None

    params = list(HDR_BASE_PARAMS)
    if track.color_matrix == BT2020_MATRIX:
        params.append("colormatrix=bt2020nc")
    if track.color_primaries == BT2020_PRIMARIES:
        params.append("colorprim=bt2020")
    if track.color_transfer in PQ_TRANSFERS:
        params.append("transfer=smpte2084")
    return ":".join(params)


def compile_video(
    track: Track,
    input_path: Path,
    title: str,
    codec: VideoCodec,
    target_format: TargetFormat = TargetFormat.NONE,
    remux: bool = False,
    copy_video: bool = False,
) -> VideoParameters:
    """Compile encoder and tag-editor arguments for the video stream.

    Args:
        track: Selected video track
        input_path: Absolute path of the source file
        title: File-level title
        codec: Target video codec
        target_format: Target resolution
        remux: Copy every stream
        copy_video: Copy the video stream only

    Returns:
        VideoParameters with the resolved format label
    """
    label = format_label(track.codec_id)
    copying = remux or copy_video

    encoder_args: list[str] = []
    if codec.is_hardware:
        encoder_args.extend(hardware_decode_arguments(track.codec_id))
    encoder_args.extend(input_arguments(input_path, title))
    encoder_args.extend(["-map", f"0:{track.index}", "-metadata:s:v:0", f"title=Video - {label}"])

    tag_args = ["--edit", "track:v1", "--set", "flag-forced=0", "--set", "flag-default=0"]

    if copying:
        encoder_args.extend(["-c:v", "copy"])
        logger.debug("Copying video stream", track_index=track.index, label=label)
        return VideoParameters(tuple(encoder_args), tuple(tag_args), format_label=label)

    encoder_args.extend(["-preset", PRESET, "-g", str(gop_size(track.fps))])
    encoder_args.extend(RATE_CONTROL[codec])

    if track.is_interlaced:
        tag_args.extend(["--delete", "interlaced", "--delete", "field-order"])

    filters = build_filter_chain(track, codec, target_format)
    if filters:
        encoder_args.extend(["-vf", filters])

    hdr_params = build_hdr_params(track)
    if hdr_params and codec is VideoCodec.X265:
        encoder_args.extend(["-x265-params", hdr_params])

    logger.debug(
        "Video parameters compiled",
        track_index=track.index,
        codec=codec.value,
        label=label,
        filters=filters,
        hdr=bool(hdr_params),
    )
    return VideoParameters(tuple(encoder_args), tuple(tag_args), format_label=label)
