"""Encoding and retagging pipeline orchestrators."""

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from mediaprep.config import Config
from mediaprep.core.analyzer import MediaProbe
from mediaprep.core.audio import compile_audio
from mediaprep.core.executor import Encoder, TagEditor
from mediaprep.core.paths import OutputPath, build_output_path, materialize
from mediaprep.core.retag import compile_retag
from mediaprep.core.selector import StreamSelector
from mediaprep.core.subtitles import compile_attachments, compile_subtitles
from mediaprep.core.video import compile_video, input_arguments
from mediaprep.exceptions import (
    EncoderFailure,
    InvalidArguments,
    ProbeFailure,
    TagEditorFailure,
)
from mediaprep.metadata.filename import parse_series
from mediaprep.metadata.resolver import EpisodeResolver
from mediaprep.models.encoding import (
    Container,
    EncodePlan,
    SelectionResult,
    TargetFormat,
    VideoCodec,
)
from mediaprep.models.file import ProcessResult, Stage
from mediaprep.models.metadata import NamingProfile, Scraper
from mediaprep.models.track import Track
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EncodeOptions:
    """Per-invocation encoding settings."""

    output_dir: Optional[Path]
    codec: VideoCodec = VideoCodec.X265
    target_format: TargetFormat = TargetFormat.NONE
    container: Container = Container.MKV
    languages: Optional[list[str]] = None
    high_quality: bool = False
    remux: bool = False
    copy_video: bool = False
    copy_audio: bool = False

    @classmethod
    def from_config(cls, config: Config, **overrides) -> "EncodeOptions":
        """Build options from configuration; non-None overrides win."""
        encoding = config.encoding
        values = dict(
            output_dir=Path(encoding.output_dir).expanduser() if encoding.output_dir else None,
            codec=encoding.codec,
            target_format=encoding.target_format,
            container=encoding.container,
            high_quality=encoding.high_quality,
            remux=encoding.remux,
            copy_video=encoding.copy_video,
            copy_audio=encoding.copy_audio,
        )
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def validate(self, file_path: Path) -> None:
        """Reject conflicting or missing options before anything runs.

        Raises:
            InvalidArguments: If the options cannot be honoured
        """
        if not file_path.is_file():
            raise InvalidArguments("Input file not found", file_path=file_path)
        if self.output_dir is None:
            raise InvalidArguments("An output directory is required", file_path=file_path)
        if (self.remux or self.copy_video) and self.target_format is not TargetFormat.NONE:
            raise InvalidArguments(
                "Cannot scale to a target format while copying the video stream",
                file_path=file_path,
            )


@dataclass
class RetagOptions:
    """Per-invocation retagging settings."""

    destination: Optional[Path] = None
    copy: bool = False
    move: bool = False
    profile: NamingProfile = NamingProfile.STANDARD
    scraper: Scraper = Scraper.NONE
    languages: Optional[list[str]] = None

    @classmethod
    def from_config(cls, config: Config, **overrides) -> "RetagOptions":
        """Build options from configuration; non-None overrides win."""
        values = dict(profile=config.naming.profile, scraper=config.naming.scraper)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def validate(self, file_path: Path) -> None:
        """Reject conflicting or missing options before anything runs.

        Raises:
            InvalidArguments: If the options cannot be honoured
        """
        if not file_path.is_file():
            raise InvalidArguments("Input file not found", file_path=file_path)
        if file_path.suffix.lower() != f".{Container.MKV.value}":
            raise InvalidArguments("Only Matroska files can be retagged", file_path=file_path)
        if self.copy and self.move:
            raise InvalidArguments("Choose either copy or move, not both", file_path=file_path)
        if (self.copy or self.move) and self.destination is None:
            raise InvalidArguments("A destination is required to copy or move", file_path=file_path)


def build_encode_plan(
    file_path: Path,
    tracks: Sequence[Track],
    selection: SelectionResult,
    options: EncodeOptions,
    output: OutputPath,
) -> EncodePlan:
    """Compile the full ffmpeg and mkvpropedit argument lists for one file.

    Compiler outputs are concatenated in a fixed order: video, audio,
    subtitles, attachments.

    Args:
        file_path: Absolute source path
        tracks: All normalized tracks of the source
        selection: Streams to keep
        options: Encoding settings
        output: Computed output location and title

    Returns:
        EncodePlan
    """
    encoder_args: list[str] = []
    tag_args: list[str] = []

    if selection.video_track is not None:
        video = compile_video(
            selection.video_track,
            file_path,
            output.title,
            options.codec,
            options.target_format,
            remux=options.remux,
            copy_video=options.copy_video,
        )
        encoder_args.extend(video.encoder_args)
        tag_args.extend(video.tag_editor_args)
    else:
        encoder_args.extend(input_arguments(file_path, output.title))

    audio = compile_audio(
        tracks,
        selection.audio_indices,
        copy=options.remux or options.copy_audio,
    )
    subtitles = compile_subtitles(
        tracks,
        selection.subtitle_indices,
        selection.forced_subtitle_indices,
        options.container,
    )
    for compiled in (audio, subtitles):
        encoder_args.extend(compiled.encoder_args)
        tag_args.extend(compiled.tag_editor_args)

    if options.container is Container.MKV:
        encoder_args.extend(compile_attachments(selection.attachment_tracks).encoder_args)
    elif selection.attachment_tracks:
        logger.info(
            "Dropping attachments, container cannot store them",
            file=str(file_path),
            container=options.container.value,
            attachments=len(selection.attachment_tracks),
        )

    if options.container is Container.MP4:
        encoder_args.extend(["-movflags", "+faststart"])

    return EncodePlan(
        input_path=str(file_path),
        output_path=str(output.path),
        container=options.container,
        title=output.title,
        encoder_args=tuple(encoder_args),
        tag_editor_args=tuple(tag_args),
    )


class EncodingPipeline:
    """Probe, select, compile, encode and tag one file.

    Stages run strictly in order (probing, selecting, compiling, encoding,
    tagging); tagging only starts after the encoder has finished.
    """

    def __init__(
        self,
        config: Config,
        probe: Optional[MediaProbe] = None,
        selector: Optional[StreamSelector] = None,
        encoder: Optional[Encoder] = None,
        tag_editor: Optional[TagEditor] = None,
    ):
        """Initialize the pipeline with configuration.

        Args:
            config: Application configuration
            probe: Track probe (defaults to mediainfo from config)
            selector: Stream selector
            encoder: ffmpeg wrapper
            tag_editor: mkvpropedit wrapper
        """
        tools = config.tools
        self.config = config
        self.probe = probe or MediaProbe(tools.mediainfo, tools.probe_timeout_seconds)
        self.selector = selector or StreamSelector(config)
        self.encoder = encoder or Encoder(tools.ffmpeg, tools.encode_timeout_seconds)
        self.tag_editor = tag_editor or TagEditor(tools.mkvpropedit, tools.tag_timeout_seconds)

    def plan(self, file_path: Path, options: EncodeOptions) -> EncodePlan:
        """Probe, select and compile without running anything else.

        Raises:
            InvalidArguments: If the options are invalid
            ProbeFailure: If the source cannot be probed
        """
        file_path = file_path.resolve()
        options.validate(file_path)
        output = build_output_path(options.output_dir, file_path.stem, options.container)

        tracks = self.probe.probe(file_path)
        selection = self.selector.select(
            tracks, options.languages, options.high_quality, file_path=file_path
        )
        return build_encode_plan(file_path, tracks, selection, options, output)

    async def process(self, file_path: Path, options: EncodeOptions) -> ProcessResult:
        """Process a single file through the complete pipeline.

        Args:
            file_path: Path to the source file
            options: Encoding settings

        Returns:
            ProcessResult naming the failed stage on failure

        Raises:
            InvalidArguments: If the options are invalid (nothing is run)
            ToolNotFound: If ffmpeg or mkvpropedit is not installed
        """
        start_time = time.time()
        file_path = file_path.resolve()
        dry_run = self.config.execution.dry_run

        options.validate(file_path)
        output = build_output_path(options.output_dir, file_path.stem, options.container)

        if not dry_run:
            self.encoder.ensure_available()
            if options.container.is_taggable:
                self.tag_editor.ensure_available()

        logger.info("Processing file", file=str(file_path), output=str(output.path))

        stage = Stage.PROBING
        try:
            tracks = self.probe.probe(file_path)

            stage = Stage.SELECTING
            selection = self.selector.select(
                tracks, options.languages, options.high_quality, file_path=file_path
            )

            stage = Stage.COMPILING
            plan = build_encode_plan(file_path, tracks, selection, options, output)

            if dry_run:
                logger.info(
                    "DRY RUN: Would encode",
                    file=str(file_path),
                    command=self.encoder.build_command(plan.encoder_args, output.path),
                    tag_command=self.tag_editor.build_command(output.path, plan.tag_editor_args)
                    if plan.needs_tagging
                    else None,
                )
                return ProcessResult(
                    status="dry_run", file_path=file_path, output_path=output.path, stage=stage
                )

            stage = Stage.ENCODING
            destination = materialize(output)
            self.encoder.encode(file_path, plan.encoder_args, destination)

        except (ProbeFailure, EncoderFailure, OSError) as e:
            message = e.message if isinstance(e, (ProbeFailure, EncoderFailure)) else str(e)
            logger.error("Pipeline stage failed", file=str(file_path), stage=stage.value, error=message)
            return ProcessResult(
                status="failed", file_path=file_path, output_path=output.path, stage=stage, error=message
            )

        warnings = []
        if plan.needs_tagging:
            try:
                self.tag_editor.edit(destination, plan.tag_editor_args)
            except TagEditorFailure as e:
                logger.warning(
                    "Tagging failed, keeping encoded file",
                    file=str(file_path),
                    output=str(destination),
                    error=e.message,
                )
                warnings.append(f"tagging failed: {e.message}")

        logger.info(
            "File processed successfully",
            file=str(file_path),
            output=str(destination),
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return ProcessResult(
            status="success",
            file_path=file_path,
            output_path=destination,
            stage=Stage.DONE,
            warnings=tuple(warnings),
        )


class RetagPipeline:
    """Retag an existing Matroska file and relocate it into a library layout."""

    def __init__(
        self,
        config: Config,
        resolver: Optional[EpisodeResolver] = None,
        probe: Optional[MediaProbe] = None,
        selector: Optional[StreamSelector] = None,
        tag_editor: Optional[TagEditor] = None,
    ):
        """Initialize the pipeline with configuration.

        Args:
            config: Application configuration
            resolver: Episode title resolver (scrapers)
            probe: Track probe
            selector: Stream selector
            tag_editor: mkvpropedit wrapper
        """
        tools = config.tools
        self.config = config
        self.resolver = resolver or EpisodeResolver(None)
        self.probe = probe or MediaProbe(tools.mediainfo, tools.probe_timeout_seconds)
        self.selector = selector or StreamSelector(config)
        self.tag_editor = tag_editor or TagEditor(tools.mkvpropedit, tools.tag_timeout_seconds)

    async def process(self, file_path: Path, options: RetagOptions) -> ProcessResult:
        """Retag one file and copy or move it into place.

        Relocation happens before tagging so a copy never modifies the
        original. A tag-editor failure is fatal here.

        Args:
            file_path: Path to the Matroska file
            options: Retagging settings

        Returns:
            ProcessResult naming the failed stage on failure

        Raises:
            InvalidArguments: If the options are invalid (nothing is run)
            ToolNotFound: If mkvpropedit is not installed
        """
        file_path = file_path.resolve()
        dry_run = self.config.execution.dry_run
        options.validate(file_path)
        if not dry_run:
            self.tag_editor.ensure_available()

        warnings = []
        stage = Stage.PROBING
        try:
            tracks = self.probe.probe(file_path)

            stage = Stage.SELECTING
            info = parse_series(file_path.stem)
            if info is not None:
                info, warning = await self.resolver.resolve(info, options.scraper)
                if warning:
                    warnings.append(warning)
            selection = self.selector.select(tracks, options.languages, file_path=file_path)

            stage = Stage.COMPILING
            base_dir = options.destination or file_path.parent
            output = build_output_path(
                base_dir, file_path.stem, Container.MKV, options.profile, series_info=info
            )
            tag_args = compile_retag(tracks, selection, output.title).tag_editor_args

            if dry_run:
                logger.info(
                    "DRY RUN: Would retag",
                    file=str(file_path),
                    tag_command=self.tag_editor.build_command(file_path, tag_args),
                    output=str(output.path) if (options.copy or options.move) else None,
                )
                return ProcessResult(
                    status="dry_run",
                    file_path=file_path,
                    output_path=output.path if (options.copy or options.move) else file_path,
                    stage=stage,
                    warnings=tuple(warnings),
                )

            stage = Stage.RELOCATING
            target = file_path
            if options.copy or options.move:
                target = materialize(output)
                if options.copy:
                    shutil.copy2(file_path, target)
                else:
                    shutil.move(str(file_path), str(target))
                logger.info(
                    "File relocated",
                    file=str(file_path),
                    target=str(target),
                    mode="copy" if options.copy else "move",
                )

            stage = Stage.TAGGING
            self.tag_editor.edit(target, tag_args)

        except (ProbeFailure, TagEditorFailure, OSError) as e:
            message = e.message if isinstance(e, (ProbeFailure, TagEditorFailure)) else str(e)
            logger.error("Retag stage failed", file=str(file_path), stage=stage.value, error=message)
            return ProcessResult(
                status="failed",
                file_path=file_path,
                stage=stage,
                error=message,
                warnings=tuple(warnings),
            )

        logger.info("File retagged", file=str(file_path), target=str(target), title=output.title)
        return ProcessResult(
            status="success",
            file_path=file_path,
            output_path=target,
            stage=Stage.DONE,
            warnings=tuple(warnings),
        )
