"""Command-line interface for mediaprep."""

import asyncio
import shlex
import sys
from pathlib import Path

import click

from mediaprep import __version__
from mediaprep.config import load_config
from mediaprep.core.pipeline import EncodeOptions, EncodingPipeline, RetagOptions, RetagPipeline
from mediaprep.core.scanner import FileScanner
from mediaprep.exceptions import MediaPrepError
from mediaprep.metadata.resolver import EpisodeResolver
from mediaprep.models.encoding import Container, TargetFormat, VideoCodec
from mediaprep.models.file import ProcessResult, Stage
from mediaprep.models.metadata import NamingProfile, Scraper
from mediaprep.utils.logger import setup_logging


def _choice(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _enum(enum_cls, value):
    return enum_cls(value.lower()) if value is not None else None


def _languages(value):
    if not value:
        return None
    return [code.strip() for code in value.split(",") if code.strip()]


def _discover(path: Path, recursive: bool, extensions=None) -> list[Path]:
    try:
        return FileScanner().scan(path, recursive=recursive, extensions=extensions)
    except (FileNotFoundError, ValueError) as e:
        click.secho(f"✗ Error scanning: {e}", fg="red", err=True)
        sys.exit(1)


def _rejected(file: Path, error: MediaPrepError) -> ProcessResult:
    """Failed result for a file rejected before any stage ran."""
    return ProcessResult(status="failed", file_path=file, stage=Stage.IDLE, error=error.message)


def _report(results: list) -> None:
    """Print a summary and exit non-zero if any file failed."""
    counts = {"success": 0, "dry_run": 0, "failed": 0}
    for result in results:
        counts[result.status] += 1

    click.echo("=" * 60)
    click.echo("Summary:")
    click.secho(f"  ✓ Success:  {counts['success']}", fg="green")
    click.secho(f"  ⊙ Dry run:  {counts['dry_run']}", fg="cyan")
    click.secho(f"  ✗ Failed:   {counts['failed']}", fg="red")
    click.echo(f"  Total:      {len(results)}")

    if counts["failed"] > 0:
        sys.exit(1)


def _show(result, indent: str = "  ") -> None:
    color = {"success": "green", "dry_run": "cyan"}.get(result.status, "red")
    click.secho(f"{indent}{result}", fg=color)
    for warning in result.warnings:
        click.secho(f"{indent}  ! {warning}", fg="yellow")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Configuration file (default: $MEDIAPREP_CONFIG, then ~/.config/mediaprep/config.yaml)",
)
@click.option("--dry-run", is_flag=True, default=False, help="Build commands without running them")
@click.pass_context
def cli(ctx, config, dry_run):
    """mediaprep - select streams, encode and retag media files."""
    try:
        cfg = load_config(config)
        if dry_run:
            cfg.execution.dry_run = True
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


def encode_options(func):
    """Options shared by `encode` and `plan`."""
    options = [
        click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path)),
        click.option("--codec", type=_choice(VideoCodec), help="Target video codec"),
        click.option("--format", "target_format", type=_choice(TargetFormat), help="Target resolution"),
        click.option("--container", type=_choice(Container), help="Output container"),
        click.option("--languages", "-l", help="Preferred languages, comma separated (e.g. eng,jpn)"),
        click.option("--high-quality/--standard-quality", default=None, help="Keep surround tracks too"),
        click.option("--remux/--no-remux", default=None, help="Copy every selected stream"),
        click.option("--copy-video/--encode-video", default=None, help="Copy the video stream"),
        click.option("--copy-audio/--encode-audio", default=None, help="Copy audio streams"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_encode_options(config, kwargs) -> EncodeOptions:
    return EncodeOptions.from_config(
        config,
        output_dir=kwargs["output_dir"],
        codec=_enum(VideoCodec, kwargs["codec"]),
        target_format=_enum(TargetFormat, kwargs["target_format"]),
        container=_enum(Container, kwargs["container"]),
        languages=_languages(kwargs["languages"]),
        high_quality=kwargs["high_quality"],
        remux=kwargs["remux"],
        copy_video=kwargs["copy_video"],
        copy_audio=kwargs["copy_audio"],
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@encode_options
@click.option("--recursive/--no-recursive", "-r/-R", default=True, help="Scan subdirectories")
@click.pass_context
def encode(ctx, path, recursive, **kwargs):
    """Encode a file, or every video file under a directory.

    Args:
        path: File or directory to encode
    """
    config = ctx.obj["config"]
    options = _build_encode_options(config, kwargs)
    files = _discover(path, recursive)

    if not files:
        click.secho("⊘ No video files found", fg="yellow")
        sys.exit(0)

    pipeline = EncodingPipeline(config)

    async def _encode():
        results = []
        for idx, file in enumerate(files, 1):
            click.echo(f"[{idx}/{len(files)}] {file.name}")
            try:
                result = await pipeline.process(file, options)
            except MediaPrepError as e:
                click.secho(f"  ✗ {e}", fg="red", err=True)
                if len(files) == 1:
                    sys.exit(2)
                results.append(_rejected(file, e))
                continue
            _show(result)
            results.append(result)
        return results

    _report(asyncio.run(_encode()))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@encode_options
@click.pass_context
def plan(ctx, file, **kwargs):
    """Print the ffmpeg and mkvpropedit commands for a file without running them."""
    config = ctx.obj["config"]
    options = _build_encode_options(config, kwargs)
    pipeline = EncodingPipeline(config)

    try:
        encode_plan = pipeline.plan(file, options)
    except MediaPrepError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(2)

    output = Path(encode_plan.output_path)
    click.echo(shlex.join(pipeline.encoder.build_command(encode_plan.encoder_args, output)))
    if encode_plan.needs_tagging:
        click.echo(shlex.join(pipeline.tag_editor.build_command(output, encode_plan.tag_editor_args)))


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--destination", "-d", type=click.Path(file_okay=False, path_type=Path))
@click.option("--copy", "copy_", is_flag=True, default=False, help="Copy into the destination")
@click.option("--move", is_flag=True, default=False, help="Move into the destination")
@click.option("--profile", type=_choice(NamingProfile), help="Naming profile")
@click.option("--scraper", type=_choice(Scraper), help="Episode metadata scraper")
@click.option("--languages", "-l", help="Preferred languages, comma separated")
@click.option("--recursive/--no-recursive", "-r/-R", default=True, help="Scan subdirectories")
@click.pass_context
def retag(ctx, path, destination, copy_, move, profile, scraper, languages, recursive):
    """Retag Matroska files and relocate them into a library layout.

    Args:
        path: File or directory to retag
    """
    config = ctx.obj["config"]
    options = RetagOptions.from_config(
        config,
        destination=destination,
        copy=copy_,
        move=move,
        profile=_enum(NamingProfile, profile),
        scraper=_enum(Scraper, scraper),
        languages=_languages(languages),
    )
    files = _discover(path, recursive, extensions={".mkv"})

    if not files:
        click.secho("⊘ No Matroska files found", fg="yellow")
        sys.exit(0)

    async def _retag():
        resolver = EpisodeResolver.from_config(config)
        pipeline = RetagPipeline(config, resolver=resolver)
        results = []
        try:
            for idx, file in enumerate(files, 1):
                click.echo(f"[{idx}/{len(files)}] {file.name}")
                try:
                    result = await pipeline.process(file, options)
                except MediaPrepError as e:
                    click.secho(f"  ✗ {e}", fg="red", err=True)
                    if len(files) == 1:
                        sys.exit(2)
                    results.append(_rejected(file, e))
                    continue
                _show(result)
                results.append(result)
        finally:
            await resolver.close()
        return results

    _report(asyncio.run(_retag()))


@cli.command()
@click.pass_context
def version(ctx):
    """Show version information."""
    click.echo(f"mediaprep v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
