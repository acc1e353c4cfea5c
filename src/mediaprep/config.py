"""Configuration management for mediaprep."""

import os
import re
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mediaprep.models.encoding import Container, TargetFormat, VideoCodec
from mediaprep.models.metadata import NamingProfile, Scraper


class PathOverride(BaseModel):
    """Path-specific language priority override."""

    path: str = Field(..., description="Glob pattern for file paths")
    language_priority: List[str] = Field(..., description="Language priority for this path")


class EncodingConfig(BaseModel):
    """Default encoding targets (CLI options override these)."""

    codec: VideoCodec = Field(default=VideoCodec.X265, description="Target video codec")
    target_format: TargetFormat = Field(
        default=TargetFormat.NONE, description="Target resolution (720p, 1080p, none)"
    )
    container: Container = Field(default=Container.MKV, description="Output container")
    high_quality: bool = Field(
        default=False, description="Also keep the best surround track per language"
    )
    remux: bool = Field(default=False, description="Copy every selected stream")
    copy_video: bool = Field(default=False, description="Copy the video stream only")
    copy_audio: bool = Field(default=False, description="Copy audio streams only")
    output_dir: Optional[str] = Field(default=None, description="Base output directory")


class NamingConfig(BaseModel):
    """Naming and relocation configuration for retagging."""

    profile: NamingProfile = Field(default=NamingProfile.STANDARD, description="Naming profile")
    scraper: Scraper = Field(default=Scraper.NONE, description="Episode metadata scraper")


class ToolsConfig(BaseModel):
    """External binaries and their timeouts."""

    mediainfo: str = Field(default="mediainfo", description="Probe binary")
    ffmpeg: str = Field(default="ffmpeg", description="Encoder binary")
    mkvpropedit: str = Field(default="mkvpropedit", description="Tag editor binary")
    probe_timeout_seconds: int = Field(default=60, description="Probe timeout")
    encode_timeout_seconds: Optional[int] = Field(
        default=None, description="Encoder timeout (None waits for completion)"
    )
    tag_timeout_seconds: int = Field(default=120, description="Tag editor timeout")


class TMDBConfig(BaseModel):
    """TMDB API configuration."""

    enabled: bool = Field(default=False, description="Enable TMDB integration")
    api_key: Optional[str] = Field(default=None, description="TMDB API key")
    cache_ttl_days: int = Field(default=30, description="Cache TTL in days")
    cache_path: str = Field(
        default="~/.cache/mediaprep/tmdb_cache.db", description="Cache database path"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str], info) -> Optional[str]:
        """Validate API key is provided when TMDB is enabled."""
        enabled = info.data.get("enabled", False)
        if enabled and not v:
            raise ValueError("TMDB API key required when TMDB is enabled")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class ExecutionConfig(BaseModel):
    """Execution configuration."""

    dry_run: bool = Field(default=False, description="Build commands without running them")


class Config(BaseModel):
    """Main configuration model."""

    language_priority: List[str] = Field(
        default=["eng"], description="Global language priority"
    )
    path_overrides: List[PathOverride] = Field(
        default_factory=list, description="Path-specific language overrides"
    )
    encoding: EncodingConfig = Field(
        default_factory=EncodingConfig, description="Encoding defaults"
    )
    naming: NamingConfig = Field(default_factory=NamingConfig, description="Naming configuration")
    tools: ToolsConfig = Field(default_factory=ToolsConfig, description="External tools")
    tmdb: TMDBConfig = Field(default_factory=TMDBConfig, description="TMDB configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    execution: ExecutionConfig = Field(
        default_factory=ExecutionConfig, description="Execution configuration"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively replace ``${VAR_NAME}`` with ``os.environ['VAR_NAME']``."""
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


CONFIG_ENV_VAR = "MEDIAPREP_CONFIG"
USER_CONFIG_PATH = Path("~/.config/mediaprep/config.yaml")


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Without an explicit path, ``$MEDIAPREP_CONFIG`` is used, then
    ``~/.config/mediaprep/config.yaml`` if it exists.

    Args:
        path: Optional path to configuration file

    Returns:
        Config instance
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if path is None:
        user_config = USER_CONFIG_PATH.expanduser()
        if not user_config.is_file():
            return Config.from_defaults()
        path = user_config

    return Config.from_yaml(path)
