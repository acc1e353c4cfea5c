"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from mediaprep.config import Config, LoggingConfig, TMDBConfig, load_config
from mediaprep.models.encoding import Container, TargetFormat, VideoCodec
from mediaprep.models.metadata import NamingProfile, Scraper


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("MEDIAPREP_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    config = load_config()
    assert config.language_priority == ["eng"]
    assert config.encoding.codec is VideoCodec.X265
    assert config.encoding.target_format is TargetFormat.NONE
    assert config.encoding.container is Container.MKV
    assert config.naming.profile is NamingProfile.STANDARD
    assert config.naming.scraper is Scraper.NONE
    assert config.tmdb.enabled is False
    assert config.tools.encode_timeout_seconds is None
    assert config.execution.dry_run is False


def test_from_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("TMDB_API_KEY", "secret")
    path = tmp_path / "config.yaml"
    path.write_text(
        """
language_priority: [jpn, eng]
path_overrides:
  - path: "/media/kids/**"
    language_priority: [ger]
encoding:
  codec: hevc_nvenc
  target_format: 1080p
  container: mp4
naming:
  profile: plex
  scraper: tmdb
tmdb:
  enabled: true
  api_key: ${TMDB_API_KEY}
logging:
  level: DEBUG
  format: json
"""
    )

    config = Config.from_yaml(path)

    assert config.language_priority == ["jpn", "eng"]
    assert config.path_overrides[0].language_priority == ["ger"]
    assert config.encoding.codec is VideoCodec.HEVC_NVENC
    assert config.encoding.target_format is TargetFormat.P1080
    assert config.encoding.container is Container.MP4
    assert config.naming.profile is NamingProfile.PLEX
    assert config.tmdb.api_key == "secret"
    assert config.logging.level == "debug"


def test_missing_env_var(tmp_path, monkeypatch):
    monkeypatch.delenv("MEDIAPREP_UNSET", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("encoding:\n  output_dir: ${MEDIAPREP_UNSET}\n")

    with pytest.raises(ValueError, match="MEDIAPREP_UNSET"):
        Config.from_yaml(path)


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert Config.from_yaml(path) == Config()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_tmdb_requires_api_key():
    with pytest.raises(ValidationError, match="API key required"):
        TMDBConfig(enabled=True, api_key=None)


def test_invalid_codec():
    with pytest.raises(ValidationError):
        Config(encoding={"codec": "vp9"})


@pytest.mark.parametrize("field,value", [("level", "verbose"), ("format", "xml")])
def test_invalid_logging(field, value):
    with pytest.raises(ValidationError):
        LoggingConfig(**{field: value})


def test_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("language_priority: [ita]\n")
    monkeypatch.setenv("MEDIAPREP_CONFIG", str(path))

    assert load_config().language_priority == ["ita"]


def test_user_config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("MEDIAPREP_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    user_config = tmp_path / ".config" / "mediaprep" / "config.yaml"
    user_config.parent.mkdir(parents=True)
    user_config.write_text("naming:\n  profile: jellyfin\n")

    assert load_config().naming.profile is NamingProfile.JELLYFIN
