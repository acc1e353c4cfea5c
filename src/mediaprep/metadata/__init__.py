"""Metadata resolution components for mediaprep.

This package parses series information from filenames and resolves missing
episode titles from online scrapers.
"""

from mediaprep.metadata.filename import parse_series
from mediaprep.metadata.resolver import EpisodeResolver

__all__ = ["EpisodeResolver", "parse_series"]
