"""Unit tests for the filename series parser."""

import pytest

from mediaprep.core.paths import episode_names
from mediaprep.metadata.filename import parse_series
from mediaprep.models.metadata import SeriesInfo


class TestParseSeries:
    """Test series/season/episode extraction."""

    def test_dash_delimited_with_episode_name(self):
        info = parse_series("Series Name - S01E02 - Episode Title")
        assert info == SeriesInfo("Series Name", 1, 2, "Episode Title")

    def test_dash_delimited_without_episode_name(self):
        info = parse_series("Series Name - S03E10")
        assert info == SeriesInfo("Series Name", 3, 10, None)

    def test_no_dash(self):
        info = parse_series("Series Name S02E05 ")
        assert info == SeriesInfo("Series Name", 2, 5, None)

    def test_no_dash_no_space(self):
        info = parse_series("ShowS01E01")
        assert info == SeriesInfo("Show", 1, 1, None)

    def test_case_insensitive_and_leading_zeros(self):
        info = parse_series("show - s00e007 - Pilot Special")
        assert info.season == 0
        assert info.episode == 7
        assert info.episode_name == "Pilot Special"

    def test_episode_name_not_swallowed_into_series(self):
        info = parse_series("Show - Part One - S01E02 - Title - With Dashes")
        assert info.series == "Show - Part One"
        assert info.episode_name == "Title - With Dashes"

    @pytest.mark.parametrize("stem", ["Movie Title", "Movie (2020)", "", "S01E02"])
    def test_not_a_series(self, stem):
        assert parse_series(stem) is None

    def test_marker_with_trailing_noise_is_not_matched(self):
        # Patterns are anchored; release-group noise is not a series name
        assert parse_series("Show.S01E02.1080p.WEB") is None

    @pytest.mark.parametrize(
        "stem",
        [
            "Series Name - S01E02 - Episode Title",
            "Another Show - S10E120 - Finale",
            "X - S00E01 - Special",
        ],
    )
    def test_reparsing_title_is_idempotent(self, stem):
        info = parse_series(stem)
        file_stem, _ = episode_names(info, None)
        reparsed = parse_series(file_stem)
        assert (reparsed.season, reparsed.episode) == (info.season, info.episode)
        assert reparsed.series == info.series
