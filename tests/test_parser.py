"""Tests for the filename pattern cascade."""

import datetime

import pytest

from plexnamer.rename.parser import (
    EpisodeMatchingResult,
    combine_results,
    detect_season,
    parse_episode_filename,
)


class TestSeasonEpisodeMarkers:
    """S01E02 style markers."""

    def test_season_episode(self):
        """Plain SxxExx marker with technical junk after it."""
        result = parse_episode_filename("Show.Name.S01E02.720p.mkv")
        assert result.season == 1
        assert result.episodes == [2]

    @pytest.mark.parametrize("name", ["Show S01 E02.mkv", "Show.S01.E02.mkv", "Show_S01_E02.mkv", "show.s01e02.mkv"])
    def test_separator_variants(self, name):
        """Separators between season and episode and lower case are accepted."""
        result = parse_episode_filename(name)
        assert (result.season, result.episodes) == (1, [2])

    def test_candidate_title(self):
        """The tail after the marker becomes the name, extension stripped."""
        result = parse_episode_filename("Show.S01E02.Pilot.mkv")
        assert result.name == "Pilot"

    @pytest.mark.parametrize("name", ["Show.S01E01E02.mkv", "Show.S01E01-E02.mkv", "Show.S01E01.S01E02.mkv"])
    def test_multi_episode(self, name):
        """Chained markers yield every episode."""
        result = parse_episode_filename(name)
        assert result.season == 1
        assert result.episodes == [1, 2]

    def test_episodes_sorted_and_unique(self):
        """Episodes come back ascending without duplicates."""
        assert parse_episode_filename("Show.S01E03E02.mkv").episodes == [2, 3]
        assert parse_episode_filename("Show.S01E02E02.mkv").episodes == [2]

    def test_full_path_uses_filename_only(self):
        """Folder names do not take part in parsing."""
        result = parse_episode_filename("/media/S09E09/Show.S01E02.mkv")
        assert (result.season, result.episodes) == (1, [2])


class TestOtherMarkers:
    """Lower priority patterns of the cascade."""

    def test_season_x_episode(self):
        """1x09 markers."""
        result = parse_episode_filename("Show.1x09.Title.avi")
        assert result.season == 1
        assert result.episodes == [9]
        assert result.name == "Title"

    def test_season_x_episode_chained(self):
        """A second 1x02 marker in the tail adds its episode."""
        result = parse_episode_filename("Show.1x01.1x02.avi")
        assert (result.season, result.episodes) == (1, [1, 2])

    def test_episode_only(self):
        """EP05 carries no season."""
        result = parse_episode_filename("Show.EP05.mkv")
        assert result.season == -1
        assert result.episodes == [5]

    def test_three_digit(self):
        """103 reads as season 1 episode 3."""
        result = parse_episode_filename("Show.Name.103.HDTV.avi")
        assert (result.season, result.episodes) == (1, [3])
        assert result.name == "HDTV"

    def test_three_digit_reads_years_greedily(self):
        """A bare year is taken for season 20 episode 11."""
        result = parse_episode_filename("Show.2011.mkv")
        assert (result.season, result.episodes) == (20, [11])

    def test_roman_part(self):
        """Part.IV gives episode 4."""
        result = parse_episode_filename("Show.Part.IV.mkv")
        assert result.season == -1
        assert result.episodes == [4]

    def test_earlier_matcher_wins(self):
        """The S01E02 season wins over the season of a later numeric match."""
        result = parse_episode_filename("Show.S01E02.Title.2010.mkv")
        assert result.season == 1
        assert result.episodes == [2, 10]

    def test_tail_runs_whole_cascade(self):
        """A three digit number after the marker adds its episode."""
        result = parse_episode_filename("Show.S01E01.Title.102.mkv")
        assert (result.season, result.episodes) == (1, [1, 2])

    def test_tail_roman_part(self):
        """Roman part numbers in the tail are picked up too."""
        result = parse_episode_filename("Show.S01E01.Part.II.mkv")
        assert result.episodes == [1, 2]

    def test_chained_tail_leaves_name_blank(self):
        """When the tail holds more episodes it does not become the name."""
        result = parse_episode_filename("Show.1x01.1x02.Title.avi")
        assert result.episodes == [1, 2]
        assert result.name == ""


class TestDates:
    """Air date patterns."""

    def test_year_month_day(self):
        """The year becomes the season and the numeric heuristic stays quiet."""
        result = parse_episode_filename("Show.2010.05.04.Guest.mkv")
        assert result.season == 2010
        assert result.date == datetime.date(2010, 5, 4)
        assert result.episodes == []
        assert result.name == "Guest"

    def test_month_day_year(self):
        """mm.dd.yyyy dates."""
        result = parse_episode_filename("Show.05.04.2010.mkv")
        assert result.season == 2010
        assert result.date == datetime.date(2010, 5, 4)

    def test_day_month_year_fallback(self):
        """A first field above 12 is read as the day."""
        result = parse_episode_filename("Show.25.12.2010.mkv")
        assert result.date == datetime.date(2010, 12, 25)


class TestUnparseable:
    """Input the cascade cannot read."""

    @pytest.mark.parametrize("name", ["", None, "random words.mkv", "\\/"])
    def test_empty_result(self, name):
        """No exception, just the default result."""
        result = parse_episode_filename(name)
        assert result.season == -1
        assert result.episodes == []
        assert result.name == ""


class TestCombineResults:
    """Folding fragments in priority order."""

    def test_first_values_win(self):
        """First season, first episode list and first name win."""
        fragments = [
            EpisodeMatchingResult(season=-1, episodes=[], name="first"),
            EpisodeMatchingResult(season=2, episodes=[5], name="second"),
            EpisodeMatchingResult(season=3, episodes=[7, 8], name=""),
        ]
        result = combine_results(fragments)
        assert result.season == 2
        assert result.episodes == [5]
        assert result.name == "first"

    def test_no_fragments(self):
        """An empty fold is the default result."""
        assert combine_results([]) == EpisodeMatchingResult()


class TestDetectSeason:
    """Season numbers from folder names."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("Season 2/Show.E05.mkv", 2),
            ("Staffel 3/Show.E05.mkv", 3),
            ("S04/ep1.mkv", 4),
            ("Show/Season 1/extras/x.mkv", 1),
            ("Extras/foo.mkv", -1),
            ("foo.mkv", -1),
        ],
    )
    def test_detect_season(self, path, expected):
        """Innermost season-like folder wins."""
        assert detect_season(path) == expected
