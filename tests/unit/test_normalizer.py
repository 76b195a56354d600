"""
Unit tests for core.normalizer module.
"""

import unittest

from tune_resolver.core import normalizer
from tune_resolver.core.models import TrackInfo
from tune_resolver.utils.string_utils import normalize_whitespace


class TestParse(unittest.TestCase):
    """Test cases for parse()."""

    def test_simple_title(self):
        """Test plain 'Artist - Song' title."""
        self.assertEqual(
            normalizer.parse("Daft Punk - One More Time"),
            TrackInfo(artist="Daft Punk", song="One More Time"),
        )

    def test_no_separator_returns_none(self):
        """Test title without a dash separator."""
        self.assertIsNone(normalizer.parse("Just A Title Without Separator"))

    def test_empty_title_returns_none(self):
        """Test empty title."""
        self.assertIsNone(normalizer.parse(""))

    def test_en_and_em_dashes(self):
        """Test alternative dashes are treated as separators."""
        self.assertEqual(
            normalizer.parse("Daft Punk – One More Time"),
            TrackInfo(artist="Daft Punk", song="One More Time"),
        )
        self.assertEqual(
            normalizer.parse("Daft Punk — One More Time"),
            TrackInfo(artist="Daft Punk", song="One More Time"),
        )

    def test_pipe_branding_dropped(self):
        """Test text after the first pipe is ignored."""
        self.assertEqual(
            normalizer.parse("Artist - Song | Some Channel | Extra"),
            TrackInfo(artist="Artist", song="Song"),
        )

    def test_official_video_removed(self):
        """Test bracketed noise descriptor is removed."""
        track = normalizer.parse("Daft Punk - One More Time (Official Video)")
        self.assertEqual(track.song, "One More Time")

    def test_square_brackets_removed(self):
        """Test noise in square brackets is removed."""
        track = normalizer.parse("Artist - Song [Official Music Video] [HD]")
        self.assertEqual(track.song, "Song")

    def test_meaningful_descriptor_preserved(self):
        """Test remix descriptor survives while noise is stripped."""
        track = normalizer.parse(
            "Justice - D.A.N.C.E. (Live Remix) (Official Video) 2018"
        )
        self.assertEqual(track, TrackInfo(artist="Justice", song="D.A.N.C.E. (Live Remix)"))

    def test_featuring_in_artist_standardized(self):
        """Test ft. in the artist half becomes feat."""
        track = normalizer.parse("Artist ft. Someone - Song")
        self.assertEqual(track.artist, "Artist feat. Someone")

    def test_bare_featuring_relocated(self):
        """Test bare featuring in the song is moved into parentheses."""
        self.assertEqual(
            normalizer.parse("Artist - Song feat. Other").song, "Song (feat. Other)"
        )
        self.assertEqual(
            normalizer.parse("Artist - Song ft Other").song, "Song (feat. Other)"
        )
        self.assertEqual(
            normalizer.parse("Artist - Song Featuring Other").song,
            "Song (feat. Other)",
        )

    def test_bracketed_featuring_kept(self):
        """Test featuring already in parentheses is left in place."""
        self.assertEqual(
            normalizer.parse("Artist - Song (feat. Other)").song, "Song (feat. Other)"
        )

    def test_trailing_year_removed(self):
        """Test trailing years in all three forms."""
        self.assertEqual(normalizer.parse("Artist - Song 1999").song, "Song")
        self.assertEqual(normalizer.parse("Artist - Song - 2011").song, "Song")
        self.assertEqual(normalizer.parse("Artist - Song (2019)").song, "Song")

    def test_stacked_trailing_years_removed(self):
        """Test every trailing year goes, not only the last one."""
        self.assertEqual(normalizer.parse("Artist - Song 1999 2000").song, "Song")
        self.assertEqual(normalizer.parse("Artist - Song 2019 (2020)").song, "Song")

    def test_featuring_before_bracket_group(self):
        """Test featured artists stop at the next bracket group."""
        self.assertEqual(
            normalizer.parse("Artist - Song feat. X (Remix)").song,
            "Song (feat. X) (Remix)",
        )

    def test_dangling_separator_after_noise_segment(self):
        """Test a trailing noise segment leaves no hyphen behind."""
        self.assertEqual(
            normalizer.parse("Artist - Song - Official Video").song, "Song"
        )

    def test_extra_dash_segments_joined_into_song(self):
        """Test only the first separator splits artist from song."""
        self.assertEqual(
            normalizer.parse("Artist - Song - Remastered 2011").song, "Song"
        )
        self.assertEqual(
            normalizer.parse("Artist - Part One - Part Two").song,
            "Part One - Part Two",
        )

    def test_bare_noise_tags_removed(self):
        """Test noise words outside brackets are removed."""
        self.assertEqual(normalizer.parse("Artist - Song Lyrics HD").song, "Song")

    def test_noise_only_song_returns_none(self):
        """Test a song made only of noise produces no result."""
        self.assertIsNone(normalizer.parse("Artist - (Official Video)"))

    def test_documented_examples(self):
        """Test reference titles covering each cleanup step."""
        self.assertEqual(
            normalizer.parse("Major Lazer ft. DJ Snake - Lean On"),
            TrackInfo(artist="Major Lazer feat. DJ Snake", song="Lean On"),
        )
        self.assertEqual(
            normalizer.parse("Calvin Harris - This Is What You Came For feat. Rihanna"),
            TrackInfo(
                artist="Calvin Harris",
                song="This Is What You Came For (feat. Rihanna)",
            ),
        )
        self.assertEqual(
            normalizer.parse(
                "LCD Soundsystem - All My Friends | Pitchfork Music Festival"
            ),
            TrackInfo(artist="LCD Soundsystem", song="All My Friends"),
        )
        self.assertIsNone(normalizer.parse("Random Title With No Dash"))

    def test_output_has_no_outer_whitespace(self):
        """Test artist and song are always trimmed and collapsed."""
        track = normalizer.parse("   Artist    Name   -   Some    Song   ")
        self.assertEqual(track, TrackInfo(artist="Artist Name", song="Some Song"))

    def test_idempotent_on_own_output(self):
        """Test re-parsing a normalized pair yields the same pair."""
        titles = [
            "Daft Punk - One More Time (Official Video)",
            "Justice - D.A.N.C.E. (Live Remix) (Official Video) 2018",
            "Artist ft. Someone - Song feat. Other [HD]",
            "Artist – Song (Extended Mix) | Label Channel",
            "Artist - Song (2019)",
            "Artist - Song 1999 2000",
            "Artist - Song 2019 (2020)",
            "Artist - Song feat. X (Remix)",
            "Artist - Song - Official Video",
        ]
        for title in titles:
            with self.subTest(title=title):
                first = normalizer.parse(title)
                self.assertIsNotNone(first)
                second = normalizer.parse(f"{first.artist} - {first.song}")
                self.assertEqual(first, second)


class TestNormalize(unittest.TestCase):
    """Test cases for normalize()."""

    def test_structured_query(self):
        """Test a parseable title fills artist and song."""
        query = normalizer.normalize("Daft Punk - One More Time", "desc")

        self.assertEqual(query.raw_title, "Daft Punk - One More Time")
        self.assertEqual(query.raw_description, "desc")
        self.assertEqual(query.artist, "Daft Punk")
        self.assertEqual(query.song, "One More Time")
        self.assertTrue(query.is_structured)

    def test_unstructured_query_keeps_cleaned_title(self):
        """Test an unparseable title still yields the cleaned raw title."""
        query = normalizer.normalize("Some   Title | Channel")

        self.assertEqual(query.raw_title, "Some Title")
        self.assertIsNone(query.artist)
        self.assertIsNone(query.song)
        self.assertFalse(query.is_structured)

    def test_empty_title(self):
        """Test empty title gives an empty query."""
        query = normalizer.normalize("")

        self.assertEqual(query.raw_title, "")
        self.assertIsNone(query.artist)


class TestRules(unittest.TestCase):
    """Test cases for the individual cleanup rules."""

    def test_normalize_dashes(self):
        self.assertEqual(normalizer.normalize_dashes("a–b—c"), "a-b-c")

    def test_extract_primary_segment(self):
        self.assertEqual(normalizer.extract_primary_segment("A - B | C"), "A - B")
        self.assertEqual(normalizer.extract_primary_segment("A - B"), "A - B")

    def test_standardize_featuring(self):
        self.assertEqual(normalizer.standardize_featuring("A Featuring B"), "A feat. B")
        self.assertEqual(normalizer.standardize_featuring("A FT. B"), "A feat. B")
        self.assertEqual(normalizer.standardize_featuring("A feat B"), "A feat. B")
        self.assertEqual(normalizer.standardize_featuring("A feat. B"), "A feat. B")

    def test_standardize_featuring_ignores_word_parts(self):
        """Test 'ft' inside a word is not rewritten."""
        self.assertEqual(normalizer.standardize_featuring("Craft Beer"), "Craft Beer")
        self.assertEqual(normalizer.standardize_featuring("Defeated"), "Defeated")

    def test_is_extraneous_descriptor(self):
        self.assertTrue(normalizer.is_extraneous_descriptor("Official Video"))
        self.assertTrue(normalizer.is_extraneous_descriptor("Lyrics"))
        self.assertTrue(normalizer.is_extraneous_descriptor("   "))
        self.assertFalse(normalizer.is_extraneous_descriptor("Extended Mix"))
        self.assertFalse(normalizer.is_extraneous_descriptor("Live Remix"))
        self.assertFalse(normalizer.is_extraneous_descriptor("feat. Someone"))
        self.assertFalse(normalizer.is_extraneous_descriptor("Acoustic"))

    def test_strip_bracketed_descriptors(self):
        result = normalizer.strip_bracketed_descriptors(
            "Song (Radio Edit) [Official Audio] {Acoustic}"
        )
        self.assertEqual(normalize_whitespace(result), "Song (Radio Edit) (Acoustic)")

    def test_strip_extraneous_tags(self):
        result = normalizer.strip_extraneous_tags("Song Official Audio")
        self.assertEqual(normalize_whitespace(result), "Song")

    def test_strip_extraneous_tags_keeps_tag_inside_remix_group(self):
        result = normalizer.strip_extraneous_tags("Song (Live Remix)")
        self.assertEqual(result, "Song (Live Remix)")

    def test_strip_extraneous_tags_inside_unclosed_mix_group(self):
        """Test a tag after an unclosed '(... Mix' is kept by proximity."""
        result = normalizer.strip_extraneous_tags("Song (Extended Mix Official")
        self.assertEqual(result, "Song (Extended Mix Official")

    def test_strip_extraneous_tags_after_closed_group(self):
        """Test a tag after a closed remix group is still removed."""
        result = normalizer.strip_extraneous_tags("Song (Remix) Live")
        self.assertEqual(normalize_whitespace(result), "Song (Remix)")

    def test_strip_year_suffixes_only_at_end(self):
        self.assertEqual(
            normalize_whitespace(normalizer.strip_year_suffixes("1999 Song 2001")),
            "1999 Song",
        )

    def test_strip_year_suffixes_repeated(self):
        self.assertEqual(
            normalize_whitespace(normalizer.strip_year_suffixes("Song 1999 (2000) - 2001")),
            "Song",
        )

    def test_strip_dangling_separators(self):
        self.assertEqual(normalizer.strip_dangling_separators("Song -"), "Song")
        self.assertEqual(normalizer.strip_dangling_separators("- Song - "), "Song")
        self.assertEqual(normalizer.strip_dangling_separators("Re-Run"), "Re-Run")

    def test_relocate_featuring(self):
        self.assertEqual(
            normalizer.relocate_featuring("Song feat. A & B"), "Song (feat. A & B)"
        )
        self.assertEqual(
            normalizer.relocate_featuring("feat. Someone"), "feat. Someone"
        )

    def test_relocate_featuring_keeps_following_groups(self):
        self.assertEqual(
            normalizer.relocate_featuring("Song feat. A (Remix) (Radio Edit)"),
            "Song (feat. A) (Remix) (Radio Edit)",
        )

    def test_apply_rules_runs_in_order(self):
        rules = (
            ("upper", str.upper),
            ("suffix", lambda value: value + "!"),
        )
        self.assertEqual(normalizer.apply_rules("abc", rules), "ABC!")


if __name__ == "__main__":
    unittest.main()
