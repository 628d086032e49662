"""
Tests for the pairwise duplicate matcher.
Covers the exact-field policy, version asymmetry and argument-order symmetry.
"""
import pytest
from dupetracks.core.matcher import DuplicateMatcher
from dupetracks.core.models import ParsedTitle
from conftest import make_file

MB = 1_048_576


@pytest.fixture
def matcher():
    return DuplicateMatcher()


class TestMatchPair:

    def test_flac_wins_over_mp3(self, matcher):
        mp3 = make_file("01. DJ Snake - Title Track.mp3", 320, size=8 * MB)
        flac = make_file("DJ Snake - Title Track.flac", 1000, size=30 * MB)

        match = matcher.match_pair(mp3, flac)

        assert match is not None
        assert match.higher_quality == flac
        assert match.lower_quality == mp3
        assert match.match_reason == "Exact title match: 'dj snake - title track'"
        assert match.quality_difference == "Bitrate difference: 320 vs 1000 kbps"

    def test_flac_wins_with_lower_bitrate(self, matcher):
        mp3 = make_file("Artist - Song.mp3", 1411)
        flac = make_file("Artist - Song.flac", 900)
        assert matcher.match_pair(mp3, flac).higher_quality == flac

    def test_different_mixes_are_distinct(self, matcher):
        radio = make_file("Artist - Track (Radio Edit).mp3", 320)
        club = make_file("Artist - Track (Club Mix).mp3", 320)
        assert matcher.match_pair(radio, club) is None

    def test_year_tags_collapse(self, matcher):
        a = make_file("Artist - Track (2017).mp3", 320)
        b = make_file("Artist - Track (2019).mp3", 192)
        match = matcher.match_pair(a, b)
        assert match is not None
        assert match.higher_quality == a
        assert match.match_reason == "Exact title match: 'artist - track (2017)'"

    def test_artist_credit_order(self, matcher):
        a = make_file("A, B - Song.mp3", 320)
        b = make_file("B, A - Song.mp3", 128)
        assert matcher.match_pair(a, b) is not None

    def test_plain_release_not_merged_with_remix(self, matcher):
        plain = make_file("Artist - Song.mp3", 320)
        remix = make_file("Artist - Song (Remix).mp3", 320)
        assert matcher.match_pair(plain, remix) is None

    def test_numbered_parts_are_distinct(self, matcher):
        part_two = make_file("Artist - Symphony (Pt. 2).mp3", 320)
        part_three = make_file("Artist - Symphony (Pt. 3).mp3", 128)
        assert matcher.match_pair(part_two, part_three) is None

    def test_different_featured_artists_are_distinct(self, matcher):
        alice = make_file("Artist - Song (feat. Alice).mp3", 320)
        bob = make_file("Artist - Song (feat. Bob).mp3", 128)
        assert matcher.match_pair(alice, bob) is None

    def test_different_titles_never_match(self, matcher):
        a = make_file("Artist - Song (Remix).mp3", 320)
        b = make_file("Artist - Songs (Remix).mp3", 320)
        assert matcher.match_pair(a, b) is None

    def test_different_artists_never_match(self, matcher):
        assert matcher.match_pair(make_file("A - Song.mp3"), make_file("B - Song.mp3")) is None


class TestSymmetry:

    @pytest.mark.parametrize("first,second", [
        (make_file("Artist - Song.mp3", 320), make_file("Artist - Song.mp3", 128, directory="/other")),
        (make_file("Artist - Song.mp3", 320, size=10), make_file("Artist - Song.mp3", 320, size=10, directory="/b")),
        (make_file("Artist - Song.flac", 900), make_file("Artist - Song.mp3", 1411)),
        (make_file("Artist - Song (Radio Edit).mp3"), make_file("Artist - Song (Club Mix).mp3")),
    ])
    def test_argument_order_does_not_change_outcome(self, matcher, first, second):
        forward = matcher.match_pair(first, second)
        backward = matcher.match_pair(second, first)
        assert forward == backward

    def test_full_tie_has_stable_winner(self, matcher):
        a = make_file("Artist - Song.mp3", 320, size=100, directory="/a")
        b = make_file("Artist - Song.mp3", 320, size=100, directory="/b")
        assert matcher.match_pair(a, b).higher_quality == a
        assert matcher.match_pair(b, a).higher_quality == a


class TestFormatReason:

    def test_without_version(self):
        assert DuplicateMatcher.format_reason(ParsedTitle("a", "b")) == "Exact title match: 'a - b'"

    def test_with_version(self):
        reason = DuplicateMatcher.format_reason(ParsedTitle("a", "b", "radio edit"))
        assert reason == "Exact title match: 'a - b (radio edit)'"


class TestCustomComparator:

    def test_comparator_is_used(self):
        matcher = DuplicateMatcher(comparator=lambda f1, f2: (False, "custom"))
        a = make_file("Artist - Song.mp3", directory="/a")
        b = make_file("Artist - Song.mp3", directory="/b")
        match = matcher.match_pair(a, b)
        assert match.higher_quality == b
        assert match.quality_difference == "custom"
