"""Tests for text and id normalization."""

import unittest
from melon_catalog.normalizer import (
    decode_entities,
    extract_call_id,
    extract_number_from_text,
    normalize_long_text,
    strip_brackets,
    strip_non_digits,
)


class TestNormalizer(unittest.TestCase):
    """Test cases for normalization helpers."""

    def test_decode_entities(self):
        """Test decoding of the five basic HTML entities."""
        self.assertEqual(
            decode_entities("&amp; &lt; &gt; &quot; &#39;"),
            "& < > \" '",
        )

    def test_decode_entities_no_double_decoding(self):
        """Test that an escaped entity is decoded only once."""
        self.assertEqual(decode_entities("&amp;lt;"), "&lt;")

    def test_normalize_long_text(self):
        """Test comment stripping, <br> conversion and entity decoding."""
        html = "<!-- note -->First &amp; line<br>second<BR />third<br/>  "
        self.assertEqual(normalize_long_text(html), "First & line\nsecond\nthird")

    def test_normalize_long_text_multiline_comment(self):
        """Test that comments spanning lines are removed."""
        self.assertEqual(normalize_long_text("<!--\n a\n b\n-->text"), "text")

    def test_normalize_long_text_empty(self):
        """Test empty input."""
        self.assertEqual(normalize_long_text(""), "")

    def test_extract_call_id_first_argument(self):
        """Test id recovery from a single-argument handler."""
        self.assertEqual(
            extract_call_id("javascript:melon.link.goAlbumDetail('11432517');", "goAlbumDetail"),
            "11432517",
        )

    def test_extract_call_id_second_argument(self):
        """Test id recovery from the second argument of playSong."""
        href = "javascript:melon.play.playSong('1000002721',38123338);"
        self.assertEqual(extract_call_id(href, "playSong", 1), "38123338")

    def test_extract_call_id_unquoted(self):
        """Test id recovery from an unquoted argument."""
        self.assertEqual(extract_call_id("javascript:goArtistDetail(2742485)", "goArtistDetail"), "2742485")

    def test_extract_call_id_missing(self):
        """Test that unmatched references give an empty string."""
        self.assertEqual(extract_call_id("", "goAlbumDetail"), "")
        self.assertEqual(extract_call_id("javascript:void(0);", "goAlbumDetail"), "")
        self.assertEqual(extract_call_id("javascript:playSong('1');", "playSong", 1), "")

    def test_strip_non_digits(self):
        """Test digit filtering."""
        self.assertEqual(strip_non_digits("'38123338' "), "38123338")
        self.assertEqual(strip_non_digits(None), "")

    def test_extract_number_from_text(self):
        """Test extracting numbers from text."""
        self.assertEqual(extract_number_from_text("3"), 3)
        self.assertEqual(extract_number_from_text(" 1,234 "), 1234)
        self.assertIsNone(extract_number_from_text(""))
        self.assertIsNone(extract_number_from_text("new"))

    def test_strip_brackets(self):
        """Test removal of square brackets around album types."""
        self.assertEqual(strip_brackets("[정규]"), "정규")
        self.assertEqual(strip_brackets(" [EP] "), "EP")


if __name__ == '__main__':
    unittest.main()
