"""Tests for the document query wrapper."""

import unittest
from melon_catalog.document import Document
from melon_catalog.extractors.base import artist_refs, definitions, first_non_empty


class TestDocument(unittest.TestCase):
    """Test cases for Document/Node queries."""

    def setUp(self):
        """Set up test fixtures."""
        self.document = Document.from_html("""
        <html>
        <head><meta property="og:title" content="Title - Artist"></head>
        <body>
            <div class="song_name"><strong class="none">앨범명</strong>Album Title<!-- x --></div>
            <div class="span"><span class="bullet_icons">Title</span>Song <span class="none">hidden</span>Name</div>
            <dl class="list"><dt>발매일</dt><dd>2024.01.01</dd><dt>장르</dt><dd>댄스</dd></dl>
            <a class="artist_name" href="javascript:goArtistDetail('1');">A</a>
            <a class="artist_name" href="javascript:goArtistDetail('2');">B</a>
            <a class="artist_name" href="#">A</a>
        </body>
        </html>
        """)

    def test_own_text_skips_children_and_comments(self):
        """Test that own_text only returns direct text nodes."""
        self.assertEqual(self.document.find('.song_name').own_text(), "Album Title")

    def test_text_excluding_does_not_mutate(self):
        """Test text without excluded descendants, leaving the tree intact."""
        node = self.document.find('.span')
        self.assertEqual(node.text_excluding('.bullet_icons, .none'), "Song Name")
        self.assertIsNotNone(node.find('.bullet_icons'))

    def test_meta(self):
        """Test meta tag lookup."""
        self.assertEqual(self.document.meta('og:title'), "Title - Artist")
        self.assertEqual(self.document.meta('og:image'), "")

    def test_attr_default(self):
        """Test attribute lookup with default."""
        node = self.document.find('.song_name')
        self.assertEqual(node.attr('href'), "")
        self.assertEqual(node.attr('class'), "song_name")

    def test_find_missing(self):
        """Test that a missing selector returns None or an empty list."""
        self.assertIsNone(self.document.find('.missing'))
        self.assertEqual(self.document.find_all('.missing'), [])

    def test_definitions(self):
        """Test dt/dd label mapping."""
        meta = definitions(self.document.find('dl.list'))
        self.assertEqual(meta['발매일'].text(), "2024.01.01")
        self.assertEqual(meta['장르'].text(), "댄스")
        self.assertEqual(definitions(None), {})

    def test_definitions_dt_without_dd(self):
        """Test that a dt followed by another dt does not borrow the later dd."""
        document = Document.from_html(
            '<dl class="list">\n<dt>A</dt>\n<dt>B</dt>\n<dd>b</dd>\n</dl>'
        )
        meta = definitions(document.find('dl.list'))
        self.assertNotIn('A', meta)
        self.assertEqual(meta['B'].text(), "b")

    def test_next_sibling_only_adjacent(self):
        """Test that next_sibling looks at the immediately following element."""
        document = Document.from_html('<div><p>1</p> <span>2</span><em>3</em></div>')
        first = document.find('p')
        self.assertEqual(first.next_sibling('span').text(), "2")
        self.assertIsNone(first.next_sibling('em'))
        self.assertIsNone(document.find('em').next_sibling('span'))

    def test_artist_refs_deduplicate_by_name(self):
        """Test that repeated names produce a single artist entry."""
        artists = artist_refs(self.document.find_all('a.artist_name'))
        self.assertEqual([(a.name, a.id) for a in artists], [("A", "1"), ("B", "2")])

    def test_first_non_empty(self):
        """Test the fallback chain helper."""
        self.assertEqual(first_non_empty(lambda: "", lambda: "second"), "second")
        self.assertEqual(first_non_empty(lambda: "", lambda: ""), "")


if __name__ == '__main__':
    unittest.main()
