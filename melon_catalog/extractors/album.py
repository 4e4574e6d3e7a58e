"""Melon 앨범 상세 페이지용 Extractor 구현."""

import logging

from ..document import Document, Node
from ..models import AlbumData, AlbumSong
from ..normalizer import extract_call_id, normalize_long_text, strip_brackets
from .base import (
    BaseExtractor,
    SkipRow,
    artist_refs,
    definitions,
    first_non_empty,
    text_of,
    title_from_meta,
)

logger = logging.getLogger(__name__)

# 메타 정보 dt 라벨 → AlbumData 필드
META_FIELDS = {
    "발매일": "release_date",
    "장르": "genre",
    "발매사": "publisher",
    "기획사": "agency",
}


class AlbumExtractor(BaseExtractor[AlbumData]):
    """Melon 앨범 상세 정보와 수록곡 목록을 파싱하는 Extractor."""

    ENTITY = "album"

    def build_path(self, target: str) -> str:
        return f"/album/detail.htm?albumId={target}"

    def parse(self, document: Document, target: str) -> AlbumData:
        album = AlbumData(album_id=target)
        album.type = strip_brackets(text_of(document.find('.gubun')))

        # <div class="song_name"><strong class="none">앨범명</strong>ALBUM TITLE</div>
        title_node = document.find('.section_info .wrap_info .entry .info .song_name')
        album.title = first_non_empty(
            lambda: title_node.own_text() if title_node is not None else "",
            lambda: title_from_meta(document),
        )

        album.artists = artist_refs(
            document.find_all('.section_info .wrap_info .artist .artist_name')
        )

        meta = definitions(document.find('.section_info .meta .list'))
        for label, field_name in META_FIELDS.items():
            if label in meta:
                setattr(album, field_name, meta[label].text())

        image = document.find('.section_info .thumb img')
        album.image_url = image.attr('src') if image is not None else ""

        album.introduction = "".join(
            normalize_long_text(node.inner_html())
            for node in document.find_all('.section_albuminfo .cont_albuminfo .dtl_albuminfo div')
        )

        album.songs = self.collect_rows(
            document.find_all('div.service_list_song table tbody tr[data-group-items]'),
            self.parse_song_row,
        )
        logger.info(f"Parsed album {target}: {album.title!r} with {len(album.songs)} songs")
        return album

    def parse_song_row(self, row: Node) -> AlbumSong:
        """수록곡 한 줄을 AlbumSong 으로 변환한다 (곡 ID가 없으면 제외)."""
        checkbox = row.find('input[type="checkbox"][name="input_check"]')
        song_id = checkbox.attr('value').strip() if checkbox is not None else ""
        if not song_id:
            detail_link = row.find('a[href*="goSongDetail"]')
            if detail_link is not None:
                song_id = extract_call_id(detail_link.attr('href'), 'goSongDetail')
        if not song_id:
            raise SkipRow("no song id")

        is_title = row.find('.wrap_song_info .ellipsis span .bullet_icons.title') is not None

        # 재생 불가 곡은 제목이 링크가 아니므로 span 텍스트에서 표시 요소를 뺀다
        title_anchor = row.find('.wrap_song_info .ellipsis:not(.rank02) span a')
        if title_anchor is not None:
            title = title_anchor.text()
        else:
            span = row.find('.wrap_song_info .ellipsis span')
            title = span.text_excluding('.bullet_icons, .none') if span is not None else ""

        return AlbumSong(
            song_id=song_id,
            title=title,
            artists=artist_refs(row.find_all('.wrap_song_info .ellipsis.rank02 a')),
            is_title=is_title,
        )
