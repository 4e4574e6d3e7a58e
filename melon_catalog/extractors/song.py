"""Melon 곡 상세 페이지용 Extractor 구현."""

import logging
from typing import Dict, List

from ..document import Document, Node
from ..models import AlbumRef, Producer, SongData
from ..normalizer import extract_call_id, normalize_long_text
from .base import (
    ARTIST_LINK_FUNC,
    BaseExtractor,
    artist_refs,
    definitions,
    first_non_empty,
    text_of,
    title_from_meta,
)

logger = logging.getLogger(__name__)

TITLE_LABEL = "곡명"
ALBUM_LABEL = "앨범"
RELEASE_DATE_LABEL = "발매일"
GENRE_LABEL = "장르"


class SongExtractor(BaseExtractor[SongData]):
    """Melon 곡 상세 정보를 파싱하는 Extractor."""

    ENTITY = "song"

    def build_path(self, target: str) -> str:
        return f"/song/detail.htm?songId={target}"

    def parse(self, document: Document, target: str) -> SongData:
        """
        곡 상세 HTML에서 SongData 를 파싱한다.

        - 제목: .song_name (없으면 og:title)
        - 앨범/발매일/장르: dt 라벨 기준, 없으면 dd 위치(0/1/2) 기준
        - 가사: 주석 제거, <br> → 줄바꿈, 엔티티 디코딩
        """
        title = first_non_empty(
            lambda: text_of(document.find('.song_name')).replace(TITLE_LABEL, '').strip(),
            lambda: title_from_meta(document),
        )

        artists = artist_refs(document.find_all('.section_info .artist a.artist_name'))

        info_list = document.find('.section_info .list')
        labelled = definitions(info_list)
        positional = info_list.find_all('dd') if info_list is not None else []

        def info_node(label: str, position: int):
            if label in labelled:
                return labelled[label]
            return positional[position] if position < len(positional) else None

        album = AlbumRef()
        album_node = info_node(ALBUM_LABEL, 0)
        if album_node is not None:
            album_link = album_node.find('a')
            if album_link is not None:
                album = AlbumRef(
                    name=album_link.text(),
                    id=extract_call_id(album_link.attr('href'), 'goAlbumDetail'),
                )

        song = SongData(
            song_id=target,
            title=title,
            artists=artists,
            album=album,
            release_date=text_of(info_node(RELEASE_DATE_LABEL, 1)),
            genre=text_of(info_node(GENRE_LABEL, 2)),
            lyrics=self.parse_lyrics(document),
            producers=self.parse_producers(document.find_all('.section_prdcr .list_person li')),
        )
        logger.debug(
            f"Parsed song {target}: title={song.title!r}, artists={len(song.artists)}, "
            f"producers={len(song.producers)}"
        )
        return song

    def parse_lyrics(self, document: Document) -> str:
        return "".join(
            normalize_long_text(node.inner_html())
            for node in document.find_all('.section_lyric .lyric')
        )

    def parse_producers(self, items: List[Node]) -> List[Producer]:
        """참여자 목록을 이름 기준으로 합치고 역할을 누적한다."""
        producers: Dict[str, Producer] = {}
        for item in items:
            name_node = item.find('.ellipsis.artist .artist_name')
            name = text_of(name_node)
            role = text_of(item.find('.meta .type'))
            if not name or not role:
                continue
            producer = producers.get(name)
            if producer is None:
                producer = Producer(
                    name=name,
                    id=extract_call_id(name_node.attr('href'), ARTIST_LINK_FUNC),
                )
                producers[name] = producer
            producer.add_role(role)
        return list(producers.values())
