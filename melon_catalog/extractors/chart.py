"""Melon 차트 페이지용 Extractor 구현."""

import logging
from typing import Dict, List

from ..document import Document, Node
from ..errors import InvalidArgumentError
from ..models import RankChange, Track
from ..normalizer import extract_call_id, extract_number_from_text
from .base import BaseExtractor, first_non_empty, text_of

logger = logging.getLogger(__name__)

# 차트 종류 → 경로
CHART_TYPES: Dict[str, str] = {
    "top100": "/chart",
    "hot100": "/chart/hot100",
    "day": "/chart/day",
    "week": "/chart/week",
    "month": "/chart/month",
}


def validate_chart_type(chart_type: str) -> None:
    """
    차트 종류를 검증한다.

    Raises:
        InvalidArgumentError: 지원하지 않는 차트 종류
    """
    if chart_type not in CHART_TYPES:
        raise InvalidArgumentError(
            f"Invalid chart type '{chart_type}'. Choose from: {', '.join(CHART_TYPES)}"
        )


def parse_rank_change(row: Node) -> RankChange:
    """
    순위 변동 표시를 파싱한다.

    상승 → 하락 → 유지 순서로 확인하고, 표시가 없으면 absent.
    """
    if row.find('span.bullet_icons.rank_up') is not None:
        return RankChange.up(extract_number_from_text(text_of(row.find('span.up'))) or 0)
    if row.find('span.bullet_icons.rank_down') is not None:
        return RankChange.down(extract_number_from_text(text_of(row.find('span.down'))) or 0)
    if row.find('span.bullet_icons.rank_static') is not None:
        return RankChange.static()
    return RankChange.absent()


class ChartExtractor(BaseExtractor[List[Track]]):
    """Melon 차트(TOP100, HOT100, 일간/주간/월간)를 파싱하는 Extractor."""

    ENTITY = "chart"

    def build_path(self, target: str) -> str:
        validate_chart_type(target)
        return CHART_TYPES[target] + "/"

    def parse(self, document: Document, target: str) -> List[Track]:
        tracks = self.collect_rows(document.find_all('tbody > tr'), self.parse_row)
        logger.info(f"Parsed {len(tracks)} tracks from {target} chart")
        return tracks

    def parse_row(self, row: Node) -> Track:
        """차트 한 줄을 Track 으로 변환한다."""
        rank = text_of(row.find('span.rank'))
        if not rank:
            raise ValueError("missing rank")

        # 곡 ID: playSong('메뉴ID', 곡ID) 의 두 번째 인자
        song_id = None
        song_link = row.find('a[href*="playSong"]')
        if song_link is not None:
            song_id = extract_call_id(song_link.attr('href'), 'playSong', 1) or None

        title = first_non_empty(
            lambda: text_of(row.find('div.ellipsis.rank01 > span > a')),
            lambda: text_of(row.find('div.ellipsis.rank01 > span')),
        )

        artists: List[str] = []
        for artist in row.find_all('div.ellipsis.rank02 > a'):
            name = artist.text()
            if name and name not in artists:
                artists.append(name)

        album_tag = row.find('div.ellipsis.rank03 > a')
        album = text_of(album_tag)
        album_id = None
        if album_tag is not None:
            album_id = extract_call_id(album_tag.attr('href'), 'goAlbumDetail') or None

        image = row.find('img[src*="album"]')
        image_url = image.attr('src') if image is not None else ""

        return Track(
            rank=rank,
            song_id=song_id,
            title=title,
            artists=artists,
            album=album,
            album_id=album_id,
            image_url=image_url,
            rank_change=parse_rank_change(row),
        )
