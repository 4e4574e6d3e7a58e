"""차트/곡/앨범 조회 서비스 - Fetcher, Extractor, 캐시를 연결한다."""

import logging
from typing import Callable, Dict, List, Optional, TypeVar

from .cache import TTLCache
from .errors import MelonError, ParseError
from .extractors.album import AlbumExtractor
from .extractors.base import BaseExtractor
from .extractors.chart import CHART_TYPES, ChartExtractor, validate_chart_type
from .extractors.song import SongExtractor
from .fetcher import Fetcher
from .models import AlbumData, Result, SongData, Track

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CatalogService:
    """
    라우팅 계층에 노출되는 세 가지 조회 연산을 제공한다.

    모든 연산은 예외 대신 Result 를 반환한다.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cache: Optional[TTLCache] = None,
        ttl_sec: Optional[Dict[str, float]] = None,
    ):
        """
        서비스를 초기화한다.

        Args:
            fetcher: HTTP Fetcher 인스턴스
            cache: 공유 캐시 (없으면 새로 만든다)
            ttl_sec: 키 종류(chart/song/album)별 TTL(초)
        """
        self.fetcher = fetcher
        self.cache = cache if cache is not None else TTLCache()
        self.ttl_sec = dict(ttl_sec or {})
        self.chart_extractor = ChartExtractor()
        self.song_extractor = SongExtractor()
        self.album_extractor = AlbumExtractor()

    @property
    def chart_types(self) -> List[str]:
        return list(CHART_TYPES)

    def ttl_for(self, key_class: str) -> float:
        return self.ttl_sec.get(key_class, self.cache.default_ttl)

    def fetch_chart(self, chart_type: str) -> Result[List[Track]]:
        """
        차트를 조회한다.

        지원하지 않는 차트 종류는 요청 없이 InvalidArgumentError 를 반환한다.
        """
        try:
            validate_chart_type(chart_type)
        except MelonError as e:
            logger.error(f"Error: {e.message}")
            return Result.err(e)
        return self._cached("chart", chart_type, self.chart_extractor)

    def fetch_song(self, song_id: str) -> Result[SongData]:
        """곡 상세 정보를 조회한다 (song_id 는 숫자 문자열로 검증된 상태)."""
        return self._cached("song", song_id, self.song_extractor)

    def fetch_album(self, album_id: str) -> Result[AlbumData]:
        """앨범 상세 정보를 조회한다 (album_id 는 숫자 문자열로 검증된 상태)."""
        return self._cached("album", album_id, self.album_extractor)

    def _load(self, extractor: BaseExtractor[T], target: str) -> Callable[[], T]:
        def compute() -> T:
            document = self.fetcher.fetch_document(extractor.build_path(target))
            return extractor.extract(document, target)
        return compute

    def _cached(self, key_class: str, target: str, extractor: BaseExtractor[T]) -> Result[T]:
        key = f"{key_class}_{target}"
        try:
            value = self.cache.get_or_compute(
                key, self._load(extractor, target), ttl=self.ttl_for(key_class)
            )
        except MelonError as e:
            logger.error(f"Error fetching {key}: {e.message}")
            return Result.err(e)
        except Exception as e:
            logger.error(f"Unexpected error fetching {key}: {e}", exc_info=True)
            return Result.err(ParseError(f"Failed to fetch {key_class} {target}: {e}"))
        return Result.ok(value)

    def close(self):
        self.fetcher.close()
