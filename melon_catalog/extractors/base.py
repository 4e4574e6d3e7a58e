"""엔티티별 Extractor 의 공통 기본 클래스 정의."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from ..document import Document, Node
from ..errors import MelonError, ParseError
from ..models import ArtistRef
from ..normalizer import extract_call_id

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

ARTIST_LINK_FUNC = "goArtistDetail"


class SkipRow(Exception):
    """행을 결과에서 조용히 제외할 때 사용한다 (경고 없이)."""


class BaseExtractor(ABC, Generic[T]):
    """HTML 문서에서 하나의 엔티티를 추출하는 Extractor 의 추상 기본 클래스."""

    ENTITY: str = ""  # 하위 클래스에서 엔티티 이름으로 재정의

    @abstractmethod
    def build_path(self, target: str) -> str:
        """
        요청 경로를 생성한다.

        Args:
            target: 차트 종류 또는 곡/앨범 ID

        Returns:
            base_url 뒤에 붙일 경로
        """
        pass

    @abstractmethod
    def parse(self, document: Document, target: str) -> T:
        """
        문서에서 엔티티를 파싱한다.

        구조적 오류는 예외로 전파되며 `extract` 가 ParseError 로 변환한다.
        """
        pass

    def extract(self, document: Document, target: str) -> T:
        """
        parse 를 실행하고 예상치 못한 예외를 ParseError 로 감싼다.

        Raises:
            ParseError: 문서 탐색 중 구조적 오류
        """
        try:
            return self.parse(document, target)
        except MelonError:
            raise
        except Exception as e:
            logger.error(f"Failed to parse {self.ENTITY} {target}: {e}")
            raise ParseError(f"Failed to parse {self.ENTITY} data: {e}") from e

    def collect_rows(
        self,
        rows: Iterable[Node],
        parse_row: Callable[[Node], R],
    ) -> List[R]:
        """
        여러 행을 파싱하되, 한 행의 실패는 경고만 남기고 건너뛴다.

        Args:
            rows: 행 노드 목록
            parse_row: 행 하나를 파싱하는 함수 (SkipRow 로 조용히 제외 가능)

        Returns:
            성공한 행의 결과 목록 (문서 순서 유지)
        """
        results = []
        for index, row in enumerate(rows):
            try:
                results.append(parse_row(row))
            except SkipRow as e:
                logger.debug(f"Skipping {self.ENTITY} row {index}: {e}")
            except Exception as e:
                logger.warning(f"Error parsing {self.ENTITY} row {index}: {e}")
        return results


def first_non_empty(*candidates: Callable[[], str]) -> str:
    """
    후보 함수를 순서대로 호출해 처음으로 비어 있지 않은 값을 반환한다.

    모두 비어 있으면 빈 문자열.
    """
    for candidate in candidates:
        value = candidate()
        if value:
            return value
    return ""


def text_of(node: Optional[Node]) -> str:
    return node.text() if node is not None else ""


def title_from_meta(document: Document) -> str:
    """og:title 메타 값에서 ' - ' 앞부분(제목)을 반환한다."""
    title = document.meta('og:title')
    if ' - ' in title:
        title = title.split(' - ')[0].strip()
    return title


def artist_refs(nodes: Iterable[Node]) -> List[ArtistRef]:
    """
    아티스트 링크 목록을 이름 기준으로 중복 제거해 ArtistRef 로 변환한다.

    ID는 `goArtistDetail('123')` 형태의 href 에서 복원한다.
    """
    artists: List[ArtistRef] = []
    seen = set()
    for node in nodes:
        name = node.text()
        if not name or name in seen:
            continue
        seen.add(name)
        artists.append(ArtistRef(name=name, id=extract_call_id(node.attr('href'), ARTIST_LINK_FUNC)))
    return artists


def definitions(list_node: Optional[Node]) -> Dict[str, Node]:
    """`<dl>` 의 dt 라벨 → 바로 다음 dd 노드 맵을 만든다."""
    result: Dict[str, Node] = {}
    if list_node is None:
        return result
    for dt in list_node.find_all('dt'):
        dd = dt.next_sibling('dd')
        label = dt.text()
        if dd is not None and label and label not in result:
            result[label] = dd
    return result
