"""HTTP 요청을 담당하는 Fetcher - Melon 페이지를 받아 문서로 파싱한다."""

import logging
import time
from typing import Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from .document import Document
from .errors import (
    FetchTimeoutError,
    HttpStatusError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.melon.com"

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Referer': 'https://www.melon.com/',
    'Connection': 'keep-alive',
}

# 오류 페이지 판별: 최상위 콘텐츠 컨테이너에 target id 가 붙어 있다
ERROR_CONTAINER_SELECTOR = '#conts[data-target-id]'
ERROR_TARGET_ATTR = 'data-target-id'

BODY_CHUNK_SIZE = 1024


def detect_error_page(document: Document) -> Optional[UpstreamError]:
    """
    문서가 Melon 오류 페이지인지 확인한다.

    Returns:
        오류 페이지면 UpstreamError, 아니면 None
    """
    container = document.find(ERROR_CONTAINER_SELECTOR)
    if container is None:
        return None
    target_id = container.attr(ERROR_TARGET_ATTR).strip()
    return UpstreamError.from_target(target_id)


def _caused_by_read_timeout(error: Exception) -> bool:
    """본문 수신 중 읽기 타임아웃은 requests 가 ConnectionError 로 감싸서 올린다."""
    causes = list(error.args[:1]) + [getattr(error, 'reason', None)]
    for cause in causes:
        if isinstance(cause, ReadTimeoutError):
            return True
        if isinstance(getattr(cause, 'reason', None), ReadTimeoutError):
            return True
    return False


class Fetcher:
    """Melon HTTP Fetcher 클래스 (requests 세션 사용)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_sec: float = 10,
        headers: Optional[dict] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Fetcher를 초기화한다.

        Args:
            base_url: 요청 경로 앞에 붙일 기본 URL
            timeout_sec: 요청 타임아웃(초)
            headers: 기본 헤더에 덧붙일 헤더
            session: 재사용할 requests 세션 (없으면 새로 만든다)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout_sec
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if headers:
            self.session.headers.update(headers)

    def build_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def fetch_html(self, path: str) -> str:
        """
        지정한 경로의 HTML을 가져온다.

        timeout 은 소켓 단위 제한과 함께 본문을 다 받을 때까지의 전체 제한으로도 적용된다.

        Args:
            path: base_url 이후의 경로 (예: "/chart/")

        Returns:
            HTML 문자열

        Raises:
            FetchTimeoutError: 제한 시간 초과
            HttpStatusError: 2xx가 아닌 응답
            TransportError: 그 밖의 네트워크 오류
        """
        url = self.build_url(path)
        logger.info(f"Fetching data from: {url}")
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            raise self._classify(url, e) from e

        try:
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(response.status_code, url)
            return self._read_body(url, response, deadline)
        finally:
            response.close()

    def _read_body(self, url: str, response: requests.Response, deadline: float) -> str:
        """본문을 조각 단위로 읽으면서 전체 제한 시간을 확인한다."""
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise FetchTimeoutError(
                        f"Request to {url} exceeded the {self.timeout}s deadline"
                    )
                chunks.append(chunk)
        except requests.RequestException as e:
            raise self._classify(url, e) from e

        content_type = response.headers.get('Content-Type', '').lower()
        encoding = response.encoding if 'charset=' in content_type and response.encoding else 'utf-8'
        return b''.join(chunks).decode(encoding, errors='replace')

    def _classify(self, url: str, error: requests.RequestException) -> Exception:
        """requests 예외를 FetchTimeoutError 또는 TransportError 로 변환한다."""
        if isinstance(error, requests.Timeout) or _caused_by_read_timeout(error):
            return FetchTimeoutError(f"Request to {url} timed out after {self.timeout}s")
        return TransportError(f"Failed to fetch data: {error}")

    def fetch_document(self, path: str) -> Document:
        """
        HTML을 가져와 문서로 파싱하고 오류 페이지 여부를 검사한다.

        Raises:
            UpstreamError: 오류 페이지로 식별된 경우
            (그 외 fetch_html 과 동일)
        """
        document = Document.from_html(self.fetch_html(path))
        error = detect_error_page(document)
        if error is not None:
            logger.warning(f"Upstream error page for {path}: target={error.target_id}")
            raise error
        return document

    def close(self):
        """세션을 정리한다."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
