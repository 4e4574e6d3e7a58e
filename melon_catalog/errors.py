"""Melon 조회 과정에서 발생하는 오류 분류와 업스트림 오류 메시지 정의."""

from typing import Dict, Optional


# 업스트림 오류 페이지의 target id → 사용자 메시지
ERROR_MESSAGES: Dict[str, str] = {
    "artist": "Artist not found: The requested artist does not exist",
    "album": "Album not found: The requested album does not exist",
    "song": "Song not found: The requested song does not exist",
    "video": "Video not found: The requested video does not exist",
    "hidden_video": "Private content: This content is private",
    "playlist": "Playlist not found: The requested playlist does not exist",
    "hidden_playlist": "Private playlist: This playlist is private",
    "perf": "Performance not found: The requested performance does not exist",
    "mstory": "Deleted page: This page has been deleted",
    "entnews": "Deleted article: This article has been deleted",
    "private": "Fan-only content: This content is only available to fans",
    "theme": "Theme not found: The requested theme does not exist",
    "story": "Story not found: The requested story does not exist",
    "nowplaying": "Now Playing not found: The requested Now Playing does not exist",
    "fanMagaz": "Mobile only: This content is only available on mobile",
    "tsSong": (
        "Temporarily unavailable: This song is temporarily unavailable "
        "due to a rights violation report"
    ),
}

DEFAULT_ERROR_MESSAGE = "Invalid request: The requested content is not available"


def message_for_target(target_id: str) -> str:
    """오류 페이지 target id에 대응하는 메시지를 반환한다 (모르는 id는 기본 메시지)."""
    return ERROR_MESSAGES.get(target_id, DEFAULT_ERROR_MESSAGE)


class MelonError(Exception):
    """모든 Melon 조회 오류의 기본 클래스."""

    kind: str = "error"
    is_client_error: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class TransportError(MelonError):
    """네트워크 오류 또는 2xx가 아닌 응답."""

    kind = "transport"


class HttpStatusError(TransportError):
    """업스트림이 2xx가 아닌 상태 코드를 반환한 경우."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        message = f"HTTP error! Status: {status_code}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class FetchTimeoutError(MelonError):
    """요청이 제한 시간을 넘긴 경우."""

    kind = "timeout"


class UpstreamError(MelonError):
    """정상 응답이지만 '없음/제한' 오류 페이지로 식별된 경우."""

    kind = "upstream"
    is_client_error = True

    def __init__(self, message: str, target_id: Optional[str] = None):
        super().__init__(message)
        self.target_id = target_id

    @classmethod
    def from_target(cls, target_id: str) -> "UpstreamError":
        return cls(message_for_target(target_id), target_id=target_id)


class ParseError(MelonError):
    """정상 문서를 탐색하던 중 구조적 오류가 발생한 경우."""

    kind = "parse"


class InvalidArgumentError(MelonError):
    """지원하지 않는 차트 종류 등 잘못된 인자."""

    kind = "invalid_argument"
    is_client_error = True
