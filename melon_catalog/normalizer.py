"""텍스트/ID 정규화 유틸리티."""

import re
from typing import Optional

_COMMENT_RE = re.compile(r'<!--[\s\S]*?-->')
_BR_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)

# 디코딩 대상 HTML 엔티티 (&amp; 는 이중 디코딩을 막기 위해 마지막에 처리)
_ENTITIES = (
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&#39;', "'"),
    ('&amp;', '&'),
)


def decode_entities(text: str) -> str:
    """기본 HTML 엔티티 5종을 디코딩한다."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def normalize_long_text(html: str) -> str:
    """
    가사/앨범 소개처럼 긴 본문 마크업을 일반 텍스트로 정리한다.

    처리 순서:
    - HTML 주석 제거
    - <br> 계열 태그 -> 줄바꿈
    - 앞뒤 공백 제거
    - 엔티티 디코딩

    Args:
        html: 요소 내부 마크업

    Returns:
        정리된 텍스트
    """
    if not html:
        return ""
    text = _COMMENT_RE.sub('', html)
    text = _BR_RE.sub('\n', text)
    return decode_entities(text.strip())


def strip_non_digits(text: str) -> str:
    """숫자가 아닌 문자를 모두 제거한다."""
    return re.sub(r'[^\d]', '', text or '')


def extract_call_id(href: str, func_name: str, arg_index: int = 0) -> str:
    """
    `javascript:goAlbumDetail('11111')` 같은 인라인 핸들러 문자열에서 ID를 꺼낸다.

    예시:
    - extract_call_id("javascript:goAlbumDetail('11111');", "goAlbumDetail") -> "11111"
    - extract_call_id("javascript:melon.play.playSong('1000002721',38123338);", "playSong", 1)
      -> "38123338"

    Args:
        href: 링크의 href 문자열
        func_name: 호출 함수 이름 (점 표기 접두어는 무시)
        arg_index: 사용할 인자 위치

    Returns:
        숫자만 남긴 ID, 찾지 못하면 빈 문자열
    """
    if not href or func_name not in href:
        return ""
    match = re.search(re.escape(func_name) + r'\s*\(([^)]*)\)', href)
    if not match:
        return ""
    args = match.group(1).split(',')
    if arg_index >= len(args):
        return ""
    return strip_non_digits(args[arg_index])


def extract_number_from_text(text: str) -> Optional[int]:
    """
    문자열에서 숫자를 추출한다.

    Args:
        text: 숫자가 포함될 수 있는 문자열 (예: "3", "1,234")

    Returns:
        추출된 정수 값, 없으면 None
    """
    if not text:
        return None
    digits = strip_non_digits(text)
    if digits:
        return int(digits)
    return None


def strip_brackets(text: str) -> str:
    """`[정규]` 같은 대괄호 표기를 제거한다."""
    return re.sub(r'[\[\]]', '', text or '').strip()
