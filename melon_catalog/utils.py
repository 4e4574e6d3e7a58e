"""로깅, 타임존 유틸리티 함수 모음."""

import logging
import os
from datetime import datetime
import pytz

# 로깅 설정
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# 기본 타임존: Asia/Seoul (Melon 차트 집계 기준)
SEOUL_TZ = pytz.timezone('Asia/Seoul')


def get_seoul_now() -> datetime:
    """Asia/Seoul 타임존의 현재 시각을 반환한다."""
    return datetime.now(SEOUL_TZ)


def get_iso8601_now() -> str:
    """Asia/Seoul 타임존 기준 현재 시각을 ISO8601 문자열로 반환한다."""
    return get_seoul_now().isoformat()
