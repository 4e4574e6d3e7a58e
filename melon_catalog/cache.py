"""TTL 기반 메모리 캐시 - 키별 동시 계산을 하나로 합친다(single-flight)."""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar('V')

DEFAULT_TTL_SEC = 60.0


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """저장된 캐시 항목 (교체만 되고 부분 수정되지 않는다)."""
    key: str
    value: V
    stored_at: float


class _InFlight:
    """진행 중인 계산 하나와 그 결과를 기다리는 Future."""

    def __init__(self):
        self.future: Future = Future()
        self.invalidated = False


class TTLCache(Generic[V]):
    """
    키 → 값 캐시.

    - 항목은 `now - stored_at < ttl` 동안 유효하다.
    - 같은 키에 대한 계산은 동시에 하나만 실행되고, 나머지 호출자는 그 결과를 함께 받는다.
    - 계산이 실패하면 기존 항목은 그대로 둔다.
    """

    def __init__(self, default_ttl: float = DEFAULT_TTL_SEC, clock: Callable[[], float] = time.monotonic):
        """
        캐시를 초기화한다.

        Args:
            default_ttl: 기본 TTL(초)
            clock: 현재 시각(초)을 반환하는 함수 (테스트에서 교체)
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._in_flight: Dict[str, _InFlight] = {}

    def get_or_compute(self, key: str, compute_fn: Callable[[], V], ttl: Optional[float] = None) -> V:
        """
        유효한 캐시 값이 있으면 반환하고, 없으면 계산해서 저장한다.

        Args:
            key: 캐시 키
            compute_fn: 값을 새로 만드는 함수 (실패 시 예외)
            ttl: 이 호출에 적용할 TTL(초), None 이면 기본값

        Returns:
            캐시된 값 또는 새로 계산한 값

        Raises:
            compute_fn 이 발생시킨 예외 (같은 계산에 합류한 모든 호출자에게 동일하게 전달)
        """
        ttl = self.default_ttl if ttl is None else ttl

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry.stored_at < ttl:
                logger.debug(f"Using cached data for {key}")
                return entry.value

            flight = self._in_flight.get(key)
            if flight is not None:
                leader = False
            else:
                flight = _InFlight()
                self._in_flight[key] = flight
                leader = True

        if not leader:
            logger.debug(f"Joining in-flight computation for {key}")
            return flight.future.result()

        logger.info(f"Cache miss or expired for {key}, fetching fresh data")
        try:
            value = compute_fn()
        except BaseException as e:
            with self._lock:
                self._in_flight.pop(key, None)
            flight.future.set_exception(e)
            raise

        with self._lock:
            if not flight.invalidated:
                self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())
            else:
                logger.debug(f"Discarding result for {key} invalidated while in flight")
            self._in_flight.pop(key, None)
        flight.future.set_result(value)
        return value

    def peek(self, key: str) -> Optional[V]:
        """만료 여부와 관계없이 저장된 값을 반환한다 (없으면 None)."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry[V]]:
        with self._lock:
            return self._entries.get(key)

    def invalidate(self, key: str) -> bool:
        """
        키 하나를 무효화한다.

        진행 중인 계산은 취소하지 않으며, 그 결과는 합류한 호출자에게만 전달되고 저장되지 않는다.

        Returns:
            저장된 항목이 있었는지 여부
        """
        with self._lock:
            flight = self._in_flight.get(key)
            if flight is not None:
                flight.invalidated = True
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """모든 항목을 삭제한다."""
        with self._lock:
            for flight in self._in_flight.values():
                flight.invalidated = True
            self._entries.clear()
        logger.info("Cache cleared")

    def set_default_ttl(self, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError(f"TTL must be positive: {ttl}")
        self.default_ttl = ttl

    def shutdown(self) -> None:
        """캐시를 비운다. 진행 중인 계산은 끝까지 실행되지만 결과는 저장되지 않는다."""
        self.clear()

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
