"""APScheduler를 이용해 차트 캐시를 주기적으로 미리 채우는 스케줄러 모듈."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .errors import MelonError, ParseError
from .extractors.chart import CHART_TYPES
from .service import CatalogService
from .utils import SEOUL_TZ, get_seoul_now

logger = logging.getLogger(__name__)

# 캐시 TTL(60초)보다 조금 짧게 잡아 만료 전에 갱신되도록 한다
DEFAULT_INTERVAL_SEC = 50.0


def _log_success(chart_type: str) -> None:
    logger.info(f"Pre-fetched chart data: {chart_type}")


def _log_error(chart_type: str, error: Exception) -> None:
    logger.error(f"Error pre-fetching {chart_type} chart: {error}")


@dataclass(frozen=True)
class PrefetchConfig:
    """프리페치 설정."""
    enabled: bool = True
    interval_sec: float = DEFAULT_INTERVAL_SEC
    on_success: Optional[Callable[[str], None]] = _log_success
    on_error: Optional[Callable[[str, Exception], None]] = _log_error

    def __post_init__(self):
        if self.interval_sec <= 0:
            raise ValueError(f"interval_sec must be positive: {self.interval_sec}")


class ChartPrefetcher:
    """
    차트 종류별로 독립된 주기 작업을 등록해 캐시를 미리 채운다.

    각 작업은 요청 처리와 같은 `CatalogService.fetch_chart` 경로를 사용하므로
    동시에 들어온 요청과 하나의 계산으로 합쳐진다.
    """

    def __init__(
        self,
        service: CatalogService,
        config: Optional[PrefetchConfig] = None,
        chart_types: Optional[List[str]] = None,
    ):
        """
        프리페처를 초기화한다.

        Args:
            service: 차트 조회 서비스
            config: 프리페치 설정 (없으면 기본값)
            chart_types: 갱신할 차트 종류 (없으면 전체)
        """
        self.service = service
        self.config = config or PrefetchConfig()
        self.chart_types = list(chart_types or CHART_TYPES)
        self._scheduler: Optional[BackgroundScheduler] = None
        self._job_ids: List[str] = []
        self._lock = threading.RLock()

    def start(self) -> None:
        """프리페치를 시작한다 (비활성 상태이거나 이미 실행 중이면 아무것도 하지 않는다)."""
        with self._lock:
            if not self.config.enabled or self._scheduler is not None:
                return

            scheduler = BackgroundScheduler(timezone=SEOUL_TZ)
            now = get_seoul_now()
            for chart_type in self.chart_types:
                job = scheduler.add_job(
                    self.prefetch_chart,
                    trigger=IntervalTrigger(seconds=self.config.interval_sec, timezone=SEOUL_TZ),
                    args=[chart_type],
                    id=f'prefetch_{chart_type}',
                    name=f'Prefetch {chart_type} chart',
                    next_run_time=now,  # 시작 직후 한 번 갱신
                    max_instances=1,
                    coalesce=True,
                    replace_existing=True,
                )
                self._job_ids.append(job.id)
            scheduler.start()
            self._scheduler = scheduler

        logger.info(f"Chart pre-fetcher started. Interval: {self.config.interval_sec}s")

    def stop(self) -> None:
        """모든 주기 작업을 취소한다. 이미 실행 중인 조회는 끝까지 진행된다."""
        with self._lock:
            scheduler = self._scheduler
            if scheduler is None:
                return
            for job_id in self._job_ids:
                if scheduler.get_job(job_id) is not None:
                    scheduler.remove_job(job_id)
            self._job_ids = []
            self._scheduler = None
            scheduler.shutdown(wait=False)

        logger.info("Chart pre-fetcher stopped")

    def is_active(self) -> bool:
        with self._lock:
            return self._scheduler is not None

    def job_ids(self) -> List[str]:
        """현재 등록된 작업 ID 목록."""
        with self._lock:
            return list(self._job_ids)

    def update_config(self, **changes) -> None:
        """
        설정 일부를 변경한다.

        실행 중이면 중지 후 새 설정으로 다시 시작한다 (enabled=False 면 중지 상태 유지).

        Args:
            **changes: enabled, interval_sec, on_success, on_error 중 일부
        """
        unknown = set(changes) - {'enabled', 'interval_sec', 'on_success', 'on_error'}
        if unknown:
            raise ValueError(f"Unknown prefetch config fields: {sorted(unknown)}")

        with self._lock:
            new_config = replace(self.config, **changes)
            was_running = self.is_active()
            if was_running:
                self.stop()
            self.config = new_config
            if was_running and self.config.enabled:
                self.start()

    def prefetch_chart(self, chart_type: str) -> bool:
        """
        차트 하나를 캐시 경로로 조회하고 결과를 콜백으로 알린다.

        예외는 밖으로 전파하지 않는다.

        Returns:
            성공 여부
        """
        config = self.config
        try:
            result = self.service.fetch_chart(chart_type)
            error = result.error
        except Exception as e:
            error = e if isinstance(e, MelonError) else ParseError(str(e))

        if error is None:
            self._notify(config.on_success, chart_type)
            return True
        self._notify(config.on_error, chart_type, error)
        return False

    def prefetch_all(self) -> Dict[str, bool]:
        """모든 차트 종류를 동시에 한 번 갱신한다."""
        with ThreadPoolExecutor(max_workers=len(self.chart_types) or 1) as executor:
            outcomes = executor.map(self.prefetch_chart, self.chart_types)
            return dict(zip(self.chart_types, outcomes))

    def _notify(self, callback: Optional[Callable], *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Prefetch callback failed for {args[0]}: {e}", exc_info=True)
