"""Melon 카탈로그 조회기 - CLI 엔트리포인트."""

import argparse
import copy
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import yaml

from .cache import TTLCache
from .fetcher import Fetcher
from .scheduler import ChartPrefetcher, PrefetchConfig
from .service import CatalogService
from .utils import get_iso8601_now

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'scraper': {
        'base_url': 'https://www.melon.com',
        'timeout_sec': 10,
    },
    'cache': {
        'default_ttl_sec': 60,
        'ttl_sec': {'chart': 60, 'song': 60, 'album': 60},
    },
    'prefetch': {
        'enabled': True,
        'interval_sec': 50,
    },
}


def _merge(base: dict, override: dict) -> dict:
    """override 값을 base 위에 재귀적으로 덮어쓴다."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str]) -> dict:
    """YAML 설정 파일을 로드해 기본 설정과 합친다 (파일이 없으면 기본 설정)."""
    if not config_path or not Path(config_path).exists():
        if config_path:
            logger.warning(f"Config file not found: {config_path}. Using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(config_path, 'r', encoding='utf-8') as f:
        return _merge(DEFAULT_CONFIG, yaml.safe_load(f) or {})


def build_service(config: dict) -> CatalogService:
    """설정으로 Fetcher, 캐시, 서비스를 생성한다."""
    scraper_config = config.get('scraper', {})
    cache_config = config.get('cache', {})
    fetcher = Fetcher(
        base_url=scraper_config.get('base_url', 'https://www.melon.com'),
        timeout_sec=scraper_config.get('timeout_sec', 10),
        headers=scraper_config.get('headers'),
    )
    cache = TTLCache(default_ttl=cache_config.get('default_ttl_sec', 60))
    return CatalogService(fetcher, cache=cache, ttl_sec=cache_config.get('ttl_sec'))


def build_prefetcher(service: CatalogService, config: dict) -> ChartPrefetcher:
    """설정으로 차트 프리페처를 생성한다."""
    prefetch_config = config.get('prefetch', {})
    return ChartPrefetcher(
        service,
        PrefetchConfig(
            enabled=prefetch_config.get('enabled', True),
            interval_sec=prefetch_config.get('interval_sec', 50),
        ),
        chart_types=prefetch_config.get('chart_types'),
    )


def _print_result(result) -> int:
    """Result 를 JSON 으로 출력하고 종료 코드를 반환한다."""
    if result.is_err:
        print(json.dumps({'error': result.error.to_dict()}, ensure_ascii=False, indent=2))
        return 1
    value = result.value
    data = [item.to_dict() for item in value] if isinstance(value, list) else value.to_dict()
    print(json.dumps({'fetchedAt': get_iso8601_now(), 'data': data}, ensure_ascii=False, indent=2))
    return 0


def main(argv=None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(description='Melon Catalog Fetcher')
    parser.add_argument('command', choices=['chart', 'song', 'album', 'prefetch'],
                       help='Command to execute')
    parser.add_argument('target', nargs='?',
                       help='Chart type (chart) or numeric id (song/album)')
    parser.add_argument('--config', default='config.yaml',
                       help='Path to config file (default: config.yaml)')
    parser.add_argument('--once', action='store_true',
                       help='prefetch: run a single pass over all charts and exit')

    args = parser.parse_args(argv)
    config = load_config(args.config)
    service = build_service(config)

    try:
        if args.command in ('chart', 'song', 'album'):
            if not args.target:
                parser.error(f"{args.command} requires a target")
            if args.command == 'chart':
                return _print_result(service.fetch_chart(args.target))
            if args.command == 'song':
                return _print_result(service.fetch_song(args.target))
            return _print_result(service.fetch_album(args.target))

        prefetcher = build_prefetcher(service, config)
        if args.once:
            start_time = time.time()
            outcomes = prefetcher.prefetch_all()
            elapsed = time.time() - start_time

            print("\n" + "="*50)
            print("Prefetch Summary")
            print("="*50)
            for chart_type, ok in outcomes.items():
                print(f"  {chart_type}: {'✓' if ok else '✗'}")
            print(f"\nElapsed time: {elapsed:.2f}s")
            print("="*50)
            return 0 if all(outcomes.values()) else 1

        if not prefetcher.config.enabled:
            logger.error("Prefetch is disabled in config")
            return 1
        prefetcher.start()
        try:
            print("Prefetcher started. Press Ctrl+C to stop.")
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            print("\nStopping prefetcher...")
            prefetcher.stop()
        return 0
    finally:
        service.close()


if __name__ == '__main__':
    sys.exit(main())
