#!/usr/bin/env python3
"""
Fetch URLs through the Redis cache from the command line.

Useful for checking what a namespace holds for a URL, or for priming the
cache from a developer workstation or CI job. Every URL is fetched through
the configured strategy and a JSON summary is printed per URL.
"""

import argparse
import asyncio
import base64
import json
from typing import Any, Dict, List, Optional
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from fetch_cache.adapters.http_fetcher import HttpFetcher  # noqa: E402
from fetch_cache.decorator import caching_fetch  # noqa: E402
from fetch_cache.options import CacheOptions  # noqa: E402
from fetch_cache.store.redis_store import RedisStore  # noqa: E402
from shared.config import BaseConfig, get_config  # noqa: E402
from shared.errors import FetchCacheException  # noqa: E402
from shared.logging import configure_logging  # noqa: E402


def _describe_payload(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, bytes):
        return {"type": "binary", "size": len(payload), "base64": base64.b64encode(payload).decode("ascii")}
    if isinstance(payload, str):
        return {"type": "text", "value": payload}
    return {"type": "object", "value": payload}


async def fetch_all(urls: List[str], config: BaseConfig, base_url: Optional[str] = None) -> List[Dict[str, Any]]:
    """Fetch every URL through the cache and summarize the outcomes."""
    store = RedisStore.from_url(config.redis_url, high_water=config.high_water)
    diagnostics: List[Dict[str, Any]] = []
    store.add_error_listener(lambda error: diagnostics.append(error.to_response().model_dump()))

    fetcher = HttpFetcher(base_url, timeout=config.upstream_timeout)
    cached_fetch = caching_fetch(fetcher, CacheOptions.from_config(config, store=store))

    summaries = []
    try:
        for url in urls:
            summary: Dict[str, Any] = {"url": url, "key": cached_fetch.cache_key(url)}
            try:
                result = await cached_fetch(url)
            except FetchCacheException as exc:
                summary["error"] = exc.to_response().model_dump()
            else:
                summary["payload"] = _describe_payload(result.payload)
            summaries.append(summary)
        await cached_fetch.drain()
    finally:
        await fetcher.aclose()
        await store.close()

    if diagnostics:
        summaries.append({"diagnostics": diagnostics})
    return summaries


def _parse_args() -> argparse.Namespace:
    config = get_config()
    parser = argparse.ArgumentParser(description="Fetch URLs through the Redis cache.")
    parser.add_argument("urls", nargs="+", help="URLs to fetch")
    parser.add_argument("--redis-url", default=config.redis_url, help="Redis connection URL")
    parser.add_argument("--base-url", default=None, help="Prefix for relative URLs")
    parser.add_argument("--strategy", choices=["readthrough", "race"], default=config.strategy, help="Caching strategy")
    parser.add_argument("--namespace", default=config.namespace, help="Cache key namespace")
    parser.add_argument("--ttl", type=int, default=config.default_ttl, help="Entry TTL in seconds")
    parser.add_argument("--high-water", type=int, default=config.high_water, help="Store command queue high-water mark")
    parser.add_argument("--log-level", default=config.log_level, help="Log level")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    configure_logging("fetch_cache", args.log_level)
    config = get_config(
        redis_url=args.redis_url,
        strategy=args.strategy,
        namespace=args.namespace,
        default_ttl=args.ttl,
        high_water=args.high_water,
    )
    try:
        summaries = asyncio.run(fetch_all(args.urls, config, args.base_url))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[cached-fetch] failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(summaries, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
