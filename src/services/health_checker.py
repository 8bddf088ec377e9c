# src/services/health_checker.py

"""Connectivity health check for monitored item pages."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.errors import TransientFetchError
from src.models.monitored_item import MonitoredItem
from src.scrapers.page_fetcher import PageFetcher
from src.scrapers.price_extractor import extract_price

logger = logging.getLogger("price_monitor.health")


@dataclass
class HealthResult:
    """Result of a single item page check."""

    item_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def check_item(
    fetcher: PageFetcher, item: MonitoredItem,
) -> HealthResult:
    """Fetch one item page and classify it. Never raises."""
    start = time.monotonic()
    try:
        body = fetcher.fetch(item.url)
        price = extract_price(body, item.selector)
    except TransientFetchError as exc:
        return HealthResult(
            item_id=item.id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=exc.reason[:80],
        )
    except Exception as exc:
        return HealthResult(
            item_id=item.id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    message = "" if price else "Selector matched nothing"

    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            item_id=item.id,
            status="slow",
            latency_ms=elapsed_ms,
            message=message or "High latency",
        )

    return HealthResult(
        item_id=item.id,
        status="ok",
        latency_ms=elapsed_ms,
        message=message,
    )


class HealthChecker:
    """Runs concurrent checks against every monitored item."""

    def __init__(self, fetcher: PageFetcher) -> None:
        self.fetcher = fetcher

    async def check_all(
        self, items: list[MonitoredItem],
    ) -> list[HealthResult]:
        """Check every item concurrently."""
        tasks = [
            asyncio.to_thread(check_item, self.fetcher, item)
            for item in items
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.item_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
