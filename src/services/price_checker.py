# src/services/price_checker.py

"""Scheduled price-check pass: scan, fetch, extract, diff, write."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.config.settings import Settings
from src.errors import PriceCheckError
from src.models.monitored_item import MonitoredItem
from src.scrapers.page_fetcher import PageFetcher
from src.scrapers.price_extractor import extract_price
from src.storage.item_store import ItemStore

logger = logging.getLogger("price_monitor.price_check")


@dataclass
class PassResult:
    """Outcome of a completed price-check pass."""

    checked: int = 0
    changed: list[MonitoredItem] = field(
        default_factory=lambda: list[MonitoredItem]()
    )


def compute_diff(
    items: list[MonitoredItem], new_prices: list[str],
) -> list[MonitoredItem]:
    """Return updated copies of items whose price text changed.

    *new_prices* is aligned with *items* by position. Comparison is
    exact string equality; nothing is normalised.
    """
    return [
        item.with_price(price)
        for item, price in zip(items, new_prices, strict=True)
        if price != item.price
    ]


class PriceChecker:
    """Runs one price-check pass against injected collaborators.

    The store, fetcher and extractor are built once at process start
    and shared by every pass.
    """

    def __init__(
        self,
        store: ItemStore,
        fetcher: PageFetcher,
        extractor: Callable[[str, str], str] = extract_price,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor

    async def _fetch_all(
        self, items: list[MonitoredItem],
    ) -> list[str]:
        """Fetch every page concurrently; the first failure propagates."""
        tasks = [
            asyncio.to_thread(self.fetcher.fetch, item.url)
            for item in items
        ]
        bodies: list[str] = list(await asyncio.gather(*tasks))
        return bodies

    async def _write_all(self, diff: list[MonitoredItem]) -> None:
        """Persist every changed row concurrently."""
        tasks = [
            asyncio.to_thread(self.store.put, item) for item in diff
        ]
        await asyncio.gather(*tasks)

    async def run_pass(self) -> PassResult:
        """Execute one pass.

        Raises:
            PriceCheckError: any fetch, extraction or write failed.
                Writes that completed before the failure are kept.
        """
        try:
            return await self._run_pass()
        except Exception as exc:
            logger.error(
                "Price-check pass aborted: %s", exc, exc_info=True,
            )
            raise PriceCheckError(str(exc)) from exc

    async def _run_pass(self) -> PassResult:
        logger.info("db scan: start")
        items = await asyncio.to_thread(self.store.scan_all)
        logger.info("db scan: end (%d items)", len(items))

        if not items:
            logger.info("db empty, nothing to check")
            return PassResult()

        logger.info("fetch: start")
        bodies = await self._fetch_all(items)
        logger.info("fetch: end")

        logger.info("generate diff: start")
        new_prices = [
            self.extractor(body, item.selector)
            for item, body in zip(items, bodies, strict=True)
        ]
        diff = compute_diff(items, new_prices)
        logger.info(
            "generate diff: end (%d of %d changed)",
            len(diff),
            len(items),
        )

        if diff:
            logger.info("db update: start")
            for item in diff:
                logger.debug(
                    "diff %s: %r -> new price %r",
                    item.id,
                    item.item,
                    item.price,
                )
            await self._write_all(diff)
            logger.info("db update: end")

        return PassResult(checked=len(items), changed=diff)


async def run_with_deadline(
    checker: PriceChecker, timeout: float | None = None,
) -> PassResult:
    """Run a pass under the invocation-level deadline.

    On expiry the pass is cancelled and ``TimeoutError`` propagates.
    """
    deadline = timeout or Settings.INVOCATION_TIMEOUT
    return await asyncio.wait_for(checker.run_pass(), deadline)
