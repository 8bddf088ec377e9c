# src/cli/runner.py

"""Headless runners behind the command-line entry point."""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.errors import PriceMonitorError
from src.models.monitored_item import MonitoredItem
from src.notifications.mail_transport import SmtpMailTransport
from src.scrapers.page_fetcher import PageFetcher
from src.services.change_notifier import ChangeNotifier, MailTransport
from src.services.price_checker import PriceChecker, run_with_deadline
from src.services.stream_consumer import StreamConsumer
from src.storage.item_store import ItemStore

logger = logging.getLogger("price_monitor.cli")

# Stderr console for status messages so stdout stays clean for tables
_err = Console(stderr=True)


@dataclass
class Services:
    """Long-lived handles shared by every invocation in this process."""

    store: ItemStore
    fetcher: PageFetcher
    checker: PriceChecker
    consumer: StreamConsumer

    def close(self) -> None:
        """Release the fetch session and the database."""
        self.fetcher.close()
        self.store.close()


def build_services(
    db_path: Path | None = None,
    transport: MailTransport | None = None,
) -> Services:
    """Wire store, fetcher, checker and stream consumer together."""
    store = ItemStore(db_path=db_path)
    fetcher = PageFetcher()
    notifier = ChangeNotifier(transport or SmtpMailTransport())
    return Services(
        store=store,
        fetcher=fetcher,
        checker=PriceChecker(store, fetcher),
        consumer=StreamConsumer(store, notifier),
    )


def run_cycle(services: Services) -> int:
    """One scheduled tick: price-check pass, then notify on changes.

    Returns an exit code (0=ok, 1=failed). Failures are logged with
    their traceback; the next tick is the retry.
    """
    try:
        result = asyncio.run(run_with_deadline(services.checker))
    except TimeoutError:
        logger.error(
            "Price-check pass exceeded %.0fs deadline",
            Settings.INVOCATION_TIMEOUT,
        )
        _err.print("[red]Price check timed out.[/red]")
        return 1
    except PriceMonitorError as exc:
        _err.print(f"[red]Price check failed: {exc}[/red]")
        return 1

    _err.print(
        f"[green]✓ {result.checked} items checked,"
        f" {len(result.changed)} changed[/green]"
    )

    try:
        services.consumer.drain()
    except PriceMonitorError as exc:
        logger.error("Notification failed: %s", exc, exc_info=True)
        _err.print(f"[red]Notification failed: {exc}[/red]")
        return 1
    return 0


def run_once(db_path: Path | None = None) -> int:
    """Run a single tick and exit."""
    services = build_services(db_path=db_path)
    try:
        return run_cycle(services)
    finally:
        services.close()


def run_daemon(
    db_path: Path | None = None, max_cycles: int | None = None,
) -> None:
    """Run a tick every ``CHECK_INTERVAL_MINUTES`` until interrupted.

    Ticks start on a fixed interval: the time a cycle took is taken
    off the following sleep. A cycle that raises is logged and the
    loop moves on to the next tick.
    """
    interval = max(1, Settings.CHECK_INTERVAL_MINUTES)
    logger.info("Starting daemon; check every %d minutes.", interval)
    services = build_services(db_path=db_path)
    cycles = 0
    try:
        while max_cycles is None or cycles < max_cycles:
            started = time.monotonic()
            try:
                run_cycle(services)
            except Exception as e:
                logger.exception("Unhandled error in daemon cycle: %s", e)
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            elapsed = time.monotonic() - started
            time.sleep(max(0.0, interval * 60 - elapsed))
    finally:
        services.close()


def _print_items(items: list[MonitoredItem]) -> None:
    table = Table(
        title="Monitored Items",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Item", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Email", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for it in items:
        table.add_row(
            it.id,
            it.item,
            it.price or "—",
            it.email,
            it.url,
        )

    Console().print(table)


def run_list(db_path: Path | None = None) -> int:
    """Print every monitored item."""
    store = ItemStore(db_path=db_path)
    try:
        items = store.scan_all()
    finally:
        store.close()

    if not items:
        _err.print("[yellow]No monitored items.[/yellow]")
        return 0
    _print_items(items)
    return 0


def run_import_items(
    filepath: Path, db_path: Path | None = None,
) -> int:
    """Seed the store from a JSON file."""
    from src.storage.item_loader import import_items

    if not filepath.exists():
        _err.print(f"[red]File not found: {filepath}[/red]")
        return 1

    store = ItemStore(db_path=db_path)
    try:
        count = import_items(store, filepath)
    finally:
        store.close()

    _err.print(f"[green]✓ Imported {count} items[/green]")
    return 0 if count else 1


async def run_health_check(db_path: Path | None = None) -> int:
    """Check every monitored page and print a status table."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running item page health check...[/bold]")
    store = ItemStore(db_path=db_path)
    fetcher = PageFetcher()
    try:
        items = store.scan_all()
        results = await HealthChecker(fetcher).check_all(items)
    finally:
        fetcher.close()
        store.close()

    table = Table(
        title="Item Page Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Item", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.item_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
