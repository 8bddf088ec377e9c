# src/errors.py

"""Exception hierarchy shared by the price-check and notification paths."""


class PriceMonitorError(Exception):
    """Base class for every error raised by price_monitor."""


class TransientFetchError(PriceMonitorError):
    """A page could not be fetched (network, timeout, non-2xx)."""

    def __init__(
        self, url: str, reason: str, status_code: int | None = None,
    ) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class ExtractionError(PriceMonitorError):
    """A selector could not be applied to a fetched page."""

    def __init__(self, selector: str, reason: str) -> None:
        self.selector = selector
        self.reason = reason
        super().__init__(
            f"Cannot apply selector {selector!r}: {reason}"
        )


class StoreReadError(PriceMonitorError):
    """The item store could not be read, or held a corrupt record."""


class StoreWriteError(PriceMonitorError):
    """The item store rejected a write."""


class NotificationDispatchError(PriceMonitorError):
    """The mail transport failed to deliver an alert."""


class PriceCheckError(PriceMonitorError):
    """A price-check pass was aborted.

    Always chained (``raise ... from``) to the underlying fetch,
    extraction or store error.
    """
