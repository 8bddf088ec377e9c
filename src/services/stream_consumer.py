# src/services/stream_consumer.py

"""Delivers item-store change records to the notifier, one at a time."""

import logging

from src.config.settings import Settings
from src.services.change_notifier import ChangeNotifier
from src.storage.item_store import ItemStore

logger = logging.getLogger("price_monitor.stream")

DEFAULT_CONSUMER = "price-notification"


class StreamConsumer:
    """Checkpointed, at-least-once reader of the store's change log.

    The checkpoint only moves after the notifier returns, so a failed
    invocation is redelivered on the next drain.
    """

    def __init__(
        self,
        store: ItemStore,
        notifier: ChangeNotifier,
        consumer: str = DEFAULT_CONSUMER,
        batch_size: int | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.consumer = consumer
        self.batch_size = batch_size or Settings.STREAM_BATCH_SIZE

    def drain(self) -> int:
        """Deliver every pending record. Returns the number delivered.

        The first notifier failure stops the drain and propagates.
        """
        delivered = 0
        position = self.store.get_checkpoint(self.consumer)
        while True:
            batch = self.store.read_changes(
                after_sequence=position, limit=self.batch_size,
            )
            if not batch:
                break
            self.notifier.handle_batch(batch)
            position = batch[-1].sequence
            self.store.set_checkpoint(self.consumer, position)
            delivered += len(batch)

        if delivered:
            logger.info(
                "Delivered %d change records to %s (checkpoint %d)",
                delivered,
                self.consumer,
                position,
            )
        return delivered
