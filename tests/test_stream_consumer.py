# tests/test_stream_consumer.py

"""Tests for the checkpointed change stream consumer."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from src.errors import NotificationDispatchError
from src.models.monitored_item import MonitoredItem
from src.services.change_notifier import ChangeNotifier
from src.services.stream_consumer import StreamConsumer
from src.storage.item_store import ItemStore


def _widget(price: str) -> MonitoredItem:
    return MonitoredItem(
        id="w1",
        url="https://shop.example.com/widget",
        selector="span.price",
        item="Widget",
        price=price,
        email="a@example.com",
    )


class TestStreamConsumer(unittest.TestCase):
    """StreamConsumer.drain end to end with a real store."""

    def setUp(self) -> None:
        """Create a store, mock transport and consumer."""
        self.tmp_dir = tempfile.mkdtemp()
        self.store = ItemStore(db_path=Path(self.tmp_dir) / "items.db")
        self.transport = MagicMock()
        self.consumer = StreamConsumer(
            self.store, ChangeNotifier(self.transport),
        )

    def tearDown(self) -> None:
        """Close the database."""
        self.store.close()

    def test_nothing_pending(self) -> None:
        """An empty stream delivers nothing."""
        self.assertEqual(self.consumer.drain(), 0)

    def test_insert_then_modify_sends_one_alert(self) -> None:
        """Only the MODIFY record produces an email."""
        self.store.put(_widget("$10.00"))
        self.store.put(_widget("$12.00"))

        self.assertEqual(self.consumer.drain(), 2)
        self.transport.send.assert_called_once()
        body = self.transport.send.call_args.args[3]
        self.assertIn("$10.00", body)
        self.assertIn("$12.00", body)

    def test_checkpoint_prevents_redelivery(self) -> None:
        """A second drain does not resend processed records."""
        self.store.put(_widget("$10.00"))
        self.store.put(_widget("$12.00"))
        self.consumer.drain()
        self.transport.send.reset_mock()

        self.assertEqual(self.consumer.drain(), 0)
        self.transport.send.assert_not_called()

    def test_one_record_per_invocation(self) -> None:
        """Every notifier call receives a single record."""
        notifier = MagicMock()
        consumer = StreamConsumer(self.store, notifier)
        self.store.put(_widget("$1"))
        self.store.put(_widget("$2"))
        self.store.put(_widget("$3"))

        consumer.drain()

        self.assertEqual(notifier.handle_batch.call_count, 3)
        for call in notifier.handle_batch.call_args_list:
            self.assertEqual(len(call.args[0]), 1)

    def test_failure_keeps_record_for_redelivery(self) -> None:
        """A failed notification is retried on the next drain."""
        self.store.put(_widget("$10.00"))
        self.store.put(_widget("$12.00"))
        self.transport.send.side_effect = NotificationDispatchError("down")

        with self.assertRaises(NotificationDispatchError):
            self.consumer.drain()

        self.transport.send.side_effect = None
        self.assertEqual(self.consumer.drain(), 1)
        self.transport.send.assert_called()

    def test_consumers_track_separate_checkpoints(self) -> None:
        """Two named consumers each see the full stream."""
        self.store.put(_widget("$10.00"))
        other = StreamConsumer(
            self.store, ChangeNotifier(MagicMock()), consumer="audit",
        )
        self.assertEqual(self.consumer.drain(), 1)
        self.assertEqual(other.drain(), 1)


if __name__ == "__main__":
    unittest.main()
