# src/services/change_notifier.py

"""Turns price modifications from the change stream into email alerts."""

import logging
from collections.abc import Sequence
from typing import Protocol

from src.errors import NotificationDispatchError
from src.models.change_event import MODIFY, ChangeEvent
from src.notifications.email_template import (
    build_subject,
    render_price_alert,
)

logger = logging.getLogger("price_monitor.notifier")


class MailTransport(Protocol):
    """Anything that can deliver a single HTML email."""

    def send(
        self,
        sender: str,
        to: list[str],
        subject: str,
        html_body: str,
    ) -> None: ...


class ChangeNotifier:
    """Sends one alert per genuine price modification."""

    def __init__(self, transport: MailTransport) -> None:
        self.transport = transport

    def handle_batch(self, records: Sequence[ChangeEvent]) -> bool:
        """Process a delivered batch; only the first record is read.

        Delivery is configured for batches of one. Anything after the
        first record is dropped with a warning.
        """
        if not records:
            return False
        if len(records) > 1:
            logger.warning(
                "Received %d change records, ignoring all but sequence %d",
                len(records),
                records[0].sequence,
            )
        return self.handle_event(records[0])

    def handle_event(self, event: ChangeEvent) -> bool:
        """Send an alert for *event* if it is a modification.

        Returns ``True`` when an email was sent.

        Raises:
            NotificationDispatchError: the transport failed.
        """
        if event.event_kind != MODIFY:
            logger.info(
                "event %d is %s, not MODIFY",
                event.sequence,
                event.event_kind,
            )
            return False
        if event.before is None or event.after is None:
            logger.warning(
                "MODIFY event %d lacks a snapshot, skipping",
                event.sequence,
            )
            return False
        if event.before.price == event.after.price:
            logger.info(
                "MODIFY event %d left the price of %s unchanged",
                event.sequence,
                event.after.id,
            )
            return False

        after = event.after
        html_body = render_price_alert(
            item=after.item,
            url=after.url,
            old_price=event.before.price,
            new_price=after.price,
        )

        logger.info("email send: start (%s)", after.id)
        try:
            self.transport.send(
                after.email,
                [after.email],
                build_subject(after.item),
                html_body,
            )
        except NotificationDispatchError:
            logger.error(
                "Alert for %s failed", after.id, exc_info=True,
            )
            raise
        except Exception as exc:
            logger.error(
                "Alert for %s failed", after.id, exc_info=True,
            )
            raise NotificationDispatchError(str(exc)) from exc
        logger.info("email send: end (%s)", after.id)
        return True
