# src/notifications/mail_transport.py

"""SMTP mail transport for outbound alerts."""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from src.config.settings import Settings
from src.errors import NotificationDispatchError

logger = logging.getLogger("price_monitor.mail")

_PLAIN_FALLBACK = "HTML capable email client required to view this alert."


class SmtpMailTransport:
    """Sends single HTML emails through an SMTP relay.

    STARTTLS is used on plain connections; ``SMTP_USE_SSL`` switches
    to implicit TLS. Credentials are optional.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        use_ssl: bool | None = None,
    ) -> None:
        self.host = host or Settings.SMTP_HOST
        self.port = port or Settings.SMTP_PORT
        self.username = (
            Settings.SMTP_USER if username is None else username
        )
        self.password = (
            Settings.SMTP_PASSWORD if password is None else password
        )
        self.use_ssl = (
            Settings.SMTP_USE_SSL if use_ssl is None else use_ssl
        )
        self.timeout = Settings.SMTP_TIMEOUT

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.use_ssl:
            return smtplib.SMTP_SSL(
                self.host, self.port,
                context=context, timeout=self.timeout,
            )
        server = smtplib.SMTP(
            self.host, self.port, timeout=self.timeout,
        )
        try:
            server.starttls(context=context)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def send(
        self,
        sender: str,
        to: list[str],
        subject: str,
        html_body: str,
    ) -> None:
        """Send one message.

        Raises:
            NotificationDispatchError: connection, auth or delivery
                failed.
        """
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = ", ".join(to)
        msg.set_content(_PLAIN_FALLBACK)
        msg.add_alternative(html_body, subtype="html")

        try:
            with self._connect() as server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg, from_addr=sender, to_addrs=to)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationDispatchError(
                f"Failed to send '{subject}' to {to}: {exc}"
            ) from exc

        logger.info("Email sent to %s: %s", to, subject)
