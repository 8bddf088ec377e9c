# tests/test_mail_transport.py

"""Tests for the SMTP mail transport."""

import smtplib
import unittest
from unittest.mock import MagicMock, patch

from src.errors import NotificationDispatchError
from src.notifications.mail_transport import SmtpMailTransport


def _send(transport: SmtpMailTransport) -> None:
    transport.send(
        "a@example.com",
        ["a@example.com"],
        "💰 Price alert - Widget",
        "<p>$12.00</p>",
    )


@patch("src.notifications.mail_transport.smtplib.SMTP")
class TestSmtpStartTls(unittest.TestCase):
    """Plain SMTP with STARTTLS."""

    def _server(self, mock_smtp: MagicMock) -> MagicMock:
        server = MagicMock()
        server.__enter__.return_value = server
        mock_smtp.return_value = server
        return server

    def test_sends_message(self, mock_smtp: MagicMock) -> None:
        """A message is handed to the server with the right envelope."""
        server = self._server(mock_smtp)
        transport = SmtpMailTransport(
            host="mail.example.com", port=587, username="", use_ssl=False,
        )
        _send(transport)

        server.starttls.assert_called_once()
        server.login.assert_not_called()
        msg = server.send_message.call_args.args[0]
        kwargs = server.send_message.call_args.kwargs
        self.assertEqual(msg["From"], "a@example.com")
        self.assertEqual(msg["To"], "a@example.com")
        self.assertEqual(msg["Subject"], "💰 Price alert - Widget")
        self.assertEqual(kwargs["to_addrs"], ["a@example.com"])

    def test_html_alternative_attached(self, mock_smtp: MagicMock) -> None:
        """The HTML body is attached as text/html."""
        server = self._server(mock_smtp)
        _send(SmtpMailTransport(host="h", port=25, username="", use_ssl=False))

        msg = server.send_message.call_args.args[0]
        html_part = msg.get_body(preferencelist=("html",))
        self.assertIsNotNone(html_part)
        self.assertIn("$12.00", html_part.get_content())

    def test_logs_in_with_credentials(self, mock_smtp: MagicMock) -> None:
        """Credentials trigger an SMTP login."""
        server = self._server(mock_smtp)
        _send(SmtpMailTransport(
            host="h", port=587, username="user", password="pw",
            use_ssl=False,
        ))
        server.login.assert_called_once_with("user", "pw")

    def test_smtp_error_raises_dispatch_error(
        self, mock_smtp: MagicMock,
    ) -> None:
        """Delivery failures raise NotificationDispatchError."""
        server = self._server(mock_smtp)
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        with self.assertRaises(NotificationDispatchError):
            _send(SmtpMailTransport(host="h", port=587, username="", use_ssl=False))

    def test_connection_error_raises_dispatch_error(
        self, mock_smtp: MagicMock,
    ) -> None:
        """An unreachable relay raises NotificationDispatchError."""
        mock_smtp.side_effect = ConnectionRefusedError("refused")
        with self.assertRaises(NotificationDispatchError) as ctx:
            _send(SmtpMailTransport(host="h", port=587, username="", use_ssl=False))
        self.assertIsInstance(
            ctx.exception.__cause__, ConnectionRefusedError,
        )

    def test_starttls_failure_closes_connection(
        self, mock_smtp: MagicMock,
    ) -> None:
        """A failed TLS upgrade closes the socket and raises."""
        server = self._server(mock_smtp)
        server.starttls.side_effect = smtplib.SMTPNotSupportedError()
        with self.assertRaises(NotificationDispatchError):
            _send(SmtpMailTransport(
                host="h", port=587, username="", use_ssl=False,
            ))
        server.close.assert_called_once()


@patch("src.notifications.mail_transport.smtplib.SMTP_SSL")
class TestSmtpSsl(unittest.TestCase):
    """Implicit TLS connections."""

    def test_uses_ssl_client(self, mock_ssl: MagicMock) -> None:
        """SMTP_SSL is used and STARTTLS is skipped."""
        server = MagicMock()
        server.__enter__.return_value = server
        mock_ssl.return_value = server

        _send(SmtpMailTransport(
            host="h", port=465, username="", use_ssl=True,
        ))

        mock_ssl.assert_called_once()
        server.starttls.assert_not_called()
        server.send_message.assert_called_once()


if __name__ == "__main__":
    unittest.main()
