# tests/test_email_template.py

"""Tests for the price alert email template."""

import unittest

from src.notifications.email_template import (
    build_subject,
    render_price_alert,
)


class TestEmailTemplate(unittest.TestCase):
    """Rendering of subject and body."""

    def _render(self, **overrides: str) -> str:
        values = {
            "item": "Widget",
            "url": "https://shop.example.com/widget",
            "old_price": "$10.00",
            "new_price": "$12.00",
        }
        values.update(overrides)
        return render_price_alert(**values)

    def test_subject_contains_item(self) -> None:
        """The subject carries the item label."""
        self.assertEqual(build_subject("Widget"), "💰 Price alert - Widget")

    def test_body_has_greeting_and_sign_off(self) -> None:
        """Greeting and sign-off frame the alert."""
        body = self._render()
        self.assertIn("Hi 👋", body)
        self.assertIn("Have a good day", body)

    def test_body_links_item(self) -> None:
        """The item label links to its page."""
        body = self._render()
        self.assertIn(
            '<a href="https://shop.example.com/widget">Widget</a>', body,
        )

    def test_old_price_before_new_price(self) -> None:
        """Old price is listed ahead of the new one."""
        body = self._render()
        self.assertLess(body.index("$10.00"), body.index("$12.00"))
        self.assertLess(body.index("Old price:"), body.index("New price:"))

    def test_markup_in_values_is_escaped(self) -> None:
        """Item labels cannot inject markup."""
        body = self._render(item="<b>Widget</b>")
        self.assertNotIn("<b>Widget</b>", body)
        self.assertIn("&lt;b&gt;Widget&lt;/b&gt;", body)

    def test_rendering_is_deterministic(self) -> None:
        """Same inputs give the same body."""
        self.assertEqual(self._render(), self._render())


if __name__ == "__main__":
    unittest.main()
