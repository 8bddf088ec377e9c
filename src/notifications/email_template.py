# src/notifications/email_template.py

"""HTML body for price-change alerts."""

from jinja2 import Environment

_FONT = (
    "font-family:-apple-system,BlinkMacSystemFont,segoe ui,Helvetica,"
    "Arial,sans-serif;font-size:16px;line-height:24px;"
    "text-align:left;color:#333333;"
)

_TEMPLATE = """\
<!doctype html>
<html>
<head>
<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Price alert - {{ item }}</title>
</head>
<body style="word-spacing:normal;margin:0;padding:0;">
<div style="margin:0px auto;max-width:600px;padding:24px;">
  <div style="{{ font }}padding:0 0 24px 0;">Hi 👋</div>
  <div style="{{ font }}padding:0 0 24px 0;">Price just changed for <a href="{{ url }}">{{ item }}</a>!</div>
  <p style="border-top:dashed 1px #cccccc;font-size:1px;margin:0 0 24px 0;width:100%;"></p>
  <div style="{{ font }}font-weight:700;">Old price:</div>
  <div style="{{ font }}padding:0 0 24px 0;">{{ old_price }}</div>
  <div style="{{ font }}font-weight:700;">New price:</div>
  <div style="{{ font }}padding:0 0 24px 0;">{{ new_price }}</div>
  <p style="border-top:dashed 1px #cccccc;font-size:1px;margin:0 0 24px 0;width:100%;"></p>
  <div style="{{ font }}padding:0 0 24px 0;">Have a good day 🐘💨</div>
</div>
</body>
</html>
"""

env = Environment(autoescape=True)
_template = env.from_string(_TEMPLATE)


def build_subject(item: str) -> str:
    """Subject line for an alert about *item*."""
    return f"💰 Price alert - {item}"


def render_price_alert(
    item: str, url: str, old_price: str, new_price: str,
) -> str:
    """Render the alert body. Pure: no store or network access."""
    return _template.render(
        item=item,
        url=url,
        old_price=old_price,
        new_price=new_price,
        font=_FONT,
    )
