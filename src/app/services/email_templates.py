"""HTML email templates.

Every template renders a complete HTML document inside the shared layout;
merge values are HTML-escaped before substitution. ``$`` placeholders
(``string.Template``) keep the CSS braces literal.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from html import escape
from string import Template
from typing import Any

FOOTER_COPYRIGHT = "© 2024 SmartAgriNet. All rights reserved."
SUPPORT_EMAIL = "support@smartagrinet.com"

_LAYOUT = Template(
    """<!DOCTYPE html>
<html lang="$lang">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>$title</title>
  <style>
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: linear-gradient(135deg, $gradient); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }
    .button { display: inline-block; background: $accent; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; margin: 20px 0; }
    .notice { background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 5px; margin: 20px 0; }
    .price-table { width: 100%; border-collapse: collapse; margin: 20px 0; }
    .price-table th, .price-table td { border: 1px solid #ddd; padding: 12px; text-align: left; }
    .price-table th { background-color: #4CAF50; color: white; }
    .increase { color: #4CAF50; font-weight: bold; }
    .decrease { color: #f44336; font-weight: bold; }
    .footer { text-align: center; margin-top: 30px; color: #666; font-size: 14px; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>$heading</h1>
      <p>$tagline</p>
    </div>
    <div class="content">
$content
    </div>
    <div class="footer">
      <p>$copyright</p>
      <p>$footer_note</p>
    </div>
  </div>
</body>
</html>
"""
)


@dataclass(frozen=True, slots=True)
class RenderedEmail:
    subject: str
    html: str


@dataclass(frozen=True, slots=True)
class EmailTemplate:
    """Subject plus a body renderer.

    ``render_body`` returns the inner HTML (already escaped) and the layout
    options for the header.
    """

    subject: str
    title: str
    heading: str
    tagline: str
    gradient: str
    accent: str
    footer_note: str
    render_body: Callable[[Mapping[str, Any], str], str]


def _e(value: Any) -> str:
    return escape("" if value is None else str(value))


def _items(values: Any) -> str:
    return "".join(f"<li>{_e(value)}</li>" for value in (values or []))


def _welcome_body(data: Mapping[str, Any], _language: str) -> str:
    dashboard_url = f"{data.get('frontend_url', '')}/dashboard"
    return f"""      <h2>Hello {_e(data.get("first_name"))}!</h2>
      <p>Welcome to SmartAgriNet - your comprehensive smart agriculture platform designed specifically for African farmers.</p>
      <h3>What you can do with SmartAgriNet:</h3>
      <ul>
        <li><strong>AI-Powered Crop Recommendations</strong> - Get personalized crop suggestions based on your soil and weather</li>
        <li><strong>Pest Detection</strong> - Identify pests and diseases using your phone's camera</li>
        <li><strong>Smart Irrigation</strong> - Optimize water usage with automated irrigation planning</li>
        <li><strong>Marketplace</strong> - Buy and sell agricultural products directly</li>
        <li><strong>Financial Services</strong> - Access loans and insurance through our partners</li>
        <li><strong>Weather Forecasting</strong> - Get accurate weather predictions for your farm</li>
      </ul>
      <h3>Getting Started:</h3>
      <ol>
        <li>Download the SmartAgriNet mobile app</li>
        <li>Complete your farm profile</li>
        <li>Start exploring our features</li>
        <li>Join our community of farmers</li>
      </ol>
      <a href="{_e(dashboard_url)}" class="button">Get Started Now</a>
      <h3>Quick Tips:</h3>
      <ul>
        <li>Add your farm location for accurate weather data</li>
        <li>Take photos of your crops for pest detection</li>
        <li>Connect with other farmers in your area</li>
        <li>Check the marketplace for best prices</li>
      </ul>"""


def _password_reset_body(data: Mapping[str, Any], _language: str) -> str:
    link = _e(data.get("reset_link"))
    return f"""      <h2>Password Reset Request</h2>
      <p>We received a request to reset your SmartAgriNet account password.</p>
      <a href="{link}" class="button">Reset Password</a>
      <div class="notice">
        <strong>Security Notice:</strong>
        <ul>
          <li>This link will expire in 1 hour</li>
          <li>If you didn't request this, please ignore this email</li>
          <li>Never share your password with anyone</li>
        </ul>
      </div>
      <p>If the button doesn't work, copy and paste this link into your browser:</p>
      <p style="word-break: break-all; color: #666;">{link}</p>"""


def _weather_alert_body(data: Mapping[str, Any], _language: str) -> str:
    return f"""      <h2>Weather Alert: {_e(data.get("type"))}</h2>
      <p><strong>Location:</strong> {_e(data.get("location"))}</p>
      <p><strong>Time:</strong> {_e(data.get("time"))}</p>
      <p><strong>Duration:</strong> {_e(data.get("duration"))}</p>
      <div class="notice">
        <h3>Alert Details:</h3>
        <p>{_e(data.get("description"))}</p>
      </div>
      <h3>Recommended Actions:</h3>
      <ul>{_items(data.get("recommendations"))}</ul>
      <p><strong>Stay safe and protect your crops!</strong></p>"""


def _price_row(product: Mapping[str, Any]) -> str:
    change = product.get("change") or 0
    css_class = "increase" if change > 0 else "decrease"
    sign = "+" if change > 0 else ""
    return (
        f"<tr><td>{_e(product.get('name'))}</td>"
        f"<td>{_e(product.get('currentPrice'))}</td>"
        f'<td class="{css_class}">{sign}{_e(change)}%</td>'
        f"<td>{_e(product.get('trend'))}</td></tr>"
    )


def _market_update_body(data: Mapping[str, Any], _language: str) -> str:
    rows = "".join(_price_row(product) for product in data.get("products") or [])
    return f"""      <h2>Market Update: {_e(data.get("date"))}</h2>
      <p><strong>Market:</strong> {_e(data.get("marketName"))}</p>
      <p><strong>Location:</strong> {_e(data.get("location"))}</p>
      <h3>Price Changes:</h3>
      <table class="price-table">
        <thead><tr><th>Product</th><th>Current Price</th><th>Change</th><th>Trend</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
      <h3>Market Insights:</h3>
      <ul>{_items(data.get("insights"))}</ul>
      <p><strong>Best time to sell:</strong> {_e(data.get("bestTimeToSell"))}</p>"""


def _custom_body(data: Mapping[str, Any], _language: str) -> str:
    # Custom content is authored by operators and sent as-is
    return str(data.get("content", ""))


TEMPLATES: dict[str, EmailTemplate] = {
    "welcome": EmailTemplate(
        subject="Welcome to SmartAgriNet - Your Smart Farming Journey Begins!",
        title="Welcome to SmartAgriNet",
        heading="Welcome to SmartAgriNet!",
        tagline="Empowering African Farmers with Smart Technology",
        gradient="#2E7D32, #4CAF50",
        accent="#4CAF50",
        footer_note=f"If you have any questions, contact us at {SUPPORT_EMAIL}",
        render_body=_welcome_body,
    ),
    "password_reset": EmailTemplate(
        subject="Reset Your SmartAgriNet Password",
        title="Password Reset - SmartAgriNet",
        heading="Password Reset Request",
        tagline="SmartAgriNet Account Security",
        gradient="#FF9800, #FFB74D",
        accent="#FF9800",
        footer_note=f"If you have any questions, contact us at {SUPPORT_EMAIL}",
        render_body=_password_reset_body,
    ),
    "weather_alert": EmailTemplate(
        subject="Weather Alert for Your Farm",
        title="Weather Alert - SmartAgriNet",
        heading="Weather Alert",
        tagline="Important weather information for your farm",
        gradient="#2196F3, #64B5F6",
        accent="#2196F3",
        footer_note="Manage your alerts in the SmartAgriNet app",
        render_body=_weather_alert_body,
    ),
    "market_update": EmailTemplate(
        subject="Market Price Update - SmartAgriNet",
        title="Market Update - SmartAgriNet",
        heading="Market Price Update",
        tagline="Latest prices for your agricultural products",
        gradient="#4CAF50, #81C784",
        accent="#4CAF50",
        footer_note="View real-time prices in the SmartAgriNet app",
        render_body=_market_update_body,
    ),
    "custom": EmailTemplate(
        subject="SmartAgriNet",
        title="SmartAgriNet",
        heading="SmartAgriNet",
        tagline="Empowering African Farmers",
        gradient="#2E7D32, #4CAF50",
        accent="#4CAF50",
        footer_note=f"Contact us at {SUPPORT_EMAIL}",
        render_body=_custom_body,
    ),
}


def render_email(
    template_name: str,
    data: Mapping[str, Any],
    language: str = "en",
    *,
    subject: str | None = None,
) -> RenderedEmail:
    """Render a template into subject + full HTML document.

    Args:
        template_name: Key of ``TEMPLATES``.
        data: Merge data.
        language: Value of ``<html lang>``.
        subject: Overrides the template subject (custom emails).

    Raises:
        ValueError: Unknown template.
    """
    template = TEMPLATES.get(template_name)
    if template is None:
        raise ValueError(f"Unknown email template: {template_name}")

    html = _LAYOUT.substitute(
        lang=_e(language),
        title=_e(template.title),
        gradient=template.gradient,
        accent=template.accent,
        heading=_e(template.heading),
        tagline=_e(template.tagline),
        content=template.render_body(data, language),
        copyright=_e(FOOTER_COPYRIGHT),
        footer_note=_e(template.footer_note),
    )
    return RenderedEmail(subject=subject or template.subject, html=html)
