"""
Weather Alert Service
=====================

Sends a notification when a reading gets too hot or too humid.

HOW IT WORKS:
------------
    Dashboard polls a new reading
            |
            v
    [AlertTrigger.check(reading)]
            |  temperature > 40 or humidity > 80 ?
            v
    [Notifier.send_threshold_alert(reading)]  --> SMTP email OR EmailJS

FIRE AND FORGET:
---------------
There is no retry and no delivery confirmation. If the email fails, we log
it and move on. The next poll will try again if it's still too hot.

LEVEL vs EDGE TRIGGERED:
-----------------------
- Level (default): fire on EVERY check while the reading is over the limit.
  That's how the original dashboard behaved, so a hot afternoon means
  one email per poll.
- Edge (ALERT_EDGE_TRIGGERED=true): fire only when we cross from "normal"
  into "too hot/humid". Back to normal re-arms the trigger.

Author: WeatherVerse Team
"""

import smtplib
import logging
import os
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from datetime import datetime, timezone
from typing import Optional

import httpx

from weatherverse.models import Reading

logger = logging.getLogger(__name__)


# =============================================================================
# NOTIFIERS
# =============================================================================

class EmailNotifier:
    """
    Sends threshold alerts by email over SMTP.

    Configure with environment variables:
    - SMTP_HOST: SMTP server hostname (default: smtp.gmail.com)
    - SMTP_PORT: SMTP server port (default: 587)
    - SMTP_USER: SMTP username/email
    - SMTP_PASSWORD: SMTP password or app password
    - ALERT_EMAIL: Email address to send alerts to
    - FROM_EMAIL: Sender address (default: SMTP_USER)
    """

    def __init__(self):
        """Initialize email notifier with configuration from environment."""
        self.smtp_host = os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.alert_email = os.getenv("ALERT_EMAIL") or self.smtp_user
        self.from_email = os.getenv("FROM_EMAIL") or self.smtp_user or "weatherverse@localhost"

        self.is_configured = bool(self.smtp_user and self.smtp_password and self.alert_email)
        if not self.is_configured:
            logger.warning(
                "Email alerts not configured. Set SMTP_USER, SMTP_PASSWORD and "
                "ALERT_EMAIL environment variables to enable them."
            )

    def send_threshold_alert(self, reading: Reading) -> bool:
        """
        Send an email saying the reading crossed a threshold.

        Args:
            reading: The reading that is too hot or too humid

        Returns:
            True if the email was handed to the SMTP server, False otherwise
        """
        if not self.is_configured:
            logger.debug("Email not configured, skipping alert")
            return False

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = (
                f"Weather Alert: {reading.temperature:.1f}°C / {reading.humidity:.1f}%"
            )
            msg["From"] = self.from_email
            msg["To"] = self.alert_email

            sent_at = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

            text_content = f"""
Weather Alert
=============

Temperature: {reading.temperature:.1f} °C
Humidity: {reading.humidity:.1f} %
Reading time: {reading.timestamp}

Sent: {sent_at}

---
WeatherVerse Dashboard
"""

            html_content = f"""
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: #dc3545; color: white; padding: 20px; border-radius: 8px 8px 0 0;">
            <h2>Weather Alert</h2>
        </div>
        <div style="background: #f8f9fa; padding: 20px; border: 1px solid #dee2e6;">
            <p><strong>Temperature:</strong> {reading.temperature:.1f} °C</p>
            <p><strong>Humidity:</strong> {reading.humidity:.1f} %</p>
            <p><strong>Reading time:</strong> {reading.timestamp}</p>
            <p><strong>Sent:</strong> {sent_at}</p>
        </div>
    </div>
</body>
</html>
"""

            msg.attach(MIMEText(text_content, "plain"))
            msg.attach(MIMEText(html_content, "html"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Alert email sent to {self.alert_email}")
            return True

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send alert email: {type(e).__name__}: {e}")
            return False


class EmailJSNotifier:
    """
    Sends threshold alerts through the EmailJS REST API.

    This is what the browser dashboard used. Configure with:
    - EMAILJS_SERVICE_ID, EMAILJS_TEMPLATE_ID, EMAILJS_USER_ID (public key)
    - EMAILJS_ACCESS_TOKEN (private key, optional)
    - ALERT_RECIPIENT_NAME: Goes into the template's to_name
    """

    API_URL = "https://api.emailjs.com/api/v1.0/email/send"

    def __init__(self, http_client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.service_id = os.getenv("EMAILJS_SERVICE_ID", "")
        self.template_id = os.getenv("EMAILJS_TEMPLATE_ID", "")
        self.user_id = os.getenv("EMAILJS_USER_ID", "")
        self.access_token = os.getenv("EMAILJS_ACCESS_TOKEN", "")
        self.recipient_name = os.getenv("ALERT_RECIPIENT_NAME") or "Weather Station Owner"
        self.http_client = http_client or httpx.Client(timeout=timeout)

        self.is_configured = bool(self.service_id and self.template_id and self.user_id)
        if not self.is_configured:
            logger.warning(
                "EmailJS alerts not configured. Set EMAILJS_SERVICE_ID, "
                "EMAILJS_TEMPLATE_ID and EMAILJS_USER_ID to enable them."
            )

    def send_threshold_alert(self, reading: Reading) -> bool:
        """
        Ask EmailJS to send the alert template.

        Returns:
            True if EmailJS accepted the request, False otherwise
        """
        if not self.is_configured:
            logger.debug("EmailJS not configured, skipping alert")
            return False

        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.user_id,
            "template_params": {
                "to_name": self.recipient_name,
                "temperature": reading.temperature,
                "humidity": reading.humidity,
            },
        }
        if self.access_token:
            payload["accessToken"] = self.access_token

        try:
            response = self.http_client.post(self.API_URL, json=payload)
            response.raise_for_status()
            logger.info(f"Email sent successfully: {response.status_code} {response.text}")
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Failed to send email: HTTP {e.response.status_code} {e.response.text[:200]}"
            )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email: {type(e).__name__}: {e}")
            return False

    def close(self):
        self.http_client.close()


class NullNotifier:
    """Notifier that only logs. Used when ALERT_CHANNEL=none."""

    def send_threshold_alert(self, reading: Reading) -> bool:
        logger.info(
            f"[ALERT] {reading.temperature:.1f}°C / {reading.humidity:.1f}% (no channel configured)"
        )
        return False


def build_notifier(channel: str):
    """
    Create the notifier for an ALERT_CHANNEL value.

    Args:
        channel: "smtp", "emailjs" or "none"

    Raises:
        ValueError: For any other channel name
    """
    channel = (channel or "").strip().lower()
    if channel == "smtp":
        return EmailNotifier()
    if channel == "emailjs":
        return EmailJSNotifier()
    if channel == "none":
        return NullNotifier()
    raise ValueError(f"Unknown alert channel: {channel!r} (expected smtp, emailjs or none)")


# =============================================================================
# THE TRIGGER
# =============================================================================

class AlertTrigger:
    """
    Decides whether a reading deserves a notification.

    HOW TO USE:
    ----------
    trigger = AlertTrigger(EmailNotifier())
    trigger.check(reading)   # True if a notification was attempted
    """

    DEFAULT_TEMPERATURE_THRESHOLD = 40
    DEFAULT_HUMIDITY_THRESHOLD = 80

    def __init__(
        self,
        notifier,
        temperature_threshold: float = DEFAULT_TEMPERATURE_THRESHOLD,
        humidity_threshold: float = DEFAULT_HUMIDITY_THRESHOLD,
        edge_triggered: bool = False
    ):
        """
        Args:
            notifier: Anything with send_threshold_alert(reading) -> bool
            temperature_threshold: Alert when temperature is ABOVE this (°C)
            humidity_threshold: Alert when humidity is ABOVE this (%)
            edge_triggered: Only alert when crossing into violation
        """
        self.notifier = notifier
        self.temperature_threshold = temperature_threshold
        self.humidity_threshold = humidity_threshold
        self.edge_triggered = edge_triggered

        self._in_violation = False
        self.attempts = 0

    def exceeds_thresholds(self, reading: Reading) -> bool:
        """True if the reading is too hot or too humid."""
        return (
            reading.temperature > self.temperature_threshold
            or reading.humidity > self.humidity_threshold
        )

    def check(self, reading: Reading) -> bool:
        """
        Evaluate one reading and fire at most one notification.

        Args:
            reading: The reading to check

        Returns:
            True if a notification was attempted (even if delivery failed)
        """
        violated = self.exceeds_thresholds(reading)
        was_violated = self._in_violation
        self._in_violation = violated

        if not violated:
            return False
        if self.edge_triggered and was_violated:
            logger.debug("Still over threshold, alert already sent for this episode")
            return False

        logger.warning(
            f"[ALERT] Threshold exceeded: {reading.temperature:.1f}°C "
            f"(limit {self.temperature_threshold}), {reading.humidity:.1f}% "
            f"(limit {self.humidity_threshold})"
        )
        self.attempts += 1
        try:
            self.notifier.send_threshold_alert(reading)
        except Exception as e:
            # Notifiers log their own delivery errors, this catches anything else
            logger.error(f"Alert notifier crashed: {type(e).__name__}: {e}")
        return True
