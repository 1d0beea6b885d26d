import json
import smtplib
from unittest import mock

import httpx
import pytest

from weatherverse.models import Reading
from weatherverse.services.alert_service import (
    AlertTrigger,
    EmailJSNotifier,
    EmailNotifier,
    NullNotifier,
    build_notifier,
)


def make_reading(temperature, humidity):
    return Reading(temperature=temperature, humidity=humidity, timestamp="2025-04-22T12:00:00+00:00")


# =============================================================================
# TRIGGER
# =============================================================================

def test_hot_reading_fires_one_notification(notifier):
    trigger = AlertTrigger(notifier)

    assert trigger.check(make_reading(41, 50)) is True
    assert len(notifier.sent) == 1


def test_normal_reading_fires_nothing(notifier):
    trigger = AlertTrigger(notifier)

    assert trigger.check(make_reading(39, 50)) is False
    assert notifier.sent == []


def test_humid_reading_fires(notifier):
    assert AlertTrigger(notifier).check(make_reading(25, 81)) is True


def test_thresholds_are_strictly_greater(notifier):
    trigger = AlertTrigger(notifier)

    assert trigger.check(make_reading(40, 80)) is False
    assert notifier.sent == []


def test_level_triggered_refires_while_in_violation(notifier):
    trigger = AlertTrigger(notifier)

    for _ in range(3):
        trigger.check(make_reading(45, 50))

    assert len(notifier.sent) == 3
    assert trigger.attempts == 3


def test_edge_triggered_fires_once_per_episode(notifier):
    trigger = AlertTrigger(notifier, edge_triggered=True)

    trigger.check(make_reading(45, 50))
    trigger.check(make_reading(46, 50))
    assert len(notifier.sent) == 1

    trigger.check(make_reading(30, 50))
    trigger.check(make_reading(45, 50))
    assert len(notifier.sent) == 2


def test_custom_thresholds(notifier):
    trigger = AlertTrigger(notifier, temperature_threshold=30, humidity_threshold=60)

    assert trigger.check(make_reading(31, 50)) is True
    assert trigger.check(make_reading(25, 61)) is True
    assert trigger.check(make_reading(25, 50)) is False


def test_failed_delivery_still_counts_as_attempt(notifier):
    notifier.succeed = False
    trigger = AlertTrigger(notifier)

    assert trigger.check(make_reading(41, 50)) is True
    assert trigger.attempts == 1


def test_crashing_notifier_does_not_raise():
    broken = mock.Mock()
    broken.send_threshold_alert.side_effect = RuntimeError("boom")

    assert AlertTrigger(broken).check(make_reading(41, 50)) is True


# =============================================================================
# NOTIFIERS
# =============================================================================

@pytest.fixture
def smtp_env(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "2525")
    monkeypatch.setenv("SMTP_USER", "station@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "secret")
    monkeypatch.setenv("ALERT_EMAIL", "owner@example.com")


def test_email_notifier_sends_over_smtp(smtp_env):
    with mock.patch("weatherverse.services.alert_service.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value

        assert EmailNotifier().send_threshold_alert(make_reading(41, 50)) is True

    smtp_cls.assert_called_once_with("smtp.example.com", 2525)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("station@example.com", "secret")
    message = server.send_message.call_args[0][0]
    assert message["To"] == "owner@example.com"
    assert "41.0" in message["Subject"]


def test_email_notifier_reports_smtp_failure(smtp_env):
    with mock.patch("weatherverse.services.alert_service.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value.login.side_effect = (
            smtplib.SMTPAuthenticationError(535, b"bad credentials")
        )
        assert EmailNotifier().send_threshold_alert(make_reading(41, 50)) is False


def test_email_notifier_blank_addresses_fall_back_to_smtp_user(smtp_env, monkeypatch):
    monkeypatch.setenv("ALERT_EMAIL", "")
    monkeypatch.setenv("FROM_EMAIL", "")

    notifier = EmailNotifier()

    assert notifier.is_configured is True
    assert notifier.alert_email == "station@example.com"
    assert notifier.from_email == "station@example.com"


def test_emailjs_blank_recipient_name_uses_default(emailjs_env, monkeypatch):
    monkeypatch.setenv("ALERT_RECIPIENT_NAME", "")
    notifier = EmailJSNotifier(http_client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200))))
    assert notifier.recipient_name == "Weather Station Owner"


def test_email_notifier_unconfigured_skips(monkeypatch):
    monkeypatch.delenv("SMTP_USER", raising=False)
    monkeypatch.delenv("SMTP_PASSWORD", raising=False)

    with mock.patch("weatherverse.services.alert_service.smtplib.SMTP") as smtp_cls:
        notifier = EmailNotifier()
        assert notifier.is_configured is False
        assert notifier.send_threshold_alert(make_reading(41, 50)) is False
    smtp_cls.assert_not_called()


@pytest.fixture
def emailjs_env(monkeypatch):
    monkeypatch.setenv("EMAILJS_SERVICE_ID", "service_abc")
    monkeypatch.setenv("EMAILJS_TEMPLATE_ID", "template_xyz")
    monkeypatch.setenv("EMAILJS_USER_ID", "public_key")
    monkeypatch.setenv("ALERT_RECIPIENT_NAME", "Sam")


def test_emailjs_notifier_posts_template(emailjs_env):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, text="OK")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    notifier = EmailJSNotifier(http_client=client)

    assert notifier.send_threshold_alert(make_reading(41, 50)) is True
    assert str(requests[0].url) == EmailJSNotifier.API_URL

    payload = json.loads(requests[0].content)
    assert payload["service_id"] == "service_abc"
    assert payload["template_id"] == "template_xyz"
    assert payload["template_params"] == {"to_name": "Sam", "temperature": 41.0, "humidity": 50.0}


def test_emailjs_notifier_reports_http_error(emailjs_env):
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(400, text="bad")))
    assert EmailJSNotifier(http_client=client).send_threshold_alert(make_reading(41, 50)) is False


def test_emailjs_notifier_reports_network_error(emailjs_env):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assert EmailJSNotifier(http_client=client).send_threshold_alert(make_reading(41, 50)) is False


def test_build_notifier_channels(monkeypatch):
    monkeypatch.delenv("SMTP_USER", raising=False)

    assert isinstance(build_notifier("smtp"), EmailNotifier)
    assert isinstance(build_notifier("EmailJS"), EmailJSNotifier)
    assert isinstance(build_notifier("none"), NullNotifier)
    with pytest.raises(ValueError):
        build_notifier("carrier-pigeon")
