"""
Tests for message composition and the Telegram notifier.
"""

from __future__ import annotations

from datetime import datetime

import requests

from attendance.messages import (
    compose_check_in_message,
    compose_late_admin_message,
    describe_lateness,
)
from attendance.models import ON_TIME, Status, Timeliness
from notifications.TelegramNotifier import TelegramNotifier


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "{}") -> None:
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, dict, float]] = []
        self.response = response or FakeResponse()
        self.error = error

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error:
            raise self.error
        return self.response

    def close(self) -> None:
        pass


def test_check_in_message_contains_all_details(alice) -> None:
    message = compose_check_in_message(alice, datetime(2026, 2, 2, 8, 3, 7), "esp32-door", ON_TIME)

    assert "Alice" in message
    assert "08:03:07" in message
    assert "esp32-door" in message
    assert "On time" in message


def test_late_messages_describe_lateness(alice) -> None:
    late = Timeliness(Status.LATE, late_minutes=6)
    when = datetime(2026, 2, 2, 8, 6)

    assert "Late by 6 minutes" in compose_check_in_message(alice, when, "door", late)
    admin = compose_late_admin_message(alice, when, late)
    assert "Alice" in admin and "08:06:00" in admin and "Late by 6 minutes" in admin


def test_describe_lateness_without_minutes() -> None:
    assert describe_lateness(None) == "Late"
    assert describe_lateness(1) == "Late by 1 minute"


def test_send_personal_posts_markdown_message() -> None:
    session = FakeSession()
    notifier = TelegramNotifier("TOKEN", admin_chat_id=-100, session=session)

    notifier.send_personal(1001, "*hello*")

    [(url, payload, timeout)] = session.calls
    assert url == "https://api.telegram.org/botTOKEN/sendMessage"
    assert payload == {"chat_id": 1001, "text": "*hello*", "parse_mode": "Markdown"}
    assert timeout == 10


def test_send_admin_targets_admin_chat() -> None:
    session = FakeSession()
    TelegramNotifier("TOKEN", admin_chat_id=-100, session=session).send_admin("late!")
    assert session.calls[0][1]["chat_id"] == -100


def test_send_admin_without_admin_chat_is_skipped() -> None:
    session = FakeSession()
    TelegramNotifier("TOKEN", session=session).send_admin("late!")
    assert session.calls == []


def test_disabled_notifier_only_logs(caplog) -> None:
    session = FakeSession()
    notifier = TelegramNotifier("", admin_chat_id=1, session=session)

    with caplog.at_level("INFO"):
        notifier.send_personal(1001, "hi")

    assert not notifier.enabled
    assert session.calls == []
    assert "Telegram disabled" in caplog.text


def test_transport_errors_are_swallowed(caplog) -> None:
    session = FakeSession(error=requests.ConnectionError("boom"))
    notifier = TelegramNotifier("TOKEN", session=session)

    notifier.send_personal(1001, "hi")

    assert "failed" in caplog.text


def test_http_errors_are_swallowed(caplog) -> None:
    session = FakeSession(response=FakeResponse(403, '{"ok":false}'))
    TelegramNotifier("TOKEN", session=session).send_personal(1001, "hi")
    assert "HTTP 403" in caplog.text
