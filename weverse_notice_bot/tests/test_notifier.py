import pytest
import requests

from weverse_notice_bot import notifier
from weverse_notice_bot.models import Notice


class DummyResponse:
    def __init__(self, status_code: int = 204, payload=None):
        self.status_code = status_code
        self.payload = payload or {}
        self.text = ""

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def _notice(**overrides) -> Notice:
    values = dict(
        id=1,
        title="테스트 공지",
        body="본문",
        share_url="https://weverse.io/notice/1",
        publish_at=1714521600000,
        images=(),
    )
    values.update(overrides)
    return Notice(**values)


def test_send_discord_message_builds_payload(monkeypatch):
    captured = {}

    def fake_post(url, json, timeout):
        captured["url"] = url
        captured["json"] = json
        return DummyResponse()

    monkeypatch.setattr(notifier.requests, "post", fake_post)

    webhook_url = "https://example.com/webhook"
    notifier.send_discord_message(webhook_url, _notice())

    assert captured["url"] == webhook_url
    payload = captured["json"]
    assert payload["content"] == "Weverse Notice: 테스트 공지 @everyone"
    embed = payload["embeds"][0]
    assert embed["title"] == "테스트 공지"
    assert embed["description"] == "본문"
    assert embed["url"] == "https://weverse.io/notice/1"
    assert embed["timestamp"] == "2024-05-01T00:00:00+00:00"
    assert embed["color"] == 0x8DAACE
    assert "image" not in embed


def test_build_payload_truncates_body_and_defaults():
    payload = notifier.build_payload(_notice(body="a" * 501, share_url=None), mention="")

    assert payload["content"] == "Weverse Notice: 테스트 공지"
    embed = payload["embeds"][0]
    assert embed["description"] == "a" * 500 + "..."
    assert embed["url"] == "https://weverse.io/"

    empty = notifier.build_payload(_notice(body=None))
    assert empty["embeds"][0]["description"] == "No content"


def test_build_payload_limits_gallery_to_four_images():
    images = tuple(f"https://img/{i}.jpg" for i in range(6))

    embeds = notifier.build_payload(_notice(images=images))["embeds"]

    assert len(embeds) == 4
    assert embeds[0]["image"] == {"url": "https://img/0.jpg"}
    assert [e["image"]["url"] for e in embeds[1:]] == [
        "https://img/1.jpg",
        "https://img/2.jpg",
        "https://img/3.jpg",
    ]
    assert all(e["url"] == "https://weverse.io/notice/1" for e in embeds)


def test_rate_limit_waits_then_retries(monkeypatch):
    responses = [DummyResponse(429, {"retry_after": 0.5}), DummyResponse(204)]
    sleeps = []

    monkeypatch.setattr(notifier.requests, "post", lambda url, json, timeout: responses.pop(0))
    monkeypatch.setattr(notifier.time, "sleep", sleeps.append)

    notifier.send_discord_message("https://example.com/webhook", _notice())

    assert sleeps == [0.5]
    assert responses == []


def test_rate_limit_gives_up(monkeypatch):
    monkeypatch.setattr(
        notifier.requests, "post", lambda url, json, timeout: DummyResponse(429, {"retry_after": 0})
    )
    monkeypatch.setattr(notifier.time, "sleep", lambda seconds: None)

    with pytest.raises(requests.HTTPError):
        notifier.send_discord_message("https://example.com/webhook", _notice())


def test_http_error_propagates(monkeypatch):
    monkeypatch.setattr(notifier.requests, "post", lambda url, json, timeout: DummyResponse(500))

    with pytest.raises(requests.HTTPError):
        notifier.send_discord_message("https://example.com/webhook", _notice())
