# weverse_notice_bot/notifier.py

from __future__ import annotations

import logging
import time
from typing import List

import requests

from .models import Notice

LOGGER = logging.getLogger(__name__)

EMBED_COLOR = 0x8DAACE
DESCRIPTION_LIMIT = 500
MAX_IMAGES = 4
MAX_RATE_LIMIT_RETRIES = 3
DEFAULT_LINK = "https://weverse.io/"


def _post_with_rate_limit(webhook_url: str, payload: dict) -> None:
    """디스코드 웹훅에 전송하되, 429가 나오면 기다렸다가 몇 번까지 재시도."""
    for _ in range(MAX_RATE_LIMIT_RETRIES):
        resp = requests.post(webhook_url, json=payload, timeout=10)

        # 레이트 리밋
        if resp.status_code == 429:
            try:
                retry_after = float(resp.json().get("retry_after", 1.0))
            except (ValueError, AttributeError):
                retry_after = 1.0
            LOGGER.warning("디스코드 레이트 리밋, %.1f초 대기", retry_after)
            time.sleep(retry_after)
            continue

        resp.raise_for_status()
        return

    raise requests.HTTPError(
        f"Discord rate limit persisted after {MAX_RATE_LIMIT_RETRIES} attempts"
    )


def _build_description(notice: Notice) -> str:
    if not notice.body:
        return "No content"
    if len(notice.body) > DESCRIPTION_LIMIT:
        return notice.body[:DESCRIPTION_LIMIT] + "..."
    return notice.body


def _build_embeds(notice: Notice) -> List[dict]:
    """공지 정보를 디스코드 임베드 목록으로 변환."""
    link = notice.share_url or DEFAULT_LINK
    main_embed = {
        "title": notice.title,
        "description": _build_description(notice),
        "url": link,
        "timestamp": notice.published.isoformat(),
        "color": EMBED_COLOR,
    }

    images = notice.images[:MAX_IMAGES]
    if images:
        main_embed["image"] = {"url": images[0]}

    embeds = [main_embed]
    # 같은 url을 가진 임베드는 디스코드가 하나의 갤러리로 묶어 보여줌
    for image_url in images[1:]:
        embeds.append({"url": link, "image": {"url": image_url}})
    return embeds


def build_payload(notice: Notice, mention: str = "@everyone") -> dict:
    content = f"Weverse Notice: {notice.title}"
    if mention:
        content = f"{content} {mention}"
    return {
        "content": content,
        "embeds": _build_embeds(notice),
    }


def send_discord_message(webhook_url: str, notice: Notice, mention: str = "@everyone") -> None:
    """단일 공지를 디스코드 웹훅으로 전송."""
    _post_with_rate_limit(webhook_url, build_payload(notice, mention))
    LOGGER.info("디스코드 전송 완료: %s (%s)", notice.id, notice.title)
