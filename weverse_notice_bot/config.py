"""Configuration handling for the notice bot."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_COMMUNITY_ID = "240"
DEFAULT_TAB_KEY = "NOTICE"
DEFAULT_LIMIT = 10
DEFAULT_MENTION = "@everyone"
DEFAULT_STATE_PATH = "state.json"
DEFAULT_LANGUAGE = "ko"
DEFAULT_REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    app_id: str
    hmac_key: str
    community_id: str = DEFAULT_COMMUNITY_ID
    tab_key: str = DEFAULT_TAB_KEY
    limit: int = DEFAULT_LIMIT
    webhook_url: Optional[str] = None
    mention: str = DEFAULT_MENTION
    rss_output_path: Optional[str] = None
    state_path: str = DEFAULT_STATE_PATH
    language: str = DEFAULT_LANGUAGE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def get_settings() -> Settings:
    """Load settings from environment variables, raising on missing credentials."""
    load_dotenv()

    app_id = _optional("APP_ID")
    if not app_id:
        raise ValueError("APP_ID is required")

    hmac_key = _optional("HMAC_KEY")
    if not hmac_key:
        raise ValueError("HMAC_KEY is required")

    # RSS_LIMIT는 rss 스크립트 시절 이름, 호환용으로 같이 읽음
    limit_raw = os.getenv("NOTICE_LIMIT") or os.getenv("RSS_LIMIT") or str(DEFAULT_LIMIT)
    try:
        limit = int(limit_raw)
    except ValueError as exc:
        raise ValueError("NOTICE_LIMIT must be an integer") from exc
    if limit <= 0:
        raise ValueError("NOTICE_LIMIT must be positive")

    timeout_raw = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
    try:
        timeout = float(timeout_raw)
    except ValueError as exc:
        raise ValueError("REQUEST_TIMEOUT must be a number") from exc
    if timeout <= 0:
        raise ValueError("REQUEST_TIMEOUT must be positive")

    mention = os.getenv("WEBHOOK_MENTION")
    if mention is None:
        mention = DEFAULT_MENTION

    return Settings(
        app_id=app_id,
        hmac_key=hmac_key,
        community_id=_optional("COMMUNITY_ID") or DEFAULT_COMMUNITY_ID,
        tab_key=_optional("TAB_KEY") or DEFAULT_TAB_KEY,
        limit=limit,
        webhook_url=_optional("WEBHOOK_URL"),
        mention=mention.strip(),
        rss_output_path=_optional("RSS_OUTPUT_PATH"),
        state_path=_optional("STATE_PATH") or DEFAULT_STATE_PATH,
        language=_optional("WEVERSE_LANGUAGE") or DEFAULT_LANGUAGE,
        request_timeout=timeout,
    )
