"""Fetch notices from the Weverse web API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .models import NoticeDetail, NoticeSummary
from .signer import RequestSigner

LOGGER = logging.getLogger(__name__)

# 브라우저 요청처럼 보이지 않으면 서버가 거부함
HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:140.0) Gecko/20100101 Firefox/140.0",
    "Accept": "application/json, text/plain, */*",
    "Referer": "https://weverse.io/",
    "Origin": "https://weverse.io",
    "WEV-device-Id": "1",
    "WEV-wdm-v2": "off",
    "WEV-open-community": "A",
    "WEV-timezone-id": "Asia/Seoul",
}


class FeedClient:
    """Thin wrapper around the tab content and notice detail endpoints."""

    def __init__(self, settings: Settings, signer: Optional[RequestSigner] = None):
        self.settings = settings
        self.signer = signer or RequestSigner(settings.hmac_key)

    def _base_params(self) -> Dict[str, str]:
        return {
            "appId": self.settings.app_id,
            "language": self.settings.language,
            "os": "WEB",
            "platform": "WEB",
            "wpf": "pc",
        }

    def _get_json(self, target_path: str, params: Dict[str, str]) -> Any:
        url = self.signer.sign(target_path, params)
        response = requests.get(url, headers=HEADERS, timeout=self.settings.request_timeout)
        response.raise_for_status()
        return response.json()

    def list_notices(self, community_id: str, tab_key: str, limit: int) -> List[NoticeSummary]:
        """Return the first page of notices on a community tab.

        Errors are logged and reported as an empty list.
        """
        target_path = f"/community/v1.0/community-{community_id}/{tab_key}/tabContent?"
        params = self._base_params()
        params.update(
            {
                "fields": f"notices.fieldSet(noticesV1).limit({limit}).pageNo(1)",
                "pagingType": "PAGE_NO",
            }
        )

        try:
            data = self._get_json(target_path, params)
        except requests.RequestException as exc:
            LOGGER.error("Failed to fetch notice list: %s", exc)
            return []
        except ValueError as exc:
            LOGGER.error("Notice list is not valid JSON: %s", exc)
            return []

        try:
            items = data["content"]["notices"]["data"]
        except (KeyError, TypeError):
            LOGGER.warning("Unexpected notice list payload, treating as empty")
            return []
        if not isinstance(items, list):
            LOGGER.warning("Unexpected notice list payload, treating as empty")
            return []

        notices: List[NoticeSummary] = []
        for item in items:
            if not isinstance(item, dict):
                LOGGER.warning("Skipping malformed notice entry: %r", item)
                continue
            try:
                notices.append(NoticeSummary.from_api(item))
            except ValueError as exc:
                LOGGER.warning("Skipping malformed notice entry: %s", exc)

        LOGGER.info(
            "공지 목록 %d개 수신 (community=%s, tab=%s)", len(notices), community_id, tab_key
        )
        return notices

    def get_notice_detail(self, notice_id: int) -> Optional[NoticeDetail]:
        """Fetch a single notice, or ``None`` when it cannot be retrieved."""
        target_path = f"/notice/v1.0/notice-{notice_id}?"
        params = self._base_params()
        params["fieldSet"] = "noticeV1"

        try:
            data = self._get_json(target_path, params)
        except requests.RequestException as exc:
            LOGGER.error("Failed to fetch notice detail for %s: %s", notice_id, exc)
            return None
        except ValueError as exc:
            LOGGER.error("Notice detail for %s is not valid JSON: %s", notice_id, exc)
            return None

        if not isinstance(data, dict):
            LOGGER.error("Unexpected notice detail payload for %s", notice_id)
            return None

        payload = dict(data)
        payload.setdefault("noticeId", notice_id)
        try:
            return NoticeDetail.from_api(payload)
        except ValueError as exc:
            LOGGER.error("Malformed notice detail for %s: %s", notice_id, exc)
            return None
