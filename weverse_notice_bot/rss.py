"""Render fetched notices as an RSS 2.0 feed."""

from __future__ import annotations

import logging
import os
import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Iterable, Optional

from .client import FeedClient
from .config import get_settings
from .models import Notice

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "public/rss.xml"


def _notice_link(notice: Notice) -> str:
    return notice.share_url or f"https://weverse.io/notice/{notice.id}"


def build_rss(
    notices: Iterable[Notice], community_id: str, now: Optional[datetime] = None
) -> str:
    """Build the feed document. Text is escaped by the XML serializer."""
    built_at = now or datetime.now(timezone.utc)

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = f"Weverse Notices - Community {community_id}"
    ET.SubElement(channel, "link").text = f"https://weverse.io/community/{community_id}"
    ET.SubElement(channel, "description").text = "최근 Weverse 공지사항 RSS"
    ET.SubElement(channel, "language").text = "ko"
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(built_at, usegmt=True)

    for notice in notices:
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = notice.title
        ET.SubElement(item, "link").text = _notice_link(notice)
        guid = ET.SubElement(item, "guid", isPermaLink="false")
        guid.text = f"weverse-{community_id}-{notice.id}"
        ET.SubElement(item, "pubDate").text = format_datetime(notice.published, usegmt=True)
        ET.SubElement(item, "description").text = notice.body or notice.title or ""

    ET.indent(rss, space="  ")
    body = ET.tostring(rss, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def write_rss(path: str | Path, document: str) -> None:
    """Write the feed through a temp file so readers never see half a document."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.with_name(out_path.name + ".tmp")
    tmp_path.write_text(document, encoding="utf-8")
    os.replace(tmp_path, out_path)
    LOGGER.info("RSS 생성 완료: %s", out_path)


def main() -> int:
    """Fetch the latest notices and write them to the RSS file."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    try:
        settings = get_settings()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    LOGGER.info(
        "RSS 생성: community=%s, tab=%s, limit=%d",
        settings.community_id,
        settings.tab_key,
        settings.limit,
    )
    client = FeedClient(settings)
    summaries = client.list_notices(settings.community_id, settings.tab_key, settings.limit)
    if not summaries:
        LOGGER.warning("공지사항을 가져오지 못했습니다. 기존 RSS 유지")
        return 0

    document = build_rss(
        [Notice.from_summary(s) for s in summaries], settings.community_id
    )
    try:
        write_rss(settings.rss_output_path or DEFAULT_OUTPUT_PATH, document)
    except OSError as exc:
        LOGGER.error("RSS 저장 실패: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
