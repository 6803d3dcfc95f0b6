"""Entrypoint for the Weverse notice Discord notifier."""

from __future__ import annotations

import functools
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from requests.exceptions import RequestException

from .client import FeedClient
from .config import Settings, get_settings
from .models import Notice
from .notifier import send_discord_message
from .rss import build_rss, write_rss
from .state import JsonProgressStore, ProgressMarker, ProgressStore, diff_new_notices

LOGGER = logging.getLogger(__name__)

Sink = Callable[[Notice], None]


@dataclass
class RunReport:
    """What a single poll did."""

    fetched: int = 0
    dispatched: List[int] = field(default_factory=list)
    bootstrap: bool = False
    last_notice_id: int = 0


def _dispatch(notice: Notice, sinks: Sequence[Sink]) -> None:
    for sink in sinks:
        try:
            sink(notice)
        except RequestException as exc:
            LOGGER.error("Failed to deliver notice %s: %s", notice.id, exc)


def run_once(
    settings: Settings,
    client: FeedClient,
    store: ProgressStore,
    sinks: Sequence[Sink],
) -> RunReport:
    """Poll the board once and hand every new notice to ``sinks`` in id order.

    The marker is saved right after each notice so a crash only repeats the
    notice that was in flight.
    """
    marker = store.load()
    report = RunReport(last_notice_id=marker.last_notice_id)

    summaries = client.list_notices(settings.community_id, settings.tab_key, settings.limit)
    report.fetched = len(summaries)
    if not summaries:
        LOGGER.info("공지 없음, 아무것도 안 함")
        return report

    if settings.rss_output_path:
        document = build_rss([Notice.from_summary(s) for s in summaries], settings.community_id)
        try:
            write_rss(settings.rss_output_path, document)
        except OSError as exc:
            LOGGER.error("RSS 저장 실패: %s", exc)

    result = diff_new_notices(summaries, marker)

    if result.bootstrap:
        store.save(ProgressMarker(result.latest_id))
        report.bootstrap = True
        report.last_notice_id = result.latest_id
        return report

    if not result.new_notices:
        LOGGER.info("새 공지 0개")
        return report

    for summary in result.new_notices:
        LOGGER.info("새 공지 발견: %d", summary.id)
        detail = client.get_notice_detail(summary.id)
        if detail is not None:
            notice = Notice.from_detail(detail)
        else:
            LOGGER.warning("공지 %d 상세 없음 -> 목록 정보로 전송", summary.id)
            notice = Notice.from_summary(summary)

        _dispatch(notice, sinks)

        store.save(ProgressMarker(summary.id))
        report.dispatched.append(summary.id)
        report.last_notice_id = summary.id

    LOGGER.info(
        "새 공지 %d개 처리 완료, lastNoticeId=%d",
        len(report.dispatched),
        report.last_notice_id,
    )
    return report


def main() -> int:
    """Run the notifier workflow."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    try:
        settings = get_settings()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    if not settings.webhook_url:
        LOGGER.error("Configuration error: WEBHOOK_URL is required")
        return 1

    sinks = [
        functools.partial(send_discord_message, settings.webhook_url, mention=settings.mention)
    ]
    store = JsonProgressStore(settings.state_path)

    try:
        run_once(settings, FeedClient(settings), store, sinks)
    except OSError as exc:
        LOGGER.error("Failed to persist progress: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
