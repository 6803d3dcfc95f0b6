"""Data models for Weverse notices."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple

from bs4 import BeautifulSoup


def _parse_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid noticeId: {value!r}")
    try:
        notice_id = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid noticeId: {value!r}") from exc
    if notice_id <= 0:
        raise ValueError(f"Invalid noticeId: {value!r}")
    return notice_id


def _parse_millis(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid publishAt: {value!r}") from exc


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _millis_to_datetime(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def html_to_text(body: str) -> str:
    """Strip markup from an HTML notice body."""
    soup = BeautifulSoup(body, "html.parser")
    return soup.get_text("\n", strip=True)


def html_image_urls(body: str) -> Tuple[str, ...]:
    soup = BeautifulSoup(body, "html.parser")
    return tuple(img["src"] for img in soup.find_all("img", src=True))


def _photo_urls(attachment: Any) -> Tuple[str, ...]:
    if not isinstance(attachment, Mapping):
        return ()
    photos = attachment.get("photo")
    if not isinstance(photos, Mapping):
        return ()
    urls = []
    for photo in photos.values():
        if isinstance(photo, Mapping) and photo.get("url"):
            urls.append(str(photo["url"]))
    return tuple(urls)


@dataclass(frozen=True)
class NoticeSummary:
    """A notice as returned by the tab content (list) endpoint."""

    id: int
    title: str
    body: Optional[str]
    share_url: Optional[str]
    publish_at: int

    @property
    def published(self) -> datetime:
        return _millis_to_datetime(self.publish_at)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "NoticeSummary":
        return cls(
            id=_parse_id(data.get("noticeId")),
            title=str(data.get("title") or ""),
            body=_text_or_none(data.get("body")),
            share_url=_text_or_none(data.get("shareUrl")),
            publish_at=_parse_millis(data.get("publishAt")),
        )


@dataclass(frozen=True)
class NoticeDetail:
    """A notice as returned by the detail endpoint."""

    id: int
    title: str
    body: Optional[str]
    share_url: Optional[str]
    publish_at: int
    plain_body: Optional[str]
    photo_urls: Tuple[str, ...] = ()

    @property
    def published(self) -> datetime:
        return _millis_to_datetime(self.publish_at)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "NoticeDetail":
        body = _text_or_none(data.get("body"))
        plain_body = _text_or_none(data.get("plainBody"))
        photo_urls = _photo_urls(data.get("attachment"))

        # plainBody/attachment가 없는 응답은 HTML 본문에서 뽑아냄
        if body is not None:
            if plain_body is None:
                plain_body = _text_or_none(html_to_text(body))
            if not photo_urls:
                photo_urls = html_image_urls(body)

        return cls(
            id=_parse_id(data.get("noticeId")),
            title=str(data.get("title") or ""),
            body=body,
            share_url=_text_or_none(data.get("shareUrl")),
            publish_at=_parse_millis(data.get("publishAt")),
            plain_body=plain_body,
            photo_urls=photo_urls,
        )


@dataclass(frozen=True)
class Notice:
    """A new notice ready to be handed to the sinks."""

    id: int
    title: str
    body: Optional[str]
    share_url: Optional[str]
    publish_at: int
    images: Tuple[str, ...] = ()

    @property
    def published(self) -> datetime:
        return _millis_to_datetime(self.publish_at)

    @classmethod
    def from_detail(cls, detail: NoticeDetail) -> "Notice":
        return cls(
            id=detail.id,
            title=detail.title,
            body=detail.plain_body,
            share_url=detail.share_url,
            publish_at=detail.publish_at,
            images=detail.photo_urls,
        )

    @classmethod
    def from_summary(cls, summary: NoticeSummary) -> "Notice":
        return cls(
            id=summary.id,
            title=summary.title,
            body=summary.body,
            share_url=summary.share_url,
            publish_at=summary.publish_at,
        )
