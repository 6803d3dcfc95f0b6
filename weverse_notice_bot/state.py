# state.py
"""마지막으로 처리한 공지 ID(진행 마커)를 관리하는 모듈."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .models import NoticeSummary

LOGGER = logging.getLogger(__name__)

MARKER_KEY = "lastNoticeId"


@dataclass(frozen=True)
class ProgressMarker:
    """ID of the most recently processed notice; 0 means never run."""

    last_notice_id: int = 0

    @property
    def is_initial(self) -> bool:
        return self.last_notice_id == 0


class ProgressStore(Protocol):
    def load(self) -> ProgressMarker:
        ...

    def save(self, marker: ProgressMarker) -> None:
        ...


class JsonProgressStore:
    """Progress marker kept in a small JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> ProgressMarker:
        """state.json에서 마커를 읽어옵니다. 없거나 깨졌으면 처음 실행으로 취급."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            LOGGER.info("%s 없음 -> 첫 실행으로 시작", self.path)
            return ProgressMarker()
        except OSError as exc:
            LOGGER.warning("%s 읽기 실패 (%s) -> 초기화", self.path, exc)
            return ProgressMarker()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("%s 파싱 실패 -> 초기화", self.path)
            return ProgressMarker()

        if not isinstance(data, dict):
            LOGGER.warning("%s 형식 오류 -> 초기화", self.path)
            return ProgressMarker()

        value = data.get(MARKER_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            LOGGER.warning("%s의 %s 값이 잘못됨 (%r) -> 초기화", self.path, MARKER_KEY, value)
            return ProgressMarker()

        return ProgressMarker(last_notice_id=value)

    def save(self, marker: ProgressMarker) -> None:
        """Atomically replace the state file with ``marker``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        data = {MARKER_KEY: marker.last_notice_id}
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        LOGGER.debug("%s 저장 완료, lastNoticeId=%d", self.path, marker.last_notice_id)


@dataclass
class DiffResult:
    new_notices: List[NoticeSummary] = field(default_factory=list)
    bootstrap: bool = False
    latest_id: Optional[int] = None


def diff_new_notices(
    notices: Sequence[NoticeSummary],
    marker: ProgressMarker,
) -> DiffResult:
    """공지 리스트에서 마커 이후의 '새로운' 공지만 골라냅니다.

    Args:
        notices: API에서 받은 공지 리스트 (순서 보장 없음)
        marker: 마지막으로 처리한 공지 ID

    Returns:
        새 공지(ID 오름차순), 첫 실행 여부, 리스트의 최대 ID.
        첫 실행이면 새 공지는 비어 있고, 호출한 쪽이 latest_id로 마커만 옮깁니다.
    """
    if not notices:
        return DiffResult()

    ordered: List[NoticeSummary] = []
    seen_ids = set()
    for n in sorted(notices, key=lambda n: n.id):
        if n.id in seen_ids:
            LOGGER.error("공지 ID %d 중복 수신 -> 스킵", n.id)
            continue
        seen_ids.add(n.id)
        ordered.append(n)

    latest_id = ordered[-1].id

    if marker.is_initial:
        LOGGER.info("첫 실행, 최신 공지 ID %d로 초기화 (알림 없음)", latest_id)
        return DiffResult(bootstrap=True, latest_id=latest_id)

    new_list = [n for n in ordered if n.id > marker.last_notice_id]

    LOGGER.info(
        "전체 공지 %d개, lastNoticeId %d, 새 공지 %d개",
        len(ordered),
        marker.last_notice_id,
        len(new_list),
    )
    return DiffResult(new_notices=new_list, latest_id=latest_id)
