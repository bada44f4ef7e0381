"""
services/draft_store.py

문제별 작성 중 코드/출력(draft) 저장소.
Public API:
  - save(question_id, code, output)          : 즉시 기록 (대기 중인 디바운스 기록은 폐기)
  - schedule_save(question_id, code, output) : 연속 편집용 디바운스 기록 (기본 2초)
  - load(question_id) -> DraftRecord | None  : 저장본이 없으면 None (첫 방문은 정상 상태)
  - clear()                                  : 현재 scope 의 모든 draft 삭제 (새 시도 시작 시)

설계 원칙:
- 이동/종료 시에는 save() 를 직접 호출 → 마지막 편집이 항상 읽기 전에 기록됨
- 저장소 레코드는 이 클래스만 다룬다. 트래커는 문제 번호로 저장/로드만 요청.
"""

import logging
from typing import Optional

from config import AUTOSAVE_DELAY_SECONDS
from coding_round_cbt.models.submission_model import DraftRecord
from coding_round_cbt.services.debounce import Debouncer
from coding_round_cbt.services.session_storage import SessionStorage
from coding_round_cbt.services.templates import BLANK_CODE_MARKER

logger = logging.getLogger(__name__)

DRAFT_KEY_PREFIX = "question_"


def code_key(question_id: int) -> str:
    return f"{DRAFT_KEY_PREFIX}{question_id}_code"


def output_key(question_id: int) -> str:
    return f"{DRAFT_KEY_PREFIX}{question_id}_output"


class DraftStore:
    def __init__(
        self,
        storage: SessionStorage,
        delay: float = AUTOSAVE_DELAY_SECONDS,
        scheduler=None,
    ):
        self.storage = storage
        self.writes = 0  # 실제 저장소 기록 횟수
        self._debouncer = Debouncer(delay, self._write, scheduler=scheduler)

    def _write(self, question_id: int, record: DraftRecord) -> None:
        self.storage.set_item(code_key(question_id), record.code)
        self.storage.set_item(output_key(question_id), record.output)
        self.writes += 1
        logger.debug(f"문제 {question_id} draft 저장")

    def save(self, question_id: int, code: str, output: str) -> None:
        self._debouncer.cancel(question_id)
        self._write(question_id, DraftRecord(code=code, output=output))

    def schedule_save(self, question_id: int, code: str, output: str) -> None:
        self._debouncer.schedule(question_id, DraftRecord(code=code, output=output))

    def flush(self, question_id: int) -> bool:
        return self._debouncer.flush(question_id)

    def flush_all(self) -> int:
        return self._debouncer.flush_all()

    def cancel_pending(self) -> None:
        self._debouncer.cancel_all()

    def has_pending(self, question_id: int) -> bool:
        return self._debouncer.pending(question_id)

    def load(self, question_id: int) -> Optional[DraftRecord]:
        code = self.storage.get_item(code_key(question_id))
        output = self.storage.get_item(output_key(question_id))
        if code == BLANK_CODE_MARKER:
            code = None
        if code is None and output is None:
            return None
        return DraftRecord(code=code or "", output=output or "")

    def clear(self) -> int:
        """scope 내 모든 draft 삭제. 대기 중인 기록도 폐기."""
        self._debouncer.cancel_all()
        removed = self.storage.remove_prefix(DRAFT_KEY_PREFIX)
        if removed:
            logger.info(f"이전 시도의 draft {removed}건 삭제")
        return removed
