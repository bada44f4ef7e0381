"""
services/exam_controller.py

시험 세션 컨트롤러. 한 번의 시험 시도(attempt)의 생명주기를 소유한다.

구성:
  - QuestionSetLoader  : 시작 전 한 번 문제 세트 로드
  - NavigationTracker  : visited / answered / active 상태 전이
  - DraftStore         : 문제별 코드/출력 저장 (편집 중에는 디바운스, 이동/종료 시 즉시)
  - CountdownTimer     : 1초 tick, 0 도달 시 finish(auto=True)
  - SubmissionClient   : 최종 결과 제출

상태: NOT_STARTED → RUNNING → FINISHED (종료 상태, 재진입 없음)
거부된 전이는 False 를 반환하고 로그만 남긴다. 예외를 호출자에게 던지지 않는다.
모든 작업은 하나의 asyncio 이벤트 루프에서 직렬로 실행된다.
"""

import asyncio
import logging
from datetime import datetime
from urllib.parse import quote
from typing import Callable, Dict, List, Optional

from config import (
    AUTOSAVE_DELAY_SECONDS, EXAM_DURATION_SECONDS, EXAM_NAME, RESULTS_URL,
    TIMER_INTERVAL_SECONDS,
)
from coding_round_cbt.models.question_model import QuestionDefinition
from coding_round_cbt.models.session_state import Notice, SessionState, StatusCounters
from coding_round_cbt.services.code_runner import simulate_run
from coding_round_cbt.services.draft_store import DraftStore
from coding_round_cbt.services.exam_timer import CountdownTimer, format_hms
from coding_round_cbt.services.navigation import NavigationTracker
from coding_round_cbt.services.question_loader import QuestionSetLoader
from coding_round_cbt.services.session_storage import (
    REGISTRATION_ID_KEY, USER_EMAIL_KEY, SessionStorage,
)
from coding_round_cbt.services.submission import SubmissionClient, SubmissionError, build_payload
from coding_round_cbt.services.templates import (
    DEFAULT_LANGUAGE, OUTPUT_PLACEHOLDER, SUPPORTED_LANGUAGES, template_for,
)
from coding_round_cbt.services.text_surface import BufferSurface, TextSurface

logger = logging.getLogger(__name__)

MSG_MISSING_IDENTITY = "Could not find user information. Cannot submit results."
MSG_SUBMITTED = "Exam completed! Your answers have been submitted."
MSG_SUBMIT_FAILED = "An error occurred while submitting your test results."
MSG_TIME_UP = "Time is up! Your exam is being submitted."
MSG_LAST_QUESTION = "This is the last question."


class ExamSessionController:
    def __init__(
        self,
        loader: QuestionSetLoader,
        submitter: SubmissionClient,
        storage: SessionStorage,
        editor: Optional[TextSurface] = None,
        output: Optional[TextSurface] = None,
        *,
        duration: int = EXAM_DURATION_SECONDS,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
        tick_interval: float = TIMER_INTERVAL_SECONDS,
        exam_name: str = EXAM_NAME,
        results_url: str = RESULTS_URL,
        scheduler=None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self.loader = loader
        self.submitter = submitter
        self.storage = storage
        self.editor = editor if editor is not None else BufferSurface()
        self.output = output if output is not None else BufferSurface(OUTPUT_PLACEHOLDER, read_only=True)
        self.duration = duration
        self.exam_name = exam_name
        self.results_url = results_url

        self.state = SessionState()
        self.tracker = NavigationTracker(self.state)
        self.drafts = DraftStore(storage, delay=autosave_delay, scheduler=scheduler)
        self.timer = CountdownTimer(
            self.state, self._on_timer_expired, interval=tick_interval, scheduler=scheduler,
        )

        self.questions: List[QuestionDefinition] = []
        self.notices: List[Notice] = []
        self.redirect_url: Optional[str] = None
        self.finish_task: Optional[asyncio.Task] = None
        self.submission_attempts = 0
        self._on_notice = on_notice

        self.editor.on_change(self._on_editor_change)

    # ── 알림 ─────────────────────────────────────────────────────────────────

    def _notify(self, level: str, message: str) -> None:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)

    def drain_notices(self) -> List[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # ── 문제 세트 ────────────────────────────────────────────────────────────

    async def load_questions(self) -> List[QuestionDefinition]:
        self.questions = await self.loader.load()
        if not self.questions:
            self._notify("error", "No questions could be loaded for this exam.")
        return self.questions

    def question(self, question_id: int) -> Optional[QuestionDefinition]:
        if 1 <= question_id <= len(self.questions):
            return self.questions[question_id - 1]
        return None

    # ── 상태 조회 ────────────────────────────────────────────────────────────

    def counters(self) -> StatusCounters:
        return self.tracker.counters()

    def time_display(self) -> str:
        return format_hms(self.state.remaining_seconds)

    # ── draft 저장/로드 ──────────────────────────────────────────────────────

    def _persist_active(self) -> None:
        """현재 문제의 draft 를 즉시 기록 (대기 중인 디바운스 기록보다 우선)."""
        if not self.tracker.in_bounds(self.state.active_question):
            return
        self.drafts.save(
            self.state.active_question, self.editor.get_text(), self.output.get_text(),
        )

    def _load_into_surfaces(self, question_id: int) -> None:
        record = self.drafts.load(question_id)
        self.state.language = DEFAULT_LANGUAGE
        self.editor.set_text(record.code if record and record.code else template_for(DEFAULT_LANGUAGE))
        self.output.set_text(record.output if record and record.output else OUTPUT_PLACEHOLDER)

    def _on_editor_change(self, text: str) -> None:
        if not self._accepts_changes():
            return
        self.drafts.schedule_save(self.state.active_question, text, self.output.get_text())

    @property
    def time_up(self) -> bool:
        """제한 시간 만료 후에는 답안을 더 이상 바꿀 수 없다 (제출 보류 중이어도)."""
        return self.timer.expired

    def _accepts_changes(self) -> bool:
        return self.state.running and not self.timer.expired

    # ── 상태 전이 ────────────────────────────────────────────────────────────

    def start(self) -> bool:
        total = len(self.questions)
        if not self.tracker.start(total, self.duration):
            logger.warning(f"시험 시작 거부: 현재 상태 {self.state.status.value}")
            return False

        # 이전 시도의 답안이 새 시도로 새어 들어가지 않도록 scope 초기화
        self.drafts.clear()
        self.editor.set_read_only(False)
        self._load_into_surfaces(self.state.active_question)
        self.timer.start()
        logger.info(f"시험 시작: 문제 {total}개, 제한 시간 {format_hms(self.duration)}")
        return True

    def go_to(self, question_id: int) -> bool:
        if not self._accepts_changes():
            logger.debug(f"문제 이동 거부 (상태 {self.state.status.value}): {question_id}")
            return False
        if not self.tracker.in_bounds(question_id):
            # 오래된 UI 이벤트 핸들러 대비: 조용히 무시
            logger.debug(f"범위 밖 문제 이동 무시: {question_id}")
            return False

        self._persist_active()
        self.tracker.visit(question_id)
        self._load_into_surfaces(question_id)
        return True

    def submit_current(self) -> bool:
        if not self._accepts_changes() or not self.tracker.in_bounds(self.state.active_question):
            return False

        self._persist_active()
        answered = self.tracker.mark_answered()
        logger.info(f"문제 {answered} 제출")
        if self.tracker.has_next():
            self.go_to(answered + 1)
        return True

    def next_question(self) -> bool:
        if not self._accepts_changes():
            return False
        if not self.tracker.has_next():
            self._notify("info", MSG_LAST_QUESTION)
            return False
        return self.go_to(self.state.active_question + 1)

    def record_edit(self, code: str) -> bool:
        """사용자 편집. 읽기 전용(종료 후)이거나 실행 중이 아니거나 시간이 만료되면 거부."""
        if not self._accepts_changes():
            return False
        edit = getattr(self.editor, "edit", None)
        if edit is not None:
            return edit(code)
        self.editor.set_text(code)
        self._on_editor_change(code)
        return True

    def change_language(self, language: str) -> bool:
        if not self._accepts_changes() or language not in SUPPORTED_LANGUAGES:
            return False
        self._persist_active()
        self.state.language = language
        self.editor.set_text(template_for(language))
        logger.info(f"언어 변경: {language}")
        return True

    async def run_code(self) -> List[str]:
        if not self._accepts_changes():
            return []
        language = self.state.language
        stamp = datetime.now().strftime("%H:%M:%S")
        lines = [f"[{stamp}] Compiling and executing {language.upper()} code..."]
        lines.extend(simulate_run(self.editor.get_text(), language))
        lines.append("--- Execution completed ---")

        self.output.set_text("\n".join(lines))
        self.drafts.schedule_save(
            self.state.active_question, self.editor.get_text(), self.output.get_text(),
        )
        return lines

    # ── 종료 / 제출 ──────────────────────────────────────────────────────────

    def _identity(self) -> tuple:
        return (
            self.storage.get_item(USER_EMAIL_KEY),
            self.storage.get_item(REGISTRATION_ID_KEY),
        )

    def _answered_codes(self) -> Dict[int, str]:
        codes = {}
        for qid in self.state.answered:
            record = self.drafts.load(qid)
            codes[qid] = record.code if record else ""
        return codes

    def _on_timer_expired(self) -> None:
        self._notify("info", MSG_TIME_UP)
        self.finish_task = asyncio.ensure_future(self.finish(auto=True))

    async def finish(self, auto: bool = False) -> bool:
        """
        시험 종료 및 결과 제출.

        Returns:
            True  : 제출 엔드포인트가 결과를 수신 확인
            False : 이미 종료됨 / 식별 정보 없음 / 제출 실패
        """
        # 재진입 방지: RUNNING 에서만 한 번 진행
        if not self.state.running:
            return False

        email, registration_id = self._identity()
        if not email or not registration_id:
            logger.error("응시자 식별 정보 없음, 제출하지 않습니다.")
            self._notify("error", MSG_MISSING_IDENTITY)
            if auto:
                # 시간 만료: RUNNING 은 유지하되 답안은 저장 후 고정
                self.drafts.flush_all()
                self._persist_active()
                self.editor.set_read_only(True)
            return False

        self.tracker.finish()
        self.state.auto_finished = auto
        self.timer.stop()
        self.drafts.flush_all()
        self._persist_active()
        self.editor.set_read_only(True)

        payload = build_payload(
            self.state, registration_id, email, self.exam_name, self._answered_codes(),
        )

        self.submission_attempts += 1
        try:
            await self.submitter.submit(payload)
        except SubmissionError as e:
            # 자동 재시도 없음, RUNNING 으로 되돌리지 않음
            logger.error(f"시험 결과 제출 실패: {e}")
            self._notify("error", MSG_SUBMIT_FAILED)
            return False

        self.state.submitted = True
        self.redirect_url = self.results_url.format(email=quote(email))
        self._notify("success", MSG_SUBMITTED)
        logger.info(f"시험 종료 ({'시간 만료' if auto else '사용자 종료'}): {email}")
        return True

    def close(self) -> None:
        """세션 폐기 시 타이머/대기 중인 저장 정리."""
        self.timer.stop()
        self.drafts.cancel_pending()
