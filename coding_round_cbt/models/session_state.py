"""
models/session_state.py

시험 진행 상태를 담는 세션 모델.
Pydantic BaseModel 기반. 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음.
"""

from enum import Enum
from typing import Set

from pydantic import BaseModel, Field

from coding_round_cbt.services.templates import DEFAULT_LANGUAGE


class ExamStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"  # 종료 상태, 재진입 없음


class SessionState(BaseModel):
    """
    응시자 한 명의 시험 시도(attempt) 전체 상태.

    Attributes:
        total_questions:   로드된 문제 수. 로드 이후 고정.
        active_question:   현재 화면에 표시 중인 문제 번호 (1-based).
        visited:           한 번이라도 이동한 문제 번호 집합 (answered 의 상위집합).
        answered:          응시자가 명시적으로 제출한 문제 번호 집합.
        remaining_seconds: 남은 시간(초). 실행 중에만 감소하며 0 미만으로 내려가지 않음.
        status:            NOT_STARTED → RUNNING → FINISHED
        auto_finished:     타이머 만료로 종료되었는지 여부.
        submitted:         제출 엔드포인트가 결과를 수신 확인했는지 여부.
        language:          편집기에 선택된 언어.
    """

    total_questions: int = Field(default=0, ge=0)
    active_question: int = Field(default=1, ge=1)
    visited: Set[int] = Field(default_factory=set)
    answered: Set[int] = Field(default_factory=set)
    remaining_seconds: int = Field(default=0, ge=0)
    status: ExamStatus = ExamStatus.NOT_STARTED
    auto_finished: bool = False
    submitted: bool = False
    language: str = DEFAULT_LANGUAGE

    model_config = {"validate_assignment": True}

    @property
    def running(self) -> bool:
        return self.status == ExamStatus.RUNNING

    @property
    def finished(self) -> bool:
        return self.status == ExamStatus.FINISHED


class StatusCounters(BaseModel):
    """문제 현황 카운터. 세 값의 합은 항상 total_questions."""

    answered: int
    visited_not_answered: int
    not_visited: int


class Notice(BaseModel):
    """사용자에게 보여줄 알림 (alert 대체)."""

    level: str  # "info" | "success" | "error"
    message: str
