"""
services/submission.py

최종 결과 페이로드 생성 및 제출 엔드포인트 호출.
재시도/멱등 키 없음. 제출은 최대 한 번(at-most-once) 시도된다.
"""

import logging
from typing import Dict, Optional

import httpx

from coding_round_cbt.models.session_state import SessionState
from coding_round_cbt.models.submission_model import (
    PLACEHOLDER_STATUS, QuestionOutcome, SubmissionPayload,
)

logger = logging.getLogger(__name__)

_SUBMIT_TIMEOUT = 15.0


class SubmissionError(RuntimeError):
    """제출 엔드포인트가 2xx 이외를 반환했거나 네트워크 오류가 발생."""


def build_payload(
    state: SessionState,
    registration_id: str,
    candidate_email: str,
    exam_name: str,
    codes: Optional[Dict[int, str]] = None,
) -> SubmissionPayload:
    """
    세션 상태 → SubmissionPayload.

    채점 로직이 없으므로 점수/정답/오답 수는 0, 문제별 상태는 "Unsolved" 고정.
    questionsAnalysis 에는 제출(answered)한 문제만 번호 순으로 담는다.
    """
    codes = codes or {}
    solved = len(state.answered)
    outcomes = [
        QuestionOutcome(
            question_id=qid,
            status=PLACEHOLDER_STATUS,
            user_code=codes.get(qid, ""),
        )
        for qid in sorted(state.answered)
    ]
    return SubmissionPayload(
        registration_id=registration_id,
        candidate_email=candidate_email,
        exam_name=exam_name,
        total_questions=state.total_questions,
        solved_questions=solved,
        unsolved_questions=state.total_questions - solved,
        questions_analysis=outcomes,
    )


class SubmissionClient:
    def __init__(self, endpoint: str, client: Optional[httpx.AsyncClient] = None):
        self.endpoint = endpoint
        self._client = client

    async def _post(self, body: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.endpoint, json=body)
        async with httpx.AsyncClient(timeout=_SUBMIT_TIMEOUT) as client:
            return await client.post(self.endpoint, json=body)

    async def submit(self, payload: SubmissionPayload) -> dict:
        try:
            response = await self._post(payload.to_wire())
        except httpx.HTTPError as e:
            raise SubmissionError(f"제출 요청 실패: {e}") from e

        if not response.is_success:
            raise SubmissionError(f"제출 실패: HTTP {response.status_code}")

        try:
            ack = response.json()
        except ValueError:
            ack = {}
        logger.info(f"시험 결과 제출 완료: {ack}")
        return ack
