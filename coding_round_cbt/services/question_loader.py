"""
services/question_loader.py

문제 세트 로더.
Public API:
  - QuestionSetLoader(source).load() -> List[QuestionDefinition]

source 는 http(s) URL (httpx 로 GET) 또는 로컬 JSON 파일 경로.
실패(네트워크 오류, 잘못된 JSON, 스키마 불일치)는 빈 리스트로 처리한다.
문제 0개인 시험은 화면에 드러나는 복구 가능한 상태이지 세션 중단 사유가 아니다.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from coding_round_cbt.models.question_model import QuestionDefinition

logger = logging.getLogger(__name__)

_QUESTION_LIST = TypeAdapter(List[QuestionDefinition])
_FETCH_TIMEOUT = 10.0


def _read_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def parse_questions(raw: object) -> List[QuestionDefinition]:
    """
    JSON 배열 → QuestionDefinition 리스트 (questionNumber 순 정렬).
    문제 번호는 1..N 으로 빠짐/중복 없이 이어져야 한다 (번호 = 위치).
    """
    if not isinstance(raw, list):
        raise ValueError("문제 데이터는 JSON 배열이어야 합니다.")
    questions = sorted(_QUESTION_LIST.validate_python(raw), key=lambda q: q.question_number)
    numbers = [q.question_number for q in questions]
    if numbers != list(range(1, len(questions) + 1)):
        raise ValueError(f"문제 번호가 1부터 연속되지 않습니다: {numbers}")
    return questions


class QuestionSetLoader:
    def __init__(self, source: str, client: Optional[httpx.AsyncClient] = None):
        self.source = source
        self._client = client
        self._questions: Optional[List[QuestionDefinition]] = None

    @property
    def loaded(self) -> bool:
        return self._questions is not None

    @property
    def questions(self) -> List[QuestionDefinition]:
        return list(self._questions or [])

    async def _fetch_raw(self) -> object:
        if self.source.startswith(("http://", "https://")):
            if self._client is not None:
                response = await self._client.get(self.source)
            else:
                async with httpx.AsyncClient(timeout=_FETCH_TIMEOUT) as client:
                    response = await client.get(self.source)
            response.raise_for_status()
            return response.json()

        text = await asyncio.to_thread(_read_file, self.source)
        return json.loads(text)

    async def load(self) -> List[QuestionDefinition]:
        if self._questions is not None:
            return self.questions

        try:
            raw = await self._fetch_raw()
            questions = parse_questions(raw)
        except (httpx.HTTPError, OSError, ValueError, ValidationError) as e:
            logger.error(f"문제 로드 실패 ({self.source}): {e}")
            logger.info("빈 문제 세트로 계속 진행합니다.")
            questions = []
        else:
            logger.info(f"문제 {len(questions)}개 로드 완료 ({self.source})")

        self._questions = questions
        return self.questions
