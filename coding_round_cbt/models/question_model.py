from typing import List

from pydantic import BaseModel, Field, field_validator


class TestCase(BaseModel):
    """문제에 딸린 예시 입출력 한 쌍."""

    __test__ = False  # pytest 수집 대상 아님

    input: str = Field(
        ...,
        description="입력 예시"
    )
    expected_output: str = Field(
        ...,
        alias="expectedOutput",
        description="기대 출력"
    )

    model_config = {"frozen": True, "populate_by_name": True}


class QuestionDefinition(BaseModel):
    """
    코딩 라운드 문제 모델
    Pydantic v2 적용. JSON 필드명은 camelCase (questionNumber, testCases).
    시험 시작 시 한 번 로드되고 이후 변경되지 않는다.
    """
    question_number: int = Field(
        ...,
        alias="questionNumber",
        ge=1,
        description="문제 번호 (1-based 순서, 화면 표시용 식별자)"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="문제 제목"
    )
    description: str = Field(
        ...,
        description="문제 설명"
    )
    difficulty: str = Field(
        ...,
        description="난이도 (Easy / Medium / Hard)"
    )
    topic: str = Field(
        ...,
        description="주제 (예: Arrays, Strings)"
    )
    test_cases: List[TestCase] = Field(
        default_factory=list,
        alias="testCases",
        description="예시 테스트 케이스 리스트"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator('title')
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()
