"""
models/submission_model.py

최종 제출 페이로드와 문제별 임시 저장(draft) 모델.
"""

from typing import List

from pydantic import BaseModel, Field

# 채점 로직이 없으므로 모든 문제 상태는 고정값
PLACEHOLDER_STATUS = "Unsolved"


class DraftRecord(BaseModel):
    """문제 하나의 작성 중 코드와 출력."""

    code: str = ""
    output: str = ""


class QuestionOutcome(BaseModel):
    question_id: int = Field(..., alias="questionId")
    status: str = PLACEHOLDER_STATUS
    user_code: str = Field(default="", alias="userCode")

    model_config = {"frozen": True, "populate_by_name": True}


class SubmissionPayload(BaseModel):
    """
    시험 종료 시 한 번 생성되어 제출 엔드포인트로 전달되는 결과.

    totalScore / correctAnswers / wrongAnswers 는 채점 미구현 자리표시자(0).
    """

    registration_id: str = Field(..., alias="registrationId")
    candidate_email: str = Field(..., alias="candidateEmail")
    exam_name: str = Field(..., alias="examName")
    status: str = "Completed"
    total_questions: int = Field(..., alias="totalQuestions")
    solved_questions: int = Field(..., alias="solvedQuestions")
    unsolved_questions: int = Field(..., alias="unsolvedQuestions")
    total_score: int = Field(default=0, alias="totalScore")
    correct_answers: int = Field(default=0, alias="correctAnswers")
    wrong_answers: int = Field(default=0, alias="wrongAnswers")
    questions_analysis: List[QuestionOutcome] = Field(
        default_factory=list, alias="questionsAnalysis"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    def to_wire(self) -> dict:
        """camelCase JSON 직렬화용 dict."""
        return self.model_dump(by_alias=True)
