from typing import Optional, Union

from pydantic import BaseModel, Field


class RegistrationForm(BaseModel):
    """
    응시자 등록 폼.
    필드 누락은 라우트에서 400으로 처리하므로 여기서는 빈 문자열을 허용한다.
    """
    fullname: str = ""
    email: str = ""
    dob: str = ""
    contact: str = ""
    gender: str = ""
    school: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name, value in self.model_dump().items() if not value.strip()]


class AdminLogin(BaseModel):
    email: str = ""
    password: str = ""


class DashboardRow(BaseModel):
    """관리자 대시보드 한 줄 (응시자 1명)."""
    name: str
    email: str
    final_score: Union[int, float, str] = Field(default="N/A", alias="finalScore")
    correct_questions: int = Field(default=0, alias="correctQuestions")
    incorrect_questions: int = Field(default=0, alias="incorrectQuestions")
    unsolved_questions: int = Field(default=0, alias="unsolvedQuestions")
    submitted_at: Optional[str] = Field(default=None, alias="submittedAt")

    model_config = {"populate_by_name": True}
