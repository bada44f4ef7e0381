import json

import httpx
import pytest

from coding_round_cbt.models.session_state import ExamStatus, SessionState
from coding_round_cbt.services.submission import (
    SubmissionClient, SubmissionError, build_payload,
)


def _state():
    return SessionState(
        total_questions=12,
        active_question=5,
        visited={1, 3, 5},
        answered={5, 1},
        status=ExamStatus.FINISHED,
    )


def test_payload_keeps_grading_placeholders():
    payload = build_payload(_state(), "reg-1", "c@example.com", "Coding Round", {1: "int main"})
    wire = payload.to_wire()

    assert wire["registrationId"] == "reg-1"
    assert wire["candidateEmail"] == "c@example.com"
    assert wire["status"] == "Completed"
    assert wire["totalQuestions"] == 12
    assert wire["solvedQuestions"] == 2
    assert wire["unsolvedQuestions"] == 10
    assert (wire["totalScore"], wire["correctAnswers"], wire["wrongAnswers"]) == (0, 0, 0)
    assert wire["questionsAnalysis"] == [
        {"questionId": 1, "status": "Unsolved", "userCode": "int main"},
        {"questionId": 5, "status": "Unsolved", "userCode": ""},
    ]


@pytest.mark.asyncio
async def test_submit_posts_json_and_returns_ack():
    received = []

    def handler(request):
        received.append(json.loads(request.content))
        return httpx.Response(201, json={"message": "ok", "id": "abc"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        submitter = SubmissionClient("http://cbt.test/api/test-results", client=client)
        ack = await submitter.submit(build_payload(_state(), "reg-1", "c@example.com", "Exam"))

    assert ack == {"message": "ok", "id": "abc"}
    assert received[0]["registrationId"] == "reg-1"


@pytest.mark.asyncio
async def test_non_2xx_raises_submission_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "db down"}))
    async with httpx.AsyncClient(transport=transport) as client:
        submitter = SubmissionClient("http://cbt.test/api/test-results", client=client)
        with pytest.raises(SubmissionError):
            await submitter.submit(build_payload(_state(), "reg-1", "c@example.com", "Exam"))


@pytest.mark.asyncio
async def test_transport_error_raises_submission_error():
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(boom)) as client:
        submitter = SubmissionClient("http://cbt.test/api/test-results", client=client)
        with pytest.raises(SubmissionError):
            await submitter.submit(build_payload(_state(), "reg-1", "c@example.com", "Exam"))
