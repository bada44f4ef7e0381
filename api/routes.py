"""
api/routes.py — 시험 진행 엔드포인트

요청마다 쿠키 세션의 ExamSessionController 를 찾아 상태 전이를 위임한다.
범위 밖 이동 등 거부된 전이는 200 + ok=False 로 응답한다 (오래된 UI 이벤트 대비).
"""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session
from coding_round_cbt.models.question_model import QuestionDefinition
from coding_round_cbt.models.session_state import ExamStatus
from coding_round_cbt.services.exam_controller import ExamSessionController
from coding_round_cbt.services.session_storage import REGISTRATION_ID_KEY, USER_EMAIL_KEY
from coding_round_cbt.services.templates import SUPPORTED_LANGUAGES

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class NavigateBody(BaseModel):
    question: int

class EditBody(BaseModel):
    code: str

class LanguageBody(BaseModel):
    language: str


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _session(request: Request) -> dict:
    state = session.get_session(request.state.session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return state


def _controller(request: Request) -> ExamSessionController:
    controller = _session(request).get("controller")
    if controller is None:
        raise HTTPException(status_code=404, detail="No exam session. Start the exam first.")
    return controller


def _question_to_dict(q: QuestionDefinition) -> dict:
    return q.model_dump(by_alias=True)


def _snapshot(c: ExamSessionController) -> dict:
    s = c.state
    return {
        "status": s.status.value,
        "active_question": s.active_question,
        "total": s.total_questions,
        "visited": sorted(s.visited),
        "answered": sorted(s.answered),
        "counters": c.counters().model_dump(),
        "question_status": {
            str(qid): c.tracker.question_status(qid)
            for qid in range(1, s.total_questions + 1)
        },
        "remaining_seconds": s.remaining_seconds,
        "time": c.time_display(),
        "time_up": c.time_up,
        "language": s.language,
        "code": c.editor.get_text(),
        "output": c.output.get_text(),
        "read_only": bool(getattr(c.editor, "read_only", False)),
        "auto_finished": s.auto_finished,
        "submitted": s.submitted,
        "redirect": c.redirect_url,
        "notices": [n.model_dump() for n in c.drain_notices()],
    }


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.get("/api/session-status")
async def session_status(request: Request):
    state = _session(request)
    storage = state["storage"]
    controller: ExamSessionController | None = state.get("controller")
    return {
        "email": storage.get_item(USER_EMAIL_KEY),
        "registered": bool(storage.get_item(USER_EMAIL_KEY) and storage.get_item(REGISTRATION_ID_KEY)),
        "exam_status": controller.state.status.value if controller else ExamStatus.NOT_STARTED.value,
    }


@router.post("/api/exam/start")
async def start_exam(request: Request):
    state = _session(request)
    controller: ExamSessionController | None = state.get("controller")
    if controller is None:
        controller = request.app.state.controller_factory(state["storage"])
        session.put(request.state.session_id, "controller", controller)

    if not controller.loader.loaded:
        await controller.load_questions()

    if not controller.start():
        raise HTTPException(status_code=400, detail="The exam has already been started.")
    return _snapshot(controller)


@router.get("/api/exam/state")
async def exam_state(request: Request):
    return _snapshot(_controller(request))


@router.get("/api/questions")
async def list_questions(request: Request):
    controller = _controller(request)
    return [_question_to_dict(q) for q in controller.questions]


@router.get("/api/exam/question/{number}")
async def get_question(number: int, request: Request):
    controller = _controller(request)
    q = controller.question(number)
    if q is None:
        raise HTTPException(status_code=404, detail="Question not found.")
    d = _question_to_dict(q)
    d["status"] = controller.tracker.question_status(number)
    return d


@router.post("/api/exam/navigate")
async def navigate(body: NavigateBody, request: Request):
    controller = _controller(request)
    ok = controller.go_to(body.question)
    return {"ok": ok, **_snapshot(controller)}


@router.post("/api/exam/edit")
async def edit_code(body: EditBody, request: Request):
    controller = _controller(request)
    if controller.state.finished:
        raise HTTPException(status_code=400, detail="The exam has already been submitted.")
    if controller.time_up:
        raise HTTPException(status_code=400, detail="Time is up. Answers can no longer be changed.")
    return {"ok": controller.record_edit(body.code)}


@router.post("/api/exam/language")
async def change_language(body: LanguageBody, request: Request):
    controller = _controller(request)
    if body.language not in SUPPORTED_LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {body.language}")
    ok = controller.change_language(body.language)
    return {"ok": ok, "language": controller.state.language, "code": controller.editor.get_text()}


@router.post("/api/exam/run")
async def run_code(request: Request):
    controller = _controller(request)
    lines = await controller.run_code()
    return {"ok": bool(lines), "lines": lines, "output": controller.output.get_text()}


@router.post("/api/exam/submit-answer")
async def submit_answer(request: Request):
    controller = _controller(request)
    ok = controller.submit_current()
    return {"ok": ok, **_snapshot(controller)}


@router.post("/api/exam/next")
async def next_question(request: Request):
    controller = _controller(request)
    ok = controller.next_question()
    return {"ok": ok, **_snapshot(controller)}


@router.post("/api/exam/finish")
async def finish_exam(request: Request):
    controller = _controller(request)
    ok = await controller.finish()
    return {"ok": ok, **_snapshot(controller)}


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(request.state.session_id)
    return {"ok": True}
