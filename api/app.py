"""
api/app.py — FastAPI 앱 인스턴스 + 세션 미들웨어 + static 파일 서빙
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

import config
from api.records import router as records_router
from api.routes import router
import api.session as session
from coding_round_cbt.services import record_store
from coding_round_cbt.services.exam_controller import ExamSessionController
from coding_round_cbt.services.question_loader import QuestionSetLoader
from coding_round_cbt.services.record_store import RecordStore
from coding_round_cbt.services.session_storage import SessionStorage
from coding_round_cbt.services.submission import SubmissionClient

logger = logging.getLogger(__name__)

SESSION_COOKIE = "cbt_session"
INTERNAL_HOST = "cbt.internal"
INTERNAL_BASE_URL = f"http://{INTERNAL_HOST}"
CLEANUP_INTERVAL = 300  # 5분


def _default_controller_factory(
    submission_client: SubmissionClient,
) -> Callable[[SessionStorage], ExamSessionController]:
    def factory(storage: SessionStorage) -> ExamSessionController:
        return ExamSessionController(
            loader=QuestionSetLoader(config.QUESTION_SOURCE),
            submitter=submission_client,
            storage=storage,
        )
    return factory


def create_app(
    db=None,
    controller_factory: Optional[Callable[[SessionStorage], ExamSessionController]] = None,
) -> FastAPI:
    store = RecordStore(db if db is not None else record_store.connect())

    # 제출 엔드포인트 미지정 시 자기 자신의 /api/test-results 로 in-process 제출
    internal_client: Optional[httpx.AsyncClient] = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.ADMIN_EMAIL and config.ADMIN_PASSWORD:
            try:
                await asyncio.to_thread(store.ensure_admin, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
            except PyMongoError as e:
                logger.error(f"관리자 계정 초기화 실패: {e}")

        # 만료 세션 주기적 정리
        async def _cleanup_loop():
            while True:
                await asyncio.sleep(CLEANUP_INTERVAL)
                removed = session.cleanup_expired()
                if removed:
                    logger.info(f"만료 세션 {removed}개 정리")

        cleanup = asyncio.create_task(_cleanup_loop())
        try:
            yield
        finally:
            cleanup.cancel()
            session.clear_all()
            if internal_client is not None:
                await internal_client.aclose()

    app = FastAPI(title="Coding Round CBT", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.records = store

    if controller_factory is None:
        if config.SUBMISSION_ENDPOINT:
            submission_client = SubmissionClient(config.SUBMISSION_ENDPOINT)
        else:
            internal_client = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app), base_url=INTERNAL_BASE_URL,
            )
            submission_client = SubmissionClient("/api/test-results", client=internal_client)
        controller_factory = _default_controller_factory(submission_client)
    app.state.controller_factory = controller_factory

    # CORS (다양한 출처 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 세션 미들웨어: 쿠키에서 세션 ID를 읽고, 없으면 새로 발급
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        # in-process 제출 요청은 응시자 세션이 아니므로 세션을 만들지 않는다
        if request.url.hostname == INTERNAL_HOST:
            request.state.session_id = None
            return await call_next(request)

        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=config.SESSION_TTL,
        )
        return response

    app.include_router(router)
    app.include_router(records_router)

    # static 파일 마운트 (문제 JSON 포함)
    if os.path.isdir(config.STATIC_DIR):
        app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")

    return app
