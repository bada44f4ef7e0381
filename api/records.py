"""
api/records.py — 등록 / 시험 결과 / 관리자 대시보드 엔드포인트 (MongoDB)
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Request

import api.session as session
from coding_round_cbt.models.registration_model import AdminLogin, RegistrationForm
from coding_round_cbt.services.record_store import (
    DuplicateRegistrationError, RecordStore, RecordStoreError,
)
from coding_round_cbt.services.session_storage import REGISTRATION_ID_KEY, USER_EMAIL_KEY

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(request: Request) -> RecordStore:
    return request.app.state.records


@router.post("/register", status_code=201)
async def register(form: RegistrationForm, request: Request):
    if form.missing_fields():
        logger.error(f"등록 실패: 필수 항목 누락 {form.missing_fields()}")
        raise HTTPException(status_code=400, detail="All fields are required.")

    try:
        registration_id = await asyncio.to_thread(_store(request).register, form)
    except DuplicateRegistrationError:
        raise HTTPException(status_code=409, detail="Email already registered.")
    except RecordStoreError as e:
        logger.error(f"등록 중 DB 오류: {e}")
        raise HTTPException(status_code=500, detail="Internal server error.")

    # 시험 코어가 읽는 응시자 식별 정보 기록
    storage = session.get(request.state.session_id, "storage")
    if storage is not None:
        storage.set_item(USER_EMAIL_KEY, form.email)
        storage.set_item(REGISTRATION_ID_KEY, registration_id)

    return {"message": "Registration successful!", "id": registration_id, "email": form.email}


@router.post("/api/test-results", status_code=201)
async def submit_test_results(request: Request, results: Dict[str, Any] = Body(...)):
    if not results.get("registrationId"):
        logger.error("시험 결과 제출 실패: registrationId 없음")
        raise HTTPException(status_code=400, detail="Invalid test results data.")

    try:
        result_id = await asyncio.to_thread(_store(request).save_result, results)
    except RecordStoreError as e:
        logger.error(f"시험 결과 저장 오류: {e}")
        raise HTTPException(status_code=500, detail=f"Internal server error: {e}")

    return {"message": "Test results submitted successfully!", "id": result_id}


@router.get("/api/admin/dashboard")
async def admin_dashboard(request: Request):
    try:
        rows = await asyncio.to_thread(_store(request).dashboard)
    except RecordStoreError as e:
        logger.error(f"대시보드 조회 오류: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data.")
    return [row.model_dump(by_alias=True) for row in rows]


@router.post("/api/admin/login")
async def admin_login(body: AdminLogin, request: Request):
    logger.info(f"관리자 로그인 시도: {body.email}")
    try:
        ok = await asyncio.to_thread(_store(request).verify_admin, body.email, body.password)
    except RecordStoreError as e:
        logger.error(f"관리자 로그인 중 DB 오류: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not ok:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return {"message": "Login successful"}


@router.get("/api/user/results")
async def user_results(request: Request, email: Optional[str] = None):
    if not email:
        raise HTTPException(status_code=400, detail="Email query parameter is required.")
    try:
        result = await asyncio.to_thread(_store(request).find_result, email)
    except RecordStoreError as e:
        logger.error(f"응시 결과 조회 오류: {e}")
        raise HTTPException(status_code=500, detail="Internal server error.")
    if result is None:
        raise HTTPException(status_code=404, detail="No test results found for this user.")
    return result
