"""
services/record_store.py

MongoDB 기반 등록/시험 결과/관리자 컬렉션 접근.
모든 메서드는 블로킹(pymongo)이므로 라우트에서는 asyncio.to_thread 로 호출한다.
"""

import hmac
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError

import config
from coding_round_cbt.models.registration_model import DashboardRow, RegistrationForm

logger = logging.getLogger(__name__)


class DuplicateRegistrationError(ValueError):
    """이미 등록된 이메일."""


class RecordStoreError(RuntimeError):
    """DB 쓰기가 확인(acknowledged)되지 않았거나 드라이버 오류."""


def connect(uri: str = config.MONGO_URI, db_name: str = config.DB_NAME):
    """MongoClient 는 지연 연결이므로 실제 접속은 첫 쿼리 시점에 일어난다."""
    client = MongoClient(uri, serverSelectionTimeoutMS=5000)
    logger.info(f"MongoDB 데이터베이스 사용: {db_name}")
    return client[db_name]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _public(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """ObjectId/datetime 을 JSON 직렬화 가능한 값으로 변환."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


class RecordStore:
    def __init__(self, db):
        self.registrations = db[config.REGISTRATION_COLLECTION]
        self.test_results = db[config.TEST_RESULTS_COLLECTION]
        self.admins = db[config.ADMIN_COLLECTION]

    # ── 등록 ────────────────────────────────────────────────────────────────

    def register(self, form: RegistrationForm) -> str:
        try:
            if self.registrations.find_one({"email": form.email}):
                logger.warning(f"이미 등록된 이메일로 등록 시도: {form.email}")
                raise DuplicateRegistrationError(form.email)
            doc = {**form.model_dump(), "registeredAt": _now()}
            result = self.registrations.insert_one(doc)
        except PyMongoError as e:
            raise RecordStoreError(str(e)) from e

        logger.info(f"신규 응시자 등록: {result.inserted_id}")
        return str(result.inserted_id)

    # ── 시험 결과 ────────────────────────────────────────────────────────────

    def save_result(self, results: Dict[str, Any]) -> str:
        try:
            result = self.test_results.insert_one({**results, "submittedAt": _now()})
        except PyMongoError as e:
            raise RecordStoreError(str(e)) from e

        if not getattr(result, "acknowledged", False):
            logger.error(f"시험 결과 저장 미확인: {result}")
            raise RecordStoreError("Failed to save test results to database.")
        logger.info(f"시험 결과 저장: {result.inserted_id}")
        return str(result.inserted_id)

    def find_result(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            return _public(self.test_results.find_one({"candidateEmail": email}))
        except PyMongoError as e:
            raise RecordStoreError(str(e)) from e

    # ── 관리자 ──────────────────────────────────────────────────────────────

    def dashboard(self) -> List[DashboardRow]:
        """
        등록자 1명당 1행. 결과가 없으면 finalScore 는 "N/A".
        정답/오답 수는 questionsAnalysis 의 "Passed"/"Failed" 상태에서 집계.
        """
        try:
            users = list(self.registrations.find({}))
            results = list(self.test_results.find({}))
        except PyMongoError as e:
            raise RecordStoreError(str(e)) from e
        logger.info(f"대시보드 조회: 등록 {len(users)}건, 결과 {len(results)}건")

        by_email: Dict[str, Dict[str, Any]] = {}
        for r in results:
            by_email.setdefault(r.get("candidateEmail"), r)

        rows = []
        for user in users:
            row = DashboardRow(name=user.get("fullname", ""), email=user.get("email", ""))
            r = by_email.get(user.get("email"))
            if r is not None:
                statuses = [q.get("status") for q in r.get("questionsAnalysis", [])]
                row.correct_questions = statuses.count("Passed")
                row.incorrect_questions = statuses.count("Failed")
                row.unsolved_questions = int(r.get("unsolvedQuestions", 0))
                row.final_score = r.get("totalScore", 0)
                submitted_at = r.get("submittedAt")
                if isinstance(submitted_at, datetime):
                    row.submitted_at = submitted_at.isoformat()
            rows.append(row)
        return rows

    def verify_admin(self, email: str, password: str) -> bool:
        try:
            admin = self.admins.find_one({"email": email})
        except PyMongoError as e:
            raise RecordStoreError(str(e)) from e
        if not admin:
            return False
        stored = str(admin.get("password", "")).encode("utf-8")
        return hmac.compare_digest(stored, password.encode("utf-8"))

    def ensure_admin(self, email: str, password: str) -> bool:
        """관리자 계정이 없으면 생성. 새로 만든 경우 True."""
        if self.admins.find_one({"email": email}):
            logger.info(f"관리자 계정 이미 존재: {email}")
            return False
        self.admins.insert_one({"email": email, "password": password, "createdAt": _now()})
        logger.info(f"관리자 계정 생성: {email}")
        return True
