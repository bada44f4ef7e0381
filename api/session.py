"""
api/session.py — 멀티유저 인메모리 세션 (쿠키 기반)

각 사용자에게 UUID 세션 ID를 발급하고, 세션별로 독립된 상태를 유지.
  - storage    : 세션 범위 key-value 저장소 (draft, 응시자 식별 정보)
  - controller : 진행 중인 시험 컨트롤러 (없으면 None)
TTL 경과 시 자동 만료되며, 만료/초기화 시 컨트롤러의 타이머도 함께 정리한다.
"""

import logging
import threading
import time
import uuid
from typing import Any

from config import SESSION_TTL
from coding_round_cbt.services.session_storage import SessionStorage

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}


def _new_state(storage: SessionStorage | None = None) -> dict[str, Any]:
    return {
        "storage": storage or SessionStorage(),
        "controller": None,
    }


def _close(state: dict[str, Any]) -> None:
    controller = state.get("controller")
    if controller is not None:
        controller.close()


def create_session() -> str:
    """새 세션을 생성하고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """세션 ID로 세션 데이터를 가져옴. 만료되었거나 없으면 None."""
    expired = None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            expired = _sessions.pop(sid)
            del _timestamps[sid]
        else:
            _timestamps[sid] = time.time()  # 접근 시 갱신
            return _sessions[sid]
    _close(expired)
    return None


def get(sid: str, key: str, default=None):
    """세션에서 값 읽기."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """세션에 값 쓰기."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """시험 상태 초기화 (응시자 식별 정보가 담긴 storage 는 유지)."""
    with _lock:
        state = _sessions.get(sid)
        if state is None:
            return
        _sessions[sid] = _new_state(state["storage"])
        _timestamps[sid] = time.time()
    _close(state)


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        removed = [_sessions.pop(sid) for sid in expired]
        for sid in expired:
            del _timestamps[sid]
    for state in removed:
        _close(state)
    return len(removed)


def clear_all() -> None:
    """모든 세션 폐기 (앱 종료 시)."""
    with _lock:
        states = list(_sessions.values())
        _sessions.clear()
        _timestamps.clear()
    for state in states:
        _close(state)
    logger.info(f"세션 {len(states)}개 폐기")
