"""
services/debounce.py

key별 디바운스 프리미티브.
  - schedule(key, payload): 해당 key의 대기 타이머를 취소하고 새로 시작 (마지막 요청만 살아남음)
  - flush(key):             타이머를 무시하고 즉시 기록
스케줄러는 call_later(delay, callback, *args) → cancel() 가능한 handle 을 반환하는 객체.
기본값은 실행 중인 asyncio 이벤트 루프.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(
        self,
        delay: float,
        write: Callable[[Hashable, Any], None],
        scheduler=None,
    ):
        self.delay = delay
        self._write = write
        self._scheduler = scheduler
        self._pending: Dict[Hashable, Tuple[Any, Any]] = {}  # key → (payload, handle)

    def _resolve_scheduler(self):
        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        return self._scheduler

    def schedule(self, key: Hashable, payload: Any) -> None:
        self.cancel(key)
        handle = self._resolve_scheduler().call_later(self.delay, self._fire, key)
        self._pending[key] = (payload, handle)

    def _fire(self, key: Hashable) -> None:
        entry = self._pending.pop(key, None)
        if entry is None:
            return
        self._write(key, entry[0])

    def flush(self, key: Hashable) -> bool:
        """대기 중인 기록이 있으면 즉시 수행. 기록 여부 반환."""
        entry = self._pending.pop(key, None)
        if entry is None:
            return False
        payload, handle = entry
        handle.cancel()
        self._write(key, payload)
        return True

    def flush_all(self) -> int:
        flushed = 0
        for key in list(self._pending):
            if self.flush(key):
                flushed += 1
        return flushed

    def cancel(self, key: Hashable) -> Optional[Any]:
        """대기 중인 기록을 버림. 버려진 payload 반환."""
        entry = self._pending.pop(key, None)
        if entry is None:
            return None
        entry[1].cancel()
        return entry[0]

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def pending(self, key: Hashable) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)
