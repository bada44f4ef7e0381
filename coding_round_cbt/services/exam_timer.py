"""
services/exam_timer.py

시험 카운트다운 타이머.
시험 제한 시간: 기본 2시간 (7200초), 1초마다 tick.
남은 시간이 0이 되는 순간 on_expire 를 정확히 한 번 호출하고 더 이상 tick 하지 않는다.
"""

import asyncio
import logging
from typing import Callable

from config import TIMER_INTERVAL_SECONDS
from coding_round_cbt.models.session_state import SessionState

logger = logging.getLogger(__name__)


def format_hms(total_seconds: int) -> str:
    """초 → HH:MM:SS (0 미만은 0으로 표시)."""
    total_seconds = max(0, int(total_seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class CountdownTimer:
    def __init__(
        self,
        state: SessionState,
        on_expire: Callable[[], None],
        interval: float = TIMER_INTERVAL_SECONDS,
        scheduler=None,
    ):
        self.state = state
        self.interval = interval
        self._on_expire = on_expire
        self._scheduler = scheduler
        self._handle = None
        self._stopped = False
        self.expired = False

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        self._stopped = False
        self._schedule_next()

    def _schedule_next(self) -> None:
        self._handle = self._scheduler.call_later(self.interval, self.tick)

    def tick(self) -> None:
        self._handle = None
        if self._stopped or self.expired or not self.state.running:
            return

        if self.state.remaining_seconds > 0:
            self.state.remaining_seconds -= 1

        if self.state.remaining_seconds == 0:
            self.expired = True
            logger.info("시험 시간 종료, 자동 제출을 시작합니다.")
            self._on_expire()
            return

        self._schedule_next()

    def stop(self) -> None:
        """타이머 중지. 여러 번 호출해도 안전."""
        if self._stopped:
            return
        self._stopped = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def display(self) -> str:
        return format_hms(self.state.remaining_seconds)
