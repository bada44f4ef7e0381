"""
services/text_surface.py

편집기 위젯을 추상화한 최소 인터페이스.
실제 편집기(브라우저)와 테스트 더블이 같은 인터페이스를 구현하므로
네비게이션/저장 로직을 UI 없이 검증할 수 있다.
"""

from typing import Callable, List, Protocol


class TextSurface(Protocol):
    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def on_change(self, callback: Callable[[str], None]) -> None: ...

    def set_read_only(self, read_only: bool) -> None: ...


class BufferSurface:
    """
    서버 측 텍스트 버퍼.

    set_text() 는 프로그램에 의한 값 교체 (문제 로드 등). 읽기 전용이어도 허용, 알림 없음.
    edit()     는 사용자 편집. 읽기 전용이면 거부되고, 성공 시 change 리스너 호출.
    """

    def __init__(self, text: str = "", read_only: bool = False):
        self._text = text
        self._read_only = read_only
        self._listeners: List[Callable[[str], None]] = []

    @property
    def read_only(self) -> bool:
        return self._read_only

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text

    def on_change(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)

    def set_read_only(self, read_only: bool) -> None:
        self._read_only = read_only

    def edit(self, text: str) -> bool:
        if self._read_only:
            return False
        self._text = text
        for callback in self._listeners:
            callback(text)
        return True
