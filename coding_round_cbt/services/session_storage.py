"""
services/session_storage.py

세션 범위 key-value 저장소 (브라우저 localStorage 대응).
  - 문제별 draft: question_{id}_code / question_{id}_output
  - 응시자 식별 정보: userEmail / registrationId (등록 흐름이 기록, 시험 코어는 읽기만)
"""

from typing import Dict, Iterator, Optional

USER_EMAIL_KEY = "userEmail"
REGISTRATION_ID_KEY = "registrationId"


class SessionStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self, prefix: str = "") -> Iterator[str]:
        return iter([k for k in self._items if k.startswith(prefix)])

    def remove_prefix(self, prefix: str) -> int:
        """prefix로 시작하는 키를 모두 삭제. 삭제된 수 반환."""
        doomed = list(self.keys(prefix))
        for key in doomed:
            del self._items[key]
        return len(doomed)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items
