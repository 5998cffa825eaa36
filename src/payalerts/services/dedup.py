from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class DuplicateSuppressor:
    """
    webhook 재전송 무시용 in-memory set.

    - 항목별 TTL 없음: interval마다 set 전체를 한 번에 비운다.
    - 비운 직후 같은 id가 오면 새 이벤트로 취급된다 (알려진 한계).
    - 프로세스 재시작 시 비어 있음. 영속적인 idempotency 장치가 아니다.
    """

    def __init__(
        self,
        clear_interval_sec: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if clear_interval_sec <= 0:
            raise ValueError("clear_interval_sec must be positive")
        self.clear_interval_sec = clear_interval_sec
        self._clock = clock
        self._lock = threading.Lock()
        self._seen: dict[str, float] = {}
        self._window_start = clock()

    def _roll_window(self, now: float) -> None:
        elapsed = now - self._window_start
        if elapsed < self.clear_interval_sec:
            return
        # 경계는 시작 시각 기준으로 고정 (setInterval과 같은 리듬)
        periods = int(elapsed // self.clear_interval_sec)
        self._window_start += periods * self.clear_interval_sec
        if self._seen:
            logger.debug("Clearing %d processed ids", len(self._seen))
        self._seen.clear()

    def should_process(self, event_id: str) -> bool:
        with self._lock:
            now = self._clock()
            self._roll_window(now)
            if event_id in self._seen:
                return False
            self._seen[event_id] = now
            return True

    def release(self, event_id: str) -> None:
        """처리 실패한 id를 빼서 게이트웨이 재시도가 다시 처리되게 한다."""
        with self._lock:
            self._seen.pop(event_id, None)

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()
            self._window_start = self._clock()

    def __len__(self) -> int:
        with self._lock:
            self._roll_window(self._clock())
            return len(self._seen)
