from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[None]]


class FollowupScheduler:
    """
    "N초 기다렸다가 후속 작업" 흐름을 asyncio task로 관리한다.

    - key(payment id)당 pending task는 하나만
    - HTTP 연결이 끊겨도 끝까지 실행됨
    - 앱 종료 시 shutdown()으로 남은 task 취소
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def schedule(self, key: str, delay_sec: float, action: Action) -> bool:
        existing = self._tasks.get(key)
        if existing is not None and not existing.done():
            logger.warning("Follow-up already pending for %s, not scheduling again", key)
            return False

        task = asyncio.get_running_loop().create_task(self._run(key, delay_sec, action))
        self._tasks[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        logger.debug("Follow-up scheduled for %s in %.1fs", key, delay_sec)
        return True

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]

    async def _run(self, key: str, delay_sec: float, action: Action) -> None:
        if delay_sec > 0:
            await asyncio.sleep(delay_sec)
        try:
            await action()
        except Exception:
            logger.exception("Follow-up for %s failed", key)

    def pending(self) -> list[str]:
        return [k for k, t in self._tasks.items() if not t.done()]

    async def drain(self) -> None:
        """pending task가 모두 끝날 때까지 기다린다."""
        while True:
            tasks = [t for t in self._tasks.values() if not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for t in tasks:
            t.cancel()
        if tasks:
            logger.info("Cancelled %d pending follow-up(s)", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
