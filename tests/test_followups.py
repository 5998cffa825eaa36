import asyncio

from payalerts.services.followups import FollowupScheduler


def test_action_runs_after_drain():
    calls = []

    async def go():
        s = FollowupScheduler()

        async def action():
            calls.append("ran")

        assert s.schedule("tr_1", 0.01, action) is True
        assert s.pending() == ["tr_1"]
        await s.drain()
        return s.pending()

    assert asyncio.run(go()) == []
    assert calls == ["ran"]


def test_same_key_is_not_scheduled_twice_while_pending():
    calls = []

    async def go():
        s = FollowupScheduler()

        async def action():
            calls.append(1)

        first = s.schedule("tr_1", 0.01, action)
        second = s.schedule("tr_1", 0.01, action)
        await s.drain()
        third = s.schedule("tr_1", 0, action)
        await s.drain()
        return first, second, third

    assert asyncio.run(go()) == (True, False, True)
    assert calls == [1, 1]


def test_shutdown_cancels_pending_actions():
    calls = []

    async def go():
        s = FollowupScheduler()

        async def action():
            calls.append(1)

        s.schedule("tr_1", 60, action)
        s.schedule("tr_2", 60, action)
        await s.shutdown()
        return s.pending()

    assert asyncio.run(go()) == []
    assert calls == []


def test_failing_action_does_not_break_drain(caplog):
    async def go():
        s = FollowupScheduler()

        async def boom():
            raise RuntimeError("gateway exploded")

        s.schedule("tr_1", 0, boom)
        await s.drain()

    asyncio.run(go())
    assert "Follow-up for tr_1 failed" in caplog.text
