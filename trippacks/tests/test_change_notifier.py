"""
Tests for fire-and-forget change notification.
"""

import pytest

from trippacks.app.services.change_notifier import ChangeNotifier


@pytest.mark.asyncio
async def test_observer_hears_own_path_and_descendants():
    notifier = ChangeNotifier()
    seen = []
    notifier.register("/trips", seen.append)

    assert notifier.notify("/trips") == 1
    assert notifier.notify("/trips/4") == 1
    assert notifier.notify("/stops") == 0
    await notifier.drain()

    assert seen == ["/trips", "/trips/4"]


@pytest.mark.asyncio
async def test_exact_registration_skips_descendants():
    notifier = ChangeNotifier()
    seen = []
    notifier.register("/trips", seen.append, descendants=False)

    notifier.notify("/trips/4")
    await notifier.drain()

    assert seen == []


@pytest.mark.asyncio
async def test_async_observer_and_unregister():
    notifier = ChangeNotifier()
    seen = []

    async def observer(path):
        seen.append(path)

    notifier.register("/stops", observer)
    notifier.notify("/stops/1")
    await notifier.drain()
    notifier.unregister(observer)
    notifier.notify("/stops/2")
    await notifier.drain()

    assert seen == ["/stops/1"]


@pytest.mark.asyncio
async def test_failing_observer_is_logged_not_raised(caplog):
    notifier = ChangeNotifier()
    seen = []

    def broken(path):
        raise RuntimeError("boom")

    notifier.register("/trips", broken)
    notifier.register("/trips", seen.append)
    notifier.notify("/trips")
    await notifier.drain()

    assert seen == ["/trips"]
    assert "Change observer failed for /trips" in caplog.text
