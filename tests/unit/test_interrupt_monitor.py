from __future__ import annotations

import asyncio
import os
import signal

import pytest

from eazy_ci.orchestrator.interrupt import InterruptMonitor


def test_only_first_trigger_is_forwarded() -> None:
    received: list[str] = []
    monitor = InterruptMonitor(on_interrupt=received.append)
    monitor.trigger("SIGTERM")
    monitor.trigger("SIGINT")
    assert received == ["SIGTERM"]
    assert monitor.is_interrupted()
    assert monitor.signal_name == "SIGTERM"


@pytest.mark.asyncio
async def test_real_signal_is_delivered_on_the_event_loop() -> None:
    received: list[str] = []
    monitor = InterruptMonitor(on_interrupt=received.append)

    with monitor.watch():
        os.kill(os.getpid(), signal.SIGINT)
        for _ in range(100):
            if received:
                break
            await asyncio.sleep(0.01)

    assert received == ["SIGINT"]


@pytest.mark.asyncio
async def test_watch_removes_handlers() -> None:
    monitor = InterruptMonitor()
    loop = asyncio.get_running_loop()
    with monitor.watch():
        pass
    assert not loop.remove_signal_handler(signal.SIGINT)
