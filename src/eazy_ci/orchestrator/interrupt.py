"""Routes external interrupt signals into the session's cleanup path."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
import signal


@dataclass
class InterruptMonitor:
    """Listens for SIGINT/SIGTERM on the pipeline's own event loop.

    Handlers are installed with ``loop.add_signal_handler`` so the callback
    runs in the same execution context as the pipeline, never concurrently
    with it. Only the first signal is forwarded to ``on_interrupt``.
    """

    on_interrupt: Callable[[str], None] | None = None
    signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)
    _interrupted: bool = field(default=False, init=False)
    _signal_name: str | None = field(default=None, init=False)
    _loop: asyncio.AbstractEventLoop | None = field(default=None, init=False)
    _installed: list[signal.Signals] = field(default_factory=list, init=False)

    def activate(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        for sig in self.signals:
            self._loop.add_signal_handler(sig, self._handle, sig)
            self._installed.append(sig)

    def deactivate(self) -> None:
        if self._loop is None:
            return
        for sig in self._installed:
            self._loop.remove_signal_handler(sig)
        self._installed.clear()
        self._loop = None

    def trigger(self, signal_name: str = "SIGINT") -> None:
        self._notify(signal_name)

    def is_interrupted(self) -> bool:
        return self._interrupted

    @property
    def signal_name(self) -> str | None:
        return self._signal_name

    def _handle(self, signum: signal.Signals) -> None:
        self._notify(signal.Signals(signum).name)

    def _notify(self, signal_name: str) -> None:
        if self._interrupted:
            return
        self._interrupted = True
        self._signal_name = signal_name
        if self.on_interrupt is not None:
            self.on_interrupt(signal_name)

    @contextmanager
    def watch(
        self, loop: asyncio.AbstractEventLoop | None = None
    ) -> Iterator[InterruptMonitor]:
        try:
            self.activate(loop)
            yield self
        finally:
            self.deactivate()
