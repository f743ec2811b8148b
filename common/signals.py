"""Close the run's channels when an interceptable termination signal arrives.

Only SIGINT, SIGTERM and SIGHUP are registered. SIGKILL and SIGSTOP can never
be caught, so a process stopped that way leaves its handles to the kernel,
which releases them on exit; the queue names are already unlinked by then.
"""

from __future__ import annotations

import logging
import os
import signal
from types import FrameType
from typing import Any, Callable, Iterable

from channels.message_queue import ChannelCloseError, ChannelPair
from common.reporting import flush_stdio
from config.defaults import EXIT_FAILURE, EXIT_SUCCESS

INTERCEPTED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)

ExitFn = Callable[[int], Any]

logger = logging.getLogger(__name__)


class SignalCleanup:
    def __init__(
        self,
        exit_fn: ExitFn = os._exit,
        signals: Iterable[signal.Signals] = INTERCEPTED_SIGNALS,
        reporter: Callable[[str], None] | None = None,
    ) -> None:
        self._exit = exit_fn
        self._signals = tuple(signals)
        self._reporter = reporter
        self._previous: dict[signal.Signals, Any] = {}
        self.channels: ChannelPair | None = None

    def attach(self, channels: ChannelPair) -> None:
        self.channels = channels

    def install(self) -> None:
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self.handle)

    def restore(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()

    def handle(self, signum: int, _frame: FrameType | None = None) -> None:
        logger.warning("received %s, closing channels", signal.Signals(signum).name)
        status = EXIT_SUCCESS
        if self.channels is not None:
            try:
                self.channels.close()
            except ChannelCloseError as exc:
                if self._reporter is not None:
                    self._reporter(f"signal cleanup failed: {exc}")
                status = EXIT_FAILURE
        flush_stdio()
        self._exit(status)
