"""Unified execution runtime for registered commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

CommandCall = Callable[[], str]
Reporter = Callable[[str], None]


@dataclass(frozen=True)
class RuntimeConfig:
    logger: Reporter


class CommandRuntime:
    def __init__(self, config: RuntimeConfig) -> None:
        self._config = config

    def run(self, command: str, call: CommandCall) -> str:
        # A broken handler still owes the client exactly one response.
        try:
            return call()
        except Exception as exc:  # noqa: BLE001
            self._config.logger(f"command execution error ({command}): {type(exc).__name__}: {exc}")
            return f"{type(exc).__name__}: {exc}"
