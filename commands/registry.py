"""Declarative command registry and dispatcher."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from commands.runtime import CommandRuntime, RuntimeConfig
from commands.schemas import CommandSpec
from protocol.command_ids import CommandKind
from protocol.messages import format_unknown_command, truncate_utf8
from services.system_info_service import SystemInfoResult

CommandHandler = Callable[["DispatchContext", str], str]
InfoLookup = Callable[[], SystemInfoResult]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchContext:
    max_message_size: int
    get_domain_name: InfoLookup
    get_host_name: InfoLookup
    get_uname: InfoLookup


@dataclass(frozen=True)
class RegisteredCommand:
    spec: CommandSpec
    handler: CommandHandler


@dataclass(frozen=True)
class DispatchResult:
    kind: CommandKind
    text: str
    stop: bool = False


class CommandDispatcher:
    def __init__(self, context: DispatchContext, logger: Callable[[str], None] | None = None) -> None:
        self._context = context
        self._registry: dict[str, RegisteredCommand] = {}
        self._runtime = CommandRuntime(RuntimeConfig(logger=logger or _log_error))

    @property
    def context(self) -> DispatchContext:
        return self._context

    def register(self, spec: CommandSpec, handler: CommandHandler) -> None:
        if spec.name in self._registry:
            raise ValueError(f"duplicate command: {spec.name}")
        self._registry[spec.name] = RegisteredCommand(spec=spec, handler=handler)

    def classify(self, text: str) -> CommandKind:
        # Exact match only: no trimming, no case folding.
        registered = self._registry.get(text)
        if registered is None:
            return CommandKind.UNKNOWN
        return registered.spec.kind

    def dispatch(self, text: str) -> DispatchResult:
        limit = self._context.max_message_size
        if self.classify(text) is CommandKind.UNKNOWN:
            return DispatchResult(CommandKind.UNKNOWN, format_unknown_command(text, limit))

        registered = self._registry[text]
        reply = self._runtime.run(text, lambda: registered.handler(self._context, text))
        fitted = truncate_utf8(reply, limit)
        if fitted != reply:
            logger.warning("response to %r truncated to %d bytes", text, limit)
        return DispatchResult(registered.spec.kind, fitted, stop=registered.spec.ends_session)

    def render_help(self) -> str:
        lines = ["Available Commands:"]
        for item in self._registry.values():
            lines.append(item.spec.help_line())
        return "\n".join(lines)

    def list_commands(self) -> list[CommandSpec]:
        return [item.spec for item in self._registry.values()]


def _log_error(message: str) -> None:
    logger.error("%s", message)
