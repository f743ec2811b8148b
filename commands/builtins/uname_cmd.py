from __future__ import annotations

import logging

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_GET_UNAME, CommandKind

SPEC = CommandSpec(
    name=CMD_GET_UNAME,
    kind=CommandKind.GET_UNAME,
    summary="get the system Unix name and print it to the console",
)

logger = logging.getLogger(__name__)


def register(dispatcher: CommandDispatcher) -> None:
    def _handler(context: DispatchContext, _command: str) -> str:
        result = context.get_uname()
        if not result.ok:
            logger.info("uname lookup failed: %s", result.text)
        return result.text

    dispatcher.register(SPEC, _handler)
