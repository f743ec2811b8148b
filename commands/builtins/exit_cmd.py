from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_EXIT, CommandKind
from protocol.messages import MESSAGE_EXIT

SPEC = CommandSpec(
    name=CMD_EXIT,
    kind=CommandKind.EXIT,
    summary="exit the application",
    ends_session=True,
)


def register(dispatcher: CommandDispatcher) -> None:
    def _handler(_context: DispatchContext, _command: str) -> str:
        return MESSAGE_EXIT

    dispatcher.register(SPEC, _handler)
