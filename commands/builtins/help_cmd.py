from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_HELP, CommandKind

SPEC = CommandSpec(
    name=CMD_HELP,
    kind=CommandKind.HELP,
    summary="gets this help message and prints it to the console",
)


def register(dispatcher: CommandDispatcher) -> None:
    def _handler(_context: DispatchContext, _command: str) -> str:
        return dispatcher.render_help()

    dispatcher.register(SPEC, _handler)
