from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_GET_HOST_NAME, CommandKind

SPEC = CommandSpec(
    name=CMD_GET_HOST_NAME,
    kind=CommandKind.GET_HOST_NAME,
    summary="get the system host name and print it to the console",
)


def register(dispatcher: CommandDispatcher) -> None:
    def _handler(context: DispatchContext, _command: str) -> str:
        # On failure the text is the OS error description.
        return context.get_host_name().text

    dispatcher.register(SPEC, _handler)
