from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_GET_DOMAIN_NAME, CommandKind

SPEC = CommandSpec(
    name=CMD_GET_DOMAIN_NAME,
    kind=CommandKind.GET_DOMAIN_NAME,
    summary="get the system domain name and print it to the console",
)


def register(dispatcher: CommandDispatcher) -> None:
    def _handler(context: DispatchContext, _command: str) -> str:
        return context.get_domain_name().text

    dispatcher.register(SPEC, _handler)
