"""Load command modules into dispatcher."""

from commands.builtins import BUILTIN_MODULES
from commands.registry import CommandDispatcher, DispatchContext
from services import system_info_service


def load_builtin_commands(dispatcher: CommandDispatcher) -> None:
    for module in BUILTIN_MODULES:
        module.register(dispatcher)


def build_dispatcher(max_message_size: int) -> CommandDispatcher:
    dispatcher = CommandDispatcher(
        DispatchContext(
            max_message_size=max_message_size,
            get_domain_name=system_info_service.get_domain_name,
            get_host_name=system_info_service.get_host_name,
            get_uname=system_info_service.get_uname,
        )
    )
    load_builtin_commands(dispatcher)
    return dispatcher
