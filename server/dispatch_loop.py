"""Server role: answer one command with exactly one response until ``exit``."""

from __future__ import annotations

import logging
from enum import Enum

from channels.message_queue import ChannelIOError, ChannelPair, MessageTooLarge
from commands.loader import build_dispatcher
from commands.registry import CommandDispatcher
from common.reporting import ConsoleReporters, make_reporters
from config.defaults import EXIT_SUCCESS
from supervisor.process import abort_role, release, wait_for_peer

logger = logging.getLogger(__name__)


class ServerState(str, Enum):
    AWAITING_COMMAND = "awaiting_command"
    STOPPED = "stopped"


def run_server(
    channels: ChannelPair,
    client_pid: int,
    dispatcher: CommandDispatcher | None = None,
    reporters: ConsoleReporters | None = None,
) -> int:
    dispatcher = dispatcher or build_dispatcher(channels.max_message_size)
    reporters = reporters or make_reporters()

    state = ServerState.AWAITING_COMMAND
    request = ""
    response = ""
    while state is ServerState.AWAITING_COMMAND:
        try:
            request = channels.command.receive()
        except ChannelIOError as exc:
            reporters.error(f"server: {exc}")
            return abort_role(channels, client_pid)

        result = dispatcher.dispatch(request)
        response = result.text
        logger.info("command %r classified as %s", request, result.kind.value)

        try:
            channels.response.send(response)
        except (ChannelIOError, MessageTooLarge) as exc:
            reporters.error(f"server: {exc}")
            return abort_role(channels, client_pid)

        if result.stop:
            state = ServerState.STOPPED
        request = ""
        response = ""

    wait_for_peer(client_pid)
    status = release(channels)
    if status != EXIT_SUCCESS:
        reporters.error("server: failed to close channels")
    return status
