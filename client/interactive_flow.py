"""Client role: prompt, send one command, print its single response."""

from __future__ import annotations

import logging
from enum import Enum

from channels.message_queue import ChannelIOError, ChannelPair, MessageTooLarge
from client.prompting import LineReader, make_line_reader
from common.reporting import ConsoleReporters, make_reporters
from config.defaults import EXIT_SUCCESS, MESSAGE_PROMPT
from protocol.command_ids import CMD_EXIT
from protocol.messages import MESSAGE_HELP, truncate_utf8
from supervisor.process import abort_role, release

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    PROMPTING = "prompting"
    AWAITING_RESPONSE = "awaiting_response"
    STOPPED = "stopped"


class _PeerLost(Exception):
    pass


def run_client(
    channels: ChannelPair,
    server_pid: int,
    read_line: LineReader | None = None,
    reporters: ConsoleReporters | None = None,
) -> int:
    reporters = reporters or make_reporters()
    read_line = read_line or make_line_reader(reporters.prompt)
    limit = channels.max_message_size

    reporters.out(MESSAGE_HELP)

    state = ClientState.PROMPTING
    command = ""
    response = ""
    while state is not ClientState.STOPPED:
        line = read_line(MESSAGE_PROMPT)
        if line is None:
            try:
                _release_server(channels)
            except _PeerLost as exc:
                reporters.error(f"client: {exc}")
                return abort_role(channels, server_pid)
            break

        command = fit_command(line, limit)
        state = ClientState.AWAITING_RESPONSE
        try:
            response = _exchange(channels, command)
        except _PeerLost as exc:
            reporters.error(f"client: {exc}")
            return abort_role(channels, server_pid)
        reporters.out(response)

        state = ClientState.STOPPED if command == CMD_EXIT else ClientState.PROMPTING
        command = ""
        response = ""

    status = release(channels)
    if status != EXIT_SUCCESS:
        reporters.error("client: failed to close channels")
    return status


def fit_command(line: str, limit: int) -> str:
    command = truncate_utf8(line, limit)
    if command != line:
        logger.warning("command truncated to %d bytes", limit)
    return command


def _exchange(channels: ChannelPair, command: str) -> str:
    try:
        channels.command.send(command)
    except (ChannelIOError, MessageTooLarge) as exc:
        raise _PeerLost(str(exc)) from exc
    try:
        return channels.response.receive()
    except ChannelIOError as exc:
        raise _PeerLost(str(exc)) from exc


def _release_server(channels: ChannelPair) -> None:
    # End of input: stop the server without printing anything.
    logger.debug("end of input, sending %s", CMD_EXIT)
    _exchange(channels, CMD_EXIT)
