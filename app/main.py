"""Command gateway entrypoint: open the queues, fork, run both roles."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from channels.message_queue import ChannelConfig, ChannelPair, ChannelUnavailable, open_channel_pair  # noqa: E402
from client.interactive_flow import run_client  # noqa: E402
from client.prompting import make_line_reader  # noqa: E402
from common.reporting import make_reporters  # noqa: E402
from common.signals import SignalCleanup  # noqa: E402
from config.defaults import (  # noqa: E402
    DEFAULT_LOG_LEVEL,
    EXIT_FAILURE,
    QUEUE_MAX_MESSAGES,
    QUEUE_MESSAGE_PRIORITY,
    QUEUE_MESSAGE_SIZE,
)
from server.dispatch_loop import run_server  # noqa: E402
from supervisor.process import Role, spawn  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Two-process command gateway over POSIX message queues")
    parser.add_argument("--command-queue", default=None, help="Command queue name, e.g. /gw_command (default: per-run)")
    parser.add_argument("--response-queue", default=None, help="Response queue name (default: per-run)")
    parser.add_argument("--max-messages", type=int, default=QUEUE_MAX_MESSAGES, help="Queue capacity in messages")
    parser.add_argument("--message-size", type=int, default=QUEUE_MESSAGE_SIZE, help="Max message size in bytes")
    parser.add_argument("--priority", type=int, default=QUEUE_MESSAGE_PRIORITY, help="Priority of every sent message")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Fail a send/receive after this many seconds (default: block forever)",
    )
    parser.add_argument("--fancy-prompt", action="store_true", help="Use an InquirerPy prompt when stdin is a TTY")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ChannelConfig:
    return ChannelConfig.for_process(
        command_name=args.command_queue,
        response_name=args.response_queue,
        max_messages=args.max_messages,
        max_message_size=args.message_size,
        priority=args.priority,
        timeout_sec=args.timeout,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )
    reporters = make_reporters()

    # Installed before the queues exist; the handler only closes attached handles.
    cleanup = SignalCleanup(reporter=reporters.error)
    cleanup.install()

    try:
        config = build_config(args)
    except ValueError as exc:
        reporters.error(f"invalid queue configuration: {exc}")
        return EXIT_FAILURE

    try:
        channels = open_channel_pair(config)
    except ChannelUnavailable as exc:
        reporters.error(f"unable to open message queues: {exc}")
        return EXIT_FAILURE
    cleanup.attach(channels)

    def _server(pair: ChannelPair, client_pid: int) -> int:
        return run_server(pair, client_pid, reporters=reporters)

    def _client(pair: ChannelPair, server_pid: int) -> int:
        reader = make_line_reader(reporters.prompt, fancy=args.fancy_prompt)
        return run_client(pair, server_pid, read_line=reader, reporters=reporters)

    return spawn(channels, {Role.SERVER: _server, Role.CLIENT: _client})


def run() -> int:
    return main()


if __name__ == "__main__":
    raise SystemExit(run())
