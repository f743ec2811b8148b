"""Fork the server and client roles and keep the pair free of zombies.

The parent process runs the server role and the forked child runs the client
role. Both inherit the already-open ``ChannelPair``. Any fatal error in either
role goes through ``abort_role``: close this process's handles, then kill and
reap the sibling.
"""

from __future__ import annotations

import logging
import os
import signal
from enum import Enum
from typing import Callable, Mapping

from channels.message_queue import ChannelCloseError, ChannelPair
from common.reporting import flush_stdio
from config.defaults import EXIT_FAILURE, EXIT_SUCCESS

RoleEntry = Callable[[ChannelPair, int], int]

logger = logging.getLogger(__name__)


class Role(str, Enum):
    SERVER = "server"
    CLIENT = "client"


def spawn(channels: ChannelPair, entries: Mapping[Role, RoleEntry]) -> int:
    """Fork and run both roles; returns the server's exit status in the parent.

    The child never returns from this call.
    """
    parent_pid = os.getpid()
    flush_stdio()
    try:
        child_pid = os.fork()
    except OSError as exc:
        logger.error("fork failed: %s", exc)
        release(channels)
        return EXIT_FAILURE

    if child_pid == 0:
        status = EXIT_FAILURE
        try:
            status = run_role(Role.CLIENT, entries, channels, parent_pid)
        finally:
            flush_stdio()
            os._exit(status)

    logger.debug("spawned client process %d", child_pid)
    return run_role(Role.SERVER, entries, channels, child_pid)


def run_role(role: Role, entries: Mapping[Role, RoleEntry], channels: ChannelPair, peer_pid: int) -> int:
    entry = entries[role]
    try:
        return entry(channels, peer_pid)
    except Exception:  # noqa: BLE001
        logger.exception("%s role crashed", role.value)
        return abort_role(channels, peer_pid)


def abort_role(channels: ChannelPair, peer_pid: int) -> int:
    release(channels)
    terminate_and_reap(peer_pid)
    return EXIT_FAILURE


def release(channels: ChannelPair) -> int:
    try:
        channels.close()
    except ChannelCloseError:
        return EXIT_FAILURE
    return EXIT_SUCCESS


def terminate_and_reap(pid: int) -> None:
    """Send SIGKILL to ``pid`` and wait for it; failures are logged only."""
    try:
        os.kill(pid, signal.SIGKILL)
    except OSError as exc:
        logger.error("kill(%d) failed: %s", pid, exc)
    try:
        os.waitpid(pid, 0)
    except ChildProcessError:
        # The client's peer is its parent, which only init can reap.
        logger.warning("process %d is not a child of %d; not waiting", pid, os.getpid())
    except OSError as exc:
        logger.error("unable to wait for process (%d) to exit: %s", pid, exc)


def wait_for_peer(pid: int) -> int | None:
    """Block until ``pid`` exits and return its exit code.

    If waiting fails the process is force-killed and ``None`` is returned.
    """
    try:
        _, status = os.waitpid(pid, 0)
    except OSError as exc:
        logger.error("unable to wait for process (%d) to exit: %s", pid, exc)
        terminate_and_reap(pid)
        return None
    code = os.waitstatus_to_exitcode(status)
    if code != EXIT_SUCCESS:
        logger.warning("process %d exited with status %d", pid, code)
    return code
