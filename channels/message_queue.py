"""Bounded POSIX message queue channels shared by the server and client roles."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import posix_ipc

from config.defaults import (
    COMMAND_QUEUE_PREFIX,
    QUEUE_MAX_MESSAGES,
    QUEUE_MESSAGE_PRIORITY,
    QUEUE_MESSAGE_SIZE,
    QUEUE_PERMISSIONS,
    RESPONSE_QUEUE_PREFIX,
)
from protocol.messages import MessageTooLarge, decode_message, encode_message

# Room for the unknown-command wrapper plus a few bytes of input.
MIN_MESSAGE_SIZE = 32

logger = logging.getLogger(__name__)


class ChannelError(Exception):
    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message


class ChannelUnavailable(ChannelError):
    """The queue could not be created, opened, or unlinked."""


class ChannelIOError(ChannelError):
    """A send or receive on an open queue failed."""


class ChannelTimeout(ChannelIOError):
    pass


class ChannelCloseError(ChannelError):
    pass


@dataclass(frozen=True)
class ChannelConfig:
    command_name: str
    response_name: str
    max_messages: int = QUEUE_MAX_MESSAGES
    max_message_size: int = QUEUE_MESSAGE_SIZE
    permissions: int = QUEUE_PERMISSIONS
    priority: int = QUEUE_MESSAGE_PRIORITY
    timeout_sec: float | None = None

    def __post_init__(self) -> None:
        for name in (self.command_name, self.response_name):
            if not name.startswith("/") or "/" in name[1:]:
                raise ValueError(f"queue name must look like /name: {name!r}")
        if self.command_name == self.response_name:
            raise ValueError("command and response queues need distinct names")
        if self.max_messages < 1:
            raise ValueError("max_messages must be >= 1")
        if self.max_message_size < MIN_MESSAGE_SIZE:
            raise ValueError(f"max_message_size must be >= {MIN_MESSAGE_SIZE}")
        if self.timeout_sec is not None and self.timeout_sec < 0:
            raise ValueError("timeout_sec must be >= 0")

    @classmethod
    def for_process(cls, pid: int | None = None, **overrides: object) -> "ChannelConfig":
        pid = os.getpid() if pid is None else pid
        values: dict[str, object] = {
            "command_name": f"{COMMAND_QUEUE_PREFIX}_{pid}",
            "response_name": f"{RESPONSE_QUEUE_PREFIX}_{pid}",
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]


class Channel:
    def __init__(self, name: str, queue: posix_ipc.MessageQueue, config: ChannelConfig) -> None:
        self.name = name
        self._queue = queue
        self._config = config
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def max_message_size(self) -> int:
        return self._config.max_message_size

    def send(self, text: str) -> None:
        if self._closed:
            raise ChannelIOError(self.name, "send on closed channel")
        raw = encode_message(text, self._config.max_message_size)
        try:
            self._queue.send(raw, timeout=self._config.timeout_sec, priority=self._config.priority)
        except posix_ipc.BusyError as exc:
            raise ChannelTimeout(self.name, f"send timed out after {self._config.timeout_sec}s") from exc
        except (posix_ipc.Error, OSError, ValueError) as exc:
            raise ChannelIOError(self.name, f"send failed: {exc}") from exc

    def receive(self) -> str:
        if self._closed:
            raise ChannelIOError(self.name, "receive on closed channel")
        try:
            raw, _priority = self._queue.receive(timeout=self._config.timeout_sec)
        except posix_ipc.BusyError as exc:
            raise ChannelTimeout(self.name, f"receive timed out after {self._config.timeout_sec}s") from exc
        except (posix_ipc.Error, OSError, ValueError) as exc:
            raise ChannelIOError(self.name, f"receive failed: {exc}") from exc
        return decode_message(raw)

    def unlink(self) -> None:
        unlink(self.name)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.close()
        except (posix_ipc.Error, OSError) as exc:
            raise ChannelCloseError(self.name, f"close failed: {exc}") from exc
        logger.debug("closed channel %s", self.name)


def open_or_create(name: str, config: ChannelConfig) -> Channel:
    try:
        queue = posix_ipc.MessageQueue(
            name,
            flags=posix_ipc.O_CREAT,
            mode=config.permissions,
            max_messages=config.max_messages,
            max_message_size=config.max_message_size,
            read=True,
            write=True,
        )
    except (posix_ipc.Error, OSError, ValueError) as exc:
        raise ChannelUnavailable(name, f"open failed: {exc}") from exc
    logger.debug(
        "opened channel %s (max_messages=%d, max_message_size=%d)",
        name,
        config.max_messages,
        config.max_message_size,
    )
    return Channel(name, queue, config)


def unlink(name: str) -> None:
    try:
        posix_ipc.unlink_message_queue(name)
    except (posix_ipc.Error, OSError) as exc:
        raise ChannelUnavailable(name, f"unlink failed: {exc}") from exc
    logger.debug("unlinked channel %s", name)


@dataclass
class ChannelPair:
    """Both channels of one run, passed explicitly to each role."""

    command: Channel
    response: Channel

    @property
    def max_message_size(self) -> int:
        return self.command.max_message_size

    def close(self) -> None:
        """Close both handles; raise the first failure after trying both."""
        failure: ChannelCloseError | None = None
        for channel in (self.command, self.response):
            try:
                channel.close()
            except ChannelCloseError as exc:
                logger.error("%s", exc)
                failure = failure or exc
        if failure is not None:
            raise failure


def open_channel_pair(config: ChannelConfig) -> ChannelPair:
    command = open_or_create(config.command_name, config)
    try:
        response = open_or_create(config.response_name, config)
    except ChannelUnavailable:
        _discard(command, unlink_name=True)
        raise

    pair = ChannelPair(command=command, response=response)
    # Names go away right after both ends are open; the handles stay usable.
    unlinked: list[str] = []
    try:
        for channel in (command, response):
            channel.unlink()
            unlinked.append(channel.name)
    except ChannelUnavailable:
        for channel in (command, response):
            _discard(channel, unlink_name=channel.name not in unlinked)
        raise
    return pair


def _discard(channel: Channel, *, unlink_name: bool) -> None:
    try:
        channel.close()
    except ChannelCloseError as exc:
        logger.error("%s", exc)
    if not unlink_name:
        return
    try:
        channel.unlink()
    except ChannelUnavailable as exc:
        logger.error("%s", exc)


__all__ = [
    "Channel",
    "ChannelCloseError",
    "ChannelConfig",
    "ChannelError",
    "ChannelIOError",
    "ChannelPair",
    "ChannelTimeout",
    "ChannelUnavailable",
    "MessageTooLarge",
    "open_channel_pair",
    "open_or_create",
    "unlink",
]
