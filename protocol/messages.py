"""Message codec and bounded text helpers for the queue protocol.

Messages are UTF-8 text. Bytes typed at the terminal that are not valid UTF-8
are sent unchanged and show up as U+FFFD once decoded. Every payload must fit
the channel's ``max_message_size``; the helpers here either refuse oversized
text (``encode_message``) or cut it on a character boundary (``truncate_utf8``).
"""

from __future__ import annotations

from typing import Final

MESSAGE_HELP: Final = (
    "Available Commands:\n"
    " > getdomainname - get the system domain name and print it to the console\n"
    " > gethostname - get the system host name and print it to the console\n"
    " > uname - get the system Unix name and print it to the console\n"
    " > help - gets this help message and prints it to the console\n"
    " > exit - exit the application"
)
MESSAGE_EXIT: Final = "Goodbye!"
MESSAGE_UNKNOWN_PREFIX: Final = 'Unknown command: "'
MESSAGE_UNKNOWN_SUFFIX: Final = '"'
MESSAGE_UNAME: Final = (
    " System: {sysname}\n"
    "   Node: {nodename}\n"
    "Release: {release}\n"
    "Version: {version}\n"
    "Machine: {machine}\n"
    " Domain: {domainname}"
)

ENCODING: Final = "utf-8"
# Bytes that are not valid UTF-8 travel as lone surrogates and go out unchanged.
ENCODE_ERRORS: Final = "surrogateescape"


class MessageTooLarge(ValueError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"message of {size} bytes exceeds the {limit} byte limit")
        self.size = size
        self.limit = limit


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def truncate_utf8(text: str, limit: int) -> str:
    """Return the longest prefix of ``text`` whose UTF-8 form fits ``limit`` bytes."""
    if limit < 0:
        raise ValueError("limit must be >= 0")
    raw = text.encode(ENCODING, errors=ENCODE_ERRORS)
    if len(raw) <= limit:
        return text
    cut = limit
    while cut > 0 and limit - cut < 3 and _is_continuation(raw[cut]):
        cut -= 1
    return raw[:cut].decode(ENCODING, errors=ENCODE_ERRORS)


def encode_message(text: str, max_size: int) -> bytes:
    raw = text.encode(ENCODING, errors=ENCODE_ERRORS)
    if len(raw) > max_size:
        raise MessageTooLarge(len(raw), max_size)
    return raw


def decode_message(raw: bytes | bytearray | memoryview | str) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, memoryview):
        raw = raw.tobytes()
    # Peers writing whole fixed-size buffers pad with NUL after the text.
    payload = bytes(raw).split(b"\0", 1)[0]
    return payload.decode(ENCODING, errors="replace")


def format_unknown_command(command: str, max_size: int) -> str:
    wrapper_size = len((MESSAGE_UNKNOWN_PREFIX + MESSAGE_UNKNOWN_SUFFIX).encode(ENCODING))
    if max_size < wrapper_size:
        raise ValueError(f"max_size {max_size} cannot hold the unknown command wrapper")
    body = truncate_utf8(command, max_size - wrapper_size)
    return f"{MESSAGE_UNKNOWN_PREFIX}{body}{MESSAGE_UNKNOWN_SUFFIX}"


def format_uname(
    sysname: str,
    nodename: str,
    release: str,
    version: str,
    machine: str,
    domainname: str,
) -> str:
    return MESSAGE_UNAME.format(
        sysname=sysname,
        nodename=nodename,
        release=release,
        version=version,
        machine=machine,
        domainname=domainname,
    )
