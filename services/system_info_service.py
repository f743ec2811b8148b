"""OS information lookups used by the dispatcher builtins.

Each lookup returns a ``SystemInfoResult``. A failed lookup is not an error for
the caller: ``text`` then carries the OS's description of the failure and is
sent back to the client in place of the value.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import errno
import os
import socket
from dataclasses import dataclass

from protocol.messages import format_uname

_NAME_BUFFER_SIZE = 256


@dataclass(frozen=True)
class SystemInfoResult:
    ok: bool
    text: str


def _load_libc() -> ctypes.CDLL:
    path = ctypes.util.find_library("c")
    return ctypes.CDLL(path, use_errno=True)


def _describe(exc: OSError) -> str:
    if exc.errno is not None:
        return os.strerror(exc.errno)
    return str(exc)


def get_domain_name() -> SystemInfoResult:
    try:
        return SystemInfoResult(True, _read_domain_name())
    except OSError as exc:
        return SystemInfoResult(False, _describe(exc))


def _read_domain_name() -> str:
    libc = _load_libc()
    getdomainname = getattr(libc, "getdomainname", None)
    if getdomainname is None:
        raise OSError(errno.ENOSYS, os.strerror(errno.ENOSYS))
    buf = ctypes.create_string_buffer(_NAME_BUFFER_SIZE)
    if getdomainname(buf, ctypes.c_size_t(_NAME_BUFFER_SIZE)) == -1:
        err = ctypes.get_errno()
        raise OSError(err, os.strerror(err))
    return buf.value.decode("utf-8", errors="replace")


def get_host_name() -> SystemInfoResult:
    try:
        return SystemInfoResult(True, socket.gethostname())
    except OSError as exc:
        return SystemInfoResult(False, _describe(exc))


def get_uname() -> SystemInfoResult:
    try:
        info = os.uname()
    except OSError as exc:
        return SystemInfoResult(False, _describe(exc))
    domain = get_domain_name()
    text = format_uname(
        info.sysname,
        info.nodename,
        info.release,
        info.version,
        info.machine,
        domain.text if domain.ok else "(unavailable)",
    )
    return SystemInfoResult(True, text)
