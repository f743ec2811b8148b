"""Console reporters built on rich."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from rich.console import Console

Reporter = Callable[[str], None]


@dataclass(frozen=True)
class ConsoleReporters:
    out: Reporter
    prompt: Reporter
    error: Reporter


def make_console(file: TextIO | None = None, *, stderr: bool = False) -> Console:
    # Responses are printed verbatim: no markup, highlighting, emoji or wrapping.
    return Console(
        file=file,
        stderr=stderr,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def make_reporters(stdout: TextIO | None = None, stderr: TextIO | None = None) -> ConsoleReporters:
    console = make_console(stdout)
    err_console = make_console(stderr, stderr=stderr is None)

    def out(message: str) -> None:
        console.print(message)

    def prompt(message: str) -> None:
        console.print(message, end="")
        console.file.flush()

    def error(message: str) -> None:
        err_console.print(message, style="bold red")

    return ConsoleReporters(out=out, prompt=prompt, error=error)


def flush_stdio() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            continue
