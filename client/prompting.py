"""Line readers for the interactive client.

A reader shows the prompt, reads one command line and returns it without the
line terminator, or ``None`` at end of input.
"""

from __future__ import annotations

import io
import sys
from typing import Callable, TextIO

from InquirerPy.resolver import prompt

from common.reporting import Reporter

LineReader = Callable[[str], "str | None"]


def ask_text(message: str, default: str = "") -> str | None:
    try:
        answers = prompt(
            [
                {
                    "type": "input",
                    "name": "value",
                    "message": message,
                    "default": default,
                }
            ],
            raise_keyboard_interrupt=False,
        )
    except EOFError:
        return None
    value = answers.get("value")
    if value is None:
        return None
    return str(value)


def stream_reader(stream: TextIO, show_prompt: Reporter) -> LineReader:
    def _read(message: str) -> str | None:
        show_prompt(message)
        line = stream.readline()
        if line == "":
            return None
        return line[:-1] if line.endswith("\n") else line

    return _read


def inquirer_reader() -> LineReader:
    def _read(message: str) -> str | None:
        return ask_text(message.rstrip().rstrip(":"))

    return _read


def tolerate_invalid_bytes(stream: TextIO) -> TextIO:
    """Make ``stream`` hand back undecodable input bytes as lone surrogates."""
    if isinstance(stream, io.TextIOWrapper) and stream.errors != "surrogateescape":
        stream.reconfigure(encoding="utf-8", errors="surrogateescape")
    return stream


def make_line_reader(show_prompt: Reporter, *, fancy: bool = False, stream: TextIO | None = None) -> LineReader:
    stream = tolerate_invalid_bytes(stream or sys.stdin)
    if fancy and stream.isatty():
        return inquirer_reader()
    return stream_reader(stream, show_prompt)
