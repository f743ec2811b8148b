"""Schema for declarative command registration."""

from __future__ import annotations

from dataclasses import dataclass

from protocol.command_ids import CommandKind


@dataclass(frozen=True)
class CommandSpec:
    name: str
    kind: CommandKind
    summary: str
    ends_session: bool = False

    def help_line(self) -> str:
        return f" > {self.name} - {self.summary}"
