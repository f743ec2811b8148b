#!/usr/bin/env python3
"""Remove leftovers of crashed gateway runs on Linux hosts."""

from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from channels.message_queue import ChannelUnavailable, unlink  # noqa: E402
from config.defaults import COMMAND_QUEUE_PREFIX, RESPONSE_QUEUE_PREFIX  # noqa: E402

DEFAULT_MQUEUE_DIR = Path("/dev/mqueue")
DEFAULT_PATTERNS = [
    "app.main",
    "mq-gateway",
]


_PKILL_OUTCOMES = {0: "killed", 1: "no match"}


def _pkill(pattern: str, *, dry_run: bool) -> int | None:
    """Run ``pkill -f pattern``; ``None`` when only planned."""
    cmd = ["pkill", "-f", pattern]
    if dry_run:
        print(f"[reset] would run: {shlex.join(cmd)}")
        return None
    print(f"[reset] running: {shlex.join(cmd)}")
    proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    for output in (proc.stdout, proc.stderr):
        if output.strip():
            print(f"[reset]   {output.strip()}")
    return proc.returncode


def find_stale_queues(mqueue_dir: Path, prefixes: list[str]) -> list[str]:
    """Queue names under ``mqueue_dir`` that start with one of ``prefixes``."""
    if not mqueue_dir.is_dir():
        return []
    bare = [prefix.lstrip("/") for prefix in prefixes]
    names = [f"/{entry.name}" for entry in mqueue_dir.iterdir() if any(entry.name.startswith(p) for p in bare)]
    return sorted(names)


def _kill_residual_processes(patterns: list[str], dry_run: bool) -> None:
    print("[reset] step: kill residual gateway processes")
    for pattern in patterns:
        rc = _pkill(pattern, dry_run=dry_run)
        if rc is None:
            continue
        outcome = _PKILL_OUTCOMES.get(rc, f"pkill failed rc={rc}")
        print(f"[reset] {pattern}: {outcome}")


def _unlink_stale_queues(mqueue_dir: Path, prefixes: list[str], dry_run: bool) -> int:
    print("[reset] step: unlink stale message queues")
    failures = 0
    names = find_stale_queues(mqueue_dir, prefixes)
    if not names:
        print(f"[reset] no stale queues under {mqueue_dir}")
    for name in names:
        if dry_run:
            print(f"[reset] planned unlink: {name}")
            continue
        try:
            unlink(name)
        except ChannelUnavailable as exc:
            failures += 1
            print(f"[reset] {exc}")
            continue
        print(f"[reset] unlinked: {name}")
    return failures


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reset message queue gateway runtime state")
    parser.add_argument("--mqueue-dir", type=Path, default=DEFAULT_MQUEUE_DIR, help="mqueue filesystem mount point")
    parser.add_argument(
        "--prefix",
        action="append",
        default=[],
        help="Additional queue name prefix to remove (repeatable)",
    )
    parser.add_argument(
        "--pattern",
        action="append",
        default=[],
        help="Additional pkill -f match pattern (repeatable)",
    )
    parser.add_argument("--skip-kill", action="store_true", help="Skip process cleanup")
    parser.add_argument("--dry-run", action="store_true", help="Print actions without executing")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if not args.skip_kill:
        _kill_residual_processes([*DEFAULT_PATTERNS, *args.pattern], args.dry_run)
    prefixes = [COMMAND_QUEUE_PREFIX, RESPONSE_QUEUE_PREFIX, *args.prefix]
    failures = _unlink_stale_queues(args.mqueue_dir, prefixes, args.dry_run)
    return 0 if failures == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
