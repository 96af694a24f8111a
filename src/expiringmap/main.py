#!/usr/bin/env python3
# ./src/expiringmap/main.py
"""Command-line interface for ExpiringMap.

Run via ``expiringmap`` (console script) or ``python -m expiringmap.main``.
Inputs: CLI command, optional ``--config`` JSON path, JSON-lines operations on stdin for ``replay``.
Outputs: JSON printed to stdout; errors on stderr with exit status 2.
Side effects: none beyond reading config files and stdin.
Operational notes: ``replay`` drives the map with a manual clock, so runs are deterministic.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from .expiring import ExpiringMap, build_map
from .utils.clock import ManualClock
from .utils.config import load_config

_Op = Callable[[ExpiringMap, Dict[str, Any]], Any]

_OPS: Dict[str, _Op] = {
    "put": lambda m, step: m.put(step["key"], step.get("value")),
    "get": lambda m, step: m.get(step["key"]),
    "remove": lambda m, step: m.remove(step["key"]),
    "contains_key": lambda m, step: m.contains_key(step["key"]),
    "contains_value": lambda m, step: m.contains_value(step.get("value")),
    "size": lambda m, _step: m.size(),
    "is_empty": lambda m, _step: m.is_empty(),
    "clear": lambda m, _step: m.clear(),
    "keys": lambda m, _step: list(m.key_set()),
    "values": lambda m, _step: list(m.values()),
    "items": lambda m, _step: [list(item) for item in m.entry_set()],
    "expired_get": lambda m, step: m.expired_get(step["key"]),
    "expired_remove": lambda m, step: m.expired_remove(step["key"]),
    "expired_clear": lambda m, _step: m.expired_clear(),
    "expired_keys": lambda m, _step: list(m.expired_key_set()),
    "expired_values": lambda m, _step: list(m.expired_values()),
    "expired_items": lambda m, _step: [list(item) for item in m.expired_entry_set()],
    "expired_size": lambda m, _step: m.expired_size(),
    "expired_is_empty": lambda m, _step: m.expired_is_empty(),
    "sweep": lambda m, _step: m.sweep(),
}


class ReplayError(ValueError):
    """Raised for malformed replay input."""


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def _parse_steps(stream: TextIO) -> List[Dict[str, Any]]:
    steps: List[Dict[str, Any]] = []
    for lineno, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            step = json.loads(line)
        except ValueError as err:
            raise ReplayError(f"line {lineno}: invalid JSON") from err
        if not isinstance(step, dict):
            raise ReplayError(f"line {lineno}: expected a JSON object")
        if step.get("op") not in _OPS:
            raise ReplayError(f"line {lineno}: unknown op {step.get('op')!r}")
        if "key" in step and isinstance(step["key"], list):
            step["key"] = tuple(step["key"])
        steps.append(step)
    return steps


def replay(
    stream: TextIO,
    ttl_seconds: Optional[float] = None,
    config_path: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Run JSON-lines operations against a fresh map on a manual clock."""
    steps = _parse_steps(stream)
    cfg = load_config(config_path)
    if ttl_seconds is not None:
        cfg.ttl_seconds = ttl_seconds

    clock = ManualClock()
    expiring = build_map(clock=clock, cfg=cfg)

    results: List[Dict[str, Any]] = []
    for step in steps:
        at = step.get("at", 0)
        try:
            clock.set(at)
        except (TypeError, ValueError, OverflowError) as err:
            raise ReplayError(f"op {step['op']!r} at {at!r}: {err}") from err
        try:
            result = _OPS[step["op"]](expiring, step)
        except KeyError as err:
            raise ReplayError(f"op {step['op']!r} requires field {err}") from err
        except TypeError as err:
            raise ReplayError(f"op {step['op']!r}: {err}") from err
        results.append({"at": at, "op": step["op"], "result": result})
    return results


def _cli() -> int:
    parser = argparse.ArgumentParser(
        prog="expiringmap",
        description="TTL map with an inspectable expired store",
    )
    parser.add_argument("--config", help="Path to config.json", default=None)
    subcommands = parser.add_subparsers(dest="cmd", required=True)

    subcommands.add_parser("config", help="Print the effective configuration")

    replay_parser = subcommands.add_parser(
        "replay", help="Replay JSON-lines operations from stdin"
    )
    replay_parser.add_argument(
        "--ttl", type=float, default=None, help="TTL in seconds (overrides config)"
    )

    args = parser.parse_args()

    if args.cmd == "config":
        print(_to_json(dataclasses.asdict(load_config(args.config))))
    elif args.cmd == "replay":
        try:
            results = replay(sys.stdin, ttl_seconds=args.ttl, config_path=args.config)
        except ValueError as err:
            print(f"expiringmap: {err}", file=sys.stderr)
            return 2
        print(_to_json(results))

    return 0


if __name__ == "__main__":
    raise SystemExit(_cli())
