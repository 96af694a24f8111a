# ./tests/test_cli_surface.py
"""CLI command behavior tests for the argparse entrypoint.

Replay runs on a manual clock, so the real map is exercised end to end
without sleeping.

Run path: `pytest tests/test_cli_surface.py`.
Inputs: synthetic argv and JSON-lines stdin payloads.
Outputs: assertions on JSON output, stderr messages and exit codes.
"""

from __future__ import annotations

import contextlib
import io
import json
import sys
from pathlib import Path
from typing import Tuple

import pytest

from expiringmap import main as cli_mod


def _run_cli(
    monkeypatch: pytest.MonkeyPatch,
    argv: list[str],
    stdin_text: str = "",
) -> Tuple[int, str, str]:
    monkeypatch.setattr(sys, "argv", ["expiringmap", *argv])
    monkeypatch.setattr(sys, "stdin", io.StringIO(stdin_text))
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = cli_mod._cli()
    return code, out.getvalue(), err.getvalue()


def _lines(*steps: dict) -> str:
    return "\n".join(json.dumps(step) for step in steps) + "\n"


def test_cli_replay_expiry_scenario(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    stdin_text = _lines(
        {"at": 0, "op": "put", "key": "a", "value": 1},
        {"at": 0.05, "op": "get", "key": "a"},
        {"at": 0.15, "op": "get", "key": "a"},
        {"at": 0.15, "op": "expired_get", "key": "a"},
        {"at": 0.15, "op": "size"},
        {"at": 0.15, "op": "expired_size"},
        {"at": 0.15, "op": "expired_is_empty"},
    )
    code, output, _ = _run_cli(monkeypatch, ["replay", "--ttl", "0.1"], stdin_text)

    assert code == 0
    assert [row["result"] for row in json.loads(output)] == [
        None,
        1,
        None,
        1,
        0,
        1,
        True,
    ]


def test_cli_replay_reinsertion_scenario(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    stdin_text = _lines(
        {"at": 0, "op": "put", "key": "a", "value": 1},
        {"at": 0.08, "op": "put", "key": "a", "value": 2},
        {"at": 0.15, "op": "get", "key": "a"},
        {"at": 0.15, "op": "items"},
    )
    code, output, _ = _run_cli(monkeypatch, ["replay", "--ttl", "0.1"], stdin_text)

    payload = json.loads(output)
    assert code == 0
    assert payload[1]["result"] == 1
    assert payload[2] == {"at": 0.15, "op": "get", "result": 2}
    assert payload[3]["result"] == [["a", 2]]


def test_cli_replay_uses_config_ttl(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path = isolated_env / "config.json"
    config_path.write_text('{"ttl_seconds": 10}', encoding="utf-8")
    stdin_text = _lines(
        {"at": 0, "op": "put", "key": "a", "value": "x"},
        {"at": 9.5, "op": "contains_key", "key": "a"},
        {"at": 10, "op": "expired_keys"},
    )
    code, output, _ = _run_cli(
        monkeypatch, ["--config", str(config_path), "replay"], stdin_text
    )

    assert code == 0
    assert [row["result"] for row in json.loads(output)] == [None, True, ["a"]]


@pytest.mark.parametrize(
    "stdin_text, message",
    [
        (_lines({"at": 0, "op": "explode"}), "unknown op"),
        (
            _lines({"at": 1, "op": "size"}, {"at": 0, "op": "size"}),
            "backwards",
        ),
        (_lines({"at": 0, "op": "get"}), "requires field"),
        ("not json\n", "invalid JSON"),
        ('{"at": Infinity, "op": "size"}\n', "finite"),
        ('{"at": 1e300, "op": "size"}\n', "at 1e+300"),
    ],
)
def test_cli_replay_rejects_bad_input(
    isolated_env: Path,
    monkeypatch: pytest.MonkeyPatch,
    stdin_text: str,
    message: str,
) -> None:
    code, output, error = _run_cli(monkeypatch, ["replay", "--ttl", "1"], stdin_text)

    assert code == 2
    assert output == ""
    assert message in error


def test_cli_replay_rejects_non_positive_ttl(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    code, _, error = _run_cli(monkeypatch, ["replay", "--ttl", "0"], "")
    assert code == 2
    assert "positive" in error


@pytest.mark.parametrize("ttl", ["inf", "nan"])
def test_cli_replay_rejects_non_finite_ttl(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch, ttl: str
) -> None:
    code, output, error = _run_cli(monkeypatch, ["replay", "--ttl", ttl], "")
    assert code == 2
    assert output == ""
    assert "finite" in error


def test_cli_config_outputs_effective_config(
    isolated_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("EXPIRINGMAP_TTL_SECONDS", "42")
    code, output, _ = _run_cli(monkeypatch, ["config"])

    payload = json.loads(output)
    assert code == 0
    assert payload["ttl_seconds"] == 42.0
    assert payload["logger_name"] == "expiringmap"
