from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest

from delegate_kit.config import AppConfig
from delegate_kit.host import TriggerOutcome
from delegate_kit.output import RecordingSink
from delegate_kit.runtime.lifecycle import main, run_scenario


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write_config(directory: Path, text: str) -> Path:
    path = directory / "app.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_run_scenario_with_defaults() -> None:
    sink = RecordingSink()

    outcomes = run_scenario(AppConfig(), sink=sink)

    assert outcomes == [TriggerOutcome.HANDLED]
    assert sink.lines == ["echo: demo", "handled"]


def test_run_without_conformer_prints_fallback(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_config(tmp_path, "scenario:\n  conformer: none\n")

    assert main(["--config", str(cfg), "run"]) == 0
    assert capsys.readouterr().out == "no handler\n"


def test_run_is_the_default_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_config(tmp_path, "scenario:\n  label: lobby\n")

    assert main(["--config", str(cfg)]) == 0
    assert capsys.readouterr().out == "echo: lobby\nhandled\n"


def test_run_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_config(tmp_path, "scenario:\n  label: x\n")

    assert main(["--config", str(cfg), "run", "--conformer", "refusing", "--triggers", "2"]) == 0
    assert capsys.readouterr().out == "refusing: x\ndeclined\nrefusing: x\ndeclined\n"


def test_dev_profile_from_working_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    configs = tmp_path / "configs"
    configs.mkdir()
    (configs / "app.yaml").write_text("scenario:\n  conformer: echo\n  label: base\n", encoding="utf-8")
    (configs / "dev.yaml").write_text(
        "scenario:\n  conformer: counting\n  limit: 1\n  triggers: 2\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    assert main(["--profile", "dev"]) == 0
    assert capsys.readouterr().out == "count: 1\nhandled\ncount: 2\ndeclined\n"


def test_print_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_config(tmp_path, "scenario:\n  triggers: 0\n")

    assert main(["--config", str(cfg), "print-config"]) == 0
    assert json.loads(capsys.readouterr().out) == {"scenario": {"triggers": 0}}


def test_contracts_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["contracts"]) == 0

    specs = json.loads(capsys.readouterr().out)
    assert [s["name"] for s in specs] == ["Handler", "Labeled", "Tallied", "LabeledHandler"]
    tallied = specs[2]["members"][0]
    assert tallied == {"kind": "property", "name": "tally", "type": "int", "access": "read-write"}


def test_config_error_exit_code(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("DELEGATE_LABEL", raising=False)
    monkeypatch.chdir(tmp_path)
    cfg = _write_config(tmp_path, "scenario:\n  label: ${DELEGATE_LABEL}\n")

    assert main(["--config", str(cfg)]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "ConfigError" in captured.err
    assert "DELEGATE_LABEL" in captured.err


def test_unknown_conformer_override_is_config_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_config(tmp_path, "")

    assert main(["--config", str(cfg), "run", "--conformer", "robot"]) == 2
    assert "scenario.conformer" in capsys.readouterr().err


def test_bad_arguments_return_argparse_code(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--profile", "prod"]) == 2
    assert "invalid choice" in capsys.readouterr().err
