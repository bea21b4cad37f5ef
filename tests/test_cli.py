from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

import pytest
from typer.testing import CliRunner

from weightwatcher.main import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WW_CONFIG_FILE", str(tmp_path / "absent.yaml"))


def invoke(data_file: Path, *args: str):  # type: ignore[no-untyped-def]
    return runner.invoke(app, ["--file", str(data_file), *args])


def history_lines(data_file: Path, *extra: str) -> List[List[str]]:
    result = invoke(data_file, *extra, "show", "history")
    assert result.exit_code == 0, result.output
    return [line.split() for line in result.output.splitlines() if line.strip()]


def test_full_session(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    assert invoke(data, "init").exit_code == 0
    for day, weight in [("2026-10-01", "10"), ("2026-10-02", "12"), ("2026-10-03", "11"),
                        ("2026-10-04", "13"), ("2026-10-05", "9")]:
        result = invoke(data, "add", "--date", day, "--weight", weight)
        assert result.exit_code == 0, result.output

    lines = history_lines(data, "--window", "3")
    assert [line[1] for line in lines] == [f"2026-10-0{i}" for i in range(1, 6)]
    assert [line[3] for line in lines] == ["10.00", "11.00", "11.00", "12.00", "11.00"]

    result = invoke(data, "-n", "3", "show", "summary")
    assert result.exit_code == 0
    assert "11.00" in result.output
    assert "2026-10-05" in result.output


def test_edit_and_remove(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    invoke(data, "init")
    invoke(data, "add", "-d", "2026-10-01", "-w", "80")
    invoke(data, "add", "-d", "2026-10-02", "-w", "82")

    assert invoke(data, "edit", "--id", "2", "--weight", "81.5").exit_code == 0
    assert [line[2] for line in history_lines(data)] == ["80.00", "81.50"]

    assert invoke(data, "remove", "--id", "1").exit_code == 0
    assert [line[0] for line in history_lines(data)] == ["2"]


def test_single_letter_aliases(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    assert invoke(data, "I").exit_code == 0
    assert invoke(data, "A", "-w", "75.0").exit_code == 0
    result = invoke(data, "S", "history")
    assert result.exit_code == 0
    assert date.today().isoformat() in result.output


def test_add_defaults_to_today(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    invoke(data, "init")
    invoke(data, "add", "-w", "70")
    assert history_lines(data)[0][1] == date.today().isoformat()


def test_invalid_window_is_fatal(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    invoke(data, "init")
    invoke(data, "add", "-d", "2026-10-01", "-w", "80")
    result = invoke(data, "--window", "0", "show", "history")
    assert result.exit_code == 1
    assert "2026-10-01" not in result.output
    assert "window size" in result.output


def test_errors_are_reported(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    result = invoke(data, "show", "history")
    assert result.exit_code == 1
    assert "does not exist" in result.output

    invoke(data, "init")
    result = invoke(data, "init")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = invoke(data, "remove", "--id", "9")
    assert result.exit_code == 1

    result = invoke(data, "edit", "--id", "1")
    assert result.exit_code == 1


def test_no_data_file_configured() -> None:
    result = runner.invoke(app, ["show", "summary"])
    assert result.exit_code == 1
    assert "no data file" in result.output


def test_data_file_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    data = tmp_path / "weight.csv"
    rc = tmp_path / ".wwrc"
    rc.write_text(f"data_file: {data}\nwindow_size: 2\n")
    monkeypatch.setenv("WW_CONFIG_FILE", str(rc))
    assert runner.invoke(app, ["init"]).exit_code == 0
    runner.invoke(app, ["add", "-d", "2026-10-01", "-w", "10"])
    runner.invoke(app, ["add", "-d", "2026-10-02", "-w", "20"])
    runner.invoke(app, ["add", "-d", "2026-10-03", "-w", "40"])
    result = runner.invoke(app, ["show", "history"])
    assert result.exit_code == 0
    averages = [line.split()[3] for line in result.output.splitlines()]
    assert averages == ["10.00", "15.00", "30.00"]


def test_summary_of_empty_file(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    invoke(data, "init")
    result = invoke(data, "show", "summary")
    assert result.exit_code == 0
    assert "No measurements" in result.output


def test_blank_cell_reported_without_partial_output(tmp_path: Path) -> None:
    data = tmp_path / "weight.csv"
    data.write_text("id,day,value\n1,2026-10-01,80\n2,,81\n")
    result = invoke(data, "show", "history")
    assert result.exit_code == 1
    assert "weightwatcher:" in result.output
    assert "2026-10-01" not in result.output


def test_command_line_overrides_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    configured = tmp_path / "configured.csv"
    chosen = tmp_path / "chosen.csv"
    rc = tmp_path / ".wwrc"
    rc.write_text(f"data_file: {configured}\nwindow_size: 2\n")
    monkeypatch.setenv("WW_CONFIG_FILE", str(rc))

    assert runner.invoke(app, ["--file", str(chosen), "init"]).exit_code == 0
    assert chosen.exists()
    assert not configured.exists()

    for day, weight in [("2026-10-01", "10"), ("2026-10-02", "20"), ("2026-10-03", "60")]:
        assert runner.invoke(app, ["-f", str(chosen), "add", "-d", day, "-w", weight]).exit_code == 0

    result = runner.invoke(app, ["-f", str(chosen), "--window", "3", "show", "history"])
    assert result.exit_code == 0, result.output
    assert [line.split()[3] for line in result.output.splitlines()] == ["10.00", "15.00", "30.00"]

    result = runner.invoke(app, ["-f", str(chosen), "show", "history"])
    assert [line.split()[3] for line in result.output.splitlines()] == ["10.00", "15.00", "40.00"]
