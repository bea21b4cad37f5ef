from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional

import typer

from . import __version__
from .config import AppConfig, load_config
from .core import report
from .data.store import MeasurementStore
from .errors import NoDataFile, WeightWatcherError
from .utils.logging import setup_logging


logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="keeps track of your weight")
show_app = typer.Typer(help="show report")


@dataclass
class CliState:
    config: AppConfig
    data_file: Optional[Path]
    window: int
    verbose: bool

    def store(self) -> MeasurementStore:
        if self.data_file is None:
            raise NoDataFile()
        return MeasurementStore(self.data_file)


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except WeightWatcherError as exc:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"weightwatcher: {exc}", err=True)
        raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"weightwatcher {__version__}")
        raise typer.Exit()


def _to_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@app.callback()
def main(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="data file"),
    verbose: bool = typer.Option(False, "--verbose", "-b", help="show more output"),
    window: Optional[int] = typer.Option(
        None, "--window", "-n", help="number of measurements in the moving average"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML config file (default: ~/.wwrc)"
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="print the version"
    ),
) -> None:
    with _handle_errors():
        cfg = load_config(config_file)
    verbose = verbose or cfg.runtime.verbose
    setup_logging("DEBUG" if verbose else cfg.env.LOG_LEVEL)
    ctx.obj = CliState(
        config=cfg,
        data_file=file.expanduser() if file is not None else cfg.runtime.data_file,
        window=window if window is not None else cfg.runtime.window_size,
        verbose=verbose,
    )


@app.command("init")
def cmd_init(ctx: typer.Context) -> None:
    """init a new data file specified by the user"""
    state: CliState = ctx.obj
    with _handle_errors():
        store = state.store()
        store.init()
    if state.verbose:
        typer.echo(f"Created data file {store.path}")


@app.command("add")
def cmd_add(
    ctx: typer.Context,
    day: Optional[datetime] = typer.Option(
        None, "--date", "-d", formats=["%Y-%m-%d"], help="date of measurement (default: today)"
    ),
    weight: float = typer.Option(..., "--weight", "-w", help="measured weight"),
) -> None:
    """add a new measurement"""
    state: CliState = ctx.obj
    with _handle_errors():
        m = state.store().add(_to_date(day) or date.today(), weight)
    if state.verbose:
        typer.echo(f"Added measurement {m.id}: {m.day:%Y-%m-%d} {m.value:.2f}")


@app.command("edit")
def cmd_edit(
    ctx: typer.Context,
    measurement_id: int = typer.Option(..., "--id", "-i", help="id of the measurement"),
    day: Optional[datetime] = typer.Option(
        None, "--date", "-d", formats=["%Y-%m-%d"], help="new date of measurement"
    ),
    weight: Optional[float] = typer.Option(None, "--weight", "-w", help="new weight"),
) -> None:
    """edit a measurement"""
    state: CliState = ctx.obj
    if day is None and weight is None:
        typer.echo("weightwatcher: nothing to change (give --date and/or --weight)", err=True)
        raise typer.Exit(code=1)
    with _handle_errors():
        m = state.store().update(measurement_id, day=_to_date(day), value=weight)
    if state.verbose:
        typer.echo(f"Updated measurement {m.id}: {m.day:%Y-%m-%d} {m.value:.2f}")


@app.command("remove")
def cmd_remove(
    ctx: typer.Context,
    measurement_id: int = typer.Option(..., "--id", "-i", help="id of the measurement"),
) -> None:
    """remove a measurement"""
    state: CliState = ctx.obj
    with _handle_errors():
        state.store().remove(measurement_id)
    if state.verbose:
        typer.echo(f"Removed measurement {measurement_id}")


@show_app.command("summary")
def show_summary(ctx: typer.Context) -> None:
    """current weight (average of last few days)"""
    state: CliState = ctx.obj
    with _handle_errors():
        s = report.summary(state.store(), state.window)
    if s is None:
        typer.echo("No measurements yet.")
        return
    typer.echo(f"Current weight: {s.average:.2f} ({s.window}-point average as of {s.day:%Y-%m-%d})")
    if state.verbose:
        typer.echo(f"Latest measurement: {s.value:.2f}, {s.count} measurements in total")


@show_app.command("history")
def show_history(ctx: typer.Context) -> None:
    """historical data with moving average (<n> periods)"""
    state: CliState = ctx.obj
    with _handle_errors():
        rows = report.history(state.store(), state.window)
    if state.verbose:
        typer.echo(f"{'id':>5}  {'date':<10}  {'weight':>8}  {'avg(' + str(state.window) + ')':>8}")
    for row in rows:
        typer.echo(f"{row.id:>5}  {row.day:%Y-%m-%d}  {row.value:8.2f}  {row.average:8.2f}")


app.add_typer(show_app, name="show")

# Single-letter aliases: I, A, E, R, S.
app.command("I", hidden=True)(cmd_init)
app.command("A", hidden=True)(cmd_add)
app.command("E", hidden=True)(cmd_edit)
app.command("R", hidden=True)(cmd_remove)
app.add_typer(show_app, name="S", hidden=True)


if __name__ == "__main__":
    app()
