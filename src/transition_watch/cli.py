"""Interfaz de línea de comandos del monitor.

English:
    Monitor command line interface.
"""

from __future__ import annotations

import json
import time
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from transition_watch.config import ConfigError, MonitorSettings, load_config
from transition_watch.core.models import Report
from transition_watch.core.processor import SnapshotProcessor
from transition_watch.data_sources import DataSourceError, fetch_snapshot, load_snapshot_file
from transition_watch.logging import bind_context, setup_logging
from transition_watch.presentation import render_text
from transition_watch.schemas import MalformedSnapshotError

app = typer.Typer(help="Validator transition monitor CLI")


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def _load_settings(config_path: Optional[Path]) -> MonitorSettings:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _format_report(report: Report, output_format: OutputFormat) -> str:
    if output_format is OutputFormat.JSON:
        return json.dumps(report.to_dict(), indent=2, sort_keys=True)
    return render_text(report)


def _emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")


@app.command()
def report(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Snapshot JSON file."),
    url: Optional[str] = typer.Option(None, "--url", help="Snapshot endpoint (defaults to INFO_URL)."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML configuration file."),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", help="Output format."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to a file."),
    now_millis: Optional[int] = typer.Option(None, "--now-millis", help="Reference instant in ms."),
) -> None:
    """Procesa un snapshot y muestra el reporte.

    English: Process one snapshot and print the report.
    """
    settings = _load_settings(config)
    logger = setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    source = file.as_posix() if file else (url or settings.INFO_URL)
    logger = bind_context(logger, source=source)

    monitor_config = settings.to_monitor_config()
    if now_millis is None:
        processor = SnapshotProcessor(monitor_config)
    else:
        processor = SnapshotProcessor(monitor_config, clock=lambda: now_millis)
    try:
        if file is not None:
            payload = load_snapshot_file(file)
        else:
            payload = fetch_snapshot(source, timeout=settings.TIMEOUT_SECONDS)
        result = processor.process_payload(payload)
    except (DataSourceError, MalformedSnapshotError) as exc:
        logger.error("report_failed", error=str(exc))
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    bind_context(logger, consensus=result.consensus).info(
        "report_ready",
        validators=len(result.validators),
        online_percentage=result.online_percentage,
        ready_percentage=result.ready_percentage,
    )
    _emit(_format_report(result, output_format), output)


@app.command()
def watch(
    url: Optional[str] = typer.Option(None, "--url", help="Snapshot endpoint (defaults to INFO_URL)."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML configuration file."),
    interval: Optional[int] = typer.Option(None, "--interval", min=1, help="Seconds between polls."),
    max_runs: int = typer.Option(0, "--max-runs", min=0, help="Stop after N polls (0 = forever)."),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", help="Output format."),
) -> None:
    """Consulta el endpoint periódicamente y muestra cada reporte.

    English: Poll the endpoint periodically and print each report.
    """
    settings = _load_settings(config)
    logger = setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    source = url or settings.INFO_URL
    delay = interval or settings.POLL_INTERVAL_SECONDS
    processor = SnapshotProcessor(settings.to_monitor_config())

    run = 0
    while True:
        run += 1
        run_logger = bind_context(logger, source=source, run=run)
        try:
            payload = fetch_snapshot(source, timeout=settings.TIMEOUT_SECONDS)
            result = processor.process_payload(payload)
        except (DataSourceError, MalformedSnapshotError) as exc:
            run_logger.warning("poll_failed", error=str(exc))
        else:
            run_logger.info("report_ready", validators=len(result.validators))
            typer.echo(_format_report(result, output_format))
        if max_runs and run >= max_runs:
            break
        time.sleep(delay)


if __name__ == "__main__":
    app()
