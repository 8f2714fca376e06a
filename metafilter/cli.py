from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from metafilter.config import DEFAULT_CONFIG_PATH, build_pipeline, load_config
from metafilter.core.filters import apply_rules
from metafilter.core.rules import InvalidPattern
from metafilter.normalize.catalogs import CATALOGS, UnknownCatalog, compose
from metafilter.normalize.metadata import FIELDS, MetadataFilter, get_preset
from metafilter.normalize.preview import FilterPreviewRecord, build_filter_preview

app = typer.Typer(help="metafilter - clean up artist, album and track names")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """metafilter CLI entrypoint."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve_filter(preset: str, config: Path | None, pipeline: str | None) -> MetadataFilter:
    if pipeline is None:
        if config is not None:
            raise typer.BadParameter("--config needs --pipeline to pick a pipeline from the file")
        try:
            return get_preset(preset)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    try:
        cfg = load_config(config or DEFAULT_CONFIG_PATH)
        return build_pipeline(cfg, pipeline)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}") from exc
    except (InvalidPattern, UnknownCatalog) as exc:
        raise typer.BadParameter(str(exc)) from exc
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0])) from exc


def _write_preview_jsonl(out_dir: Path, records: list[FilterPreviewRecord]) -> Path:
    path = out_dir / "filter_preview.jsonl"
    rows = (json.dumps(rec.to_dict(), ensure_ascii=False) for rec in records)
    path.write_text("".join(f"{row}\n" for row in rows), encoding="utf-8", newline="\n")
    return path


def _preview_summary_table(records: list[FilterPreviewRecord]) -> Table:
    changed = [r for r in records if r.would_change]
    errors = [r for r in records if r.error]
    table = Table(title="Filter Preview Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="magenta")
    table.add_row("Files evaluated", str(len(records)))
    table.add_row("Would change", str(len(changed)))
    for name in FIELDS:
        count = sum(1 for r in changed if name in r.changed_fields)
        table.add_row(f"Would change {name}", str(count))
    table.add_row("Read errors", str(len(errors)))
    return table


@app.command("filter")
def filter_text(
    text: str = typer.Argument(..., help="Text to clean up"),
    catalog: list[str] | None = typer.Option(
        None,
        "--catalog",
        "-c",
        help="Catalog to apply, in order. Can be repeated. Defaults to trim-whitespace.",
    ),
    max_passes: int | None = typer.Option(None, "--max-passes", min=1, help="Stop after this many passes"),
) -> None:
    names = catalog or ["trim-whitespace"]
    try:
        rules = compose(*names)
    except UnknownCatalog as exc:
        raise typer.BadParameter(f"{exc}. Allowed: {', '.join(CATALOGS)}") from exc
    console.print(apply_rules(text, rules, max_passes=max_passes), markup=False, highlight=False)


@app.command("field")
def filter_field(
    text: str = typer.Argument(..., help="Field value to clean up"),
    field: str = typer.Option("track", "--field", help=f"Metadata field: {', '.join(FIELDS)}"),
    preset: str = typer.Option("youtube", "--preset", help="Built-in preset: youtube, spotify, amazon, tidal"),
    config: Path | None = typer.Option(None, "--config", help="Config file with custom pipelines"),
    pipeline: str | None = typer.Option(None, "--pipeline", help="Pipeline name from the config file"),
) -> None:
    if field not in FIELDS:
        raise typer.BadParameter(f"Unknown field: {field}. Allowed: {', '.join(FIELDS)}")
    metadata_filter = _resolve_filter(preset, config, pipeline)
    console.print(metadata_filter.filter_field(field, text) or "", markup=False, highlight=False)


@app.command("catalogs")
def list_catalogs() -> None:
    table = Table(title="Filter Catalogs")
    table.add_column("Name", style="cyan")
    table.add_column("Rules", justify="right", style="magenta")
    table.add_column("Description")
    for name, build in CATALOGS.items():
        table.add_row(name, str(len(build())), build.__doc__ or "")
    console.print(table)


@app.command()
def preview(
    music: Path = typer.Argument(Path("./music"), help="Folder to scan recursively"),
    out: Path = typer.Option(Path("data/reports"), "--out", help="Output folder for the preview report"),
    preset: str = typer.Option("youtube", "--preset", help="Built-in preset: youtube, spotify, amazon, tidal"),
    config: Path | None = typer.Option(None, "--config", help="Config file with custom pipelines"),
    pipeline: str | None = typer.Option(None, "--pipeline", help="Pipeline name from the config file"),
) -> None:
    if not music.exists() or not music.is_dir():
        raise typer.BadParameter(f"Music directory does not exist: {music}")
    metadata_filter = _resolve_filter(preset, config, pipeline)
    out.mkdir(parents=True, exist_ok=True)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Filtering tags", total=None)

        def _on_progress(done: int, total: int, _path: Path) -> None:
            progress.update(task, completed=done, total=total)

        records = build_filter_preview(music, metadata_filter, on_progress=_on_progress)

    jsonl_path = _write_preview_jsonl(out, records)
    console.print(_preview_summary_table(records))
    console.print(f"[green]Wrote:[/green] {jsonl_path}")


if __name__ == "__main__":
    app()
