"""Typer CLI entrypoint for glossc."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Literal, cast

import typer

from apps.cli.format_human import render_build_summary
from apps.cli.io import build_output_paths, existing_output_files, write_build_output_atomic
from core.config.models import Settings
from core.config.settings_loader import load_settings
from core.orchestrator.pipeline import build_glossary
from core.render.models import BuildOutput
from core.source.loader import discover_sources, read_sources
from core.source.models import SourceFile
from core.utils.errors import GlossaryError

app = typer.Typer(help="Glossary markup to HTML compiler", rich_markup_mode=None)
UnresolvedLinksMode = Literal["warn", "error"]

_EXIT_CODES = {
    "source": 1,
    "parse": 2,
    "compile": 3,
    "render": 4,
}


class _EchoHandler(logging.Handler):
    """Forward glossc diagnostics to stderr through typer."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            typer.echo(f"{record.levelname}({record.name}): {record.getMessage()}", err=True)
        except Exception:  # noqa: BLE001
            self.handleError(record)


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep `glossc build` as explicit command form."""


@app.command("build")
def build_command(
    source_dir: Annotated[Path | None, typer.Option(file_okay=False)] = None,
    out: Annotated[Path | None, typer.Option(dir_okay=False)] = None,
    config: Annotated[Path | None, typer.Option(exists=True, dir_okay=False)] = None,
    unresolved_links: Annotated[str | None, typer.Option()] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Also write a JSON build report to this path."),
    ] = None,
    no_overwrite: Annotated[
        bool,
        typer.Option("--no-overwrite", help="Fail when outputs already exist."),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug diagnostics.")
    ] = False,
) -> None:
    """Compile the source directory and write the HTML output atomically."""

    _configure_logging(verbose)
    settings = _load_effective_settings(config, unresolved_links)
    paths = build_output_paths(out or Path(settings.output_file), report)

    existing = existing_output_files(paths)
    if existing and no_overwrite:
        typer.echo("ERROR: outputs already exist and --no-overwrite is enabled.")
        raise typer.Exit(code=1)
    if existing:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}")

    output = _run_pipeline(source_dir or Path(settings.source_dir), settings)

    try:
        write_build_output_atomic(paths, output)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"ERROR: write output failed: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(render_build_summary(output.report))
    typer.echo(f"INFO: output written to {paths.html}")
    typer.echo("INFO: success")


@app.command("check")
def check_command(
    source_dir: Annotated[Path | None, typer.Option(file_okay=False)] = None,
    config: Annotated[Path | None, typer.Option(exists=True, dir_okay=False)] = None,
    unresolved_links: Annotated[str | None, typer.Option()] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug diagnostics.")
    ] = False,
) -> None:
    """Run the whole pipeline without writing anything."""

    _configure_logging(verbose)
    settings = _load_effective_settings(config, unresolved_links)
    output = _run_pipeline(source_dir or Path(settings.source_dir), settings)
    typer.echo(render_build_summary(output.report))
    typer.echo("INFO: success")


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("glossc")
    if not any(isinstance(handler, _EchoHandler) for handler in logger.handlers):
        logger.addHandler(_EchoHandler())
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_effective_settings(config: Path | None, unresolved_links: str | None) -> Settings:
    try:
        settings = load_settings(config)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc

    if unresolved_links is None:
        return settings

    normalized = unresolved_links.lower().strip()
    if normalized not in {"warn", "error"}:
        typer.echo("ERROR: --unresolved-links must be one of: warn, error.")
        raise typer.Exit(code=1)
    mode = cast(UnresolvedLinksMode, normalized)
    return settings.model_copy(update={"unresolved_links": mode})


def _run_pipeline(source_dir: Path, settings: Settings) -> BuildOutput:
    files: list[SourceFile] = []
    try:
        files = discover_sources(source_dir)
        chars = read_sources(files)
        return build_glossary(chars, settings)
    except GlossaryError as exc:
        typer.echo(f"ERROR({exc.stage}): {exc}")
        for line in _file_legend(exc, files):
            typer.echo(line)
        raise typer.Exit(code=_EXIT_CODES.get(exc.stage, 1)) from exc
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc


def _file_legend(exc: GlossaryError, files: list[SourceFile]) -> list[str]:
    indices: set[int] = set()
    for value in exc.detail().values():
        if isinstance(value, dict) and isinstance(value.get("file"), int):
            indices.add(value["file"])

    lines: list[str] = []
    for index in sorted(indices):
        if 1 <= index <= len(files):
            lines.append(f"INFO: file {index} is {files[index - 1].path}")
    return lines


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
