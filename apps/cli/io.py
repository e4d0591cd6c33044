"""CLI I/O helpers for atomic output writing."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.render.models import BuildOutput


@dataclass(frozen=True)
class OutputPaths:
    """Artifact paths for a single build."""

    html: Path
    report: Path | None = None


def build_output_paths(out: Path, report: Path | None = None) -> OutputPaths:
    """Build output file paths for one run."""

    return OutputPaths(html=out, report=report)


def existing_output_files(paths: OutputPaths) -> list[Path]:
    """Return existing output files among artifact paths."""

    candidates = [paths.html]
    if paths.report is not None:
        candidates.append(paths.report)
    return [path for path in candidates if path.exists()]


def write_build_output_atomic(paths: OutputPaths, output: BuildOutput) -> None:
    """Stage the HTML (and optional JSON report) in temporary files, then replace.

    Nothing is replaced until every artifact is staged, so a failure while
    writing the report leaves a previous HTML file untouched.
    """

    staged: list[tuple[Path, Path]] = []
    try:
        paths.html.parent.mkdir(parents=True, exist_ok=True)
        staged.append((_stage_bytes(paths.html, output.html.encode("utf-8")), paths.html))
        if paths.report is not None:
            paths.report.parent.mkdir(parents=True, exist_ok=True)
            staged.append(
                (_stage_json(paths.report, output.report.model_dump(mode="json")), paths.report)
            )
    except Exception:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise

    for tmp_path, path in staged:
        tmp_path.replace(path)


def _stage_json(path: Path, payload: dict[str, Any]) -> Path:
    data = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return _stage_bytes(path, data.encode("utf-8"))


def _stage_bytes(path: Path, data: bytes) -> Path:
    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        tmp_path.write_bytes(data)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path
