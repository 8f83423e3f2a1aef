"""Run artifact writers: loss trace, weight dump and manifest."""

from __future__ import annotations

import json
import os
import subprocess
import time
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from ..core.ndarray import NDArray

MSE_TRACE_FILES = ("mse.dat", "mse.txt")


def git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def write_mse_trace(
    trace: Iterable[float],
    run_dir: str | Path,
    filenames: Sequence[str] = MSE_TRACE_FILES,
) -> list[str]:
    """Write the per-example loss trace, one value per line, to each filename."""

    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    text = "".join(f"{float(value)!r}\n" for value in trace)
    paths = []
    for name in filenames:
        path = run_dir / name
        path.write_text(text)
        paths.append(str(path))
    return paths


def write_weights(weights: Mapping[str, NDArray], path: str | Path) -> str:
    """Dump each matrix under a label line, values row-major one per line.

    Keys ``"W0"`` and ``"W1"`` are written as ``w0`` and ``w1``.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    for name, matrix in weights.items():
        lines.append(name.lower())
        lines.extend(repr(float(value)) for value in matrix.flat_values())
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def read_weights(path: str | Path) -> dict[str, list[float]]:
    """Parse a file produced by :func:`write_weights` into flat value lists."""

    weights: dict[str, list[float]] = {}
    current: list[float] | None = None
    for line in Path(path).read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            value = float(line)
        except ValueError:
            current = weights.setdefault(line, [])
            continue
        if current is None:
            raise ValueError(f"{path}: value {line!r} precedes any matrix label")
        current.append(value)
    return weights


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset_provenance: Mapping[str, object],
) -> str:
    """Write a manifest JSON file capturing reproducibility metadata."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": dict(dataset_provenance),
        "environment": {
            "python": os.environ.get("PYTHON_VERSION", "unknown"),
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


__all__ = [
    "MSE_TRACE_FILES",
    "git_sha",
    "read_weights",
    "write_manifest",
    "write_mse_trace",
    "write_weights",
]
