"""Deterministic summaries of a training loss trace."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np


def _area(y: np.ndarray, x: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y, x))
    return float(np.trapz(y, x))


def compute_auc(points: Sequence[float]) -> float:
    """Return the area-under-curve of ``points`` along an implicit step axis."""

    if not points:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    x = np.arange(len(points), dtype=np.float64)
    return _area(y, x)


def summarize_trace(trace: Sequence[float], *, tail: int = 32) -> Mapping[str, object]:
    arr = np.asarray(trace, dtype=np.float64)
    tail_window = min(tail, arr.size)
    if arr.size == 0:
        stats: Mapping[str, float] = {}
    else:
        tail_arr = arr[-tail_window:]
        stats = {
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "last": float(arr[-1]),
            "tail_mean": float(np.mean(tail_arr)),
            "tail_auc": compute_auc(tail_arr.tolist()),
        }
    return {
        "version": 1,
        "records": int(arr.size),
        "tail_window": tail_window,
        "mse": stats,
    }


def write_summary(
    trace: Sequence[float],
    out_summary_json: str | Path,
    *,
    tail: int = 32,
    extra: Mapping[str, object] | None = None,
) -> str:
    """Write :func:`summarize_trace` of ``trace`` plus ``extra`` fields as JSON."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = dict(summarize_trace(trace, tail=tail))
    if extra:
        summary.update(extra)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "summarize_trace", "write_summary"]
