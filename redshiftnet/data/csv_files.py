"""Loaders for the comma-separated feature file and the label file."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from ..core.errors import ShapeError
from ..core.ndarray import NDArray
from .registry import DatasetSpec, register_dataset


def _read_rows(path: Path, n_rows: int) -> pd.DataFrame:
    try:
        frame = pd.read_csv(
            path, header=None, nrows=n_rows, dtype=np.float64, float_precision="round_trip"
        )
    except pd.errors.ParserError as exc:
        raise ShapeError(f"{path}: inconsistent number of values per line") from exc
    incomplete = frame.isna().any(axis=1)
    if incomplete.any():
        line = int(incomplete.to_numpy().argmax()) + 1
        raise ShapeError(f"{path}: line {line} has missing values")
    return frame


def load_feature_file(path: str | Path, n_examples: int, n_input: int) -> NDArray:
    """Read at most ``n_examples`` lines of ``n_input`` comma-separated values.

    Reading stops quietly at ``n_examples`` or at the end of the file; the
    returned matrix has one row per line actually read.
    """

    frame = _read_rows(Path(path), n_examples)
    if frame.shape[1] != n_input:
        raise ShapeError(
            f"{path}: expected {n_input} values per line, found {frame.shape[1]}"
        )
    return NDArray.from_numpy(frame.to_numpy(dtype=np.float64))


def load_label_file(path: str | Path, n_examples: int) -> NDArray:
    """Read at most ``n_examples`` labels, one value per line."""

    frame = _read_rows(Path(path), n_examples)
    if frame.shape[1] != 1:
        raise ShapeError(f"{path}: expected one value per line, found {frame.shape[1]}")
    return NDArray.from_numpy(frame.iloc[:, 0].to_numpy(dtype=np.float64))


@register_dataset("csv")
def load_csv_dataset(
    *,
    features_path: str | Path = "x_prep.txt",
    labels_path: str | Path = "y_prep.txt",
    n_examples: int = 10000,
    n_input: int = 10,
) -> DatasetSpec:
    """Load paired feature and label files as one dataset."""

    features = load_feature_file(features_path, n_examples, n_input)
    labels = load_label_file(labels_path, n_examples)
    if labels.size < features.rows:
        raise ShapeError(
            f"{labels_path} holds {labels.size} labels for {features.rows} examples"
        )
    provenance = {
        "type": "csv",
        "features_path": str(features_path),
        "labels_path": str(labels_path),
        "n_examples": features.rows,
        "n_input": n_input,
    }
    return DatasetSpec(name="csv", features=features, labels=labels, provenance=provenance)


__all__ = ["load_csv_dataset", "load_feature_file", "load_label_file"]
