"""Dataset loaders for redshiftnet."""

from . import registry
from .csv_files import load_csv_dataset, load_feature_file, load_label_file
from .synthetic import load_synthetic

__all__ = [
    "load_csv_dataset",
    "load_feature_file",
    "load_label_file",
    "load_synthetic",
    "registry",
]
