"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, MutableMapping

from ..core.ndarray import NDArray


@dataclass(frozen=True)
class DatasetSpec:
    """Feature matrix and label vector for one dataset.

    Attributes
    ----------
    name:
        Registry key the dataset was loaded under.
    features:
        ``(n_examples, n_input)`` matrix, one example per row.
    labels:
        ``(n_examples,)`` vector of regression targets.
    provenance:
        Where the data came from and the options used, recorded in the run
        manifest.
    """

    name: str
    features: NDArray
    labels: NDArray
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_examples(self) -> int:
        return self.features.rows

    @property
    def n_input(self) -> int:
        return self.features.cols


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("csv")
        def load_csv(**kwargs):
            ...

    or directly::

        register_dataset("csv", load_csv)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get(name: str, **options: Any) -> DatasetSpec:
    """Build the dataset registered under ``name`` with ``options``."""

    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    return _REGISTRY[name](**options)


def names() -> list[str]:
    return sorted(_REGISTRY)


__all__ = ["DatasetSpec", "get", "names", "register_dataset"]
