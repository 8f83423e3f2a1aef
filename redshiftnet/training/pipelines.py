"""Pipeline assembly: data, network, training loop and run artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping

from ..core.types import HoldoutReport, RunResult, TrainResult
from ..data import registry
from ..reporting.artifacts import write_manifest, write_mse_trace, write_weights
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .network import Network
from .trainer import Trainer, evaluate_holdout

#: Mean redshift of the SDSS training labels.
SDSS_MEAN_REDSHIFT = 0.35960330678661007

_PRESETS: Dict[str, Mapping[str, Any]] = {
    "sdss-redshift": {
        "data": {
            "name": "csv",
            "options": {
                "features_path": "x_prep.txt",
                "labels_path": "y_prep.txt",
                "n_examples": 10000,
                "n_input": 10,
            },
        },
        "model": {"n_input": 10, "n_hidden": 5, "leak": 0.5, "b0": 1.0, "b1": 1.0},
        "train": {
            "alpha": 0.001,
            "threshold": 1e-8,
            "seed": None,
            "holdout": 100,
            "benchmark": SDSS_MEAN_REDSHIFT,
            "run_dir": "runs/sdss-redshift",
            "enable_plots": False,
        },
    },
    "synthetic-min": {
        "data": {
            "name": "synthetic",
            "options": {"n_examples": 200, "n_input": 10, "noise": 0.02, "seed": 0},
        },
        "model": {"n_input": 10, "n_hidden": 5, "leak": 0.5, "b0": 1.0, "b1": 1.0},
        "train": {
            "alpha": 0.001,
            "threshold": 1e-8,
            "seed": 7,
            "holdout": 50,
            "benchmark": None,
            "run_dir": "runs/synthetic-min",
            "enable_plots": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, Any]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, Any]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Read a JSON or YAML run configuration."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return dict(data)


def merge_config(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_network(model_cfg: Mapping[str, Any], seed: int | None) -> Network:
    return Network(
        n_input=int(model_cfg.get("n_input", 10)),
        n_hidden=int(model_cfg.get("n_hidden", 5)),
        n_output=int(model_cfg.get("n_output", 1)),
        leak=float(model_cfg.get("leak", 0.5)),
        b0=float(model_cfg.get("b0", 1.0)),
        b1=float(model_cfg.get("b1", 1.0)),
        seed=seed,
    )


def run_pipeline(config: Mapping[str, Any]) -> RunResult:
    missing = {"data", "model", "train"} - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = registry.get(data_cfg["name"], **data_cfg.get("options", {}))
    n_input = int(model_cfg.get("n_input", dataset.n_input))
    if dataset.n_input != n_input:
        raise ValueError(
            f"Configured n_input={n_input} but dataset {dataset.name!r} has {dataset.n_input}"
        )

    seed = train_cfg.get("seed")
    seed = int(seed) if seed is not None else int(time.time())
    network = build_network(model_cfg, seed)
    alpha = float(train_cfg.get("alpha", 0.001))
    threshold = float(train_cfg.get("threshold", 1e-8))

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        n_examples=dataset.n_examples,
        network=network,
        alpha=alpha,
        threshold=threshold,
        seed=seed,
    )

    jsonl = JsonlSink(run_dir / "metrics_train.jsonl", split="train", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics_train.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(
        network,
        alpha=alpha,
        threshold=threshold,
        callbacks=[jsonl, csv_sink, plots],
    )
    result = trainer.run(dataset.features, dataset.labels)
    _print_stop(result, network)

    write_mse_trace(result.mse_trace, run_dir)
    weights_path = write_weights(network.state_dict(), run_dir / "weights.txt")

    benchmark = train_cfg.get("benchmark")
    report = evaluate_holdout(
        network,
        dataset.features,
        dataset.labels,
        n_holdout=int(train_cfg.get("holdout", 100)),
        benchmark=float(benchmark) if benchmark is not None else None,
    )
    print(f"validation mse = {report.validation_mse}")
    print(f"benchmark mse = {report.benchmark_mse}")
    plots.close(
        validation_mse=report.validation_mse, benchmark_mse=report.benchmark_mse
    )

    holdout = _holdout_payload(report)
    (run_dir / "holdout.json").write_text(json.dumps(holdout, indent=2))
    summary_path = write_summary(
        result.mse_trace,
        run_dir / "summary.json",
        tail=int(train_cfg.get("summary_tail", 32)),
        extra={
            "steps": result.steps,
            "stopped_at": result.stopped_at,
            "converged": result.converged,
            "holdout": holdout,
        },
    )

    resolved = _safe_config(config, seed)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        dataset_provenance=dataset.provenance,
    )
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2))

    return RunResult(
        steps=result.steps,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        weights_path=weights_path,
        summary_path=summary_path,
        validation_mse=report.validation_mse,
        benchmark_mse=report.benchmark_mse,
    )


def _resolve_run_dir(train_cfg: Mapping[str, Any], dataset: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(train_cfg["run_dir"])
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _holdout_payload(report: HoldoutReport) -> Dict[str, float]:
    return {
        "validation_mse": report.validation_mse,
        "benchmark_mse": report.benchmark_mse,
        "benchmark_value": report.benchmark_value,
        "n_examples": report.n_examples,
    }


def _safe_config(config: Mapping[str, Any], seed: int) -> Dict[str, Any]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("train", {})["seed"] = seed
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    n_examples: int,
    network: Network,
    alpha: float,
    threshold: float,
    seed: int,
) -> None:
    print("=== redshiftnet run ===")
    print(f"Dataset       : {dataset_name} ({n_examples} examples)")
    print(f"Dimensions    : [{network.n_input}, {network.n_hidden}, {network.n_output}]")
    print(f"Leak          : {network.leak}")
    print(f"Learning rate : {alpha}")
    print(f"Threshold     : {threshold}")
    print(f"Seed          : {seed}")
    print(f"Parameters    : {network.parameter_count()}")
    print("=======================")


def _print_stop(result: TrainResult, network: Network) -> None:
    print(f"stopping at iteration {result.stopped_at}")
    print("w0")
    print(network.w0)
    print("w1")
    print(network.w1)


__all__ = [
    "SDSS_MEAN_REDSHIFT",
    "build_network",
    "load_config_file",
    "load_preset",
    "merge_config",
    "presets",
    "run_pipeline",
]
