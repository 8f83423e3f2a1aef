"""Command line entry point for redshiftnet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from redshiftnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "steps": result.steps,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "weights": result.weights_path,
        "validation_mse": result.validation_mse,
        "benchmark_mse": result.benchmark_mse,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="sdss-redshift",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--features", help="Path to the comma-separated feature file")
    parser.add_argument("--labels", help="Path to the label file")
    parser.add_argument(
        "--n-examples", type=int, help="Maximum number of examples to read"
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a loss curve image"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)

    if args.config:
        override = pipelines.load_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    if args.features or args.labels or args.n_examples is not None:
        data_cfg = config.setdefault("data", {})
        if args.features or args.labels:
            data_cfg["name"] = "csv"
        options = data_cfg.setdefault("options", {})
        if args.features:
            options["features_path"] = args.features
        if args.labels:
            options["labels_path"] = args.labels
        if args.n_examples is not None:
            options["n_examples"] = int(args.n_examples)

    train_cfg = config.setdefault("train", {})
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
