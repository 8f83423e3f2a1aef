import json
from pathlib import Path

import pytest

from redshiftnet.training import pipelines


def _config(run_dir, seed=11):
    config = pipelines.load_preset("synthetic-min")
    config["data"]["options"]["n_examples"] = 60
    config["train"].update({"seed": seed, "holdout": 20, "run_dir": str(run_dir)})
    return config


def test_pipeline_produces_artifacts(tmp_path, capsys):
    run_dir = tmp_path / "run"
    result = pipelines.run_pipeline(_config(run_dir))

    assert result.steps == 60
    for name in ["mse.dat", "mse.txt", "weights.txt", "holdout.json", "config.json"]:
        assert (run_dir / name).exists(), name
    assert (run_dir / "mse.dat").read_text() == (run_dir / "mse.txt").read_text()
    assert len((run_dir / "mse.dat").read_text().splitlines()) == 60

    weights = (run_dir / "weights.txt").read_text().splitlines()
    assert weights[0] == "w0"
    assert weights[1 + 11 * 5] == "w1"
    assert len(weights) == 2 + 11 * 5 + 6

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["seed"] == 11
    assert manifest["dataset"]["type"] == "synthetic"

    metrics = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert len(metrics) == 60
    assert metrics[0]["split"] == "train"
    assert all("loss" in entry for entry in metrics)
    assert (run_dir / "metrics_train.csv").exists()

    holdout = json.loads((run_dir / "holdout.json").read_text())
    assert holdout["n_examples"] == 20
    assert holdout["validation_mse"] == pytest.approx(result.validation_mse)

    out = capsys.readouterr().out
    assert "stopping at iteration 59" in out
    assert "validation mse = " in out
    assert "benchmark mse = " in out


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run1", seed=99))
    second = pipelines.run_pipeline(_config(tmp_path / "run2", seed=99))
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    assert Path(first.weights_path).read_text() == Path(second.weights_path).read_text()


def test_unseeded_run_records_the_clock_seed(tmp_path):
    config = _config(tmp_path / "run")
    config["train"]["seed"] = None
    result = pipelines.run_pipeline(config)
    manifest = json.loads(Path(result.manifest_path).read_text())
    assert isinstance(manifest["config"]["train"]["seed"], int)


def test_config_validation(tmp_path):
    config = _config(tmp_path / "run")
    config["model"]["n_input"] = 4
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)
    with pytest.raises(KeyError):
        pipelines.run_pipeline({"data": {}, "model": {}})
    with pytest.raises(KeyError):
        pipelines.load_preset("does-not-exist")


def test_config_files_merge_into_presets(tmp_path):
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"train": {"alpha": 0.01}}))
    config = pipelines.merge_config(
        pipelines.load_preset("sdss-redshift"), pipelines.load_config_file(override)
    )
    assert config["train"]["alpha"] == 0.01
    assert config["train"]["threshold"] == 1e-8
    assert config["model"]["n_hidden"] == 5
    with pytest.raises(ValueError):
        pipelines.load_config_file(tmp_path / "config.toml")
