import json
from pathlib import Path

import numpy as np
import pytest

from cli.main import main


def test_cli_synthetic_preset(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "synthetic-min", "--seed", "3"])
    run_dir = Path("runs/synthetic-min")
    assert (run_dir / "metrics_train.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    assert (run_dir / "mse.txt").exists()


def test_cli_reads_feature_and_label_files(tmp_path, capsys):
    rng = np.random.default_rng(0)
    X = rng.standard_normal((30, 10))
    y = rng.uniform(0.0, 1.0, size=30)
    x_path = tmp_path / "x.txt"
    y_path = tmp_path / "y.txt"
    x_path.write_text("\n".join(",".join(repr(float(v)) for v in row) for row in X) + "\n")
    y_path.write_text("\n".join(repr(float(v)) for v in y) + "\n")
    dump = tmp_path / "resolved.json"

    main(
        [
            "--features", str(x_path),
            "--labels", str(y_path),
            "--n-examples", "25",
            "--run-dir", str(tmp_path / "run"),
            "--seed", "1",
            "--dump-config", str(dump),
        ]
    )

    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["steps"] == 25
    assert Path(payload["weights"]).exists()
    resolved = json.loads(dump.read_text())
    assert resolved["data"]["name"] == "csv"
    assert resolved["data"]["options"]["n_examples"] == 25


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--list-presets"])
    assert info.value.code == 0
    assert capsys.readouterr().out.split() == ["sdss-redshift", "synthetic-min"]
