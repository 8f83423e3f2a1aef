import json

from redshiftnet.core.ndarray import NDArray
from redshiftnet.reporting.artifacts import read_weights, write_mse_trace, write_weights
from redshiftnet.reporting.metrics import CsvSink, JsonlSink
from redshiftnet.reporting.plots import PlotAdapter, running_mean
from redshiftnet.reporting.summary import compute_auc, summarize_trace


def test_mse_trace_written_twice_with_identical_content(tmp_path):
    paths = write_mse_trace([0.5, 0.25, 1e-9], tmp_path)
    assert [p.rsplit("/", 1)[-1] for p in paths] == ["mse.dat", "mse.txt"]
    dat = (tmp_path / "mse.dat").read_text()
    assert dat == (tmp_path / "mse.txt").read_text()
    assert [float(line) for line in dat.splitlines()] == [0.5, 0.25, 1e-9]


def test_weight_dump_is_labelled_and_row_major(tmp_path):
    w0 = NDArray.from_numpy([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
    w1 = NDArray.from_numpy([[0.5], [-0.5], [0.25]])
    path = write_weights({"W0": w0, "W1": w1}, tmp_path / "weights.txt")
    lines = (tmp_path / "weights.txt").read_text().splitlines()
    assert lines[0] == "w0"
    assert [float(v) for v in lines[1:7]] == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert lines[7] == "w1"
    assert read_weights(path) == {
        "w0": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        "w1": [0.5, -0.5, 0.25],
    }


def test_sinks_write_one_record_per_step(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", seed=3, sha="abc")
    csv_sink = CsvSink(tmp_path / "m.csv")
    for step in range(3):
        metrics = {"loss": 0.1 * step, "prediction": 1.0, "target": 1.0}
        jsonl.on_step(step, metrics)
        csv_sink(step, metrics)
    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert [r["step"] for r in records] == [0, 1, 2]
    assert records[0]["sha"] == "abc" and records[0]["seed"] == 3
    rows = (tmp_path / "m.csv").read_text().splitlines()
    assert rows[0] == "loss,prediction,split,step,target"
    assert len(rows) == 4


def test_trace_summary():
    summary = summarize_trace([4.0, 2.0, 1.0, 1.0], tail=2)
    assert summary["records"] == 4
    assert summary["tail_window"] == 2
    assert summary["mse"]["last"] == 1.0
    assert summary["mse"]["tail_mean"] == 1.0
    assert summary["mse"]["max"] == 4.0
    assert compute_auc([1.0, 1.0, 1.0]) == 2.0
    assert summarize_trace([])["mse"] == {}


def test_plot_adapter_draws_trace_with_reference_lines(tmp_path):
    adapter = PlotAdapter(tmp_path / "run", enable_plots=True)
    adapter.on_step(0, {"loss": 1.0, "prediction": 0.2, "target": 0.3})
    adapter(1, {"loss": 0.0})
    assert adapter.losses == [1.0, 0.0]
    path = adapter.close(validation_mse=0.01, benchmark_mse=0.05)
    assert path == tmp_path / "run" / "loss.png"
    assert path.exists()


def test_plot_adapter_disabled_records_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "off")
    adapter.on_step(0, {"loss": 1.0})
    assert adapter.losses == []
    assert adapter.close() is None
    assert not (tmp_path / "off").exists()


def test_running_mean():
    assert running_mean([4.0, 2.0, 0.0]).tolist() == [4.0, 3.0, 2.0]
