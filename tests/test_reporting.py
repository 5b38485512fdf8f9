import logging
import math

import pandas as pd
import pytest

from equidepth import HistogramEstimator
from equidepth.utils.custom_log import format_histogram, HistogramStateLogger
from equidepth.utils.streaming_stats import StreamingStat
from equidepth.utils.plot_fig import (snapshot_record, save_snapshots, plot_histogram,
                                      plot_bin_counts, report_paths)


class TestFormatting:

    def test_bin_lines(self, scenario_estimator):
        assert format_histogram(scenario_estimator) == [
            "Bin 1: 1.00 - 5.00 | Count: 1",
            "Bin 2: 5.00 - 10.00 | Count: 2",
        ]

    def test_no_bins_no_lines(self):
        assert format_histogram(HistogramEstimator(0)) == []

    def test_state_logged_at_debug(self, scenario_estimator, caplog):
        with caplog.at_level(logging.DEBUG, logger="equidepth.utils.custom_log"):
            HistogramStateLogger().log_state(3, scenario_estimator)
        assert "[HIST] step=3 total=3 bins=2" in caplog.text
        assert "Bin 2: 5.00 - 10.00 | Count: 2" in caplog.text

    def test_echo_prints_state(self, scenario_estimator, capsys):
        lines = HistogramStateLogger(echo=True).log_state(3, scenario_estimator)
        out = capsys.readouterr().out
        assert out.startswith("Current histogram state:")
        for line in lines:
            assert line in out


class TestStreamingStat:

    def test_empty_summary(self):
        summary = StreamingStat().summary()
        assert summary["count"] == 0
        assert summary["min"] is None
        assert summary["max"] is None
        assert summary["mean"] == 0.0

    def test_moments(self):
        stat = StreamingStat()
        for x in [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]:
            stat.add(x)
        summary = stat.summary()
        assert summary["count"] == 8
        assert summary["mean"] == pytest.approx(5.0)
        assert summary["std"] == pytest.approx(math.sqrt(32.0 / 7.0))
        assert summary["min"] == 2.0
        assert summary["max"] == 9.0

    def test_constant_stream_has_zero_spread(self):
        stat = StreamingStat()
        for _ in range(10):
            stat.add(0.1)
        assert stat.std() == pytest.approx(0.0)


class TestPlotFig:

    def test_snapshot_record(self, scenario_estimator):
        record = snapshot_record(3, 10.0, scenario_estimator)
        assert record == {
            "step": 3, "sample": 10.0, "total_count": 3,
            "count_0": 1, "count_1": 2,
            "edge_0": 1.0, "edge_1": 5.0, "edge_2": 10.0,
        }

    def test_snapshots_csv(self, rng, tmp_path):
        estimator = HistogramEstimator(3)
        records = []
        for step, s in enumerate(rng.uniform(0, 1, size=20), start=1):
            estimator.add(s)
            records.append(snapshot_record(step, s, estimator))
        path = save_snapshots(records, str(tmp_path / "snapshots.csv"))

        df = pd.read_csv(path)
        assert len(df) == 20
        assert list(df["total_count"]) == list(range(1, 21))
        assert df.iloc[-1][["count_0", "count_1", "count_2"]].sum() == 20

    def test_plots_written(self, rng, tmp_path):
        estimator = HistogramEstimator(4)
        records = []
        for step, s in enumerate(rng.normal(size=30), start=1):
            estimator.add(s)
            records.append(snapshot_record(step, s, estimator))
        paths = report_paths(str(tmp_path))
        save_snapshots(records, paths["snapshots"])

        plot_histogram(estimator, paths["histogram"])
        plot_bin_counts(paths["snapshots"], paths["bin_counts"])
        assert (tmp_path / "histogram.png").stat().st_size > 0
        assert (tmp_path / "bin_counts.png").stat().st_size > 0
