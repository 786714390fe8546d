"""Tests for the infection time series and CSV export."""

from __future__ import annotations

import pytest

from malware_sim.simulation.timeseries import Sample, TimeSeries, to_csv


class TestTimeSeries:
    def test_append_in_order(self):
        ts = TimeSeries()
        ts.append(0, 1)
        ts.append(1, 3)
        assert len(ts) == 2
        assert ts.last == Sample(1, 3)
        assert ts.steps == [0, 1]
        assert ts.counts == [1, 3]

    def test_must_start_at_zero(self):
        with pytest.raises(ValueError):
            TimeSeries([(1, 1)])

    def test_rejects_gaps(self):
        ts = TimeSeries([(0, 1)])
        with pytest.raises(ValueError):
            ts.append(2, 1)

    def test_rejects_decreasing_count(self):
        ts = TimeSeries([(0, 3)])
        with pytest.raises(ValueError):
            ts.append(1, 2)

    def test_rejects_negative_count(self):
        with pytest.raises(ValueError):
            TimeSeries([(0, -1)])

    def test_snapshot_is_a_copy(self):
        ts = TimeSeries([(0, 1)])
        snap = ts.snapshot()
        ts.append(1, 2)
        assert snap == [Sample(0, 1)]


class TestCsvExport:
    def test_literal_output(self):
        ts = TimeSeries([(0, 1), (1, 3), (2, 5)])
        assert ts.to_csv() == "Step,Infected Nodes\n0,1\n1,3\n2,5"

    def test_empty_series_is_header_only(self):
        assert TimeSeries().to_csv() == "Step,Infected Nodes"

    def test_module_function_accepts_pairs(self):
        assert to_csv([Sample(0, 1), (1, 1)]) == "Step,Infected Nodes\n0,1\n1,1"
