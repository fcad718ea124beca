"""
Unit tests for the stock index builder.
"""

import json

import pytest

from stockdash.core import storage
from stockdash.core.errors import DegenerateSeriesError, InsufficientHistoryError
from stockdash.pipeline.index_builder import (
    build_stocks_index,
    build_summary,
    filter_equities,
    round_half_away,
)

from conftest import write_price_csv

META = {
    "Symbol": "ACME",
    "Security Name": " Acme Corp ",
    "Listing Exchange": "N",
    "Market Category": " ",
    "ETF": "N",
}


def _rows(*closes):
    return [{"Date": f"2024-01-0{i + 1}", "Close": c} for i, c in enumerate(closes)]


class TestRoundHalfAway:
    """Tests for round_half_away."""

    @pytest.mark.parametrize(
        "value,expected",
        [(5.0, 5.0), (1.234, 1.23), (1.235001, 1.24), (0.125, 0.13), (-0.125, -0.13), (-0.001, 0.0)],
    )
    def test_rounding(self, value, expected):
        """Test two-place rounding with halves away from zero."""
        assert round_half_away(value) == expected

    def test_negative_zero_normalized(self):
        """Test tiny negatives do not serialize as -0.0."""
        assert str(round_half_away(-0.0001)) == "0.0"


class TestFilterEquities:
    """Tests for filter_equities."""

    def test_only_exact_y_is_etf(self):
        """Test the ETF flag is matched exactly."""
        rows = [
            {"Symbol": "A", "ETF": "Y"},
            {"Symbol": "B", "ETF": "N"},
            {"Symbol": "C", "ETF": "y"},
            {"Symbol": "D", "ETF": ""},
        ]
        assert [r["Symbol"] for r in filter_equities(rows)] == ["B", "C", "D"]


class TestBuildSummary:
    """Tests for build_summary."""

    def test_variation_from_last_two_closes(self):
        """Test previousClose 100 and lastPrice 105 give 5.00 and 5.00%."""
        summary = build_summary(META, _rows("90", "100", "105"))
        assert summary.last_price == 105.0
        assert summary.variation == 5.0
        assert summary.variation_percent == 5.0
        assert summary.last_date == "2024-01-03"

    def test_negative_variation(self):
        """Test a falling close yields negative figures."""
        summary = build_summary(META, _rows("200", "190"))
        assert summary.variation == -10.0
        assert summary.variation_percent == -5.0

    def test_identity_fields_trimmed(self):
        """Test name/exchange/category are trimmed and isEtf is False."""
        summary = build_summary(META, _rows("1", "2"))
        assert summary.symbol == "ACME"
        assert summary.name == "Acme Corp"
        assert summary.exchange == "N"
        assert summary.market_category == ""
        assert summary.is_etf is False

    def test_name_defaults_to_symbol(self):
        """Test a blank security name falls back to the symbol."""
        summary = build_summary({"Symbol": "XYZ"}, _rows("1", "2"))
        assert summary.name == "XYZ"
        assert summary.exchange == ""

    def test_zero_previous_close_rejected(self):
        """Test previousClose of exactly zero is degenerate."""
        with pytest.raises(DegenerateSeriesError):
            build_summary(META, _rows("0", "5"))

    def test_non_numeric_close_rejected(self):
        """Test a non-numeric close is degenerate."""
        with pytest.raises(DegenerateSeriesError):
            build_summary(META, _rows("10", "n/a"))

    def test_single_row_rejected(self):
        """Test one observation is insufficient history."""
        with pytest.raises(InsufficientHistoryError):
            build_summary(META, _rows("10"))


class TestBuildStocksIndex:
    """Tests for build_stocks_index."""

    def test_builds_index_and_counts_skips(self, dataset):
        """Test eligible symbols are indexed and anomalies are skipped and counted."""
        master = storage.read_master_metadata(dataset.master_metadata_path)
        index, report = build_stocks_index(
            master, dataset.stock_prices_dir, dataset.prices_output_dir
        )

        assert [s.symbol for s in index.stocks] == ["AAPL", "MSFT"]
        assert report.eligible == 5
        assert report.processed == 2
        assert set(report.skipped) == {"ONE", "ZERO", "GONE"}
        assert report.skipped["GONE"] == "missing price file"

    def test_price_artifacts_only_for_indexed_symbols(self, dataset):
        """Test prices/<SYMBOL>.json is written for indexed symbols only."""
        master = storage.read_master_metadata(dataset.master_metadata_path)
        build_stocks_index(master, dataset.stock_prices_dir, dataset.prices_output_dir)

        written = sorted(p.name for p in dataset.prices_output_dir.iterdir())
        assert written == ["AAPL.json", "MSFT.json"]

        data = json.loads((dataset.prices_output_dir / "AAPL.json").read_text())
        assert data["symbol"] == "AAPL"
        assert len(data["prices"]) == 3
        assert set(data["prices"][0]) == {"date", "open", "high", "low", "close", "volume"}

    def test_two_rows_included_one_row_excluded(self, tmp_path):
        """Test the two-observation boundary."""
        write_price_csv(tmp_path / "TWO.csv", [10.0, 11.0])
        write_price_csv(tmp_path / "ONE.csv", [10.0])
        master = [{"Symbol": "TWO", "ETF": "N"}, {"Symbol": "ONE", "ETF": "N"}]

        index, report = build_stocks_index(master, tmp_path)

        assert [s.symbol for s in index.stocks] == ["TWO"]
        assert "ONE" in report.skipped

    def test_unreadable_file_is_skipped(self, tmp_path):
        """Test a per-symbol read error does not abort the batch."""
        (tmp_path / "BAD.csv").write_bytes(b"Date,Close\n\xff\xfe,\x00\n")
        write_price_csv(tmp_path / "OK.csv", [1.0, 2.0])
        master = [{"Symbol": "BAD", "ETF": "N"}, {"Symbol": "OK", "ETF": "N"}]

        index, report = build_stocks_index(master, tmp_path)

        assert [s.symbol for s in index.stocks] == ["OK"]
        assert "BAD" in report.skipped

    def test_trailing_comma_rows_keep_header_mapping(self, tmp_path):
        """Test rows with a trailing delimiter still map fields by header name."""
        (tmp_path / "TRAIL.csv").write_text(
            "Date,Open,High,Low,Close,Adj Close,Volume\n"
            "2024-01-01,1,2,0.5,10,9,500,\n"
            "2024-01-02,1,2,0.5,11,9,600,\n",
            encoding="utf-8",
        )
        master = [{"Symbol": "TRAIL", "ETF": "N"}]

        index, report = build_stocks_index(master, tmp_path, tmp_path / "out")

        assert report.processed == 1
        stock = index.stocks[0]
        assert stock.last_date == "2024-01-02"
        assert stock.last_price == 11.0
        assert stock.variation == 1.0

        data = json.loads((tmp_path / "out" / "TRAIL.json").read_text())
        assert data["prices"][0] == {
            "date": "2024-01-01", "open": 1.0, "high": 2.0, "low": 0.5, "close": 10.0, "volume": 500,
        }
