"""Tests for the CSV ledger feed."""

from pathlib import Path

import pytest

from finledger.exceptions import FeedError
from finledger.ingestion.csv_feed import CsvTradeFeed
from finledger.models.enums import AssetClass


class TestCsvTradeFeed:
    def test_comma_delimited_english_headers(self, write_csv):
        path = write_csv("stocks.csv", [
            "Date,Ticker,Action,Quantity,Price,Type",
            "2023-03-15,ACME,Buy,10,100.5,",
            "2023-04-01,VWCE,Buy,4,95.5,ETF",
        ])
        result = CsvTradeFeed().parse(path)
        assert result.asset_class == AssetClass.STOCK
        assert result.source == "stocks.csv"
        assert len(result.rows) == 2
        row = result.rows[1]
        assert row.ticker == "VWCE"
        assert row.price == "95.5"
        assert row.type == "ETF"
        assert row.spent is None

    def test_semicolon_delimited_italian_headers(self, write_csv):
        path = write_csv("titoli.csv", [
            "Data;Titolo;Azione;Quantita;Prezzo;Tipo",
            "15/03/2023;ACME;Buy;10;100,50;",
            "01/04/2023;VWCE;Buy;4;95,50;ETF",
            "01/02/2024;ACME;Sell;4;130,00;",
        ])
        result = CsvTradeFeed().parse(path)
        assert len(result.rows) == 3
        assert result.rows[0].date == "15/03/2023"
        assert result.rows[0].price == "100,50"

    def test_crypto_spent_column(self, write_csv):
        path = write_csv("crypto.csv", [
            "Date,Asset,Action,Qty,Spent",
            "2023-05-01,BTC,Buy,0.5,10000",
            "2023-07-01,BTC,Staking,0.01,0",
        ])
        result = CsvTradeFeed(AssetClass.CRYPTO).parse(path)
        assert result.asset_class == AssetClass.CRYPTO
        assert result.rows[0].spent == "10000"
        assert result.rows[0].price is None

    def test_blank_rows_skipped(self, write_csv):
        path = write_csv("stocks.csv", [
            "Date,Ticker,Action,Quantity,Price",
            "2023-03-15,ACME,Buy,10,100",
            ",,,,",
            "",
            "2023-03-16,ACME,Buy,1,101",
        ])
        assert len(CsvTradeFeed().parse(path).rows) == 2

    def test_windows_encoded_export(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes(
            "Data;Titolo;Quantita;Prezzo\n01/02/2024;SOCI\u00c9T\u00c9;3;10,50\n".encode("cp1252")
        )
        result = CsvTradeFeed().parse(path)
        assert result.rows[0].ticker == "SOCI\u00c9T\u00c9"

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "binary.csv"
        path.write_bytes(b"Date,Ticker,Quantity\n2024-01-01,\x81\x8d,1\n")
        with pytest.raises(FeedError, match="unsupported text encoding"):
            CsvTradeFeed().parse(path)

    def test_missing_required_column(self, write_csv):
        path = write_csv("bad.csv", [
            "Date,Action,Price",
            "2023-03-15,Buy,100",
            "2023-03-16,Buy,101",
        ])
        with pytest.raises(FeedError, match="ticker, quantity"):
            CsvTradeFeed().parse(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            CsvTradeFeed().parse(Path("/nonexistent/ledger.csv"))

    def test_empty_file(self, write_csv, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        feed = CsvTradeFeed()
        result = feed.parse(path)
        assert result.rows == []
        assert feed.validate(result) == ["empty.csv: no transaction rows"]

    def test_validate_ok(self, write_csv):
        path = write_csv("stocks.csv", [
            "Date,Ticker,Quantity",
            "2023-03-15,ACME,10",
            "2023-03-16,ACME,2",
        ])
        feed = CsvTradeFeed()
        assert feed.validate(feed.parse(path)) == []
