"""Tests for data parsers (standard, ARIES) and record models."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from prodcast.data import (
    AriesParser,
    DataParser,
    ProductionRecord,
    StandardParser,
    detect_parser,
    iter_records,
    load_records,
    wells_from_records,
)
from prodcast.exceptions import DataFormatError


class TestStandardParser:
    """Tests for StandardParser."""

    def _make_df(self, **overrides):
        """Create a minimal production table."""
        data = {
            "Well ID": ["W002", "W001", "W001", "W002"],
            "Well Name": ["Jones 2H", "Smith 1H", "Smith 1H", "Jones 2H"],
            "Production Date": ["2020-02-01", "2020-02-01", "2020-01-01", "2020-01-01"],
            "Oil (BBL)": [5500.0, 4500.0, 5000.0, 6000.0],
            "Gas (MCF)": [28000.0, 22000.0, 25000.0, 30000.0],
        }
        data.update(overrides)
        return pd.DataFrame(data)

    def test_can_parse(self):
        assert StandardParser().can_parse(self._make_df())

    def test_cannot_parse_without_gas(self):
        df = self._make_df().drop(columns=["Gas (MCF)"])
        assert not StandardParser().can_parse(df)

    def test_cannot_parse_unrecognized(self):
        df = pd.DataFrame({"foo": [1], "bar": [2]})
        assert not StandardParser().can_parse(df)

    def test_parse_columns_and_order(self):
        records = StandardParser().parse(self._make_df())

        assert list(records.columns[:4]) == ["well_id", "date", "oil", "gas"]
        assert records["well_id"].tolist() == ["W001", "W001", "W002", "W002"]
        assert records["date"].tolist() == [
            pd.Timestamp("2020-01-01"), pd.Timestamp("2020-02-01"),
            pd.Timestamp("2020-01-01"), pd.Timestamp("2020-02-01"),
        ]
        assert records["oil"].tolist() == [5000.0, 4500.0, 6000.0, 5500.0]

    def test_extra_columns_carried(self):
        records = StandardParser().parse(self._make_df())
        assert "Well Name" in records.columns
        assert records.loc[0, "Well Name"] == "Smith 1H"

    def test_missing_volume_stays_undefined(self):
        df = self._make_df(**{"Oil (BBL)": [5500.0, None, 5000.0, "n/a"]})
        records = StandardParser().parse(df)
        assert np.isnan(records.loc[1, "oil"])  # W001 2020-02
        assert np.isnan(records.loc[2, "oil"])  # W002 2020-01

    def test_unparseable_date_raises(self):
        df = self._make_df(**{"Production Date": ["2020-02-01", "garbage", "2020-01-01", "2020-01-01"]})
        with pytest.raises(DataFormatError, match="unparseable dates.*garbage"):
            StandardParser().parse(df)

    def test_missing_date_raises(self):
        df = self._make_df(**{"Production Date": ["2020-02-01", None, "2020-01-01", "2020-01-01"]})
        with pytest.raises(DataFormatError, match="1 row"):
            StandardParser().parse(df)

    def test_missing_well_id_raises(self):
        df = self._make_df(**{"Well ID": ["W002", None, "W001", "W002"]})
        with pytest.raises(DataFormatError, match="missing values"):
            StandardParser().parse(df)

    def test_well_id_priority_over_api(self):
        df = self._make_df(API=["42-1", "42-2", "42-2", "42-1"])
        records = StandardParser().parse(df)
        assert set(records["well_id"]) == {"W001", "W002"}
        assert "API" in records.columns

    def test_api_used_when_only_identifier(self):
        df = self._make_df().drop(columns=["Well ID"])
        df["API Number"] = ["42-1", "42-2", "42-2", "42-1"]
        records = StandardParser().parse(df)
        assert set(records["well_id"]) == {"42-1", "42-2"}

    def test_parse_errors_are_value_errors(self):
        df = self._make_df(**{"Production Date": ["x", "y", "z", "w"]})
        with pytest.raises(ValueError):
            StandardParser().parse(df)


class TestAriesParser:
    """Tests for AriesParser."""

    def test_can_parse(self):
        df = pd.DataFrame({
            "PROPNUM": ["W001"], "YYYYMM": [202001],
            "MONTHLY_OIL": [5000], "MONTHLY_GAS": [25000],
        })
        assert AriesParser().can_parse(df)

    def test_cannot_parse_standard(self):
        df = pd.DataFrame({"well_id": ["W1"], "date": ["2020-01-01"], "oil": [1], "gas": [2]})
        assert not AriesParser().can_parse(df)

    def test_parse_yyyymm_numeric(self):
        df = pd.DataFrame({
            "PROPNUM": ["W001", "W001", "W002"],
            "YYYYMM": [202002, 202001, 202001],
            "MONTHLY_OIL": [4500, 5000, 6000],
            "MONTHLY_GAS": [22000, 25000, 30000],
        })
        records = AriesParser().parse(df)
        assert records["date"].iloc[0] == pd.Timestamp("2020-01-01")
        assert records["date"].iloc[1] == pd.Timestamp("2020-02-01")
        assert records["oil"].tolist() == [5000.0, 4500.0, 6000.0]

    def test_parse_year_month_string(self):
        df = pd.DataFrame({
            "PROPNUM": ["W001", "W001"],
            "P_DATE": ["2021-03", "2021-04"],
            "OIL": [100, 90],
            "GAS": [500, 450],
        })
        records = AriesParser().parse(df)
        assert records["date"].tolist() == [pd.Timestamp("2021-03-01"), pd.Timestamp("2021-04-01")]

    def test_parse_iso_dates(self):
        df = pd.DataFrame({
            "PROPNUM": ["W001"], "P_DATE": ["2021-03-01"], "OIL": [100], "GAS": [500],
        })
        records = AriesParser().parse(df)
        assert records["date"].iloc[0] == pd.Timestamp("2021-03-01")

    def test_bad_yyyymm_raises(self):
        df = pd.DataFrame({
            "PROPNUM": ["W001", "W001"], "YYYYMM": [202001, 202013],
            "MONTHLY_OIL": [1, 2], "MONTHLY_GAS": [1, 2],
        })
        with pytest.raises(DataFormatError, match="unparseable dates"):
            AriesParser().parse(df)


class TestDetectAndLoad:
    """Tests for format detection and file loading."""

    def test_detect_standard(self):
        df = pd.DataFrame({"well_id": ["W1"], "date": ["2020-01-01"], "oil": [1], "gas": [2]})
        assert isinstance(detect_parser(df), StandardParser)

    def test_detect_aries(self):
        df = pd.DataFrame({"PROPNUM": ["W1"], "YYYYMM": [202001], "OIL": [1], "GAS": [2]})
        assert isinstance(detect_parser(df), AriesParser)

    def test_detect_unknown_raises(self):
        with pytest.raises(DataFormatError, match="Could not detect data format"):
            detect_parser(pd.DataFrame({"foo": [1]}))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("x")
        with pytest.raises(DataFormatError, match="Unsupported file format"):
            DataParser.load_file(path)

    def test_load_records_csv(self, three_wells_csv):
        records = load_records(three_wells_csv)
        assert records["well_id"].nunique() == 3
        assert len(records) == 36 + 30 + 10
        assert records["date"].dtype.kind == "M"

    def test_load_records_bad_date(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text(
            "well_id,date,oil,gas\n"
            "W1,2020-01-01,10,20\n"
            "W1,,11,21\n"
        )
        with pytest.raises(DataFormatError, match="missing or unparseable dates"):
            load_records(path)


class TestRecordModels:
    """Tests for ProductionRecord, Well and ProductionData."""

    def test_iter_records(self, three_wells):
        first = next(iter_records(three_wells))
        assert isinstance(first, ProductionRecord)
        assert first.well_id == "W1"
        assert first.period == date(2015, 1, 1)

    def test_records_are_frozen(self):
        record = ProductionRecord("W1", date(2020, 1, 1), 1.0, 2.0)
        with pytest.raises(AttributeError):
            record.oil = 5.0  # type: ignore

    def test_wells_from_records(self, three_wells):
        wells = wells_from_records(three_wells)
        assert [w.well_id for w in wells] == ["W1", "W2", "W3"]

        w1 = wells[0]
        assert w1.production.n_months == 36
        assert w1.production.first_date == date(2015, 1, 1)
        assert w1.production.last_date == date(2017, 12, 1)
        assert wells[2].production.n_months == 10

    def test_metadata_from_extra_columns(self):
        records = pd.DataFrame({
            "well_id": ["W1", "W1"],
            "date": pd.to_datetime(["2020-01-01", "2020-02-01"]),
            "oil": [1.0, 2.0],
            "gas": [3.0, 4.0],
            "basin": [None, "Permian"],
        })
        well = wells_from_records(records)[0]
        assert well.metadata == {"basin": "Permian"}

    def test_get_product_unknown(self, three_wells):
        well = wells_from_records(three_wells)[0]
        with pytest.raises(ValueError, match="Unknown product"):
            well.production.get_product("water")  # type: ignore
