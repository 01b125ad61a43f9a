import pytest
from pydantic import ValidationError

from ingres.dataset import GroundwaterDataset
from ingres.schema import HistoricalRecord


def test_loads_all_districts(dataset):
    assert dataset.districts == ["Ariyalur", "Chennai", "Kanchipuram", "Madurai", "Thiruvallur"]
    assert len(dataset.records) == 30
    assert all(isinstance(r, HistoricalRecord) for r in dataset.records)


def test_forecast_year_follows_last_year(dataset):
    assert dataset.last_year == 2025
    assert dataset.forecast_year == 2026


def test_lookup_is_case_insensitive(dataset):
    upper = dataset.lookup("Chennai")
    lower = dataset.lookup("chennai")
    assert upper == lower
    assert len(upper) == 6
    assert {r.district for r in upper} == {"Chennai"}


def test_lookup_is_sorted_by_year(dataset):
    years = [r.year for r in dataset.lookup("MADURAI")]
    assert years == sorted(years) == list(range(2020, 2026))


def test_lookup_no_partial_or_fuzzy_match(dataset):
    assert dataset.lookup("Chen") == []
    assert dataset.lookup("Chennai district") == []
    assert dataset.lookup("") == []


def test_records_are_immutable(dataset):
    record = dataset.records[0]
    with pytest.raises(ValidationError):
        record.year = 1999


def test_to_json_uses_dataset_column_names(dataset):
    text = dataset.to_json(dataset.lookup("Ariyalur")[:1])
    assert '"District": "Ariyalur"' in text
    assert '"WaterLevel_m"' in text
    assert '"Annual_Extractable_GW_HAM"' in text


def test_duplicate_rows_are_rejected(tmp_path):
    csv = tmp_path / "dup.csv"
    csv.write_text(
        "State,District,Year,Recharge_MCM,WaterLevel_m,Rainfall_mm,Soil_type,Annual_Extractable_GW_HAM,Status\n"
        "Tamil Nadu,Chennai,2020,1.0,2.0,3.0,Clay,4,Safe\n"
        "Tamil Nadu,Chennai,2020,1.5,2.5,3.5,Clay,4,Safe\n"
    )
    with pytest.raises(ValueError, match="Duplicate"):
        GroundwaterDataset(csv)


def test_duplicates_differing_only_in_case_are_rejected(tmp_path):
    csv = tmp_path / "case.csv"
    csv.write_text(
        "State,District,Year,Recharge_MCM,WaterLevel_m,Rainfall_mm,Soil_type,Annual_Extractable_GW_HAM,Status\n"
        "Tamil Nadu,Chennai,2020,1.0,2.0,3.0,Clay,4,Safe\n"
        "Tamil Nadu,Chennai,2021,1.5,2.5,3.5,Clay,4,Safe\n"
        "Tamil Nadu,chennai,2020,1.2,2.2,3.2,Clay,4,Safe\n"
    )
    with pytest.raises(ValueError, match="Duplicate"):
        GroundwaterDataset(csv)


def test_path_with_quote_loads(tmp_path):
    folder = tmp_path / "o'brien"
    folder.mkdir()
    csv = folder / "groundwater.csv"
    csv.write_text(
        "State,District,Year,Recharge_MCM,WaterLevel_m,Rainfall_mm,Soil_type,Annual_Extractable_GW_HAM,Status\n"
        "Tamil Nadu,Chennai,2021,1.5,2.5,3.5,Clay,4,Safe\n"
        "Tamil Nadu,Chennai,2020,1.0,2.0,3.0,Clay,4,Safe\n"
    )
    dataset = GroundwaterDataset(csv)
    assert [r.year for r in dataset.lookup("chennai")] == [2020, 2021]


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        GroundwaterDataset(tmp_path / "nope.csv")


def test_missing_columns_are_rejected(tmp_path):
    csv = tmp_path / "short.csv"
    csv.write_text("State,District,Year\nTamil Nadu,Chennai,2020\n")
    with pytest.raises(ValueError, match="missing columns"):
        GroundwaterDataset(csv)
