from ingres.console import format_entry
from ingres.schema import ForecastRecord, GraphEntry, PredictionEntry, TextEntry


def test_text_entry():
    assert format_entry(TextEntry(text="Hi!", sender="bot")) == "🤖 Ingres: Hi!"


def test_graph_entry_lists_every_year(dataset):
    rows = dataset.lookup("Ariyalur")
    out = format_entry(GraphEntry(text="Visualizing data for Ariyalur", sender="bot", district_data=rows))
    lines = out.splitlines()
    assert len(lines) == 2 + len(rows)
    assert lines[2].strip().startswith("2020")


def test_prediction_entry_appends_forecast_row(dataset):
    rows = dataset.lookup("Chennai")
    prediction = ForecastRecord(
        District="Chennai", Year=2026, Recharge_MCM=165.0, WaterLevel_m=10.5, Rainfall_mm=1200.0,
        confidence="Medium", rationale="Steady decline.",
    )
    out = format_entry(PredictionEntry(text="forecast", sender="bot", district_data=rows, prediction=prediction))
    assert "2026" in out and "(forecast)" in out
    assert out.rstrip().endswith("Rationale: Steady decline.")
