import asyncio

from ingres.llm_session import CONNECTION_APOLOGY, reset_session, send_turn
from ingres.schema import ForecastRecord, GraphEntry, PredictionEntry, TextEntry


def test_system_instruction_embeds_dataset_and_commands(dataset):
    session = reset_session([], dataset)
    assert "[SHOW_GRAPH:DISTRICT_NAME]" in session.system_instruction
    assert "[PREDICT:DISTRICT_NAME]" in session.system_instruction
    assert '"District": "Thiruvallur"' in session.system_instruction
    assert "2026" in session.system_instruction
    assert session.history == []


def test_history_replays_text_entries_only(dataset):
    rows = dataset.lookup("Madurai")
    entries = [
        TextEntry(text="Hello!", sender="bot"),
        TextEntry(text="show madurai", sender="user"),
        GraphEntry(text="Visualizing data for Madurai", sender="bot", district_data=rows),
        TextEntry(text="thanks", sender="user"),
        TextEntry(text="You're welcome", sender="bot"),
    ]
    session = reset_session(entries, dataset)
    assert session.history == [
        {"role": "assistant", "content": "Hello!"},
        {"role": "user", "content": "show madurai"},
        {"role": "user", "content": "thanks"},
        {"role": "assistant", "content": "You're welcome"},
    ]


def test_prediction_entries_are_not_replayed(dataset):
    prediction = ForecastRecord(
        District="Chennai", Year=2026, Recharge_MCM=1, WaterLevel_m=2, Rainfall_mm=3,
        confidence="Low", rationale="r",
    )
    entries = [PredictionEntry(text="forecast", sender="bot", district_data=[], prediction=prediction)]
    assert reset_session(entries, dataset).history == []


def test_send_turn_prefixes_language(dataset, fake_client):
    client = fake_client("Vanakkam!")
    session = reset_session([TextEntry(text="Hello!", sender="bot")], dataset)

    reply = asyncio.run(send_turn(session, "hi", "Tamil", client=client))

    assert reply == "Vanakkam!"
    messages = client.calls[0]["messages"]
    assert messages[0]["role"] == "system"
    assert messages[1] == {"role": "assistant", "content": "Hello!"}
    assert messages[-1] == {"role": "user", "content": "(Respond in Tamil) hi"}


def test_send_turn_turns_failures_into_apology(dataset, fake_client):
    client = fake_client(RuntimeError("service down"))
    session = reset_session([], dataset)
    assert asyncio.run(send_turn(session, "hi", "English", client=client)) == CONNECTION_APOLOGY


def test_send_turn_handles_empty_content(dataset, fake_client):
    client = fake_client(None)
    assert asyncio.run(send_turn(reset_session([], dataset), "hi", "English", client=client)) == ""
