#!/usr/bin/env python3
"""
Ingres LLM session manager
Builds the conversational session (system instruction + replayed history) and
sends one user turn to Groq. Sessions are plain values rebuilt before every turn.
"""
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional

from groq import AsyncGroq

from ingres.config import BOT_NAME, CHAT_TEMPERATURE, MODEL, get_api_key

logger = logging.getLogger(__name__)

CONNECTION_APOLOGY = "Sorry, I'm having trouble connecting right now. Please try again later."

SYSTEM_INSTRUCTION_TEMPLATE = """You are '{bot_name}', an advanced AI assistant specializing in groundwater analysis and conservation. Your purpose is to help users understand groundwater data, predict future trends, and provide actionable suggestions for sustainability.

You have access to historical groundwater data for several districts in {states} from {first_year} to {last_year}. This data is provided below.

Your capabilities:
1.  **Analyze Data:** Answer questions about the provided historical data.
2.  **Visualize Data:** If asked to show a graph, chart, or visualize data for a district, you MUST respond with ONLY the special command: `[SHOW_GRAPH:DISTRICT_NAME]`. Replace DISTRICT_NAME with the relevant district (e.g., {example_districts}).
3.  **Predict Trends:** If asked for a forecast or prediction for the next year ({forecast_year}) for a specific district, you MUST respond with ONLY the special command: `[PREDICT:DISTRICT_NAME]`.
4.  **Provide Suggestions:** When asked for advice, conservation tips, or suggestions, analyze the district's status. Your suggestions MUST be short and conversational, like you are chatting with a friend. For instance: "The water level in Chennai is critical. We could all help by trying rainwater harvesting or fixing leaky taps at home. Every little bit helps!"
5.  **Borewell Suggestions:** If a user asks about building a borewell or drilling depth in a specific district, you MUST analyze the latest available data for that district, specifically the 'Status' and 'WaterLevel_m' fields, and give a conversational recommendation about the drilling depth:
    *   If the latest 'Status' is 'Safe': tell them the groundwater is safe, that water should be found at around [WaterLevel_m] meters, and that drilling a bit deeper helps ensure a consistent supply.
    *   If the latest 'Status' is 'Semi-Critical': tell them they can drill but should be careful, plan for at least [WaterLevel_m] meters, and consider rainwater harvesting.
    *   If the latest 'Status' is 'Critical': tell them the groundwater is at a critical level, that a borewell would need to go deeper than [WaterLevel_m] meters, that supply may not be reliable, and strongly suggest conservation and rainwater harvesting.
    *   For general borewell questions not tied to a specific district, provide general conservation tips like rainwater harvesting or checking for leaks.
6.  **Be Multilingual:** You MUST respond in the language of the user's last prompt.
7.  **General Conversation:** For greetings or general questions, respond politely and guide the user towards your capabilities.


Here is the historical data you must use:
{dataset_json}
"""


@dataclass
class ChatSession:
    """One logical conversation: the fixed system prompt plus replayed history."""

    system_instruction: str
    history: List[Dict[str, str]] = field(default_factory=list)
    model: str = MODEL

    def messages_for(self, user_text: str, language: str) -> List[Dict[str, str]]:
        return (
            [{"role": "system", "content": self.system_instruction}]
            + list(self.history)
            + [{"role": "user", "content": f"(Respond in {language}) {user_text}"}]
        )


@lru_cache(maxsize=1)
def get_client() -> AsyncGroq:
    """Shared Groq client, created on first use."""
    return AsyncGroq(api_key=get_api_key())


def build_system_instruction(dataset) -> str:
    records = dataset.records
    states = sorted({r.state for r in records})
    return SYSTEM_INSTRUCTION_TEMPLATE.format(
        bot_name=BOT_NAME,
        states=", ".join(states),
        first_year=min(r.year for r in records),
        last_year=dataset.last_year,
        forecast_year=dataset.forecast_year,
        example_districts=", ".join(dataset.districts[:2]),
        dataset_json=dataset.to_json(),
    )


def reset_session(prior_entries, dataset, model: Optional[str] = None) -> ChatSession:
    """
    Start a fresh session whose history mirrors the visible transcript.
    Only plain-text entries are replayed; graph and prediction entries carry
    no conversational context.
    """
    history = [
        {"role": "user" if entry.sender == "user" else "assistant", "content": entry.text}
        for entry in prior_entries
        if entry.type == "text"
    ]
    return ChatSession(
        system_instruction=build_system_instruction(dataset),
        history=history,
        model=model or MODEL,
    )


async def send_turn(session: ChatSession, user_text: str, language: str, client=None) -> str:
    """Send one user utterance and return the raw reply text. Never raises."""
    try:
        client = client or get_client()
        response = await client.chat.completions.create(
            model=session.model,
            messages=session.messages_for(user_text, language),
            temperature=CHAT_TEMPERATURE,
        )
        return response.choices[0].message.content or ""
    except Exception as e:
        logger.error(f"Error fetching chat response from Groq: {e}", exc_info=True)
        return CONNECTION_APOLOGY
