#!/usr/bin/env python3
"""
Ingres conversation orchestration
Drives one chat turn at a time: user text -> chat session -> command
interpretation -> optional forecast -> transcript entries.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional

from ingres.config import DEFAULT_LANGUAGE
from ingres.intelligent_qna import response_generator as rg
from ingres.intelligent_qna.command_parser import Predict, ShowGraph, classify
from ingres.intelligent_qna.forecaster import ForecastError, request_forecast
from ingres.llm_session import reset_session, send_turn
from ingres.schema import ConversationEntry, GraphEntry, LanguageOption, PredictionEntry, TextEntry

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"
    AWAITING_FORECAST = "awaiting_forecast"


class Conversation:
    """
    Append-only transcript plus the turn state machine.

    Only one turn runs at a time: a submit that arrives while a reply or a
    forecast is outstanding is dropped, not queued.
    """

    def __init__(
        self,
        dataset,
        client=None,
        language: LanguageOption = DEFAULT_LANGUAGE,
        on_entry: Optional[Callable] = None,
    ):
        self.dataset = dataset
        self.client = client
        self.language = language
        self.on_entry = on_entry
        self.state = TurnState.IDLE
        self._entries: List[ConversationEntry] = []
        self._append(TextEntry(text=rg.greeting_text(), sender="bot"))

    @property
    def transcript(self):
        return tuple(self._entries)

    @property
    def busy(self) -> bool:
        return self.state is not TurnState.IDLE

    def can_accept(self, text: str) -> bool:
        return bool(text and text.strip()) and not self.busy

    def _append(self, entry):
        self._entries.append(entry)
        if self.on_entry is not None:
            self.on_entry(entry)
        return entry

    async def submit(self, text: str, language: Optional[LanguageOption] = None) -> List[ConversationEntry]:
        """Run one turn and return the entries it appended ([] if the input was dropped)."""
        if not self.can_accept(text):
            logger.info(f"Dropped input (state={self.state.value}): {text!r}")
            return []

        self.state = TurnState.AWAITING_REPLY
        if language is not None:
            self.language = language
        start = len(self._entries)
        try:
            prior = list(self._entries)
            self._append(TextEntry(text=text, sender="user"))
            logger.info(f"Received question: {text}")

            session = reset_session(prior, self.dataset)
            reply = await send_turn(session, text, self.language.name, client=self.client)
            intent = classify(reply)
            logger.info(f"Reply classified as {type(intent).__name__}")

            if isinstance(intent, ShowGraph):
                self._show_graph(intent.district)
            elif isinstance(intent, Predict):
                await self._predict(intent.district)
            else:
                self._append(TextEntry(text=intent.text, sender="bot"))
        finally:
            self.state = TurnState.IDLE

        return self._entries[start:]

    def _show_graph(self, district: str):
        rows = self.dataset.lookup(district)
        if not rows:
            self._append(TextEntry(text=rg.no_data_text(district), sender="bot"))
            return
        self._append(GraphEntry(text=rg.graph_text(rows[0].district), sender="bot", district_data=rows))

    async def _predict(self, district: str):
        rows = self.dataset.lookup(district)
        if not rows:
            self._append(TextEntry(text=rg.no_data_text(district), sender="bot"))
            return

        district = rows[0].district
        self._append(
            TextEntry(text=rg.forecast_pending_text(district, self.dataset.forecast_year), sender="bot")
        )
        self.state = TurnState.AWAITING_FORECAST
        try:
            prediction = await request_forecast(district, self.language.name, self.dataset, client=self.client)
        except ForecastError as e:
            logger.error(f"Failed to produce forecast for {district}: {e}")
            self._append(TextEntry(text=rg.forecast_failed_text(), sender="bot"))
            return

        self._append(
            PredictionEntry(
                text=rg.forecast_text(prediction),
                sender="bot",
                district_data=rows,
                prediction=prediction,
            )
        )
