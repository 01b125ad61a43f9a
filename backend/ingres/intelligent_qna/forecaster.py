"""
One-year-ahead forecast requests.
Runs outside the chat session: one standalone prompt, one JSON reply.
"""
import json
import logging
import re

from pydantic import ValidationError

from ingres.config import FORECAST_TEMPERATURE, MODEL
from ingres.llm_session import get_client
from ingres.schema import FORECAST_KEYS, ForecastRecord

logger = logging.getLogger(__name__)

FORECAST_PROMPT = """
You are a data scientist specializing in hydrological time-series analysis.
(Respond in {language})
Based on the following time-series data for the {district} district, perform a sophisticated forecast to predict the values for the year {year}. Consider the underlying trends, acceleration/deceleration in changes, and historical volatility. Use a method conceptually similar to exponential smoothing to weigh recent years more heavily.

Data: {data}

Provide your prediction as a single, clean JSON object with NO other text or markdown. The JSON object must have these exact keys: "Recharge_MCM" (number), "WaterLevel_m" (number), "Rainfall_mm" (number), "confidence" (string, one of "High", "Medium", or "Low"), and "rationale" (string, a brief one-sentence explanation for your confidence level).
"""


class ForecastError(Exception):
    """The forecast could not be produced or its reply could not be trusted."""


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` if the model added them."""
    text = text.strip()
    text = re.sub(r'^```(?:json)?\s*', '', text, flags=re.IGNORECASE)
    text = re.sub(r'\s*```$', '', text)
    return text.strip()


def build_forecast_prompt(district: str, language: str, dataset) -> str:
    rows = dataset.lookup(district)
    return FORECAST_PROMPT.format(
        language=language,
        district=district,
        year=dataset.forecast_year,
        data=dataset.to_json(rows),
    )


def parse_forecast(reply_text: str, district: str, year: int) -> ForecastRecord:
    """
    Strictly parse the model's JSON reply into a ForecastRecord.
    District and Year always come from the caller, never from the reply.
    """
    try:
        payload = json.loads(strip_code_fence(reply_text))
    except (TypeError, ValueError) as e:
        raise ForecastError(f"Forecast reply is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ForecastError(f"Forecast reply is not a JSON object: {type(payload).__name__}")
    if "error" in payload:
        raise ForecastError(str(payload["error"]))

    missing = [k for k in FORECAST_KEYS if k not in payload]
    if missing:
        raise ForecastError(f"Forecast reply is missing keys: {missing}")

    fields = {k: payload[k] for k in FORECAST_KEYS}
    try:
        return ForecastRecord.model_validate({**fields, "District": district, "Year": year}, strict=True)
    except ValidationError as e:
        raise ForecastError(f"Forecast reply has invalid values: {e}") from e


async def request_forecast(district: str, language: str, dataset, client=None) -> ForecastRecord:
    """Ask the model for next year's values for one district."""
    prompt = build_forecast_prompt(district, language, dataset)
    try:
        client = client or get_client()
        response = await client.chat.completions.create(
            model=MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=FORECAST_TEMPERATURE,
            response_format={"type": "json_object"},
        )
        reply_text = response.choices[0].message.content or ""
    except Exception as e:
        logger.error(f"Error fetching forecast from Groq for {district}: {e}", exc_info=True)
        raise ForecastError(f"Failed to generate prediction for {district}.") from e

    logger.info(f"Forecast reply for {district}: {reply_text}")
    return parse_forecast(reply_text, district, dataset.forecast_year)
