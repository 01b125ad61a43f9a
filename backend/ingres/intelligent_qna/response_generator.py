import html
import re

from ingres.config import BOT_NAME

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")


def greeting_text():
    return (
        f"Hello! I am {BOT_NAME}. How can I help you analyze groundwater data today? "
        "You can ask me for suggestions, predictions, or to visualize data for a district."
    )


def graph_text(district):
    return f"Visualizing data for {district}"


def no_data_text(district):
    return f"Sorry, I couldn't find data for {district}."


def forecast_pending_text(district, year):
    return f"Hold on, I am running a forecast for {district} for the year {year}..."


def forecast_text(prediction):
    return (
        f"Here is the forecast for {prediction.district} for {prediction.year}. "
        f"My confidence in this forecast is **{prediction.confidence}**."
    )


def forecast_failed_text():
    return "I'm sorry, I couldn't generate a reliable forecast at this time."


def render_html(text):
    """Escape text for display and turn **bold** spans into <strong> tags."""
    return _BOLD_RE.sub(r"<strong>\1</strong>", html.escape(text))


def speech_text(entry):
    """
    Plain string handed to the text-to-speech provider for an entry.
    Prediction entries also read out the forecast rationale.
    """
    text = _BOLD_RE.sub(r"\1", entry.text)
    if entry.type == "prediction":
        text = f"{text} My rationale is: {entry.prediction.rationale}"
    return text
