"""Sentinel-command parsing for raw model replies."""
from dataclasses import dataclass
from typing import Optional, Union

SHOW_GRAPH_PREFIX = "[SHOW_GRAPH:"
PREDICT_PREFIX = "[PREDICT:"


@dataclass(frozen=True)
class ShowGraph:
    district: str


@dataclass(frozen=True)
class Predict:
    district: str


@dataclass(frozen=True)
class PlainText:
    text: str


Intent = Union[ShowGraph, Predict, PlainText]


def _extract_district(reply_text: str) -> Optional[str]:
    """Text between the first ':' and the first ']', trimmed; None when malformed."""
    start = reply_text.find(":")
    end = reply_text.find("]")
    if start == -1 or end == -1 or end < start:
        return None
    district = reply_text[start + 1:end].strip()
    if not district or "\n" in district:
        return None
    return district


def classify(reply_text: str) -> Intent:
    """
    Classifies a raw model reply into a show-graph command, a predict command
    or plain conversational text.
    """
    for prefix, command in ((SHOW_GRAPH_PREFIX, ShowGraph), (PREDICT_PREFIX, Predict)):
        if reply_text.startswith(prefix):
            district = _extract_district(reply_text)
            if district is None:
                # unterminated or empty command
                return PlainText(reply_text)
            return command(district)
    return PlainText(reply_text)
