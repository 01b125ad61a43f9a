"""
Data model for the Ingres chat backend
Column names match the dataset CSV exactly (they are also the JSON keys the model sees)
"""

import uuid
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

SCHEMA = {
    "groundwater": [
        "State",
        "District",
        "Year",
        "Recharge_MCM",
        "WaterLevel_m",
        "Rainfall_mm",
        "Soil_type",
        "Annual_Extractable_GW_HAM",
        "Status",
    ],
}

NUMERIC_COLUMNS = ["Recharge_MCM", "WaterLevel_m", "Rainfall_mm", "Annual_Extractable_GW_HAM"]

# Keys the forecast reply must carry
FORECAST_KEYS = ["Recharge_MCM", "WaterLevel_m", "Rainfall_mm", "confidence", "rationale"]

Status = Literal["Safe", "Semi-Critical", "Critical"]
Confidence = Literal["High", "Medium", "Low"]
Sender = Literal["user", "bot"]


class HistoricalRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    state: str = Field(alias="State")
    district: str = Field(alias="District")
    year: int = Field(alias="Year")
    recharge_mcm: float = Field(alias="Recharge_MCM")
    water_level_m: float = Field(alias="WaterLevel_m")
    rainfall_mm: float = Field(alias="Rainfall_mm")
    soil_type: str = Field(alias="Soil_type")
    annual_extractable_gw_ham: float = Field(alias="Annual_Extractable_GW_HAM")
    status: Status = Field(alias="Status")


class ForecastRecord(BaseModel):
    """One forecast point extending a district's series by a year."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    district: str = Field(alias="District")
    year: int = Field(alias="Year")
    recharge_mcm: float = Field(alias="Recharge_MCM")
    water_level_m: float = Field(alias="WaterLevel_m")
    rainfall_mm: float = Field(alias="Rainfall_mm")
    confidence: Confidence
    rationale: str


def _new_id() -> str:
    return uuid.uuid4().hex


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    text: str
    sender: Sender


class TextEntry(_Entry):
    type: Literal["text"] = "text"


class GraphEntry(_Entry):
    type: Literal["graph"] = "graph"
    district_data: List[HistoricalRecord]


class PredictionEntry(_Entry):
    type: Literal["prediction"] = "prediction"
    district_data: List[HistoricalRecord]
    prediction: ForecastRecord


ConversationEntry = Annotated[
    Union[TextEntry, GraphEntry, PredictionEntry],
    Field(discriminator="type"),
]


class LanguageOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    voice_name: str
