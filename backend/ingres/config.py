"""
Runtime configuration for the Ingres chat backend.
Values come from the environment (.env for local, host env in production).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from ingres.schema import LanguageOption

# -----------------------------------------------------------------------------
# PATHS
# -----------------------------------------------------------------------------
PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parents[1]
DATA_DIR = PACKAGE_DIR / "data"
FRONTEND_DIR = BASE_DIR / "frontend"

load_dotenv(BASE_DIR / ".env")

# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
DATASET_PATH = Path(os.getenv("INGRES_DATASET_PATH", str(DATA_DIR / "groundwater.csv")))
MODEL = os.getenv("INGRES_MODEL", "llama-3.3-70b-versatile")
CHAT_TEMPERATURE = float(os.getenv("INGRES_CHAT_TEMPERATURE", "0.7"))
FORECAST_TEMPERATURE = float(os.getenv("INGRES_FORECAST_TEMPERATURE", "0.2"))
PORT = int(os.getenv("PORT", "8000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

BOT_NAME = "Ingres"

LANGUAGES = [
    LanguageOption(code="en-US", name="English", voice_name="Google US English"),
    LanguageOption(code="ta-IN", name="Tamil", voice_name="Google தமிழ்"),
    LanguageOption(code="hi-IN", name="Hindi", voice_name="Google हिन्दी"),
    LanguageOption(code="kn-IN", name="Kannada", voice_name="Google ಕನ್ನಡ"),
    LanguageOption(code="te-IN", name="Telugu", voice_name="Google తెలుగు"),
    LanguageOption(code="ur-IN", name="Urdu", voice_name="Google اردو"),
    LanguageOption(code="bn-IN", name="Bengali", voice_name="Google বাংলা"),
    LanguageOption(code="ml-IN", name="Malayalam", voice_name="Google മലയാളം"),
    LanguageOption(code="pa-IN", name="Punjabi", voice_name="Google ਪੰਜਾਬੀ"),
    LanguageOption(code="gu-IN", name="Gujarati", voice_name="Google ગુજરાતી"),
    LanguageOption(code="or-IN", name="Odia", voice_name="Google ଓଡ଼ିଆ"),
]
DEFAULT_LANGUAGE = LANGUAGES[0]


def find_language(code) -> LanguageOption:
    """Return the language for a locale code, English when unknown."""
    for lang in LANGUAGES:
        if lang.code == code:
            return lang
    return DEFAULT_LANGUAGE


def get_api_key() -> str:
    """Read GROQ_API_KEY, failing loudly if it is not configured."""
    api_key = os.getenv("GROQ_API_KEY")
    if not api_key:
        raise EnvironmentError("GROQ_API_KEY not found. Add it in .env or the host environment.")
    return api_key
