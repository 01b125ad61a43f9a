import argparse
import logging
import pandas as pd
from pathlib import Path

from ingres.config import DATASET_PATH
from ingres.schema import NUMERIC_COLUMNS, SCHEMA, HistoricalRecord

# --- Setup ---
BASE = Path(__file__).resolve().parents[1]
RAW_DIR = BASE / "data" / "raw"

ENCODINGS = ["utf-8", "latin1", "windows-1252"]

# normalized header -> dataset column
COLUMN_ALIASES = {
    "state": "State",
    "state_name": "State",
    "district": "District",
    "district_name": "District",
    "year": "Year",
    "recharge_mcm": "Recharge_MCM",
    "annual_recharge_mcm": "Recharge_MCM",
    "recharge": "Recharge_MCM",
    "waterlevel_m": "WaterLevel_m",
    "water_level_m": "WaterLevel_m",
    "depth_to_water_level": "WaterLevel_m",
    "rainfall_mm": "Rainfall_mm",
    "annual_rainfall_mm": "Rainfall_mm",
    "rainfall": "Rainfall_mm",
    "soil_type": "Soil_type",
    "soil": "Soil_type",
    "annual_extractable_gw_ham": "Annual_Extractable_GW_HAM",
    "extractable_gw_ham": "Annual_Extractable_GW_HAM",
    "status": "Status",
    "category": "Status",
}


# --- Helper functions ---
def try_read_csv(path):
    """Try multiple encodings until the file reads successfully."""
    for enc in ENCODINGS:
        try:
            df = pd.read_csv(path, encoding=enc, low_memory=False)
            logging.info(f"Read {path.name} with encoding {enc}")
            return df, enc
        except UnicodeDecodeError:
            logging.warning(f"Encoding {enc} failed for {path.name}, trying next...")
    raise ValueError(f"All encodings failed for {path.name}")


def normalize_headers(df):
    """Clean up column headers and map them onto the dataset columns."""
    df.columns = (
        df.columns.str.strip()
        .str.lower()
        .str.replace(" ", "_")
        .str.replace(r"[()\-./]", "_", regex=True)
        .str.replace(r"_+", "_", regex=True)
        .str.strip("_")
    )
    df = df.rename(columns={c: COLUMN_ALIASES[c] for c in df.columns if c in COLUMN_ALIASES})
    missing = [c for c in SCHEMA["groundwater"] if c not in df.columns]
    if missing:
        raise ValueError(f"Raw file is missing columns: {missing}")
    return df[SCHEMA["groundwater"]].copy()


def clean_dataframe(df):
    """Strip strings, coerce numerics, drop rows that cannot be used."""
    for col in ("State", "District", "Soil_type", "Status"):
        df[col] = df[col].astype(str).str.strip().replace({"nan": pd.NA, "": pd.NA})
    df["Status"] = df["Status"].str.title()
    for col in ["Year"] + NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    before = len(df)
    df = df.dropna().copy()
    if len(df) < before:
        logging.warning(f"Dropped {before - len(df)} incomplete rows")
    df["Year"] = df["Year"].astype(int)
    return df


def validate_dataframe(df):
    """Check every row against HistoricalRecord and reject duplicate (District, Year) keys."""
    key = df["District"].str.strip().str.lower()
    dupes = df[pd.DataFrame({"district": key, "year": df["Year"]}).duplicated(keep=False)]
    if not dupes.empty:
        keys = sorted(set(zip(dupes["District"], dupes["Year"])))
        raise ValueError(f"Duplicate (District, Year) rows: {keys}")
    for row in df.to_dict("records"):
        HistoricalRecord.model_validate({**row, "Year": int(row["Year"])})
    df = df.assign(_key=key).sort_values(["_key", "Year"]).drop(columns="_key")
    return df.reset_index(drop=True)


# --- Main ETL ---
def normalize_file(src, dest=DATASET_PATH):
    df, enc = try_read_csv(Path(src))
    df = normalize_headers(df)
    df = clean_dataframe(df)
    df = validate_dataframe(df)

    Path(dest).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(dest, index=False)
    logging.info(f"Processed: {Path(src).name} ({enc}) → {len(df)} rows saved to {dest}")
    return df


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(description="Normalize a raw groundwater CSV into the Ingres dataset")
    parser.add_argument("src", nargs="?", default=str(RAW_DIR / "groundwater_raw.csv"))
    parser.add_argument("--dest", default=str(DATASET_PATH))
    args = parser.parse_args()

    if not Path(args.src).exists():
        logging.error(f"{args.src} not found. Nothing to do.")
        raise SystemExit(1)
    normalize_file(args.src, args.dest)


if __name__ == "__main__":
    main()
