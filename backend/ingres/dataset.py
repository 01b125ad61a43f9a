"""
Static groundwater dataset store.
Loads the packaged CSV through an in-memory DuckDB connection once at startup,
then serves immutable HistoricalRecord rows.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import duckdb

from ingres.config import DATASET_PATH
from ingres.schema import SCHEMA, HistoricalRecord

logger = logging.getLogger(__name__)


class GroundwaterDataset:
    """Read-only table of historical records, one per (District, Year)."""

    def __init__(self, csv_path: Optional[Path] = None):
        self.csv_path = Path(csv_path or DATASET_PATH)
        self._records: Tuple[HistoricalRecord, ...] = tuple(_load_records(self.csv_path))
        if not self._records:
            raise ValueError(f"Dataset at {self.csv_path} has no rows")
        logger.info(f"Loaded {len(self._records)} groundwater rows from {self.csv_path.name}")

    @property
    def records(self) -> Tuple[HistoricalRecord, ...]:
        return self._records

    @property
    def districts(self) -> List[str]:
        return sorted({r.district for r in self._records})

    @property
    def last_year(self) -> int:
        return max(r.year for r in self._records)

    @property
    def forecast_year(self) -> int:
        """Year a forecast is made for: the year after the dataset ends."""
        return self.last_year + 1

    def lookup(self, district: str) -> List[HistoricalRecord]:
        """
        Case-insensitive exact match on District.
        Rows come back in ascending Year order; an unknown district gives [].
        """
        wanted = district.strip().lower()
        if not wanted:
            return []
        return [r for r in self._records if r.district.lower() == wanted]

    def to_json(self, records=None) -> str:
        """Serialize rows with their dataset column names, as fed to the model."""
        rows = self._records if records is None else records
        return json.dumps([r.model_dump(by_alias=True) for r in rows], indent=2, ensure_ascii=False)


def _load_records(csv_path: Path) -> List[HistoricalRecord]:
    if not csv_path.exists():
        raise ValueError(f"Dataset file not found: {csv_path}")

    columns = ", ".join(f'"{c}"' for c in SCHEMA["groundwater"])
    source = csv_path.as_posix().replace("'", "''")
    con = duckdb.connect(":memory:")
    try:
        con.execute(f"""
            CREATE TABLE groundwater AS
            SELECT * FROM read_csv_auto('{source}', header=True);
        """)
        present = [col[1] for col in con.execute("PRAGMA table_info(groundwater)").fetchall()]
        missing = [c for c in SCHEMA["groundwater"] if c not in present]
        if missing:
            raise ValueError(f"Dataset is missing columns: {missing}")

        duplicates = con.execute("""
            SELECT lower(trim("District")) AS district, "Year", COUNT(*) AS n
            FROM groundwater
            GROUP BY lower(trim("District")), "Year"
            HAVING COUNT(*) > 1
        """).fetchall()
        if duplicates:
            raise ValueError(f"Duplicate (District, Year) rows in dataset: {duplicates}")

        result = con.execute(f'SELECT {columns} FROM groundwater ORDER BY lower(trim("District")), "Year"')
        names = [desc[0] for desc in result.description]
        rows = [dict(zip(names, row)) for row in result.fetchall()]
    finally:
        con.close()

    return [HistoricalRecord.model_validate(row) for row in rows]
