from dataclasses import dataclass
import json
import os
from typing import Optional
from dotenv import load_dotenv

from skoolresults.core.divisions import DivisionTable, get_division_table
from skoolresults.core.errors import DivisionTableError


load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def parse_division_table(value: str, name: str) -> Optional[DivisionTable]:
    """
    A division table setting is either the name of a preset or a JSON list of
    [max_points, label] rows. An empty value means no table is configured.
    """
    text = value.strip()
    if not text:
        return None
    if not text.startswith("["):
        return get_division_table(text)
    try:
        rows = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DivisionTableError(f"{name} is not valid JSON: {exc}") from exc
    return DivisionTable.from_rows(name, rows)


@dataclass(frozen=True)
class Settings:
    grade_scale: str = os.getenv("RESULTS_GRADE_SCALE", "standard")
    o_level_division_table: str = os.getenv("RESULTS_O_LEVEL_DIVISION_TABLE", "")
    a_level_division_table: str = os.getenv("RESULTS_A_LEVEL_DIVISION_TABLE", "")
    aggregation_workers: int = _int_env("RESULTS_AGGREGATION_WORKERS", 1)
    log_level: str = os.getenv("RESULTS_LOG_LEVEL", "INFO")


settings = Settings()
