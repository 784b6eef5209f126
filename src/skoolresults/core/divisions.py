from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence, Tuple

from skoolresults.core.errors import DivisionTableError, NoDivisionMatchError


@dataclass(frozen=True)
class DivisionRow:
    max_points: int
    label: str


def _threshold(value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"threshold must be a whole number, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class DivisionTable:
    name: str
    rows: Tuple[DivisionRow, ...]

    def __post_init__(self) -> None:
        if not self.rows:
            raise DivisionTableError(f"Division table '{self.name}' has no rows")
        thresholds = [row.max_points for row in self.rows]
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise DivisionTableError(
                f"Division table '{self.name}' thresholds must be strictly ascending: {thresholds}"
            )

    @classmethod
    def from_rows(cls, name: str, rows: Iterable[Sequence[Any]]) -> "DivisionTable":
        parsed = []
        for row in rows:
            try:
                max_points, label = row
                parsed.append(DivisionRow(_threshold(max_points), str(label)))
            except (TypeError, ValueError) as exc:
                raise DivisionTableError(f"Invalid division row in '{name}': {row!r}") from exc
        return cls(name, tuple(parsed))

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(row.label for row in self.rows)


def divide(points_sum: int, table: DivisionTable) -> str:
    for row in table.rows:
        if row.max_points >= points_sum:
            return row.label
    raise NoDivisionMatchError(points_sum, table.name)


# Bands found in the source system. None of them is confirmed, so they are
# only applied when a deployment selects one by name.
DIVISION_TABLE_PRESETS: Dict[str, DivisionTable] = {
    "necta-csee": DivisionTable.from_rows(
        "necta-csee", [(17, "I"), (21, "II"), (25, "III"), (33, "IV"), (35, "0")]
    ),
    "necta-acsee": DivisionTable.from_rows(
        "necta-acsee", [(9, "I"), (12, "II"), (17, "III"), (19, "IV"), (21, "0")]
    ),
    "report-card-csee": DivisionTable.from_rows(
        "report-card-csee", [(32, "I"), (45, "II"), (59, "III"), (72, "IV")]
    ),
    "report-card-acsee": DivisionTable.from_rows(
        "report-card-acsee", [(12, "I"), (15, "II"), (18, "III"), (21, "IV")]
    ),
}


def get_division_table(name: str) -> DivisionTable:
    try:
        return DIVISION_TABLE_PRESETS[name]
    except KeyError as exc:
        raise DivisionTableError(f"Unknown division table: {name}") from exc
