import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from skoolresults.core.curriculum import Curriculum
from skoolresults.core.errors import GradeScaleError, InvalidMarkError


UNGRADED = "-"


@dataclass(frozen=True)
class GradeBand:
    lower: float
    grade: str
    points: int


@dataclass(frozen=True)
class GradeScale:
    """
    Bands are listed best first. A mark falls in the first band whose lower
    bound it reaches, so every band is closed-open except the top one, which
    also includes 100.
    """

    name: str
    curriculum: Curriculum
    bands: Tuple[GradeBand, ...]

    def grade(self, mark: Any, subject_code: Optional[str] = None) -> Tuple[str, Optional[int]]:
        if mark is None:
            return UNGRADED, None
        value = validate_mark(mark, subject_code)
        for band in self.bands:
            if value >= band.lower:
                return band.grade, band.points
        # unreachable: every scale ends at 0
        raise InvalidMarkError(mark, subject_code)


def validate_mark(mark: Any, subject_code: Optional[str] = None) -> float:
    if isinstance(mark, bool) or not isinstance(mark, (int, float)):
        raise InvalidMarkError(mark, subject_code)
    if math.isnan(mark) or not 0 <= mark <= 100:
        raise InvalidMarkError(mark, subject_code)
    return mark


def _scale(name: str, curriculum: Curriculum, *bands: Tuple[float, str, int]) -> GradeScale:
    return GradeScale(name, curriculum, tuple(GradeBand(*band) for band in bands))


O_LEVEL_STANDARD = _scale(
    "standard",
    Curriculum.O_LEVEL,
    (75, "A", 1),
    (65, "B", 2),
    (50, "C", 3),
    (30, "D", 4),
    (0, "F", 5),
)

A_LEVEL_STANDARD = _scale(
    "standard",
    Curriculum.A_LEVEL,
    (80, "A", 1),
    (70, "B", 2),
    (60, "C", 3),
    (50, "D", 4),
    (40, "E", 5),
    (35, "S", 6),
    (0, "F", 7),
)

# Alternative O-Level cut-offs that appear in older report screens. They
# disagree with the standard table and are only used when selected by name.
O_LEVEL_75_65_45_30 = _scale(
    "o-level-75-65-45-30",
    Curriculum.O_LEVEL,
    (75, "A", 1),
    (65, "B", 2),
    (45, "C", 3),
    (30, "D", 4),
    (0, "F", 5),
)

O_LEVEL_80_70_60_50 = _scale(
    "o-level-80-70-60-50",
    Curriculum.O_LEVEL,
    (80, "A", 1),
    (70, "B", 2),
    (60, "C", 3),
    (50, "D", 4),
    (0, "F", 5),
)

GRADE_SCALES: Dict[str, Dict[Curriculum, GradeScale]] = {
    "standard": {
        Curriculum.O_LEVEL: O_LEVEL_STANDARD,
        Curriculum.A_LEVEL: A_LEVEL_STANDARD,
    },
    "o-level-75-65-45-30": {
        Curriculum.O_LEVEL: O_LEVEL_75_65_45_30,
        Curriculum.A_LEVEL: A_LEVEL_STANDARD,
    },
    "o-level-80-70-60-50": {
        Curriculum.O_LEVEL: O_LEVEL_80_70_60_50,
        Curriculum.A_LEVEL: A_LEVEL_STANDARD,
    },
}


def get_grade_scale(curriculum: Curriculum, name: str = "standard") -> GradeScale:
    try:
        return GRADE_SCALES[name][Curriculum(curriculum)]
    except KeyError as exc:
        raise GradeScaleError(f"Unsupported grade scale: {name}") from exc


def grade_from_mark(
    mark: Any,
    curriculum: Curriculum,
    *,
    scale_name: str = "standard",
) -> Tuple[str, Optional[int]]:
    return get_grade_scale(curriculum, scale_name).grade(mark)


REMARKS: Dict[str, str] = {
    "A": "Excellent",
    "B": "Very Good",
    "C": "Good",
    "D": "Satisfactory",
    "E": "Pass",
    "S": "Subsidiary Pass",
    "F": "Fail",
}

O_LEVEL_PASSING_GRADES = frozenset("ABCD")
PRINCIPAL_PASSING_GRADES = frozenset("ABCDE")
SUBSIDIARY_PASSING_GRADES = frozenset("ABCDES")


def grade_remark(grade: str, curriculum: Curriculum) -> str:
    if Curriculum(curriculum) == Curriculum.O_LEVEL and grade in ("E", "S"):
        return UNGRADED
    return REMARKS.get(grade, UNGRADED)


def is_passed(grade: str, curriculum: Curriculum, is_principal: Optional[bool] = None) -> bool:
    if Curriculum(curriculum) == Curriculum.O_LEVEL:
        return grade in O_LEVEL_PASSING_GRADES
    if is_principal:
        return grade in PRINCIPAL_PASSING_GRADES
    return grade in SUBSIDIARY_PASSING_GRADES
