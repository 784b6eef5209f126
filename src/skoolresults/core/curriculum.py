from enum import Enum
from typing import Dict


class Curriculum(str, Enum):
    O_LEVEL = "O_LEVEL"
    A_LEVEL = "A_LEVEL"


# Number of subjects whose points are summed for the division.
BEST_SUBJECT_COUNT: Dict[Curriculum, int] = {
    Curriculum.O_LEVEL: 7,
    Curriculum.A_LEVEL: 3,
}


def best_subject_count(curriculum: Curriculum) -> int:
    return BEST_SUBJECT_COUNT[Curriculum(curriculum)]
