from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from skoolresults.core.curriculum import Curriculum


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass(frozen=True)
class SubjectCombination:
    code: str
    name: str = ""
    principal_subjects: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def create(cls, code: str, principal_subjects: Iterable[str], name: str = "") -> "SubjectCombination":
        return cls(
            code=normalize_code(code),
            name=name.strip(),
            principal_subjects=frozenset(normalize_code(s) for s in principal_subjects if s.strip()),
        )


def is_principal(combination: Optional[SubjectCombination], subject_code: str) -> bool:
    if combination is None:
        return False
    return normalize_code(subject_code) in combination.principal_subjects


def classify(
    curriculum: Curriculum,
    combination: Optional[SubjectCombination],
    subject_code: str,
) -> Optional[bool]:
    # O-Level subjects are not grouped into principal/subsidiary.
    if Curriculum(curriculum) == Curriculum.O_LEVEL:
        return None
    return is_principal(combination, subject_code)
