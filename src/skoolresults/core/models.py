from dataclasses import dataclass
from typing import Optional, Tuple, Union

from skoolresults.core.curriculum import Curriculum


Mark = Union[int, float]


@dataclass(frozen=True)
class SubjectResult:
    subject_code: str
    mark: Optional[Mark]
    grade: str
    points: Optional[int]
    is_principal: Optional[bool] = None
    remark: str = "-"

    @property
    def is_graded(self) -> bool:
        return self.points is not None


@dataclass(frozen=True)
class SummaryWarning:
    kind: str
    message: str
    subject_code: Optional[str] = None


@dataclass(frozen=True)
class RejectedRecord:
    """A student record too malformed to summarise. It is reported, not ranked."""

    student_id: Optional[str]
    message: str


@dataclass(frozen=True)
class StudentSummary:
    student_id: str
    curriculum: Curriculum
    results: Tuple[SubjectResult, ...]
    total_marks: Mark
    average: Optional[float]
    best_subset: Tuple[SubjectResult, ...]
    best_points_sum: Optional[int]
    division: Optional[str]
    warnings: Tuple[SummaryWarning, ...] = ()
    position: Optional[int] = None
    tie_group: Optional[int] = None

    @property
    def graded_count(self) -> int:
        return sum(1 for r in self.results if r.is_graded)

    @property
    def is_complete(self) -> bool:
        return self.best_points_sum is not None

    def result_for(self, subject_code: str) -> Optional[SubjectResult]:
        for result in self.results:
            if result.subject_code == subject_code:
                return result
        return None


@dataclass(frozen=True)
class ClassRanking:
    entries: Tuple[StudentSummary, ...]
    class_id: Optional[str] = None
    exam_id: Optional[str] = None
    rejected: Tuple[RejectedRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def position_of(self, student_id: str) -> Optional[int]:
        for entry in self.entries:
            if entry.student_id == student_id:
                return entry.position
        return None
