from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field

from skoolresults.core.combinations import SubjectCombination
from skoolresults.core.curriculum import Curriculum


class MarkPayload(BaseModel):
    subject_code: str = Field(min_length=1)
    # Validated by the grade scale so a bad mark only affects its own subject.
    mark: Any = None


class CombinationPayload(BaseModel):
    code: str = Field(min_length=1)
    name: str = ""
    principal_subjects: List[str] = Field(min_length=1)

    def to_combination(self) -> SubjectCombination:
        return SubjectCombination.create(self.code, self.principal_subjects, self.name)


class StudentMarksPayload(BaseModel):
    student_id: str = Field(min_length=1)
    curriculum: Curriculum
    marks: List[MarkPayload] = Field(default_factory=list)
    combination: Optional[CombinationPayload] = None

    def mark_pairs(self) -> List[Tuple[str, Any]]:
        return [(entry.subject_code, entry.mark) for entry in self.marks]
