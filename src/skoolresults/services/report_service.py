import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from skoolresults.config.logging_config import configure_logging
from skoolresults.config.settings import parse_division_table, settings
from skoolresults.core.curriculum import Curriculum
from skoolresults.core.divisions import DivisionTable
from skoolresults.core.errors import DivisionTableError
from skoolresults.core.grades import get_grade_scale
from skoolresults.core.models import ClassRanking, RejectedRecord, StudentSummary
from skoolresults.core.ranking import rank_students
from skoolresults.core.statistics import (
    SubjectAnalysis,
    analyse_subjects,
    class_pass_rate,
    division_distribution,
    examination_gpa,
)
from skoolresults.core.summary import build_student_summary
from skoolresults.services.payloads import StudentMarksPayload


logger = logging.getLogger(__name__)

StudentInput = Union[StudentMarksPayload, Mapping[str, Any]]


class ReportServiceError(Exception):
    pass


@dataclass(frozen=True)
class ClassReport:
    ranking: ClassRanking
    examination_gpa: Optional[float]
    pass_rate: Optional[float]
    division_distribution: Dict[str, int]
    subjects: Dict[str, SubjectAnalysis]


class ReportService:
    def __init__(
        self,
        division_tables: Mapping[Curriculum, DivisionTable],
        *,
        grade_scale: str = "standard",
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ReportServiceError("workers must be at least 1")
        self.division_tables = {Curriculum(k): v for k, v in division_tables.items()}
        self.grade_scale = grade_scale
        self.workers = workers

    @classmethod
    def from_settings(cls) -> "ReportService":
        configure_logging()
        tables = {}
        o_level = parse_division_table(settings.o_level_division_table, "RESULTS_O_LEVEL_DIVISION_TABLE")
        a_level = parse_division_table(settings.a_level_division_table, "RESULTS_A_LEVEL_DIVISION_TABLE")
        if o_level is not None:
            tables[Curriculum.O_LEVEL] = o_level
        if a_level is not None:
            tables[Curriculum.A_LEVEL] = a_level
        return cls(tables, grade_scale=settings.grade_scale, workers=settings.aggregation_workers)

    def _table_for(self, curriculum: Curriculum) -> DivisionTable:
        try:
            return self.division_tables[curriculum]
        except KeyError as exc:
            raise DivisionTableError(
                f"Missing division table for {curriculum.value}. "
                f"Set RESULTS_{curriculum.value}_DIVISION_TABLE in environment"
            ) from exc

    @staticmethod
    def _parse(student: StudentInput) -> StudentMarksPayload:
        if isinstance(student, StudentMarksPayload):
            return student
        try:
            return StudentMarksPayload.model_validate(student)
        except ValidationError as exc:
            raise ReportServiceError(f"Malformed student record: {exc}") from exc

    def summarize_student(self, student: StudentInput) -> StudentSummary:
        payload = self._parse(student)
        combination = payload.combination.to_combination() if payload.combination else None
        return build_student_summary(
            payload.student_id,
            payload.curriculum,
            payload.mark_pairs(),
            self._table_for(payload.curriculum),
            combination=combination,
            scale=get_grade_scale(payload.curriculum, self.grade_scale),
        )

    def _partition(
        self, students: Iterable[StudentInput]
    ) -> Tuple[List[StudentMarksPayload], List[RejectedRecord]]:
        payloads: List[StudentMarksPayload] = []
        rejected: List[RejectedRecord] = []
        for student in students:
            try:
                payloads.append(self._parse(student))
            except ReportServiceError as exc:
                student_id = student.get("student_id") if isinstance(student, Mapping) else None
                student_id = None if student_id is None else str(student_id)
                logger.warning("Rejected record for student %s: %s", student_id, exc)
                rejected.append(RejectedRecord(student_id, str(exc)))
        return payloads, rejected

    def summarize_students(self, students: Iterable[StudentInput]) -> List[StudentSummary]:
        """Summaries for every well-formed record; malformed ones are logged and skipped."""
        payloads, _ = self._partition(students)
        return self._summarize_payloads(payloads)

    def _summarize_payloads(self, payloads: List[StudentMarksPayload]) -> List[StudentSummary]:
        # Resolve every table up front so a missing one fails before any work.
        for curriculum in {p.curriculum for p in payloads}:
            self._table_for(curriculum)

        if self.workers == 1 or len(payloads) < 2:
            return [self.summarize_student(p) for p in payloads]
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(self.summarize_student, payloads))

    def rank_class(
        self,
        students: Iterable[StudentInput],
        *,
        class_id: Optional[str] = None,
        exam_id: Optional[str] = None,
    ) -> ClassRanking:
        payloads, rejected = self._partition(students)
        summaries = self._summarize_payloads(payloads)
        incomplete = sum(1 for s in summaries if not s.is_complete)
        logger.info(
            "Ranking %s students for class=%s exam=%s (%s without a division, %s rejected)",
            len(summaries),
            class_id,
            exam_id,
            incomplete,
            len(rejected),
        )
        return rank_students(summaries, class_id=class_id, exam_id=exam_id, rejected=rejected)

    def build_class_report(
        self,
        students: Iterable[StudentInput],
        *,
        class_id: Optional[str] = None,
        exam_id: Optional[str] = None,
    ) -> ClassReport:
        ranking = self.rank_class(students, class_id=class_id, exam_id=exam_id)
        entries = ranking.entries
        return ClassReport(
            ranking=ranking,
            examination_gpa=examination_gpa(entries),
            pass_rate=class_pass_rate(entries),
            division_distribution=division_distribution(entries),
            subjects=analyse_subjects(entries),
        )
