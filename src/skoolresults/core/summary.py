import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from skoolresults.core.combinations import SubjectCombination, classify, normalize_code
from skoolresults.core.curriculum import Curriculum
from skoolresults.core.divisions import DivisionTable, divide
from skoolresults.core.errors import InsufficientSubjectsError, InvalidMarkError
from skoolresults.core.grades import GradeScale, get_grade_scale, grade_remark
from skoolresults.core.models import StudentSummary, SubjectResult, SummaryWarning
from skoolresults.core.selection import select_best_subjects


logger = logging.getLogger(__name__)


def grade_subject(
    subject_code: str,
    mark: Any,
    curriculum: Curriculum,
    *,
    combination: Optional[SubjectCombination] = None,
    scale: Optional[GradeScale] = None,
) -> SubjectResult:
    curriculum = Curriculum(curriculum)
    code = normalize_code(subject_code)
    scale = scale or get_grade_scale(curriculum)
    grade, points = scale.grade(mark, code)
    return SubjectResult(
        subject_code=code,
        mark=mark,
        grade=grade,
        points=points,
        is_principal=classify(curriculum, combination, code),
        remark=grade_remark(grade, curriculum),
    )


def grade_subjects(
    marks: Iterable[Tuple[str, Any]],
    curriculum: Curriculum,
    *,
    combination: Optional[SubjectCombination] = None,
    scale: Optional[GradeScale] = None,
) -> Tuple[Tuple[SubjectResult, ...], Tuple[SummaryWarning, ...]]:
    """
    Grades every (subject_code, mark) pair. A subject with an invalid mark, or
    a repeat of a subject already seen, is left out of the results and
    reported as a warning instead.
    """
    results: List[SubjectResult] = []
    warnings: List[SummaryWarning] = []
    seen = set()
    for subject_code, mark in marks:
        code = normalize_code(subject_code)
        if code in seen:
            warnings.append(
                SummaryWarning("DuplicateSubject", f"Subject {code} appears more than once; repeat ignored", code)
            )
            continue
        seen.add(code)
        try:
            results.append(
                grade_subject(subject_code, mark, curriculum, combination=combination, scale=scale)
            )
        except InvalidMarkError as exc:
            warnings.append(SummaryWarning(type(exc).__name__, str(exc), code))
    return tuple(results), tuple(warnings)


def aggregate_student(
    student_id: str,
    curriculum: Curriculum,
    results: Sequence[SubjectResult],
    division_table: DivisionTable,
    *,
    warnings: Sequence[SummaryWarning] = (),
) -> StudentSummary:
    curriculum = Curriculum(curriculum)
    graded = [r for r in results if r.is_graded]
    total_marks = sum(r.mark for r in graded)
    average = total_marks / len(graded) if graded else None
    collected = list(warnings)

    try:
        best_subset = select_best_subjects(results, curriculum)
    except InsufficientSubjectsError as exc:
        collected.append(SummaryWarning(type(exc).__name__, str(exc)))
        best_subset = exc.candidates
        best_points_sum = None
        division = None
    else:
        best_points_sum = sum(r.points for r in best_subset)
        # NoDivisionMatchError means the table itself is broken; let it through.
        division = divide(best_points_sum, division_table)

    return StudentSummary(
        student_id=student_id,
        curriculum=curriculum,
        results=tuple(results),
        total_marks=total_marks,
        average=average,
        best_subset=tuple(best_subset),
        best_points_sum=best_points_sum,
        division=division,
        warnings=tuple(collected),
    )


def build_student_summary(
    student_id: str,
    curriculum: Curriculum,
    marks: Iterable[Tuple[str, Any]],
    division_table: DivisionTable,
    *,
    combination: Optional[SubjectCombination] = None,
    scale: Optional[GradeScale] = None,
) -> StudentSummary:
    curriculum = Curriculum(curriculum)
    results, warnings = grade_subjects(marks, curriculum, combination=combination, scale=scale)
    if curriculum == Curriculum.A_LEVEL and combination is None:
        warnings += (
            SummaryWarning("MissingCombination", "No subject combination, so no principal subjects"),
        )
    summary = aggregate_student(student_id, curriculum, results, division_table, warnings=warnings)
    for warning in summary.warnings:
        logger.warning("Student %s: %s", student_id, warning.message)
    return summary
