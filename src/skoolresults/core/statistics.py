import statistics
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from skoolresults.core.curriculum import Curriculum
from skoolresults.core.grades import is_passed
from skoolresults.core.models import Mark, StudentSummary, SubjectResult
from skoolresults.core.ranking import subject_positions


PASSING_DIVISIONS = ("I", "II", "III", "IV")


@dataclass(frozen=True)
class MarkStatistics:
    mean: float
    median: float
    mode: float
    standard_deviation: float


@dataclass(frozen=True)
class SubjectAnalysis:
    subject_code: str
    candidates: int
    grade_distribution: Dict[str, int]
    gpa: Optional[float]
    pass_rate: Optional[float]
    marks: Optional[MarkStatistics]
    positions: Dict[str, int]


def describe_marks(marks: Iterable[Mark], *, round_to: int = 2) -> Optional[MarkStatistics]:
    values = list(marks)
    if not values:
        return None
    return MarkStatistics(
        mean=round(statistics.mean(values), round_to),
        median=round(statistics.median(values), round_to),
        mode=round(min(statistics.multimode(values)), round_to),
        standard_deviation=round(statistics.pstdev(values), round_to),
    )


def _graded(results: Iterable[SubjectResult]) -> List[SubjectResult]:
    return [r for r in results if r.is_graded]


def grade_distribution(results: Iterable[SubjectResult]) -> Dict[str, int]:
    return dict(Counter(r.grade for r in _graded(results)))


def subject_gpa(results: Iterable[SubjectResult], *, round_to: int = 4) -> Optional[float]:
    """
    Subject GPA = Σ(points of every graded candidate) / number of candidates.
    Lower is better, like the points themselves.
    """
    graded = _graded(results)
    if not graded:
        return None
    return round(sum(r.points for r in graded) / len(graded), round_to)


def subject_pass_rate(
    results: Iterable[SubjectResult],
    curriculum: Curriculum,
    is_principal: Optional[bool] = None,
    *,
    round_to: int = 2,
) -> Optional[float]:
    """
    Share of graded candidates who passed. Without an explicit is_principal,
    each result is judged by its own principal or subsidiary status.
    """
    graded = _graded(results)
    if not graded:
        return None
    passed = sum(
        1
        for r in graded
        if is_passed(r.grade, curriculum, r.is_principal if is_principal is None else is_principal)
    )
    return round(passed / len(graded) * 100, round_to)


def examination_gpa(summaries: Iterable[StudentSummary], *, round_to: int = 4) -> Optional[float]:
    """Examination GPA = Σ(best-N points of every complete student) / number of those students."""
    points = [s.best_points_sum for s in summaries if s.is_complete]
    if not points:
        return None
    return round(sum(points) / len(points), round_to)


def class_pass_rate(
    summaries: Sequence[StudentSummary],
    passing_divisions: Sequence[str] = PASSING_DIVISIONS,
    *,
    round_to: int = 2,
) -> Optional[float]:
    if not summaries:
        return None
    passed = sum(1 for s in summaries if s.division in passing_divisions)
    return round(passed / len(summaries) * 100, round_to)


def division_distribution(summaries: Iterable[StudentSummary]) -> Dict[str, int]:
    return dict(Counter(s.division for s in summaries if s.division is not None))


def analyse_subjects(summaries: Sequence[StudentSummary]) -> Dict[str, SubjectAnalysis]:
    by_subject: Dict[str, List[SubjectResult]] = {}
    curricula: Dict[str, Curriculum] = {}
    for summary in summaries:
        for result in summary.results:
            by_subject.setdefault(result.subject_code, []).append(result)
            curricula.setdefault(result.subject_code, summary.curriculum)

    analysis: Dict[str, SubjectAnalysis] = {}
    for code in sorted(by_subject):
        results = by_subject[code]
        graded = _graded(results)
        analysis[code] = SubjectAnalysis(
            subject_code=code,
            candidates=len(graded),
            grade_distribution=grade_distribution(results),
            gpa=subject_gpa(results),
            pass_rate=subject_pass_rate(results, curricula[code]),
            marks=describe_marks(r.mark for r in graded),
            positions=subject_positions(summaries, code),
        )
    return analysis
