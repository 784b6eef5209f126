import logging
from typing import Iterable, Tuple

from skoolresults.core.curriculum import Curriculum, best_subject_count
from skoolresults.core.errors import InsufficientSubjectsError
from skoolresults.core.models import SubjectResult


logger = logging.getLogger(__name__)


def _eligible(result: SubjectResult, curriculum: Curriculum) -> bool:
    if not result.is_graded:
        return False
    if curriculum == Curriculum.A_LEVEL:
        return result.is_principal is True
    return True


def selection_key(result: SubjectResult) -> Tuple[int, str]:
    return result.points, result.subject_code


def select_best_subjects(
    results: Iterable[SubjectResult],
    curriculum: Curriculum,
) -> Tuple[SubjectResult, ...]:
    """
    Best-N subset used for the division: lowest points first, ties broken by
    subject code. A-Level only considers principal subjects.
    """
    curriculum = Curriculum(curriculum)
    required = best_subject_count(curriculum)
    candidates = tuple(sorted((r for r in results if _eligible(r, curriculum)), key=selection_key))

    if len(candidates) < required:
        raise InsufficientSubjectsError(required, len(candidates), candidates)

    selected = candidates[:required]
    logger.debug(
        "Selected %s for %s division: %s",
        required,
        curriculum.value,
        ", ".join(f"{r.subject_code}={r.points}" for r in selected),
    )
    return selected
