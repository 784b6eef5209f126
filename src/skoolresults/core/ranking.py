import dataclasses
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from skoolresults.core.combinations import normalize_code
from skoolresults.core.models import ClassRanking, RejectedRecord, StudentSummary


def competition_ranks(keys: Sequence[Hashable]) -> List[Tuple[int, int]]:
    """
    keys must already be sorted best first. Returns (rank, tie_group) per key:
    equal keys share a rank and the next distinct key is ranked after all of
    them, e.g. 1, 1, 3, 4. tie_group counts distinct keys from 1.
    """
    ranks: List[Tuple[int, int]] = []
    rank = 0
    group = 0
    previous: Any = None
    for index, key in enumerate(keys):
        if index == 0 or key != previous:
            rank = index + 1
            group += 1
        ranks.append((rank, group))
        previous = key
    return ranks


def ranking_key(summary: StudentSummary) -> Tuple[int, int, Any]:
    # Students without a division rank after everyone who has one.
    if summary.best_points_sum is None:
        return 1, 0, -summary.total_marks
    return 0, summary.best_points_sum, -summary.total_marks


def rank_students(
    summaries: Iterable[StudentSummary],
    *,
    class_id: Optional[str] = None,
    exam_id: Optional[str] = None,
    rejected: Iterable[RejectedRecord] = (),
) -> ClassRanking:
    ordered = sorted(summaries, key=lambda s: (ranking_key(s), s.student_id))
    ranks = competition_ranks([ranking_key(s) for s in ordered])
    entries = tuple(
        dataclasses.replace(summary, position=rank, tie_group=group)
        for summary, (rank, group) in zip(ordered, ranks)
    )
    return ClassRanking(entries=entries, class_id=class_id, exam_id=exam_id, rejected=tuple(rejected))


def subject_positions(summaries: Iterable[StudentSummary], subject_code: str) -> Dict[str, int]:
    """Position of each student within one subject, highest mark first."""
    code = normalize_code(subject_code)
    marks = []
    for summary in summaries:
        result = summary.result_for(code)
        if result is not None and result.is_graded:
            marks.append((summary.student_id, result.mark))

    marks.sort(key=lambda item: (-item[1], item[0]))
    ranks = competition_ranks([mark for _, mark in marks])
    return {student_id: rank for (student_id, _), (rank, _) in zip(marks, ranks)}
