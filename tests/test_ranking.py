import unittest

from skoolresults.core.curriculum import Curriculum
from skoolresults.core.models import StudentSummary, SubjectResult
from skoolresults.core.ranking import competition_ranks, rank_students, subject_positions


def summary(student_id, points, total, results=()):
    return StudentSummary(
        student_id=student_id,
        curriculum=Curriculum.O_LEVEL,
        results=tuple(results),
        total_marks=total,
        average=None,
        best_subset=(),
        best_points_sum=points,
        division=None if points is None else "I",
    )


class CompetitionRankTests(unittest.TestCase):
    def test_ties_skip_following_ranks(self):
        self.assertEqual(
            competition_ranks([9, 9, 12, 15]),
            [(1, 1), (1, 1), (3, 2), (4, 3)],
        )

    def test_empty(self):
        self.assertEqual(competition_ranks([]), [])


class ClassRankerTests(unittest.TestCase):
    def test_points_tie_broken_by_total_marks(self):
        ranking = rank_students([summary("B", 9, 295), summary("A", 9, 310)])
        self.assertEqual([s.student_id for s in ranking], ["A", "B"])
        self.assertEqual(ranking.position_of("A"), 1)
        self.assertEqual(ranking.position_of("B"), 2)

    def test_competition_ranking_1_1_3_4(self):
        students = [
            summary("D", 15, 200),
            summary("C", 12, 250),
            summary("B", 9, 300),
            summary("A", 9, 300),
        ]
        ranking = rank_students(students, class_id="F4A", exam_id="MIDTERM")
        self.assertEqual([s.student_id for s in ranking], ["A", "B", "C", "D"])
        self.assertEqual([s.position for s in ranking], [1, 1, 3, 4])
        self.assertEqual([s.tie_group for s in ranking], [1, 1, 2, 3])
        self.assertEqual(ranking.class_id, "F4A")

    def test_points_beat_total_marks(self):
        ranking = rank_students([summary("A", 10, 500), summary("B", 9, 100)])
        self.assertEqual(ranking.entries[0].student_id, "B")

    def test_incomplete_students_rank_last(self):
        ranking = rank_students([summary("X", None, 900), summary("Y", 30, 10)])
        self.assertEqual([(s.student_id, s.position) for s in ranking], [("Y", 1), ("X", 2)])

    def test_inputs_not_mutated(self):
        original = summary("A", 9, 300)
        rank_students([original])
        self.assertIsNone(original.position)

    def test_ranking_ignores_input_order(self):
        students = [summary(str(i), 7 + i % 3, 100 + i % 2) for i in range(9)]
        forward = rank_students(students)
        backward = rank_students(list(reversed(students)))
        self.assertEqual(forward, backward)


class SubjectPositionTests(unittest.TestCase):
    def test_positions_by_mark(self):
        students = [
            summary("A", 9, 0, [SubjectResult("MAT", 70, "B", 2)]),
            summary("B", 9, 0, [SubjectResult("MAT", 85, "A", 1)]),
            summary("C", 9, 0, [SubjectResult("MAT", 70, "B", 2)]),
            summary("D", 9, 0, [SubjectResult("MAT", None, "-", None)]),
        ]
        self.assertEqual(subject_positions(students, "mat"), {"B": 1, "A": 2, "C": 2})


if __name__ == "__main__":
    unittest.main()
