import unittest

from skoolresults.core.curriculum import Curriculum
from skoolresults.core.divisions import DIVISION_TABLE_PRESETS, DivisionTable
from skoolresults.core.errors import DivisionTableError, NoDivisionMatchError
from skoolresults.services.report_service import ReportService, ReportServiceError


PCM = {"code": "PCM", "name": "Physics Chemistry Mathematics", "principal_subjects": ["PHY", "CHE", "MAT"]}


def a_level_student(student_id, phy, che, mat, gs=75):
    return {
        "student_id": student_id,
        "curriculum": "A_LEVEL",
        "combination": PCM,
        "marks": [
            {"subject_code": "PHY", "mark": phy},
            {"subject_code": "CHE", "mark": che},
            {"subject_code": "MAT", "mark": mat},
            {"subject_code": "GS", "mark": gs},
        ],
    }


class ReportServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = ReportService({Curriculum.A_LEVEL: DIVISION_TABLE_PRESETS["necta-acsee"]})

    def test_rank_class(self):
        students = [
            a_level_student("S3", 45, 45, 45),
            a_level_student("S1", 85, 78, 92),
            a_level_student("S2", 85, 78, 92, gs=60),
        ]
        ranking = self.service.rank_class(students, class_id="F6", exam_id="ANNUAL")
        self.assertEqual([s.student_id for s in ranking], ["S1", "S2", "S3"])
        self.assertEqual([s.position for s in ranking], [1, 2, 3])
        self.assertEqual(ranking.entries[0].best_points_sum, 4)
        self.assertEqual(ranking.entries[0].division, "I")
        self.assertEqual(ranking.entries[2].division, "III")

    def test_bad_mark_does_not_stop_class(self):
        students = [a_level_student("S1", 85, "eighty", 92), a_level_student("S2", 70, 70, 70)]
        ranking = self.service.rank_class(students)
        bad = next(s for s in ranking if s.student_id == "S1")
        self.assertIsNone(bad.division)
        self.assertEqual(bad.warnings[0].subject_code, "CHE")
        self.assertEqual(ranking.position_of("S2"), 1)
        self.assertEqual(ranking.position_of("S1"), 2)

    def test_parallel_matches_sequential(self):
        students = [a_level_student(f"S{i}", 40 + i * 5, 50 + i, 90 - i * 3) for i in range(8)]
        parallel = ReportService(self.service.division_tables, workers=4)
        self.assertEqual(parallel.rank_class(students), self.service.rank_class(students))

    def test_missing_table_is_fatal(self):
        student = {"student_id": "O1", "curriculum": "O_LEVEL", "marks": []}
        with self.assertRaises(DivisionTableError):
            self.service.rank_class([student])

    def test_broken_table_is_fatal(self):
        service = ReportService({Curriculum.A_LEVEL: DivisionTable.from_rows("tiny", [(3, "I")])})
        with self.assertRaises(NoDivisionMatchError):
            service.rank_class([a_level_student("S1", 85, 85, 85), a_level_student("S2", 50, 50, 50)])

    def test_malformed_record_does_not_stop_class(self):
        broken = a_level_student("S2", 70, 70, 70)
        broken["marks"][0]["subject_code"] = ""
        ranking = self.service.rank_class(
            [a_level_student("S1", 85, 78, 92), broken, {"curriculum": "A_LEVEL"}]
        )
        self.assertEqual([s.student_id for s in ranking], ["S1"])
        self.assertEqual(ranking.position_of("S1"), 1)
        self.assertEqual([r.student_id for r in ranking.rejected], ["S2", None])
        self.assertIn("subject_code", ranking.rejected[0].message)

    def test_malformed_single_record(self):
        with self.assertRaises(ReportServiceError):
            self.service.summarize_student({"curriculum": "A_LEVEL"})
        self.assertEqual(self.service.summarize_students([{"student_id": "X"}]), [])

    def test_invalid_worker_count(self):
        with self.assertRaises(ReportServiceError):
            ReportService({}, workers=0)

    def test_class_report(self):
        report = self.service.build_class_report(
            [a_level_student("S1", 85, 78, 92), a_level_student("S2", 45, 45, 45)]
        )
        self.assertEqual(report.examination_gpa, (4 + 15) / 2)
        self.assertEqual(report.pass_rate, 100.0)
        self.assertEqual(report.division_distribution, {"I": 1, "III": 1})
        self.assertEqual(report.subjects["PHY"].positions, {"S1": 1, "S2": 2})


if __name__ == "__main__":
    unittest.main()
