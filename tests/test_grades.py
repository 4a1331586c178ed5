import math
from unittest.mock import patch

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from schoolhub.models import Grade
from schoolhub.schemas.grade_schema import GradeCreateRequest
from schoolhub.services import grade_service
from schoolhub.utils.utils import check_grade_range
from tests.base import ApiTestCase


class TestGradeValidation(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.teacher = self.register("t@x.com", "teacher", "Terry Teacher")
        self.student = self.register("s@x.com", "student", "Sam Student")
        self.lesson = self.create_lesson(self.teacher["id"])
        self.sign_up(self.lesson["id"], self.student["id"])

    def payload(self, grade):
        return {"lesson_id": self.lesson["id"], "student_id": self.student["id"],
                "teacher_id": self.teacher["id"], "grade": grade}

    def test_out_of_range_rejected(self):
        for bad in (-1, 101, 100.5, "abc", None, True):
            with self.subTest(grade=bad):
                response = self.client.post("/grades", json=self.payload(bad))
                self.assertEqual(response.status_code, 400)
                self.assertIn("between 0 and 100", response.json()["detail"])

    def test_nan_rejected(self):
        body = ('{"lesson_id": %d, "student_id": %d, "teacher_id": %d, "grade": NaN}'
                % (self.lesson["id"], self.student["id"], self.teacher["id"]))
        response = self.client.post("/grades", content=body, headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 400)
        with self.assertRaises(ValueError):
            check_grade_range(math.nan)
        with self.assertRaises(ValueError):
            check_grade_range(math.inf)

    def test_bounds_accepted(self):
        for good in (0, 100, 55.5):
            with self.subTest(grade=good):
                response = self.client.post("/grades", json=self.payload(good))
                self.assertEqual(response.status_code, 201)
                self.assertEqual(response.json()["grade"], good)

    def test_missing_fields(self):
        response = self.client.post("/grades", json={"lesson_id": self.lesson["id"], "grade": 50})
        self.assertEqual(response.status_code, 400)


class TestGrades(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.teacher = self.register("t@x.com", "teacher", "Terry Teacher")
        self.lesson = self.create_lesson(self.teacher["id"], title="Algebra", date="2025-03-10", time="14:30")
        self.students = [self.register(f"s{i}@x.com", "student", f"Student {i}") for i in range(4)]
        for s in self.students:
            self.sign_up(self.lesson["id"], s["id"])

    def grade(self, student, value, lesson=None, teacher=None, comment=None):
        return self.client.post("/grades", json={
            "lesson_id": (lesson or self.lesson)["id"], "student_id": student["id"],
            "teacher_id": (teacher or self.teacher)["id"], "grade": value, "comment": comment,
        })

    def stats(self, student, lesson=None):
        response = self.client.get(f"/lessons/{(lesson or self.lesson)['id']}/grade-stats",
                                   params={"student_id": student["id"]})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_class_stats(self):
        me, a, b = self.students[:3]
        self.grade(a, 70)
        self.grade(b, 90)
        self.assertEqual(self.grade(me, 86).status_code, 201)

        stats = self.stats(me)
        self.assertEqual(stats, {"my_grade": 86.0, "class_avg": 82.0, "class_count": 3, "my_rank": 2})

    def test_rank_is_competition_ranking(self):
        values = [90, 80, 80, 70]
        for student, value in zip(self.students, values):
            self.grade(student, value)
        ranks = [self.stats(s)["my_rank"] for s in self.students]
        self.assertEqual(ranks, [1, 2, 2, 4])
        for i, first in enumerate(values):
            for j, second in enumerate(values):
                if first > second:
                    self.assertLessEqual(ranks[i], ranks[j])
        for rank in ranks:
            self.assertTrue(1 <= rank <= len(values))

    def test_stats_without_grades(self):
        stats = self.stats(self.students[0])
        self.assertEqual(stats, {"my_grade": None, "class_avg": 0.0, "class_count": 0, "my_rank": None})
        self.grade(self.students[1], 40)
        stats = self.stats(self.students[0])
        self.assertIsNone(stats["my_rank"])
        self.assertEqual(stats["class_count"], 1)

    def test_stats_do_not_leak_classmates(self):
        self.grade(self.students[0], 70)
        self.grade(self.students[1], 90)
        stats = self.stats(self.students[0])
        self.assertEqual(set(stats), {"my_grade", "class_avg", "class_count", "my_rank"})
        self.assertNotIn("Student 1", str(stats))

    def test_regrading_updates_in_place(self):
        student = self.students[0]
        self.grade(student, 50, comment="first try")
        response = self.grade(student, 75, comment="retake")
        self.assertEqual(response.status_code, 201)
        self.assertIsNotNone(response.json()["updated_at"])
        with self.session() as db:
            grades = db.exec(select(Grade).where(Grade.student_id == student["id"])).all()
        self.assertEqual(len(grades), 1)
        self.assertEqual(grades[0].grade, 75)
        self.assertEqual(grades[0].comment, "retake")

    def test_insert_error_other_than_duplicate_propagates(self):
        request = GradeCreateRequest(lesson_id=self.lesson["id"], student_id=self.students[0]["id"],
                                     teacher_id=self.teacher["id"], grade=60)
        failure = IntegrityError("INSERT INTO grade", {}, Exception("foreign key violation"))
        with self.session() as db, patch.object(Session, "commit", side_effect=failure):
            with self.assertRaises(IntegrityError):
                grade_service.record_grade(db, request)
        with self.session() as db:
            self.assertEqual(db.exec(select(Grade)).all(), [])

    def test_only_lesson_owner_grades(self):
        other = self.register("t2@x.com", "teacher")
        self.assertEqual(self.grade(self.students[0], 50, teacher=other).status_code, 403)
        missing = {"id": 999}
        self.assertEqual(self.grade(self.students[0], 50, lesson=missing).status_code, 404)

    def test_student_must_be_enrolled(self):
        stranger = self.register("x@x.com", "student")
        response = self.grade(stranger, 50)
        self.assertEqual(response.status_code, 400)
        self.assertIn("not signed up", response.json()["detail"])

    def test_student_grades_include_lesson_and_teacher(self):
        self.grade(self.students[0], 88, comment="good")
        rows = self.client.get(f"/students/{self.students[0]['id']}/grades").json()
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual((row["grade"], row["comment"]), (88.0, "good"))
        self.assertEqual((row["lesson_title"], row["date"], row["time"]), ("Algebra", "2025-03-10", "14:30"))
        self.assertEqual(row["teacher_name"], "Terry Teacher")

    def test_teacher_grades_filter_by_lesson_id(self):
        # same title and date: only the lesson id tells them apart
        twin = self.create_lesson(self.teacher["id"], title="Algebra", date="2025-03-10", time="16:00")
        self.sign_up(twin["id"], self.students[0]["id"])
        self.grade(self.students[0], 60)
        self.grade(self.students[1], 80)
        self.grade(self.students[0], 100, lesson=twin)

        everything = self.client.get(f"/teachers/{self.teacher['id']}/grades").json()
        self.assertEqual(len(everything), 3)
        self.assertEqual({r["student_name"] for r in everything}, {"Student 0", "Student 1"})

        only_twin = self.client.get(f"/teachers/{self.teacher['id']}/grades",
                                    params={"lesson_id": twin["id"]}).json()
        self.assertEqual([r["grade"] for r in only_twin], [100.0])

        stats = self.client.get(f"/teachers/{self.teacher['id']}/grades/stats").json()
        self.assertEqual(stats, {"count": 3, "avg": 80.0, "min": 60.0, "max": 100.0})
        stats = self.client.get(f"/teachers/{self.teacher['id']}/grades/stats",
                                params={"lesson_id": self.lesson["id"]}).json()
        self.assertEqual(stats["count"], 2)

    def test_teacher_stats_empty(self):
        stats = self.client.get(f"/teachers/{self.teacher['id']}/grades/stats").json()
        self.assertEqual(stats, {"count": 0, "avg": None, "min": None, "max": None})

    def test_lesson_grades_for_owner_only(self):
        self.grade(self.students[0], 70)
        rows = self.client.get(f"/lessons/{self.lesson['id']}/grades",
                               params={"teacher_id": self.teacher["id"]}).json()
        self.assertEqual(rows, [{"student_id": self.students[0]["id"], "full_name": "Student 0", "grade": 70.0}])

        other = self.register("t2@x.com", "teacher")
        response = self.client.get(f"/lessons/{self.lesson['id']}/grades", params={"teacher_id": other["id"]})
        self.assertEqual(response.status_code, 403)
