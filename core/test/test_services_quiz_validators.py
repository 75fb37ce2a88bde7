from types import SimpleNamespace

from django.test import SimpleTestCase

from core.services.quiz import validators as vz
from core.services.shared.errors import NotFoundError, PermissionDeniedError, ValidationError


class QuizValidatorsUnitTests(SimpleTestCase):
    def setUp(self):
        self.enrollment = SimpleNamespace(id=1, class_group_id=10)

    def test_attempt_not_found(self):
        with self.assertRaises(NotFoundError):
            vz.validate_attempt_ownership(attempt=None, enrollment=self.enrollment)

    def test_attempt_owned_by_other_enrollment(self):
        with self.assertRaises(PermissionDeniedError) as ctx:
            vz.validate_attempt_ownership(attempt=SimpleNamespace(enrollment_id=2), enrollment=self.enrollment)
        self.assertEqual(ctx.exception.to_payload()["error_code"], "PERMISSION_DENIED")

    def test_attempt_owned(self):
        self.assertIsNone(vz.validate_attempt_ownership(attempt=SimpleNamespace(enrollment_id=1), enrollment=self.enrollment))

    def test_quiz_access(self):
        with self.assertRaises(NotFoundError):
            vz.validate_quiz_access(quiz=None, enrollment=self.enrollment)
        with self.assertRaises(PermissionDeniedError):
            vz.validate_quiz_access(quiz=SimpleNamespace(class_group_id=11), enrollment=self.enrollment)
        vz.validate_quiz_access(quiz=SimpleNamespace(class_group_id=10), enrollment=self.enrollment)

    def test_answers_payload(self):
        self.assertEqual(vz.validate_answers_payload(None), {})
        self.assertEqual(vz.validate_answers_payload({1: "A"}), {"1": "A"})
        with self.assertRaises(ValidationError):
            vz.validate_answers_payload(["A"])
