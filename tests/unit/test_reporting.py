"""
Unit tests for attempt payloads and demo detection.
"""

import unittest

from src.models.exercise_session import ExerciseResult, ExerciseSession
from src.utils.reporting import build_attempt_payload, demo_message, is_demo_exercise
from src.utils.validation import validate_attempt_payload


class TestDemoDetection(unittest.TestCase):

    def test_missing_id_is_demo(self):
        self.assertTrue(is_demo_exercise(None))
        self.assertTrue(is_demo_exercise(""))

    def test_temp_id_is_demo(self):
        self.assertTrue(is_demo_exercise("temp"))

    def test_real_id_is_not_demo(self):
        self.assertFalse(is_demo_exercise("42"))

    def test_custom_demo_ids(self):
        self.assertTrue(is_demo_exercise("preview", demo_ids=["preview"]))
        self.assertFalse(is_demo_exercise("temp", demo_ids=["preview"]))

    def test_demo_message(self):
        self.assertEqual(demo_message(30, 50), "Du fick 30 av 50 poäng!")


class TestAttemptPayload(unittest.TestCase):

    def setUp(self):
        self.session = ExerciseSession(total_questions=2, started_at_ms=0)
        self.session.record(ExerciseResult("tf_0", "Fråga 1", "true", "true", True, 2500))
        self.session.record(ExerciseResult("tf_1", "Fråga 2", "true", "false", False, 3100))

    def test_payload_shape(self):
        payload = build_attempt_payload(self.session, "ex-1", "student-1", 65_900)

        self.assertEqual(payload["exerciseId"], "ex-1")
        self.assertEqual(payload["score"], 10)
        self.assertEqual(payload["maxScore"], 20)
        self.assertEqual(payload["timeSpentSeconds"], 65)
        self.assertEqual(payload["answers"]["totalQuestions"], 2)
        self.assertEqual(payload["answers"]["correctCount"], 1)
        self.assertEqual([r["questionId"] for r in payload["answers"]["responses"]], ["tf_0", "tf_1"])

    def test_payload_matches_schema(self):
        payload = build_attempt_payload(self.session, "ex-1", "student-1", 5000)
        result = validate_attempt_payload(payload)
        self.assertTrue(result.valid, result.errors)
