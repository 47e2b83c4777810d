"""
Unit tests for JSON Schema validation.

Tests:
- ValidationResult behaviour
- Word record validation and auto-repair
- Exercise options and attempt payload validation
"""

import json

import pytest

from src.utils.validation import (
    SchemaValidator,
    ValidationResult,
    validate_attempt_payload,
    validate_exercise_options,
    validate_word_records,
)


class TestValidationResult:
    """Test ValidationResult class."""

    def test_valid_result_is_truthy(self):
        result = ValidationResult(valid=True, errors=[])
        assert result
        assert bool(result) is True

    def test_invalid_result_is_falsy(self):
        result = ValidationResult(valid=False, errors=["Error 1"])
        assert not result

    def test_str_representation_valid(self):
        result = ValidationResult(valid=True, errors=[], repairs=["Fixed X"])
        assert "Validation passed" in str(result)
        assert "1 repair" in str(result)

    def test_str_representation_invalid(self):
        result = ValidationResult(valid=False, errors=["Error 1", "Error 2"])
        text = str(result)
        assert "2 error(s)" in text
        assert "Error 1" in text


class TestSchemaValidator:
    """Test the generic validator against a temporary schema."""

    @pytest.fixture
    def schema_file(self, tmp_path):
        schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "required": ["name"],
            "additionalProperties": False,
            "properties": {"name": {"type": "string"}},
        }
        path = tmp_path / "test.schema.json"
        path.write_text(json.dumps(schema), encoding="utf-8")
        return path

    def test_reports_missing_field(self, schema_file):
        result = SchemaValidator(schema_file).validate({})
        assert not result
        assert any("'name' is a required property" in error for error in result.errors)

    def test_repair_does_not_mutate_input(self, schema_file):
        data = {"name": 5, "extra": True}
        result = SchemaValidator(schema_file).validate(data, auto_repair=True)

        assert result.valid
        assert result.data == {"name": "5"}
        assert data == {"name": 5, "extra": True}
        assert len(result.repairs) == 2


class TestWordRecordValidation:
    """Test validation of provider word records."""

    def test_valid_records_pass(self):
        records = [
            {"id": "1", "term": "hund", "definition": "ett husdjur"},
            {"id": "2", "term": "katt", "definition": "ett husdjur", "imageUrl": None},
        ]
        result = validate_word_records(records)
        assert result.valid
        assert len(result.data) == 2
        assert result.repairs == []

    def test_numeric_id_and_unknown_columns_are_repaired(self):
        records = [{"id": 7, "term": "hund", "definition": "ett husdjur", "vocabularySetId": 3}]
        result = validate_word_records(records)

        assert result.valid
        assert result.data[0]["id"] == "7"
        assert "vocabularySetId" not in result.data[0]
        assert all(repair.startswith("word[0]:") for repair in result.repairs)

    def test_missing_definition_is_reported_with_index(self):
        records = [
            {"id": "1", "term": "hund", "definition": "ett husdjur"},
            {"id": "2", "term": "katt"},
        ]
        result = validate_word_records(records)

        assert not result.valid
        assert len(result.data) == 1
        assert any(error.startswith("word[1]:") for error in result.errors)

    def test_repair_can_be_disabled(self):
        result = validate_word_records([{"id": 7, "term": "hund", "definition": "x"}], auto_repair=False)
        assert not result.valid


class TestExerciseOptionsValidation:

    def test_known_options_pass(self):
        assert validate_exercise_options({"focusOn": "antonyms", "allowFreeText": False})

    def test_unknown_focus_fails(self):
        result = validate_exercise_options({"focusOn": "homonyms"})
        assert not result.valid

    def test_unknown_key_fails(self):
        assert not validate_exercise_options({"timeLimit": 30})


class TestAttemptPayloadValidation:

    @pytest.fixture
    def payload(self):
        return {
            "exerciseId": "ex-1",
            "studentId": "student-1",
            "score": 10,
            "maxScore": 20,
            "timeSpentSeconds": 12,
            "answers": {
                "responses": [{
                    "questionId": "tf_0",
                    "question": '"hund" betyder "ett husdjur"',
                    "userAnswer": "true",
                    "correctAnswer": "true",
                    "isCorrect": True,
                    "timeSpent": 4200,
                }],
                "totalQuestions": 2,
                "correctCount": 1,
            },
        }

    def test_valid_payload(self, payload):
        assert validate_attempt_payload(payload).valid

    def test_negative_score_fails(self, payload):
        payload["score"] = -10
        assert not validate_attempt_payload(payload).valid

    def test_non_string_user_answer_fails(self, payload):
        payload["answers"]["responses"][0]["userAnswer"] = True
        assert not validate_attempt_payload(payload).valid
