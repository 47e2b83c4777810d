"""
Schema validation utilities for the vocabulary exercise engine.

Provides JSON Schema validation with clear error messages and
automatic repair of common problems in word records.

Features:
- Format validation
- Deep copy to prevent mutations
- Type coercion (numeric ids to strings)
- Removal of unknown keys (database columns the engine does not use)
- Transparent repair tracking
"""

import json
from copy import deepcopy
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError

try:
    from ..config import config
except ImportError:
    from src.config import config


class ValidationResult:
    """
    Result of a validation attempt.

    Attributes:
        valid: Whether data passed validation
        errors: List of error messages
        data: The validated data (may be modified if repair was attempted)
        repairs: List of repairs applied (for transparency)
    """

    def __init__(
        self,
        valid: bool,
        errors: list[str],
        data: Any = None,
        repairs: Optional[list[str]] = None,
    ):
        self.valid = valid
        self.errors = errors
        self.data = data
        self.repairs = repairs or []

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.valid:
            msg = "✓ Validation passed"
            if self.repairs:
                msg += f" (with {len(self.repairs)} repair(s))"
            return msg
        return f"✗ Validation failed with {len(self.errors)} error(s):\n" + "\n".join(
            f"  - {error}" for error in self.errors
        )


class SchemaValidator:
    """
    JSON Schema validator with auto-repair capabilities.

    Usage:
        validator = SchemaValidator("schemas/vocabulary_word.schema.json")
        result = validator.validate(record, auto_repair=True)
        if result:
            print("Valid!")
            print("Repairs applied:", result.repairs)
        else:
            print(result.errors)
    """

    def __init__(self, schema_path: Path | str):
        """
        Initialize validator with a schema file.

        Args:
            schema_path: Path to JSON Schema file
        """
        self.schema_path = Path(schema_path)
        with open(self.schema_path, "r", encoding="utf-8") as f:
            self.schema = json.load(f)
        self.validator = Draft7Validator(self.schema, format_checker=FormatChecker())

    def validate(self, data: Any, auto_repair: bool = False) -> ValidationResult:
        """
        Validate data against schema.

        Args:
            data: Data to validate
            auto_repair: If True, attempt to fix common validation errors

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = [self._format_error(error) for error in self.validator.iter_errors(data)]

        if errors:
            if auto_repair:
                repaired_data, repairs = self._attempt_repair(data)
                result = self.validate(repaired_data, auto_repair=False)
                result.repairs = repairs
                return result
            return ValidationResult(valid=False, errors=errors, data=data)

        return ValidationResult(valid=True, errors=[], data=data)

    def _format_error(self, error: ValidationError) -> str:
        """
        Convert ValidationError to human-readable message with details.

        Args:
            error: jsonschema ValidationError

        Returns:
            Formatted error message with validator and schema path
        """
        path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        validator_name = getattr(error, "validator", "unknown")
        schema_path = "/".join(str(p) for p in error.schema_path)
        return (
            f"At '{path}': {error.message} "
            f"[validator={validator_name}, schema_path=/{schema_path}]"
        )

    def _attempt_repair(self, data: Any) -> tuple[Any, list[str]]:
        """
        Attempt to automatically fix common validation errors.

        Args:
            data: Original data

        Returns:
            Tuple of (repaired data, list of repairs applied)
        """
        # Deep copy to prevent mutation of original
        repaired = deepcopy(data)
        repairs: list[str] = []

        self._strip_additional_props(repaired, self.schema, repairs)
        self._coerce_types(repaired, self.schema, repairs)

        return repaired, repairs

    def _strip_additional_props(
        self, obj: Any, schema: dict, repairs: list[str], path: str = "root"
    ):
        """
        Recursively remove keys not allowed by schema (additionalProperties: false).
        Handles both objects and arrays.
        """
        if not isinstance(schema, dict):
            return

        if isinstance(obj, dict) and "properties" in schema:
            allowed = set(schema.get("properties", {}).keys())
            if schema.get("additionalProperties") is False:
                extra_keys = [k for k in list(obj.keys()) if k not in allowed]
                for k in extra_keys:
                    obj.pop(k, None)
                    repairs.append(f"Removed unknown key '{k}' at {path}")

            for k, subschema in schema.get("properties", {}).items():
                if k in obj:
                    self._strip_additional_props(obj[k], subschema, repairs, f"{path}.{k}")

        if isinstance(obj, list) and "items" in schema:
            for i, item in enumerate(obj):
                self._strip_additional_props(item, schema["items"], repairs, f"{path}[{i}]")

    def _coerce_types(self, obj: Any, schema: dict, repairs: list[str], path: str = "root"):
        """
        Coerce numbers to strings where the schema expects a string
        (e.g., integer primary keys used as word ids).
        """
        if not isinstance(obj, dict) or not isinstance(schema, dict):
            return

        for key, subschema in schema.get("properties", {}).items():
            value = obj.get(key)
            if subschema.get("type") == "string" and isinstance(value, (int, float)) and not isinstance(value, bool):
                obj[key] = str(value)
                repairs.append(f"Coerced {path}.{key}: {value!r} → '{obj[key]}'")


@lru_cache(maxsize=None)
def _validator_for(schema_path: str) -> SchemaValidator:
    """Load each schema once."""
    return SchemaValidator(schema_path)


def validate_word_records(
    records: Iterable[dict],
    auto_repair: bool = True,
) -> ValidationResult:
    """
    Validate raw vocabulary word records from the word-pool provider.

    Args:
        records: Word records as delivered by the provider (camelCase keys)
        auto_repair: Strip unknown columns and coerce numeric ids

    Returns:
        ValidationResult whose data is the list of (possibly repaired) records
    """
    validator = _validator_for(str(config.paths.word_schema))

    cleaned: list[dict] = []
    errors: list[str] = []
    repairs: list[str] = []

    for index, record in enumerate(records):
        result = validator.validate(record, auto_repair=auto_repair)
        repairs.extend(f"word[{index}]: {repair}" for repair in result.repairs)
        if result.valid:
            cleaned.append(result.data)
        else:
            errors.extend(f"word[{index}]: {error}" for error in result.errors)

    return ValidationResult(valid=not errors, errors=errors, data=cleaned, repairs=repairs)


def validate_exercise_options(options: dict) -> ValidationResult:
    """Validate per-exercise generation options."""
    validator = _validator_for(str(config.paths.options_schema))
    return validator.validate(options)


def validate_attempt_payload(payload: dict) -> ValidationResult:
    """Validate the completion summary before it is handed to the reporter."""
    validator = _validator_for(str(config.paths.attempt_schema))
    return validator.validate(payload)
