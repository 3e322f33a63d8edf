"""
JSON Schema Contract Validators

Validation of inbound field bags (mappings handed over by the value objects)
against JSON Schema contracts before any field resolution happens.

Schemas (shipped in contracts/schema/):
- date_fields.json (year, month | month_code, day)
- year_month_fields.json (year, month | month_code)
- month_day_fields.json (month | month_code, day, optional year)
- partial_time.json (at least one of hour..nanosecond)
- duration_like.json (years..nanoseconds, no unknown keys)

Contracts check SHAPE only (required members, value types). Numeric domain
checks (finite, positive, in range) stay in the field-resolution code, which
raises TemporalRangeError for them.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping

import jsonschema
from jsonschema import Draft202012Validator, ValidationError
from jsonschema.exceptions import best_match

from isotemporal.core.errors import InvalidArgumentError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    JSON Schema file loader.

    Schemas live next to this module in schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # name -> schema
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load (and cache) a JSON Schema file.

        Args:
            schema_name: Schema name without extension (e.g. 'date_fields')

        Returns:
            Loaded schema as dict

        Raises:
            FileNotFoundError: Schema file does not exist
            ValueError: File is not a valid Draft 2020-12 schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Validation of data against one named schema.

    validate() raises jsonschema.ValidationError like the underlying library;
    require() is the engine-facing variant that raises InvalidArgumentError.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: data does not match the schema
        """
        self.validator.validate(dict(data))

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        return self.validator.is_valid(dict(data))

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(dict(data))

    def require(self, data: Any) -> None:
        """
        Engine-facing validation.

        Args:
            data: Field bag (must be a Mapping)

        Raises:
            InvalidArgumentError: data is not a mapping or violates the contract;
                the message names the first offending field
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"{self.schema_name}: expected a mapping, got {type(data).__name__}"
            )
        error = best_match(self.iter_errors(data))
        if error is not None:
            location = ".".join(str(p) for p in error.absolute_path) or "<root>"
            raise InvalidArgumentError(f"{self.schema_name}: {location}: {error.message}")


_VALIDATORS: Dict[str, ContractValidator] = {}


def get_validator(schema_name: str) -> ContractValidator:
    """Shared validator instance per schema."""
    validator = _VALIDATORS.get(schema_name)
    if validator is None:
        validator = ContractValidator(schema_name)
        _VALIDATORS[schema_name] = validator
    return validator


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_date_fields(data: Any) -> None:
    """Raises InvalidArgumentError if data is not a valid date field bag."""
    get_validator("date_fields").require(data)


def validate_year_month_fields(data: Any) -> None:
    get_validator("year_month_fields").require(data)


def validate_month_day_fields(data: Any) -> None:
    get_validator("month_day_fields").require(data)


def validate_partial_time(data: Any) -> None:
    get_validator("partial_time").require(data)


def validate_duration_like(data: Any) -> None:
    """Raises InvalidArgumentError if data is not a valid duration field bag."""
    get_validator("duration_like").require(data)
