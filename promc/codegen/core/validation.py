"""
Structural validation of metric configuration documents.

Decodes raw JSON or YAML and checks it against a fixed JSON Schema,
collecting every violation in a single pass. Semantic rules (uniqueness,
bucket ordering) are left to :mod:`promc.codegen.core.schema`.
"""

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

import yaml
from jsonschema import Draft7Validator

from ...logging_config import get_logger

logger = get_logger(__name__)

METRIC_KINDS = ("counter", "gauge", "histogram")
METRIC_NAME_PATTERN = r"^[a-z][a-z0-9_]*$"
LABEL_NAME_PATTERN = r"^[a-zA-Z_][a-zA-Z0-9_]*$"

METRIC_CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "promc metric configuration",
    "type": "object",
    "required": ["metrics"],
    "additionalProperties": False,
    "properties": {
        "$schema": {"type": "string"},
        "metrics": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "type"],
                "additionalProperties": False,
                "properties": {
                    "name": {
                        "type": "string",
                        "minLength": 1,
                        "pattern": METRIC_NAME_PATTERN,
                    },
                    "type": {"type": "string", "enum": list(METRIC_KINDS)},
                    "labels": {
                        "type": "array",
                        "items": {"type": "string", "pattern": LABEL_NAME_PATTERN},
                    },
                    "help": {"type": "string"},
                    "buckets": {"type": "array", "items": {"type": "number"}},
                },
            },
        },
    },
}

SUPPORTED_FORMATS = ("json", "yaml")


class SchemaValidationError(Exception):
    """Raised when a configuration document violates the schema."""

    def __init__(self, violations: List["Violation"]):
        self.violations = list(violations)
        lines = "\n".join(f"- {violation}" for violation in self.violations)
        super().__init__(f"invalid config:\n{lines}")


@dataclass(frozen=True)
class Violation:
    """One schema violation: where it happened and what is wrong."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationReport:
    """Outcome of validating one document."""

    document: Optional[Any] = None
    violations: List[Violation] = field(default_factory=list)
    malformed: bool = False

    @property
    def valid(self) -> bool:
        return not self.violations


def format_path(parts) -> str:
    """Render a jsonschema path deque as ``$.metrics[0].type``."""
    rendered = "$"
    for part in parts:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}"
    return rendered


def _document_order(error) -> list:
    # ints and strs never share a position, so tag them to keep tuples comparable
    return [(0, p) if isinstance(p, int) else (1, p) for p in error.absolute_path]


def decode_document(content: Union[bytes, str], fmt: str = "json") -> Any:
    """
    Decode raw configuration content.

    Raises:
        ValueError: If the content is not well-formed in the given format
    """
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"unsupported document format: {fmt}")

    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"document is not valid UTF-8: {e}") from e

    if fmt == "yaml":
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                raise ValueError(
                    f"malformed YAML at line {mark.line + 1}, column {mark.column + 1}: "
                    f"{getattr(e, 'problem', e)}"
                ) from e
            raise ValueError(f"malformed YAML: {e}") from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"malformed JSON at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


class SchemaValidator:
    """Checks configuration documents against :data:`METRIC_CONFIG_SCHEMA`."""

    def __init__(self, schema: Optional[dict] = None):
        self.schema = schema or METRIC_CONFIG_SCHEMA
        Draft7Validator.check_schema(self.schema)
        self._validator = Draft7Validator(self.schema)

    def validate(self, content: Union[bytes, str], fmt: str = "json") -> ValidationReport:
        """
        Validate raw configuration content.

        Args:
            content: Raw document bytes or text
            fmt: Container format, ``json`` or ``yaml``

        Returns:
            ValidationReport holding the decoded document and all violations
        """
        try:
            document = decode_document(content, fmt)
        except ValueError as e:
            logger.debug("Document could not be decoded: %s", e)
            return ValidationReport(
                violations=[Violation("$", str(e))], malformed=True
            )

        return self.validate_document(document)

    def validate_document(self, document: Any) -> ValidationReport:
        """Validate an already decoded document."""
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda e: (_document_order(e), e.message),
        )
        violations = [Violation(format_path(e.absolute_path), e.message) for e in errors]

        if violations:
            logger.debug("Schema validation found %d violation(s)", len(violations))

        return ValidationReport(document=document, violations=violations)


_default_validator: Optional[SchemaValidator] = None


def get_default_validator() -> SchemaValidator:
    """Get the shared validator instance."""
    global _default_validator
    if _default_validator is None:
        _default_validator = SchemaValidator()
    return _default_validator


def validate_config(content: Union[bytes, str], fmt: str = "json") -> ValidationReport:
    """Validate raw content with the default validator."""
    return get_default_validator().validate(content, fmt)


def validate_or_raise(content: Union[bytes, str], fmt: str = "json") -> Any:
    """
    Validate raw content and return the decoded document.

    Raises:
        SchemaValidationError: If any violation was found
    """
    report = validate_config(content, fmt)
    if not report.valid:
        raise SchemaValidationError(report.violations)
    return report.document
