"""
Expectation Models

Declarative, data-only descriptions of single assertions against a
captured response. Each kind is a frozen Pydantic model tagged by a
``kind`` literal, and ``Expectation`` is the discriminated union of all
kinds. Adding a new assertion means adding a model here and a case in
assertions.evaluate_one().

Expectations can also be loaded from plain dicts (e.g. a JSON file) via
``load_expectations``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .jsonpath import parse_path


# -----------------------------------------------------------------------------
# JSON Value Classification
# -----------------------------------------------------------------------------


class JsonKind(str, Enum):
    """
    Type tags for JSON values.

    NUMBER is not produced by classify(); as an expected kind it accepts
    either INTEGER or FLOAT.
    """

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    NUMBER = "number"


def classify(value: Any) -> JsonKind:
    """
    Classify a decoded JSON value.

    Numbers follow their lexical form as decoded by the json module: a
    literal without fraction or exponent ("7") is INTEGER, one with a
    fraction or exponent ("7.0", "7e0") is FLOAT. Booleans are never
    integers.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return JsonKind.INTEGER
    if isinstance(value, float):
        return JsonKind.FLOAT
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def kind_matches(value: Any, expected: JsonKind) -> bool:
    actual = classify(value)
    if expected is JsonKind.NUMBER:
        return actual in (JsonKind.INTEGER, JsonKind.FLOAT)
    return actual is expected


# -----------------------------------------------------------------------------
# Expectation Kinds
# -----------------------------------------------------------------------------


class _ExpectationBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class _PathExpectation(_ExpectationBase):
    path: str

    @field_validator("path")
    @classmethod
    def _valid_path(cls, value: str) -> str:
        parse_path(value)
        return value


class StatusEquals(_ExpectationBase):
    kind: Literal["status_equals"] = "status_equals"
    status: int

    def describe(self) -> str:
        return f"status code == {self.status}"


class ContentTypeEquals(_ExpectationBase):
    """Compares media types only; parameters such as charset are ignored."""

    kind: Literal["content_type_equals"] = "content_type_equals"
    content_type: str

    def describe(self) -> str:
        return f"content type == {self.content_type}"


class JsonPathEquals(_PathExpectation):
    kind: Literal["json_path_equals"] = "json_path_equals"
    expected: Any

    def describe(self) -> str:
        return f"{self.path} == {self.expected!r}"


class JsonPathType(_PathExpectation):
    kind: Literal["json_path_type"] = "json_path_type"
    expected_kind: JsonKind

    def describe(self) -> str:
        return f"{self.path} is {self.expected_kind.value}"


class JsonPathContains(_PathExpectation):
    kind: Literal["json_path_contains"] = "json_path_contains"
    substring: str

    def describe(self) -> str:
        return f"{self.path} contains {self.substring!r}"


class ElapsedBelow(_ExpectationBase):
    """Strict: elapsed_millis must be < millis."""

    kind: Literal["elapsed_below"] = "elapsed_below"
    millis: float = Field(gt=0)

    def describe(self) -> str:
        return f"elapsed < {self.millis:g} ms"


class JsonPathPresent(_PathExpectation):
    """
    required=True: the path must exist and not be null.
    required=False: the field is optional; absence passes.
    """

    kind: Literal["json_path_present"] = "json_path_present"
    required: bool = True

    def describe(self) -> str:
        return f"{self.path} is {'present' if self.required else 'optional'}"


class JsonPathBetween(_PathExpectation):
    """Numeric value strictly between low and high."""

    kind: Literal["json_path_between"] = "json_path_between"
    low: float
    high: float

    def describe(self) -> str:
        return f"{self.low:g} < {self.path} < {self.high:g}"


class JsonPathPresentIf(_PathExpectation):
    """If ``when`` is present, ``path`` must be present too."""

    kind: Literal["json_path_present_if"] = "json_path_present_if"
    when: str

    @field_validator("when")
    @classmethod
    def _valid_when(cls, value: str) -> str:
        parse_path(value)
        return value

    def describe(self) -> str:
        return f"{self.path} is present when {self.when} is present"


Expectation = Annotated[
    Union[
        StatusEquals,
        ContentTypeEquals,
        JsonPathEquals,
        JsonPathType,
        JsonPathContains,
        ElapsedBelow,
        JsonPathPresent,
        JsonPathBetween,
        JsonPathPresentIf,
    ],
    Field(discriminator="kind"),
]

_EXPECTATION_LIST = TypeAdapter(list[Expectation])


def load_expectations(data: list[dict[str, Any]]) -> list[Expectation]:
    """Validate a list of plain dicts (each with a 'kind') into expectations."""
    return _EXPECTATION_LIST.validate_python(data)


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------


def status_equals(status: int) -> StatusEquals:
    return StatusEquals(status=status)


def content_type_equals(content_type: str) -> ContentTypeEquals:
    return ContentTypeEquals(content_type=content_type)


def json_path_equals(path: str, expected: Any) -> JsonPathEquals:
    return JsonPathEquals(path=path, expected=expected)


def json_path_type(path: str, expected_kind: JsonKind | str) -> JsonPathType:
    return JsonPathType(path=path, expected_kind=JsonKind(expected_kind))


def json_path_contains(path: str, substring: str) -> JsonPathContains:
    return JsonPathContains(path=path, substring=substring)


def elapsed_below(millis: float) -> ElapsedBelow:
    return ElapsedBelow(millis=millis)


def json_path_present(path: str, required: bool = True) -> JsonPathPresent:
    return JsonPathPresent(path=path, required=required)


def json_path_between(path: str, low: float, high: float) -> JsonPathBetween:
    return JsonPathBetween(path=path, low=low, high=high)


def json_path_present_if(path: str, when: str) -> JsonPathPresentIf:
    return JsonPathPresentIf(path=path, when=when)
