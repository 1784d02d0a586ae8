"""
Harness Data Models

Pydantic schemas for the values that flow through one test case:
RequestSpec → CapturedResponse → TestResult.

All three are frozen once constructed. A CapturedResponse is read-only
after capture and is discarded after its expectations are evaluated.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .config import SECRET_QUERY_PARAMS

QueryValue = str | int | float

MASK = "***"


# -----------------------------------------------------------------------------
# TypedDict Definitions for Structured Data
# -----------------------------------------------------------------------------


class TestResultDict(TypedDict):
    """Dictionary representation of a test result, as written to JSON reports."""

    name: str
    state: str
    passed: bool
    failures: list[str]
    elapsed_millis: float | None


class ReportDict(TypedDict):
    """Dictionary representation of a full registry run."""

    total: int
    passed: int
    failed: int
    errored: int
    cancelled: int
    results: list[TestResultDict]


# -----------------------------------------------------------------------------
# Request
# -----------------------------------------------------------------------------


class RequestSpec(BaseModel):
    """
    An HTTP GET request to perform: base URL, path and query parameters.

    Built through builder.build(), which validates inputs. Owned solely by
    the test case that creates it.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    path: str
    query_params: dict[str, QueryValue] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        """Absolute URL without the query string."""
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"

    def masked_params(self) -> dict[str, QueryValue]:
        """Query params with secret values replaced, safe for logs and reports."""
        return {
            key: (MASK if key in SECRET_QUERY_PARAMS else value)
            for key, value in self.query_params.items()
        }


# -----------------------------------------------------------------------------
# Response
# -----------------------------------------------------------------------------


class CapturedResponse(BaseModel):
    """
    Everything the assertion engine needs from one executed request.

    HTTP error statuses are data here, not failures. When the body was
    expected to be JSON but could not be parsed, body_json is None and
    parse_error carries the reason.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    status_code: int
    content_type: str = ""
    elapsed_millis: float
    body_json: Any = None
    parse_error: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    body_text: str = ""

    @property
    def media_type(self) -> str:
        """Content type without parameters, lowercased (e.g. 'application/json')."""
        return self.content_type.split(";", 1)[0].strip().lower()


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class CaseState(str, Enum):
    """Lifecycle of a registered test case."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (CaseState.PENDING, CaseState.RUNNING)


class TestResult(BaseModel):
    """Outcome of one test case: final state plus ordered diagnostics."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    name: str
    state: CaseState
    failures: list[str] = Field(default_factory=list)
    elapsed_millis: float | None = None
    error_category: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        return self.state is CaseState.PASSED

    def to_dict(self) -> TestResultDict:
        return {
            "name": self.name,
            "state": self.state.value,
            "passed": self.passed,
            "failures": list(self.failures),
            "elapsed_millis": self.elapsed_millis,
        }
