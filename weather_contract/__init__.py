"""Weather contract harness package."""

from .assertions import evaluate, evaluate_one
from .builder import build
from .capture import AsyncResponseCapturer, ResponseCapturer
from .config import (
    DEFAULT_CITY,
    HTTP_TIMEOUT_MS,
    MAX_RESPONSE_MILLIS,
    OPENWEATHER_BASE_URL,
    WEATHER_PATH,
    HarnessConfig,
)
from .errors import (
    ConfigurationError,
    DuplicateCaseError,
    HarnessFailure,
    InvalidRequestSpec,
    NetworkError,
    RequestTimeoutError,
)
from .expectations import (
    ContentTypeEquals,
    ElapsedBelow,
    Expectation,
    JsonKind,
    JsonPathBetween,
    JsonPathContains,
    JsonPathEquals,
    JsonPathPresent,
    JsonPathPresentIf,
    JsonPathType,
    StatusEquals,
    classify,
    load_expectations,
)
from .jsonpath import Absent, Present, parse_path, resolve
from .models import (
    CapturedResponse,
    CaseState,
    ReportDict,
    RequestSpec,
    TestResult,
    TestResultDict,
)
from .registry import CaseRegistry, TestCase
from .report import exit_code, format_report, results_to_dict

__all__ = [
    # Pipeline
    "build",
    "ResponseCapturer",
    "AsyncResponseCapturer",
    "evaluate",
    "evaluate_one",
    "CaseRegistry",
    "TestCase",
    # JSON paths
    "parse_path",
    "resolve",
    "Present",
    "Absent",
    # Config
    "HarnessConfig",
    "OPENWEATHER_BASE_URL",
    "WEATHER_PATH",
    "DEFAULT_CITY",
    "HTTP_TIMEOUT_MS",
    "MAX_RESPONSE_MILLIS",
    # Errors
    "HarnessFailure",
    "NetworkError",
    "RequestTimeoutError",
    "InvalidRequestSpec",
    "ConfigurationError",
    "DuplicateCaseError",
    # Models
    "RequestSpec",
    "CapturedResponse",
    "TestResult",
    "CaseState",
    "TestResultDict",
    "ReportDict",
    # Expectations
    "Expectation",
    "JsonKind",
    "StatusEquals",
    "ContentTypeEquals",
    "JsonPathEquals",
    "JsonPathType",
    "JsonPathContains",
    "ElapsedBelow",
    "JsonPathPresent",
    "JsonPathBetween",
    "JsonPathPresentIf",
    "classify",
    "load_expectations",
    # Reporting
    "format_report",
    "results_to_dict",
    "exit_code",
]
